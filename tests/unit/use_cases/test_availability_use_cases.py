"""Unit tests for availability use cases

Tests cover:
- GetAvailability windows and conflict-free slots
- Date range validation
- CreateAvailabilityRule / DeleteAvailabilityRule
"""

import pytest
from datetime import date, datetime, time, timedelta
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.availability.create_rule import CreateAvailabilityRule
from src.app.use_cases.availability.delete_rule import DeleteAvailabilityRule
from src.app.use_cases.availability.dtos import (
    CreateAvailabilityRuleCommandDTO,
    GetAvailabilityQueryDTO,
)
from src.app.use_cases.availability.get_availability import GetAvailability
from src.domain.availability_rule import AvailabilityRule, RuleKind, RulePolarity
from src.domain.booking import Booking, BookingStatus
from src.domain.service import Service
from src.domain.studio_policy import StudioPolicy

NOW = datetime(2024, 1, 1, 9, 0)
MONDAY = date(2024, 1, 8)


@pytest.fixture
def monday_rule():
    return AvailabilityRule(
        id="rule_mon",
        trainer_id="trainer_1",
        kind=RuleKind.WEEKLY,
        polarity=RulePolarity.OPEN,
        day_of_week=1,
        start_time=time(9, 0),
        end_time=time(12, 0),
    )


@pytest.fixture
def deps(monday_rule):
    booking_repo = MagicMock()
    booking_repo.list_active_for_trainer = AsyncMock(return_value=[])
    service_repo = MagicMock()
    service_repo.get_by_id = AsyncMock(
        return_value=Service(id="svc_1", trainer_id="trainer_1", name="PT", duration_minutes=60)
    )
    rule_repo = MagicMock()
    rule_repo.list_for_trainer = AsyncMock(return_value=[monday_rule])
    policy_provider = MagicMock()
    policy_provider.get_policy = AsyncMock(return_value=StudioPolicy())
    return booking_repo, service_repo, rule_repo, policy_provider


def query(start=MONDAY, end=MONDAY, stride=None):
    return GetAvailabilityQueryDTO(
        trainer_id="trainer_1", service_id="svc_1", start_date=start, end_date=end, stride_minutes=stride
    )


def at(hh, mm=0):
    return datetime.combine(MONDAY, time(hh, mm))


@pytest.mark.asyncio
class TestGetAvailability:
    async def test_slots_exclude_active_bookings(self, deps):
        """
        Given: Trainer open 09-12 Monday, confirmed booking 10:00-11:00
        When: Listing 60-minute slots on a 30-minute stride
        Then: Only 09:00 and 11:00 remain
        """
        # Arrange
        booking_repo = deps[0]
        booking_repo.list_active_for_trainer = AsyncMock(
            return_value=[
                Booking(
                    id="b1", trainer_id="trainer_1", client_id="c", service_id="svc_1",
                    scheduled_at=at(10), duration_minutes=60, status=BookingStatus.CONFIRMED,
                )
            ]
        )
        use_case = GetAvailability(*deps, clock=lambda: NOW)

        # Act
        result = await use_case.execute(query(stride=30))

        # Assert
        assert result.is_ok()
        assert [(w.start, w.end) for w in result.value.windows] == [(at(9), at(12))]
        assert result.value.slots == [at(9), at(11)]

    async def test_lapsed_hold_does_not_block(self, deps):
        booking_repo = deps[0]
        booking_repo.list_active_for_trainer = AsyncMock(
            return_value=[
                Booking(
                    id="b1", trainer_id="trainer_1", client_id="c", service_id="svc_1",
                    scheduled_at=at(10), duration_minutes=60, status=BookingStatus.HOLD,
                    hold_expiry=NOW - timedelta(minutes=1),
                )
            ]
        )
        use_case = GetAvailability(*deps, clock=lambda: NOW)

        result = await use_case.execute(query(stride=60))

        assert result.value.slots == [at(9), at(10), at(11)]

    async def test_default_stride_is_used(self, deps):
        use_case = GetAvailability(*deps, default_stride_minutes=60, clock=lambda: NOW)

        result = await use_case.execute(query())

        assert result.value.slots == [at(9), at(10), at(11)]

    async def test_inverted_range_rejected(self, deps):
        use_case = GetAvailability(*deps, clock=lambda: NOW)

        result = await use_case.execute(query(start=MONDAY, end=MONDAY - timedelta(days=1)))

        assert result.error.code == "INVALID_DATE_RANGE"

    async def test_range_too_long_rejected(self, deps):
        use_case = GetAvailability(*deps, max_range_days=7, clock=lambda: NOW)

        result = await use_case.execute(query(start=MONDAY, end=MONDAY + timedelta(days=7)))

        assert result.error.code == "INVALID_DATE_RANGE"

    async def test_unknown_service(self, deps):
        deps[1].get_by_id = AsyncMock(return_value=None)
        use_case = GetAvailability(*deps, clock=lambda: NOW)

        result = await use_case.execute(query())

        assert result.error.code == "SERVICE_NOT_FOUND"

    async def test_invalid_stored_rule_surfaces_error(self, deps, monday_rule):
        monday_rule.end_time = time(8, 0)
        use_case = GetAvailability(*deps, clock=lambda: NOW)

        result = await use_case.execute(query())

        assert result.error.code == "INVALID_AVAILABILITY_RULE"


@pytest.mark.asyncio
class TestRuleManagement:
    async def test_create_weekly_rule(self, mock_uow):
        repo = MagicMock()
        repo.create = AsyncMock(side_effect=lambda r: r)
        use_case = CreateAvailabilityRule(mock_uow, repo, clock=lambda: NOW)

        result = await use_case.execute(
            CreateAvailabilityRuleCommandDTO(
                trainer_id="trainer_1", kind=RuleKind.WEEKLY, day_of_week=1,
                start_time=time(9, 0), end_time=time(17, 0),
            )
        )

        assert result.is_ok()
        assert result.value.kind == "weekly"
        assert result.value.polarity == "open"
        mock_uow.commit.assert_called_once()

    @pytest.mark.parametrize(
        "fields",
        [
            {"kind": RuleKind.WEEKLY, "day_of_week": 1, "start_time": time(17, 0), "end_time": time(9, 0)},
            {"kind": RuleKind.WEEKLY, "start_time": time(9, 0), "end_time": time(10, 0)},
            {"kind": RuleKind.ONCE, "start_time": time(9, 0), "end_time": time(10, 0)},
            {
                "kind": RuleKind.ONCE, "specific_date": MONDAY, "end_date": MONDAY - timedelta(days=1),
                "start_time": time(9, 0), "end_time": time(10, 0),
            },
        ],
    )
    async def test_malformed_rules_rejected_by_command(self, fields):
        with pytest.raises(ValueError):
            CreateAvailabilityRuleCommandDTO(trainer_id="trainer_1", **fields)

    async def test_delete_rule(self, mock_uow, monday_rule):
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=monday_rule)
        repo.delete = AsyncMock()
        use_case = DeleteAvailabilityRule(mock_uow, repo)

        result = await use_case.execute("rule_mon", trainer_id="trainer_1")

        assert result.value == "rule_mon"
        repo.delete.assert_called_once_with(monday_rule)
        mock_uow.commit.assert_called_once()

    async def test_delete_someone_elses_rule_is_not_found(self, mock_uow, monday_rule):
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=monday_rule)
        repo.delete = AsyncMock()
        use_case = DeleteAvailabilityRule(mock_uow, repo)

        result = await use_case.execute("rule_mon", trainer_id="trainer_2")

        assert result.error.code == "RULE_NOT_FOUND"
        repo.delete.assert_not_called()
