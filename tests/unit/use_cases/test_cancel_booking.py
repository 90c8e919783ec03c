"""Unit tests for CancelBooking use case

Tests cover:
- Cancellation outside the window restores credits
- OUTSIDE_CANCELLATION_WINDOW inside the window
- ALREADY_TERMINAL for cancelled/completed bookings
- Actor must be the client or the trainer
- Lapsed holds are expired, then rejected
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.booking.cancel_booking import CancelBooking
from src.app.use_cases.booking.dtos import CancelBookingCommandDTO
from src.domain.booking import Booking, BookingStatus
from src.domain.ledger_entry import LedgerEntry, LedgerReason
from src.domain.studio_policy import StudioPolicy

NOW = datetime(2024, 1, 1, 9, 0)


def make_booking(status=BookingStatus.CONFIRMED, hours_ahead=30, hold_expiry=None):
    return Booking(
        id="booking_1",
        trainer_id="trainer_1",
        client_id="client_1",
        service_id="svc_1",
        scheduled_at=NOW + timedelta(hours=hours_ahead),
        duration_minutes=60,
        status=status,
        hold_expiry=hold_expiry,
        credits_charged=3,
        created_at=NOW - timedelta(days=1),
        updated_at=NOW - timedelta(days=1),
    )


def refund(package_id, delta):
    return LedgerEntry(
        package_id=package_id,
        client_id="client_1",
        booking_id="booking_1",
        delta=delta,
        balance_after=delta,
        reason=LedgerReason.REFUND,
    )


@pytest.fixture
def mock_booking_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=make_booking())
    repo.update = AsyncMock(side_effect=lambda b: b)
    return repo


@pytest.fixture
def mock_ledger():
    ledger = MagicMock()
    ledger.reverse_booking = AsyncMock(return_value=[refund("soon", 2), refund("later", 1)])
    return ledger


@pytest.fixture
def mock_policy_provider():
    provider = MagicMock()
    provider.get_policy = AsyncMock(return_value=StudioPolicy(cancellation_window_hours=24))
    return provider


@pytest.fixture
def use_case(mock_uow, mock_booking_repo, mock_ledger, mock_policy_provider):
    return CancelBooking(
        uow=mock_uow,
        booking_repo=mock_booking_repo,
        ledger=mock_ledger,
        policy_provider=mock_policy_provider,
        clock=lambda: NOW,
    )


@pytest.mark.asyncio
class TestCancelBookingSuccess:
    async def test_cancel_30_hours_ahead_restores_credits(
        self, use_case, mock_uow, mock_booking_repo, mock_ledger
    ):
        """
        Given: Confirmed booking 30h ahead, 24h cancellation window, 2+1 credits consumed
        When: The client cancels
        Then: State cancelled, 3 credits refunded, single commit
        """
        # Act
        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        # Assert
        assert result.is_ok()
        assert result.value.state == "cancelled"
        assert result.value.credits_refunded == 3
        mock_booking_repo.get_by_id.assert_called_once_with("booking_1", for_update=True)
        mock_ledger.reverse_booking.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_trainer_may_cancel(self, use_case):
        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="trainer_1"))

        assert result.is_ok()

    async def test_checked_in_booking_can_be_cancelled(self, use_case, mock_booking_repo):
        mock_booking_repo.get_by_id = AsyncMock(return_value=make_booking(status=BookingStatus.CHECKED_IN))

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        assert result.is_ok()


@pytest.mark.asyncio
class TestCancelBookingRejections:
    async def test_cancel_10_hours_ahead_is_outside_window(
        self, use_case, mock_uow, mock_booking_repo, mock_ledger
    ):
        """
        Given: Confirmed booking 10h ahead, 24h cancellation window
        When: The client cancels
        Then: OUTSIDE_CANCELLATION_WINDOW, nothing reversed
        """
        booking = make_booking(hours_ahead=10)
        mock_booking_repo.get_by_id = AsyncMock(return_value=booking)

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        assert result.is_err()
        assert result.error.code == "OUTSIDE_CANCELLATION_WINDOW"
        assert booking.status == BookingStatus.CONFIRMED
        mock_ledger.reverse_booking.assert_not_called()
        mock_uow.commit.assert_not_called()

    async def test_exactly_at_cutoff_is_rejected(self, use_case, mock_booking_repo):
        mock_booking_repo.get_by_id = AsyncMock(return_value=make_booking(hours_ahead=24))

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        assert result.error.code == "OUTSIDE_CANCELLATION_WINDOW"

    @pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED])
    async def test_terminal_booking_is_rejected(self, use_case, mock_booking_repo, mock_ledger, status):
        mock_booking_repo.get_by_id = AsyncMock(return_value=make_booking(status=status))

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        assert result.error.code == "ALREADY_TERMINAL"
        mock_ledger.reverse_booking.assert_not_called()

    async def test_stranger_sees_not_found(self, use_case, mock_ledger):
        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="someone_else"))

        assert result.error.code == "BOOKING_NOT_FOUND"
        mock_ledger.reverse_booking.assert_not_called()

    async def test_missing_booking(self, use_case, mock_booking_repo):
        mock_booking_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="nope", actor_id="client_1"))

        assert result.error.code == "BOOKING_NOT_FOUND"

    async def test_live_hold_cannot_be_cancelled(self, use_case, mock_booking_repo):
        mock_booking_repo.get_by_id = AsyncMock(
            return_value=make_booking(status=BookingStatus.HOLD, hold_expiry=NOW + timedelta(minutes=5))
        )

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        assert result.error.code == "INVALID_TRANSITION"

    async def test_lapsed_hold_is_expired_then_terminal(
        self, use_case, mock_uow, mock_booking_repo, mock_ledger
    ):
        """
        Given: A hold that lapsed a minute ago
        When: The client tries to cancel
        Then: The hold is expired (credits released, committed) and the cancel reports ALREADY_TERMINAL
        """
        booking = make_booking(status=BookingStatus.HOLD, hold_expiry=NOW - timedelta(minutes=1))
        mock_booking_repo.get_by_id = AsyncMock(return_value=booking)

        result = await use_case.execute(CancelBookingCommandDTO(booking_id="booking_1", actor_id="client_1"))

        assert result.error.code == "ALREADY_TERMINAL"
        assert booking.status == BookingStatus.EXPIRED
        mock_ledger.reverse_booking.assert_called_once()
        mock_uow.commit.assert_called_once()
