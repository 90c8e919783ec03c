"""GetAvailability Use Case

Bookable windows and candidate start times for a trainer and service over
a date range.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Callable
from libs.result import Result, Return, Error
from src.app.repositories.availability_rule_repository import AvailabilityRuleRepository
from src.app.repositories.booking_repository import BookingRepository
from src.app.repositories.service_repository import ServiceRepository
from src.app.services.studio_policy_provider import StudioPolicyProvider
from src.app.use_cases.common import domain_error
from src.domain.availability import AvailabilityResolver, candidate_starts
from src.domain.base import utc_now
from src.domain.booking import BookingStatus
from src.domain.errors import DomainError
from src.domain.slot_conflict import SlotConflictChecker
from .dtos import AvailabilityResponseDTO, GetAvailabilityQueryDTO, WindowDTO

logger = logging.getLogger(__name__)


class GetAvailability:
    """
    Use Case: Show a trainer's open time

    Read-only. Lapsed holds are treated as free without being written back;
    the next write path expires them. The result is advisory: CreateBooking
    re-checks everything under lock.
    """

    def __init__(
        self,
        booking_repo: BookingRepository,
        service_repo: ServiceRepository,
        rule_repo: AvailabilityRuleRepository,
        policy_provider: StudioPolicyProvider,
        default_stride_minutes: int = 30,
        max_range_days: int = 62,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.booking_repo = booking_repo
        self.service_repo = service_repo
        self.rule_repo = rule_repo
        self.policy_provider = policy_provider
        self.default_stride_minutes = default_stride_minutes
        self.max_range_days = max_range_days
        self.clock = clock
        self.resolver = AvailabilityResolver()
        self.checker = SlotConflictChecker()

    async def execute(self, query: GetAvailabilityQueryDTO) -> Result[AvailabilityResponseDTO]:
        now = self.clock()

        if query.end_date < query.start_date:
            return Return.err(
                Error(code="INVALID_DATE_RANGE", message="end_date must not precede start_date")
            )
        span = (query.end_date - query.start_date).days + 1
        if span > self.max_range_days:
            return Return.err(
                Error(
                    code="INVALID_DATE_RANGE",
                    message=f"Date range may cover at most {self.max_range_days} days",
                    reason=f"requested={span}",
                )
            )

        service = await self.service_repo.get_by_id(query.service_id)
        if not service or not service.is_active:
            return Return.err(
                Error(
                    code="SERVICE_NOT_FOUND",
                    message=f"Service {query.service_id} not found or not bookable",
                )
            )

        policy = await self.policy_provider.get_policy(query.trainer_id)
        rules = await self.rule_repo.list_for_trainer(query.trainer_id)
        try:
            windows = self.resolver.resolve(
                rules, policy, query.start_date, query.end_date, service.duration_minutes, now
            )
        except DomainError as e:
            logger.warning(f"Availability for trainer {query.trainer_id} failed: {e.message}")
            return Return.err(domain_error(e))

        range_start = datetime.combine(query.start_date, time.min)
        range_end = datetime.combine(query.end_date + timedelta(days=1), time.min)
        bookings = await self.booking_repo.list_active_for_trainer(
            query.trainer_id, range_start, range_end
        )
        blocking = [
            b for b in bookings
            if not (b.status == BookingStatus.HOLD and b.hold_lapsed(now))
        ]

        stride = query.stride_minutes or self.default_stride_minutes
        slots = [
            start
            for start in candidate_starts(windows, service.duration_minutes, stride)
            if not self.checker.conflicts(start, service.duration_minutes, blocking)
        ]

        return Return.ok(
            AvailabilityResponseDTO(
                trainer_id=query.trainer_id,
                service_id=service.id,
                duration_minutes=service.duration_minutes,
                start_date=query.start_date,
                end_date=query.end_date,
                windows=[WindowDTO(start=w.start, end=w.end) for w in windows],
                slots=slots,
            )
        )
