"""CreateBooking Use Case

Books a trainer slot for a client: availability check, conflict check,
credit reservation and booking insert in a single unit of work.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from sqlalchemy.exc import IntegrityError
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import BookingEvent, NotificationService
from src.app.services.studio_policy_provider import StudioPolicyProvider
from src.app.repositories.availability_rule_repository import AvailabilityRuleRepository
from src.app.repositories.booking_repository import BookingRepository
from src.app.repositories.service_repository import ServiceRepository
from src.app.use_cases.common import domain_error, notify
from src.domain.availability import AvailabilityResolver, fits_in_windows
from src.domain.base import generate_uuid, utc_now
from src.domain.booking import Booking
from src.domain.booking_state import BookingStateMachine
from src.domain.errors import DomainError
from src.domain.slot_conflict import SlotConflictChecker
from .dtos import BookingResponseDTO, CreateBookingCommandDTO
from .hold_expiry import HoldExpiryGuard

logger = logging.getLogger(__name__)


class CreateBooking:
    """
    Use Case: Create a booking

    Business Rules:
    1. The service must exist and be active
    2. [start, start+duration) must lie inside one resolved open window
    3. No overlap with the trainer's active bookings, re-checked under lock
    4. Credits are reserved FIFO; a short balance creates nothing.
       Credits parked on the client's lapsed holds count as available
    5. Paid services start in HOLD (unless the studio disables holds),
       free services start CONFIRMED
    6. Atomic: everything commits together or nothing does

    Flow:
    1. Load service and studio policy
    2. Resolve the start date's availability
    3. Lock trainer schedule, expire stale holds in range and the
       client's own lapsed holds, check conflicts
    4. Reserve credits
    5. Insert booking
    6. Commit and announce
    """

    def __init__(
        self,
        uow: UnitOfWork,
        booking_repo: BookingRepository,
        service_repo: ServiceRepository,
        rule_repo: AvailabilityRuleRepository,
        ledger: CreditLedger,
        policy_provider: StudioPolicyProvider,
        notifier: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.booking_repo = booking_repo
        self.service_repo = service_repo
        self.rule_repo = rule_repo
        self.ledger = ledger
        self.policy_provider = policy_provider
        self.notifier = notifier
        self.clock = clock
        self.resolver = AvailabilityResolver()
        self.checker = SlotConflictChecker()
        self.state_machine = BookingStateMachine()
        self.expiry = HoldExpiryGuard(booking_repo, ledger, self.state_machine)

    async def execute(self, command: CreateBookingCommandDTO) -> Result[BookingResponseDTO]:
        """
        Execute booking creation

        Args:
            command: CreateBookingCommandDTO with client, trainer, service, start

        Returns:
            Result[BookingResponseDTO]: created booking or one of
            SERVICE_NOT_FOUND, OUTSIDE_OPERATING_HOURS, SLOT_CONFLICT,
            INSUFFICIENT_CREDITS, CREATE_BOOKING_FAILED
        """
        now = self.clock()
        start = command.start_time

        try:
            # Step 1: Service and studio policy
            service = await self.service_repo.get_by_id(command.service_id)
            if not service or not service.is_active:
                return await self._fail(
                    "SERVICE_NOT_FOUND",
                    f"Service {command.service_id} not found or not bookable",
                )
            policy = await self.policy_provider.get_policy(command.trainer_id)
            end = start + timedelta(minutes=service.duration_minutes)

            # Step 2: Availability on the start date
            rules = await self.rule_repo.list_for_trainer(command.trainer_id)
            windows = self.resolver.resolve(
                rules, policy, start.date(), start.date(), service.duration_minutes, now
            )
            if not fits_in_windows(windows, start, service.duration_minutes):
                return await self._fail(
                    "OUTSIDE_OPERATING_HOURS",
                    f"{start.isoformat()} - {end.isoformat()} is not within the trainer's open hours",
                    reason=f"open_windows={len(windows)}",
                )

            # Step 3: Serialize on the trainer's schedule and re-check conflicts
            await self.booking_repo.lock_trainer_schedule(command.trainer_id)
            existing = await self.booking_repo.list_active_for_trainer(
                command.trainer_id, start, end, for_update=True
            )
            # Booking rows are locked before any package row
            client_lapsed = await self.booking_repo.list_lapsed_holds_for_client(
                command.client_id, now, for_update=True
            )
            for booking in existing:
                await self.expiry.apply(booking, now)
            released = await self.expiry.release_client_holds(
                command.client_id, now, loaded=client_lapsed
            )

            conflicts = self.checker.find_conflicts(start, service.duration_minutes, existing)
            if conflicts:
                return await self._fail(
                    "SLOT_CONFLICT",
                    f"Trainer {command.trainer_id} is already booked at {start.isoformat()}",
                    reason=f"conflicting_booking={conflicts[0].id}",
                )

            # Step 4: Reserve credits against the new booking id
            status, hold_expiry = self.state_machine.initial_status(service, policy, now)
            booking = Booking(
                id=generate_uuid(),
                trainer_id=command.trainer_id,
                client_id=command.client_id,
                service_id=service.id,
                scheduled_at=start,
                duration_minutes=service.duration_minutes,
                status=status,
                hold_expiry=hold_expiry,
                credits_charged=service.credits_required,
                created_at=now,
                updated_at=now,
            )
            await self.ledger.reserve(
                command.client_id, service.credits_required, booking_id=booking.id, now=now
            )

            # Step 5: Insert booking
            created = await self.booking_repo.create(booking)

            # Step 6: Commit
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            logger.warning(f"Booking rejected for client {command.client_id}: {e.code} {e.message}")
            return Return.err(domain_error(e))

        except IntegrityError as e:
            # Unique index backstop: someone else won the race for this start time
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SLOT_CONFLICT",
                    message=f"Trainer {command.trainer_id} is already booked at {start.isoformat()}",
                    reason=str(e.orig) if getattr(e, "orig", None) else str(e),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create booking for client {command.client_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_BOOKING_FAILED",
                    message="Failed to create booking",
                    reason=str(e),
                )
            )

        logger.info(
            f"Booking {created.id} created for client {created.client_id} with trainer "
            f"{created.trainer_id} at {created.scheduled_at.isoformat()} ({created.status.value})"
        )
        for booking in released:
            await notify(self.notifier, booking, BookingEvent.EXPIRED)
        await notify(self.notifier, created, BookingEvent.CREATED)
        return Return.ok(BookingResponseDTO.from_booking(created))

    async def _fail(self, code: str, message: str, reason: Optional[str] = None) -> Result:
        await self.uow.rollback()
        logger.warning(f"Booking rejected: {code} {message}")
        return Return.err(Error(code=code, message=message, reason=reason))
