"""CancelBooking Use Case

Cancels a confirmed or checked-in booking outside the studio's
cancellation window and returns its credits to the packages they came from.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import BookingEvent, NotificationService
from src.app.services.studio_policy_provider import StudioPolicyProvider
from src.app.repositories.booking_repository import BookingRepository
from src.app.use_cases.common import domain_error, notify
from src.domain.base import utc_now
from src.domain.booking import BookingStatus, TERMINAL_STATUSES
from src.domain.booking_state import BookingStateMachine
from src.domain.errors import DomainError
from .dtos import CancelBookingCommandDTO, CancelBookingResponseDTO
from .hold_expiry import HoldExpiryGuard

logger = logging.getLogger(__name__)


class CancelBooking:
    """
    Use Case: Cancel a booking

    Business Rules:
    1. Only the booking's client or trainer may cancel it
    2. A lapsed hold is expired first (and then cannot be cancelled)
    3. Terminal bookings are rejected with ALREADY_TERMINAL, so credits are
       never reversed twice
    4. Cancellation must happen more than cancellation_window_hours before
       the scheduled start
    5. Every consumed credit is restored to its original package
    6. Atomic: reversal and state change commit together
    """

    def __init__(
        self,
        uow: UnitOfWork,
        booking_repo: BookingRepository,
        ledger: CreditLedger,
        policy_provider: StudioPolicyProvider,
        notifier: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.booking_repo = booking_repo
        self.ledger = ledger
        self.policy_provider = policy_provider
        self.notifier = notifier
        self.clock = clock
        self.state_machine = BookingStateMachine()
        self.expiry = HoldExpiryGuard(booking_repo, ledger, self.state_machine)

    async def execute(self, command: CancelBookingCommandDTO) -> Result[CancelBookingResponseDTO]:
        now = self.clock()

        try:
            booking = await self.booking_repo.get_by_id(command.booking_id, for_update=True)
            if not booking or command.actor_id not in (booking.client_id, booking.trainer_id):
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="BOOKING_NOT_FOUND",
                        message=f"Booking {command.booking_id} not found",
                    )
                )

            if await self.expiry.apply(booking, now):
                await self.uow.commit()
                await notify(self.notifier, booking, BookingEvent.EXPIRED)

            if booking.status in TERMINAL_STATUSES:
                return await self._reject(
                    "ALREADY_TERMINAL",
                    f"Booking {booking.id} is already {booking.status.value}",
                )

            if not self.state_machine.can_transition(booking.status, BookingStatus.CANCELLED):
                return await self._reject(
                    "INVALID_TRANSITION",
                    f"Cannot cancel booking {booking.id} in state {booking.status.value}",
                )

            policy = await self.policy_provider.get_policy(booking.trainer_id)
            cutoff = booking.scheduled_at - timedelta(hours=policy.cancellation_window_hours)
            if now >= cutoff:
                hours_left = (booking.scheduled_at - now).total_seconds() / 3600
                return await self._reject(
                    "OUTSIDE_CANCELLATION_WINDOW",
                    f"Cannot cancel within {policy.cancellation_window_hours} hours of scheduled time",
                    reason=f"hours_until_session={hours_left:.2f}",
                )

            refunds = await self.ledger.reverse_booking(
                booking.id, now=now, notes="Credit refund for cancelled booking"
            )
            self.state_machine.transition(booking, BookingStatus.CANCELLED, now)
            await self.booking_repo.update(booking)

            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to cancel booking {command.booking_id}: {e}")
            return Return.err(
                Error(
                    code="CANCEL_BOOKING_FAILED",
                    message="Failed to cancel booking",
                    reason=str(e),
                )
            )

        credits_refunded = sum(r.delta for r in refunds)
        logger.info(
            f"Booking {booking.id} cancelled by {command.actor_id}, "
            f"refunded {credits_refunded} credits"
        )
        await notify(self.notifier, booking, BookingEvent.CANCELLED)
        return Return.ok(
            CancelBookingResponseDTO(
                booking_id=booking.id,
                state=booking.status.value,
                credits_refunded=credits_refunded,
            )
        )

    async def _reject(self, code: str, message: str, reason: Optional[str] = None) -> Result:
        # Message is built before rollback expires the loaded booking
        await self.uow.rollback()
        return Return.err(Error(code=code, message=message, reason=reason))
