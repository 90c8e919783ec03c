"""Shared flow for single-step booking transitions

Confirm, check-in and complete all load the booking under lock, expire a
lapsed hold, apply one state-machine move and commit.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import BookingEvent, NotificationService
from src.app.repositories.booking_repository import BookingRepository
from src.app.use_cases.common import domain_error, notify
from src.domain.base import utc_now
from src.domain.booking import BookingStatus
from src.domain.booking_state import BookingStateMachine
from src.domain.errors import DomainError
from .dtos import BookingResponseDTO
from .hold_expiry import HoldExpiryGuard

logger = logging.getLogger(__name__)


class TransitionBooking:
    target: BookingStatus
    event: Optional[BookingEvent] = None
    failure_code: str = "BOOKING_TRANSITION_FAILED"

    def __init__(
        self,
        uow: UnitOfWork,
        booking_repo: BookingRepository,
        ledger: CreditLedger,
        notifier: Optional[NotificationService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.booking_repo = booking_repo
        self.ledger = ledger
        self.notifier = notifier
        self.clock = clock
        self.state_machine = BookingStateMachine()
        self.expiry = HoldExpiryGuard(booking_repo, ledger, self.state_machine)

    async def _run(self, booking_id: str, declaration: Optional[str] = None) -> Result[BookingResponseDTO]:
        now = self.clock()

        try:
            booking = await self.booking_repo.get_by_id(booking_id, for_update=True)
            if not booking:
                await self.uow.rollback()
                return Return.err(
                    Error(code="BOOKING_NOT_FOUND", message=f"Booking {booking_id} not found")
                )

            if await self.expiry.apply(booking, now):
                await self.uow.commit()
                await notify(self.notifier, booking, BookingEvent.EXPIRED)

            previous = booking.status
            self.state_machine.transition(booking, self.target, now, declaration=declaration)
            await self.booking_repo.update(booking)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            logger.warning(f"Booking {booking_id} -> {self.target.value} rejected: {e.message}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to move booking {booking_id} to {self.target.value}: {e}")
            return Return.err(
                Error(
                    code=self.failure_code,
                    message=f"Failed to move booking to {self.target.value}",
                    reason=str(e),
                )
            )

        logger.info(f"Booking {booking.id} moved {previous.value} -> {booking.status.value}")
        if self.event is not None:
            await notify(self.notifier, booking, self.event)
        return Return.ok(BookingResponseDTO.from_booking(booking))
