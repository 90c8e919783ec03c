"""GetBooking Use Case"""

import logging
from datetime import datetime
from typing import Callable, Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import BookingEvent, NotificationService
from src.app.repositories.booking_repository import BookingRepository
from src.app.use_cases.common import notify
from src.domain.base import utc_now
from .dtos import BookingResponseDTO
from .hold_expiry import HoldExpiryGuard

logger = logging.getLogger(__name__)


class GetBooking:
    """
    Use Case: Read one booking

    A hold observed after its expiry is expired (and its credits returned)
    before being returned, so readers never see a stale hold.
    """

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
        self.notifier = notifier
        self.clock = clock
        self.expiry = HoldExpiryGuard(booking_repo, ledger)

    async def execute(self, booking_id: str) -> Result[BookingResponseDTO]:
        now = self.clock()
        expired = False

        try:
            booking = await self.booking_repo.get_by_id(booking_id, for_update=True)
            if not booking:
                await self.uow.rollback()
                return Return.err(
                    Error(code="BOOKING_NOT_FOUND", message=f"Booking {booking_id} not found")
                )

            expired = await self.expiry.apply(booking, now)
            # Rollback expires loaded rows, so snapshot first
            response = BookingResponseDTO.from_booking(booking)
            if expired:
                await self.uow.commit()
            else:
                await self.uow.rollback()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to load booking {booking_id}: {e}")
            return Return.err(
                Error(code="GET_BOOKING_FAILED", message="Failed to load booking", reason=str(e))
            )

        if expired:
            await notify(self.notifier, booking, BookingEvent.EXPIRED)
        return Return.ok(response)
