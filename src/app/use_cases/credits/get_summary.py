"""Get Credit Summary Use Case

Retrieves a client's credit balance across packages.
"""

import logging
from datetime import datetime
from typing import Callable, Optional
from libs.result import Result, Return, Error
from src.app.repositories.booking_repository import BookingRepository
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import BookingEvent, NotificationService
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.booking.hold_expiry import HoldExpiryGuard
from src.app.use_cases.common import notify
from src.domain.base import utc_now
from .dtos import CreditPackageDTO, CreditSummaryDTO

logger = logging.getLogger(__name__)


class GetCreditSummary:
    """
    Get Credit Summary Use Case

    Display-only: the figures may be stale by the time a booking is
    attempted, and reservations always re-read under lock. The client's
    own lapsed holds are expired first, so credits they parked show as
    available again.
    A client without packages gets an empty summary at level "none".
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
        self.ledger = ledger
        self.notifier = notifier
        self.clock = clock
        self.expiry = HoldExpiryGuard(booking_repo, ledger)

    async def execute(self, client_id: str) -> Result[CreditSummaryDTO]:
        now = self.clock()

        try:
            released = await self.expiry.release_client_holds(client_id, now)
            packages, total, nearest_expiry, level = await self.ledger.summary(client_id, now=now)
            # Rollback expires loaded rows, so snapshot first
            summary = CreditSummaryDTO(
                client_id=client_id,
                total_remaining=total,
                nearest_expiry=nearest_expiry,
                credit_level=level.value,
                packages=[CreditPackageDTO.from_package(p, now) for p in packages],
            )
            if released:
                await self.uow.commit()
            else:
                await self.uow.rollback()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to summarize credits for client {client_id}: {e}")
            return Return.err(
                Error(code="CREDIT_SUMMARY_FAILED", message="Failed to load credit summary", reason=str(e))
            )

        for booking in released:
            await notify(self.notifier, booking, BookingEvent.EXPIRED)
        return Return.ok(summary)
