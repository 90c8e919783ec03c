"""ExpireStaleHolds Use Case

Batch counterpart of the passive hold expiry. Correctness never depends on
it running; it only returns credits sooner for holds nobody looks at.
"""

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
from .dtos import ExpireHoldsResultDTO
from .hold_expiry import HoldExpiryGuard

logger = logging.getLogger(__name__)


class ExpireStaleHolds:
    """
    Use Case: Expire every lapsed hold

    Each hold is re-read under lock and committed on its own, so one failure
    does not roll back the rest and a hold already expired by a concurrent
    reader is skipped.
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
        self.ledger = ledger
        self.notifier = notifier
        self.clock = clock
        self.expiry = HoldExpiryGuard(booking_repo, ledger)

    async def execute(self, limit: int = 100) -> Result[ExpireHoldsResultDTO]:
        now = self.clock()

        try:
            candidates = await self.booking_repo.list_lapsed_holds(now, limit=limit)
            candidate_ids = [b.id for b in candidates]
            await self.uow.rollback()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to list lapsed holds: {e}")
            return Return.err(
                Error(code="EXPIRE_HOLDS_FAILED", message="Failed to list lapsed holds", reason=str(e))
            )

        expired = 0
        credits_restored = 0
        for booking_id in candidate_ids:
            try:
                booking = await self.booking_repo.get_by_id(booking_id, for_update=True)
                released = None if booking is None else await self.expiry.expire(booking, now)
                if released is None:
                    await self.uow.rollback()
                    continue
                await self.uow.commit()
            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Failed to expire hold {booking_id}: {e}")
                continue

            expired += 1
            credits_restored += released
            await notify(self.notifier, booking, BookingEvent.EXPIRED)

        if candidate_ids:
            logger.info(
                f"Hold sweep: {expired}/{len(candidate_ids)} holds expired, "
                f"{credits_restored} credits restored"
            )
        return Return.ok(
            ExpireHoldsResultDTO(
                holds_checked=len(candidate_ids),
                holds_expired=expired,
                credits_restored=credits_restored,
                swept_at=now,
            )
        )
