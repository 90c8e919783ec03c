"""Passive hold expiry

Every read or write path that touches a booking runs it through
HoldExpiryGuard first, so a lapsed hold is expired (and its credits
returned) before anything else looks at it. Paths that read a client's
balance also release that client's own lapsed holds first.
"""

import logging
from datetime import datetime
from typing import List, Optional
from src.app.repositories.booking_repository import BookingRepository
from src.app.services.credit_ledger import CreditLedger
from src.domain.booking import Booking
from src.domain.booking_state import BookingStateMachine

logger = logging.getLogger(__name__)


class HoldExpiryGuard:
    """
    Applies hold -> expired with credit reversal

    The booking must have been loaded with a row lock. Re-observing an
    expired hold is a no-op, and the ledger skips entries that were
    already reversed, so the credits come back exactly once.
    """

    def __init__(
        self,
        booking_repo: BookingRepository,
        ledger: CreditLedger,
        state_machine: BookingStateMachine = None,
    ):
        self.booking_repo = booking_repo
        self.ledger = ledger
        self.state_machine = state_machine or BookingStateMachine()

    async def expire(self, booking: Booking, now: datetime) -> Optional[int]:
        """
        Expire the booking if its hold lapsed

        Returns:
            Credits actually released, or None when the booking was not expired
        """
        if not self.state_machine.expire_if_lapsed(booking, now):
            return None

        refunds = await self.ledger.reverse_booking(
            booking.id, now=now, notes="Credits released from expired hold"
        )
        await self.booking_repo.update(booking)
        released = sum(r.delta for r in refunds)
        logger.info(
            f"Hold on booking {booking.id} expired at {booking.hold_expiry.isoformat()}, "
            f"released {released} credits"
        )
        return released

    async def apply(self, booking: Booking, now: datetime) -> bool:
        """Returns True if the booking was expired by this call."""
        return await self.expire(booking, now) is not None

    async def release_client_holds(
        self, client_id: str, now: datetime, loaded: Optional[List[Booking]] = None
    ) -> List[Booking]:
        """
        Expire every lapsed hold the client owns

        Args:
            loaded: The client's lapsed holds, if the caller already read them
                under lock (keeps booking locks ahead of package locks)

        Returns:
            The bookings expired by this call
        """
        if loaded is None:
            loaded = await self.booking_repo.list_lapsed_holds_for_client(
                client_id, now, for_update=True
            )

        expired = []
        for booking in loaded:
            if await self.apply(booking, now):
                expired.append(booking)
        return expired
