"""Booking state machine

Legal lifecycle moves for a Booking. Side effects on other aggregates (credit
reversal, persistence) belong to the use cases; this module only validates
and applies the state change itself.
"""

from datetime import datetime, timedelta
from typing import Dict, FrozenSet, Optional, Tuple
from src.domain.booking import Booking, BookingStatus, TERMINAL_STATUSES
from src.domain.errors import AlreadyTerminal, InvalidDeclaration, InvalidTransition
from src.domain.service import Service
from src.domain.studio_policy import StudioPolicy

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.HOLD: frozenset({BookingStatus.CONFIRMED, BookingStatus.EXPIRED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.CHECKED_IN, BookingStatus.COMPLETED, BookingStatus.CANCELLED}
    ),
    BookingStatus.CHECKED_IN: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.EXPIRED: frozenset(),
}


class BookingStateMachine:
    """
    Booking lifecycle

        hold ──> confirmed ──> checked_in ──> completed
          │          │  └──────────────────────^  (walk-in)
          v          v             │
       expired   cancelled <───────┘

    - hold -> expired happens passively once now > hold_expiry
    - hold -> confirmed is only possible while the hold is still live
    - -> completed requires a non-empty completion declaration
    - cancellation-window rules are the orchestrator's concern
    """

    def initial_status(
        self, service: Service, policy: StudioPolicy, now: datetime
    ) -> Tuple[BookingStatus, Optional[datetime]]:
        """Initial (status, hold_expiry) for a new booking of this service."""
        if not service.requires_payment or policy.hold_minutes is None:
            return BookingStatus.CONFIRMED, None
        return BookingStatus.HOLD, now + timedelta(minutes=policy.hold_minutes)

    def can_transition(self, current: BookingStatus, target: BookingStatus) -> bool:
        return target in TRANSITIONS.get(current, frozenset())

    def transition(
        self,
        booking: Booking,
        target: BookingStatus,
        now: datetime,
        declaration: Optional[str] = None,
    ) -> Booking:
        current = booking.status
        if current in TERMINAL_STATUSES:
            raise AlreadyTerminal(
                f"Booking {booking.id} is already {current.value}",
                reason=f"{current.value} -> {target.value}",
            )
        if not self.can_transition(current, target):
            raise InvalidTransition(
                f"Cannot move booking {booking.id} from {current.value} to {target.value}",
                reason=f"{current.value} -> {target.value}",
            )

        if current == BookingStatus.HOLD:
            lapsed = booking.hold_lapsed(now)
            if target == BookingStatus.CONFIRMED and lapsed:
                raise InvalidTransition(
                    f"Hold on booking {booking.id} lapsed at {booking.hold_expiry.isoformat()}",
                    reason="hold expired",
                )
            if target == BookingStatus.EXPIRED and not lapsed:
                raise InvalidTransition(
                    f"Hold on booking {booking.id} has not lapsed yet",
                    reason="hold still live",
                )

        if target == BookingStatus.COMPLETED:
            if declaration is None or not declaration.strip():
                raise InvalidDeclaration(
                    f"Completing booking {booking.id} requires a session declaration"
                )
            booking.completion_notes = declaration

        if target == BookingStatus.CONFIRMED:
            booking.hold_expiry = None

        booking.status = target
        booking.updated_at = now
        return booking

    def expire_if_lapsed(self, booking: Booking, now: datetime) -> bool:
        """Apply hold -> expired if due. Returns False when nothing changed."""
        if not booking.hold_lapsed(now):
            return False
        self.transition(booking, BookingStatus.EXPIRED, now)
        return True
