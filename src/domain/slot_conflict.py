"""Slot conflict detection against a trainer's existing bookings"""

from datetime import datetime, timedelta
from typing import Iterable, List
from src.domain.booking import ACTIVE_STATUSES, Booking


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Half-open overlap: touching intervals do not conflict."""
    return start_a < end_b and start_b < end_a


class SlotConflictChecker:
    """
    Tests a candidate interval against existing bookings

    Only active bookings (hold, confirmed, checked_in) block a slot.
    Callers are expected to have applied hold expiry to the bookings first.
    """

    def find_conflicts(
        self, candidate_start: datetime, candidate_duration: int, existing: Iterable[Booking]
    ) -> List[Booking]:
        candidate_end = candidate_start + timedelta(minutes=candidate_duration)
        return [
            b for b in existing
            if b.status in ACTIVE_STATUSES
            and intervals_overlap(candidate_start, candidate_end, b.scheduled_at, b.ends_at)
        ]

    def conflicts(
        self, candidate_start: datetime, candidate_duration: int, existing: Iterable[Booking]
    ) -> bool:
        return bool(self.find_conflicts(candidate_start, candidate_duration, existing))
