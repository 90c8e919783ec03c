"""Booking Repository Interface

Defines the contract for booking persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.booking import Booking


class BookingRepository(ABC):
    """
    Repository interface for Booking persistence

    Booking creation must serialize on the trainer's schedule: callers take
    lock_trainer_schedule() and read the candidate range with for_update=True
    before inserting, all inside one unit of work.
    """

    @abstractmethod
    async def create(self, booking: Booking) -> Booking:
        """
        Persist a new booking

        Raises:
            IntegrityError: an active booking already starts at the same time
                for this trainer (unique index backstop)
        """
        pass

    @abstractmethod
    async def get_by_id(self, booking_id: str, for_update: bool = False) -> Optional[Booking]:
        """
        Retrieve booking by ID

        Args:
            booking_id: Booking identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Booking if found, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, booking: Booking) -> Booking:
        """Flush changes to an existing booking"""
        pass

    @abstractmethod
    async def lock_trainer_schedule(self, trainer_id: str) -> None:
        """
        Serialize booking writers for one trainer until the transaction ends
        """
        pass

    @abstractmethod
    async def list_active_for_trainer(
        self,
        trainer_id: str,
        range_start: datetime,
        range_end: datetime,
        for_update: bool = False,
    ) -> List[Booking]:
        """
        Active bookings (hold, confirmed, checked_in) that may overlap
        [range_start, range_end)

        Args:
            trainer_id: Trainer identifier
            range_start: Range start
            range_end: Range end (exclusive)
            for_update: If True, lock the returned rows

        Returns:
            Bookings ordered by scheduled_at
        """
        pass

    @abstractmethod
    async def list_lapsed_holds(self, now: datetime, limit: int = 100) -> List[Booking]:
        """
        HOLD bookings whose hold_expiry is before now

        Used by the optional hold sweeper.
        """
        pass

    @abstractmethod
    async def list_lapsed_holds_for_client(
        self, client_id: str, now: datetime, for_update: bool = False
    ) -> List[Booking]:
        """
        One client's HOLD bookings whose hold_expiry is before now

        Read before the client's balance is used, so credits parked on a
        lapsed hold are released first.
        """
        pass
