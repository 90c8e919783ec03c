"""Ledger Entry Repository Interface

Defines the contract for ledger entry persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.ledger_entry import LedgerEntry, LedgerReason


class LedgerEntryRepository(ABC):
    """
    Repository interface for LedgerEntry persistence

    Entries are immutable and append-only; there is no update or delete.
    """

    @abstractmethod
    async def create(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append a ledger entry

        Raises:
            IntegrityError: reverses_entry_id already reversed
        """
        pass

    @abstractmethod
    async def list_by_booking(
        self, booking_id: str, reason: Optional[LedgerReason] = None
    ) -> List[LedgerEntry]:
        """
        Entries linked to a booking, oldest first

        Args:
            booking_id: Booking identifier
            reason: Optional filter (e.g. BOOKING for the original consumption)
        """
        pass

    @abstractmethod
    async def get_reversal(self, entry_id: str) -> Optional[LedgerEntry]:
        """Refund entry that reverses entry_id, if any"""
        pass

    @abstractmethod
    async def list_by_client(
        self, client_id: str, limit: int = 50, offset: int = 0
    ) -> tuple[list[LedgerEntry], int]:
        """
        Client's ledger history, newest first

        Returns:
            Tuple of (entries, total count)
        """
        pass
