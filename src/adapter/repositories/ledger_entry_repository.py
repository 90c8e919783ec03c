"""SQLAlchemy implementation of LedgerEntryRepository

Append-only persistence for LedgerEntry. The unique reverses_entry_id column
makes a second reversal of the same entry fail at flush.
"""

from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.domain.ledger_entry import LedgerEntry, LedgerReason


class SqlAlchemyLedgerEntryRepository(LedgerEntryRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: LedgerEntry) -> LedgerEntry:
        """
        Append a ledger entry

        Raises:
            IntegrityError: If the entry it reverses was already reversed
        """
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def list_by_booking(
        self, booking_id: str, reason: Optional[LedgerReason] = None
    ) -> List[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.booking_id == booking_id)
        if reason is not None:
            stmt = stmt.where(LedgerEntry.reason == reason)
        stmt = stmt.order_by(LedgerEntry.created_at, LedgerEntry.id)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_reversal(self, entry_id: str) -> Optional[LedgerEntry]:
        stmt = select(LedgerEntry).where(LedgerEntry.reverses_entry_id == entry_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_client(
        self, client_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[LedgerEntry], int]:
        """
        Get a client's entries with pagination, newest first

        Returns:
            Tuple of (entries list, total count)
        """
        count_stmt = (
            select(func.count())
            .select_from(LedgerEntry)
            .where(LedgerEntry.client_id == client_id)
        )
        count_result = await self.session.execute(count_stmt)
        total = count_result.scalar_one()

        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.client_id == client_id)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total
