"""SQLAlchemy implementation of BookingRepository

Serializes booking writers per trainer with a transaction-scoped advisory
lock on PostgreSQL, backed by row locks on the candidate range and a partial
unique index on (trainer_id, scheduled_at) for active bookings.
"""

from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy import text
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.booking_repository import BookingRepository
from src.domain.booking import ACTIVE_STATUSES, Booking, BookingStatus

# Longest session we look back for when searching overlaps by start time
MAX_SESSION_LOOKBACK = timedelta(hours=24)


class SqlAlchemyBookingRepository(BookingRepository):
    """
    SQLAlchemy implementation of BookingRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - pg_advisory_xact_lock per trainer on PostgreSQL
    - Range reads that only touch active bookings
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, booking: Booking) -> Booking:
        self.session.add(booking)
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def get_by_id(self, booking_id: str, for_update: bool = False) -> Optional[Booking]:
        stmt = select(Booking).where(Booking.id == booking_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, booking: Booking) -> Booking:
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def lock_trainer_schedule(self, trainer_id: str) -> None:
        """
        Take a transaction-scoped advisory lock keyed on the trainer

        Released automatically on commit or rollback. SQLite needs no lock
        here: its transactions already start with BEGIN IMMEDIATE (see
        src.adapter.database), which serializes every writer.
        """
        bind = self.session.bind
        if bind is None or bind.dialect.name != "postgresql":
            return
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:trainer_id))"),
            {"trainer_id": trainer_id},
        )

    async def list_active_for_trainer(
        self,
        trainer_id: str,
        range_start: datetime,
        range_end: datetime,
        for_update: bool = False,
    ) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.trainer_id == trainer_id)
            .where(Booking.status.in_(list(ACTIVE_STATUSES)))
            .where(Booking.scheduled_at < range_end)
            .where(Booking.scheduled_at >= range_start - MAX_SESSION_LOOKBACK)
            .order_by(Booking.scheduled_at)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        # Sessions starting before range_start only matter if they run into it
        return [b for b in result.scalars().all() if b.ends_at > range_start]

    async def list_lapsed_holds(self, now: datetime, limit: int = 100) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.status == BookingStatus.HOLD)
            .where(Booking.hold_expiry < now)
            .order_by(Booking.hold_expiry)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_lapsed_holds_for_client(
        self, client_id: str, now: datetime, for_update: bool = False
    ) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.client_id == client_id)
            .where(Booking.status == BookingStatus.HOLD)
            .where(Booking.hold_expiry < now)
            .order_by(Booking.hold_expiry, Booking.id)
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
