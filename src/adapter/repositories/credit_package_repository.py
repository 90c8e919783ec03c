"""SQLAlchemy implementation of CreditPackageRepository

Provides persistence for CreditPackage entities with pessimistic locking
support so concurrent reservations never read the same remaining balance.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.credit_package_repository import CreditPackageRepository
from src.domain.credit_package import CreditPackage


class SqlAlchemyCreditPackageRepository(CreditPackageRepository):
    """
    SQLAlchemy implementation of CreditPackageRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - FIFO-friendly ordering (soonest expiry first, never-expiring last)
    - Balance changes as guarded in-database arithmetic
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, package: CreditPackage) -> CreditPackage:
        self.session.add(package)
        await self.session.flush()
        await self.session.refresh(package)
        return package

    async def get_by_id(self, package_id: str, for_update: bool = False) -> Optional[CreditPackage]:
        """
        Retrieve package by ID with optional row-level locking

        Args:
            package_id: Package identifier
            for_update: If True, locks the row with SELECT FOR UPDATE

        Returns:
            CreditPackage if found, None otherwise
        """
        stmt = select(CreditPackage).where(CreditPackage.id == package_id)

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_client(self, client_id: str, for_update: bool = False) -> List[CreditPackage]:
        """
        Retrieve all of a client's packages

        Locking every row of the client (not just the usable ones) keeps two
        reservations for the same client strictly sequential.
        """
        stmt = (
            select(CreditPackage)
            .where(CreditPackage.client_id == client_id)
            .order_by(
                CreditPackage.expires_at.is_(None),
                CreditPackage.expires_at,
                CreditPackage.created_at,
                CreditPackage.id,
            )
        )

        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, package: CreditPackage) -> CreditPackage:
        """
        Flush balance changes

        Note:
            Should be called within a transaction with the package already locked
        """
        self.session.add(package)
        await self.session.flush()
        return package

    async def apply_usage(self, package: CreditPackage, delta: int, now: datetime) -> bool:
        """
        Guarded UPDATE ... SET credits_used = credits_used + :delta

        The arithmetic happens in SQL, so concurrent writers cannot overwrite
        each other's deduction with an absolute value.
        """
        used = CreditPackage.credits_used + delta
        stmt = (
            update(CreditPackage)
            .where(CreditPackage.id == package.id)
            .where(used >= 0)
            .where(used <= CreditPackage.credits_total)
            .values(credits_used=used, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount != 1:
            return False

        await self.session.refresh(package)
        return True
