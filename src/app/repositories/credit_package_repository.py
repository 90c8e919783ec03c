"""Credit Package Repository Interface

Defines the contract for credit package persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from src.domain.credit_package import CreditPackage


class CreditPackageRepository(ABC):
    """
    Repository interface for CreditPackage persistence

    Methods use pessimistic locking (SELECT FOR UPDATE) so that two
    concurrent reservations never read the same remaining balance.
    """

    @abstractmethod
    async def create(self, package: CreditPackage) -> CreditPackage:
        """Persist a new credit package"""
        pass

    @abstractmethod
    async def get_by_id(self, package_id: str, for_update: bool = False) -> Optional[CreditPackage]:
        """
        Retrieve package by ID

        Args:
            package_id: Package identifier
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            CreditPackage if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_client(self, client_id: str, for_update: bool = False) -> List[CreditPackage]:
        """
        Retrieve every package a client owns

        Args:
            client_id: Client identifier
            for_update: If True, lock all of the client's package rows

        Returns:
            Packages ordered by expires_at ascending (never-expiring last)
        """
        pass

    @abstractmethod
    async def update(self, package: CreditPackage) -> CreditPackage:
        """Flush balance changes; caller must hold the row lock"""
        pass

    @abstractmethod
    async def apply_usage(self, package: CreditPackage, delta: int, now: datetime) -> bool:
        """
        Atomically move credits_used by delta, in the database

        The change only lands while 0 <= credits_used + delta <= credits_total
        holds for the stored row, so a stale in-memory balance can never
        overdraw or over-refund a package.

        Returns:
            True if applied (package is refreshed), False if the guard failed
        """
        pass
