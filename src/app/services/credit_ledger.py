"""Credit Ledger Service

Owns every mutation of client credit packages. Each mutation appends a
LedgerEntry; nothing here commits, so the caller's unit of work decides
whether a reservation and the booking it pays for land together.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple
from src.app.repositories.credit_package_repository import CreditPackageRepository
from src.app.repositories.ledger_entry_repository import LedgerEntryRepository
from src.domain.base import utc_now
from src.domain.credit_allocation import plan_allocation
from src.domain.credit_package import CreditLevel, CreditPackage, summarize
from src.domain.errors import InsufficientCredits, PackageNotFound
from src.domain.ledger_entry import LedgerEntry, LedgerReason

logger = logging.getLogger(__name__)


class CreditLedger:
    """
    Credit ledger over a client's expiring packages

    Business Rules:
    1. FIFO: credits come from the package closest to expiry first,
       never-expiring packages last
    2. All-or-nothing: a short reservation changes nothing
    3. Pessimistic locking: the client's package rows are locked (SELECT FOR
       UPDATE) for the whole reservation
    4. Exact reversal: a refund restores the same amount to the same package,
       even if that package has expired since
    5. Idempotent reversal: an entry already reversed is skipped
    """

    def __init__(
        self,
        package_repo: CreditPackageRepository,
        entry_repo: LedgerEntryRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.package_repo = package_repo
        self.entry_repo = entry_repo
        self.clock = clock

    async def reserve(
        self,
        client_id: str,
        credits_required: int,
        booking_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[LedgerEntry]:
        """
        Deduct credits_required from the client's packages

        Returns:
            One BOOKING entry per package touched

        Raises:
            InsufficientCredits: usable credits are short. Nothing is written when
                the plan fails; a guard failure mid-plan leaves the rollback to
                the caller's unit of work
        """
        now = now or self.clock()
        if credits_required == 0:
            return []

        # Lock every package of the client before reading balances
        packages = await self.package_repo.list_by_client(client_id, for_update=True)
        plan = plan_allocation(packages, credits_required, now)

        entries = []
        for package, amount in plan:
            if not await self.package_repo.apply_usage(package, amount, now):
                # Stored row moved since it was read; the caller rolls back
                raise InsufficientCredits(required=credits_required, available=package.remaining)

            entry = LedgerEntry(
                package_id=package.id,
                client_id=client_id,
                booking_id=booking_id,
                delta=-amount,
                balance_after=package.remaining,
                reason=LedgerReason.BOOKING,
                created_at=now,
            )
            entries.append(await self.entry_repo.create(entry))

        logger.info(
            f"Reserved {credits_required} credits for client {client_id} "
            f"across {len(entries)} package(s) (booking={booking_id})"
        )
        return entries

    async def reverse(
        self,
        entries: Iterable[LedgerEntry],
        now: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> List[LedgerEntry]:
        """
        Write the exact inverse of each consumption entry

        Returns:
            The REFUND entries written (already-reversed entries are skipped)
        """
        now = now or self.clock()
        consumptions = [e for e in entries if e.delta < 0]
        if not consumptions:
            return []

        # Lock packages in a stable order so concurrent reversals cannot deadlock
        packages = {}
        for package_id in sorted({e.package_id for e in consumptions}):
            package = await self.package_repo.get_by_id(package_id, for_update=True)
            if package is None:
                raise PackageNotFound(f"Credit package {package_id} not found")
            packages[package_id] = package

        refunds = []
        for original in consumptions:
            if await self.entry_repo.get_reversal(original.id):
                logger.info(f"Ledger entry {original.id} already reversed, skipping")
                continue

            package = packages[original.package_id]
            amount = -original.delta
            if not await self.package_repo.apply_usage(package, -amount, now):
                raise RuntimeError(
                    f"Cannot return {amount} credits to package {package.id} "
                    f"with only {package.credits_used} used"
                )

            refund = LedgerEntry(
                package_id=package.id,
                client_id=original.client_id,
                booking_id=original.booking_id,
                delta=amount,
                balance_after=package.remaining,
                reason=LedgerReason.REFUND,
                reverses_entry_id=original.id,
                notes=notes,
                created_at=now,
            )
            refunds.append(await self.entry_repo.create(refund))

        if refunds:
            logger.info(
                f"Reversed {sum(r.delta for r in refunds)} credits "
                f"across {len(refunds)} entr(ies) (booking={refunds[0].booking_id})"
            )
        return refunds

    async def reverse_booking(
        self, booking_id: str, now: Optional[datetime] = None, notes: Optional[str] = None
    ) -> List[LedgerEntry]:
        """Reverse every consumption linked to a booking"""
        entries = await self.entry_repo.list_by_booking(booking_id, reason=LedgerReason.BOOKING)
        return await self.reverse(entries, now=now, notes=notes)

    async def grant(
        self,
        package_id: str,
        credits: int,
        now: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> LedgerEntry:
        """Add credits to a package (raises its total)"""
        if credits <= 0:
            raise ValueError("credits must be > 0")
        now = now or self.clock()
        package = await self._locked_package(package_id)

        package.credits_total += credits
        package.updated_at = now
        await self.package_repo.update(package)

        entry = LedgerEntry(
            package_id=package.id,
            client_id=package.client_id,
            delta=credits,
            balance_after=package.remaining,
            reason=LedgerReason.MANUAL_GRANT,
            notes=notes,
            created_at=now,
        )
        return await self.entry_repo.create(entry)

    async def deduct(
        self,
        package_id: str,
        credits: int,
        now: Optional[datetime] = None,
        notes: Optional[str] = None,
    ) -> LedgerEntry:
        """
        Remove credits from one package

        Raises:
            InsufficientCredits: the package has fewer remaining credits
        """
        if credits <= 0:
            raise ValueError("credits must be > 0")
        now = now or self.clock()
        package = await self._locked_package(package_id)

        if package.remaining < credits or not await self.package_repo.apply_usage(
            package, credits, now
        ):
            raise InsufficientCredits(required=credits, available=package.remaining)

        entry = LedgerEntry(
            package_id=package.id,
            client_id=package.client_id,
            delta=-credits,
            balance_after=package.remaining,
            reason=LedgerReason.MANUAL_DEDUCTION,
            notes=notes,
            created_at=now,
        )
        return await self.entry_repo.create(entry)

    async def summary(
        self, client_id: str, now: Optional[datetime] = None
    ) -> Tuple[List[CreditPackage], int, Optional[datetime], CreditLevel]:
        """
        Display-only balance view (no locks taken)

        Returns:
            (packages, total_remaining, nearest_expiry, credit_level)
        """
        now = now or self.clock()
        packages = await self.package_repo.list_by_client(client_id)
        total, nearest_expiry, level = summarize(packages, now)
        return packages, total, nearest_expiry, level

    async def history(
        self, client_id: str, limit: int = 50, offset: int = 0
    ) -> Tuple[List[LedgerEntry], int]:
        """Ledger entries newest first, with the total count"""
        return await self.entry_repo.list_by_client(client_id, limit=limit, offset=offset)

    async def _locked_package(self, package_id: str) -> CreditPackage:
        package = await self.package_repo.get_by_id(package_id, for_update=True)
        if package is None:
            raise PackageNotFound(f"Credit package {package_id} not found")
        return package
