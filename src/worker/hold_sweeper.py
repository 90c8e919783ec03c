"""Hold Sweeper Background Worker

Periodically expires provisional holds nobody has looked at since they
lapsed, releasing their credits. Passive expiry on every read and write
already guarantees correctness; the sweeper only returns credits sooner.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.database import serialize_sqlite_writes
from src.adapter.repositories.booking_repository import SqlAlchemyBookingRepository
from src.adapter.repositories.credit_package_repository import SqlAlchemyCreditPackageRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import NotificationService
from src.app.use_cases.booking import ExpireStaleHolds, ExpireHoldsResultDTO
from src.domain.base import utc_now

logger = logging.getLogger(__name__)


class HoldSweeperWorker:
    """
    Background worker for lapsed hold expiry

    Features:
    - Expires each lapsed hold in its own transaction
    - Safe alongside API traffic (rows are re-read under lock, reversal is idempotent)
    - Can run once or continuously

    Usage:
        # Run once
        worker = HoldSweeperWorker()
        result = await worker.run_once()

        # Run continuously
        worker = HoldSweeperWorker()
        await worker.run_forever(interval_seconds=60)
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        batch_size: Optional[int] = None,
        notifier: Optional[NotificationService] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            batch_size: Max holds per sweep (defaults to HOLD_SWEEP_BATCH_SIZE)
            notifier: Where booking.expired events go
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.batch_size = batch_size or ApplicationConfig.HOLD_SWEEP_BATCH_SIZE
        self.notifier = notifier or create_notification_service(
            ApplicationConfig.BOOKING_NOTIFICATION_WEBHOOK
        )

        self.engine = serialize_sqlite_writes(
            create_async_engine(self.db_uri, echo=False, future=True)
        )
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("HoldSweeperWorker initialized")

    async def run_once(self) -> ExpireHoldsResultDTO:
        """
        Run one sweep

        Returns:
            ExpireHoldsResultDTO with sweep counts
        """
        if not ApplicationConfig.HOLD_SWEEP_ENABLED:
            logger.info("Hold sweep is disabled, skipping")
            return ExpireHoldsResultDTO(
                holds_checked=0,
                holds_expired=0,
                credits_restored=0,
                swept_at=utc_now(),
            )

        async with self.async_session_factory() as session:
            booking_repo = SqlAlchemyBookingRepository(session)
            ledger = CreditLedger(
                SqlAlchemyCreditPackageRepository(session),
                SqlAlchemyLedgerEntryRepository(session),
            )

            use_case = ExpireStaleHolds(
                uow=SqlAlchemyUnitOfWork(session),
                booking_repo=booking_repo,
                ledger=ledger,
                notifier=self.notifier,
            )

            result = await use_case.execute(limit=self.batch_size)

            if result.is_err():
                logger.error(f"Hold sweep failed: {result.error.message}")
                raise RuntimeError(f"Hold sweep failed: {result.error.message}")

            return result.value

    async def run_forever(self, interval_seconds: int = 60):
        """
        Sweep continuously at the specified interval

        Args:
            interval_seconds: Seconds between sweeps (default: 60)
        """
        logger.info(f"Starting continuous hold sweep with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Hold sweep complete. "
                    f"Checked {result.holds_checked} holds, "
                    f"expired {result.holds_expired}, "
                    f"restored {result.credits_restored} credits"
                )
            except Exception as e:
                logger.error(f"Hold sweep cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("HoldSweeperWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.hold_sweeper --once

        # Run continuously (default: HOLD_SWEEP_INTERVAL_SECONDS)
        python -m src.worker.hold_sweeper

        # Run continuously with custom interval (in seconds)
        python -m src.worker.hold_sweeper --interval 30
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Hold Sweeper Worker")
    parser.add_argument(
        "--once", action="store_true", help="Run once and exit"
    )
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.HOLD_SWEEP_INTERVAL_SECONDS,
        help="Interval between sweeps in seconds"
    )
    parser.add_argument(
        "--batch-size", type=int, default=None,
        help="Max holds expired per sweep"
    )
    args = parser.parse_args()

    worker = HoldSweeperWorker(batch_size=args.batch_size)

    try:
        if args.once:
            result = await worker.run_once()
            print("Hold sweep complete:")
            print(f"  Holds checked: {result.holds_checked}")
            print(f"  Holds expired: {result.holds_expired}")
            print(f"  Credits restored: {result.credits_restored}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
