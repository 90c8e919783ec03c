"""AdjustCredits Use Case

Manual grant or deduction on a single package by a trainer or admin.
"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.credit_ledger import CreditLedger
from src.app.use_cases.common import domain_error
from src.domain.base import utc_now
from src.domain.errors import DomainError
from .dtos import (
    AdjustCreditsCommandDTO,
    AdjustCreditsResponseDTO,
    AdjustmentKind,
    CreditPackageDTO,
    LedgerEntryDTO,
)

logger = logging.getLogger(__name__)


class AdjustCredits:
    """
    Use Case: Manually adjust a package's credits

    Business Rules:
    1. The package row is locked for the adjustment
    2. A deduction never takes a package below zero (INSUFFICIENT_CREDITS)
    3. Every adjustment writes a ledger entry
    """

    def __init__(
        self,
        uow: UnitOfWork,
        ledger: CreditLedger,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.ledger = ledger
        self.clock = clock

    async def execute(self, command: AdjustCreditsCommandDTO) -> Result[AdjustCreditsResponseDTO]:
        now = self.clock()
        try:
            if command.kind == AdjustmentKind.GRANT:
                entry = await self.ledger.grant(
                    command.package_id, command.credits, now=now, notes=command.notes
                )
            else:
                entry = await self.ledger.deduct(
                    command.package_id, command.credits, now=now, notes=command.notes
                )
            package = await self.ledger.package_repo.get_by_id(command.package_id)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            logger.warning(f"Adjustment on package {command.package_id} rejected: {e.message}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to adjust package {command.package_id}: {e}")
            return Return.err(
                Error(
                    code="ADJUST_CREDITS_FAILED",
                    message="Failed to adjust credits",
                    reason=str(e),
                )
            )

        logger.info(
            f"Package {command.package_id} {command.kind.value} of {command.credits} credits, "
            f"balance now {entry.balance_after}"
        )
        return Return.ok(
            AdjustCreditsResponseDTO(
                package=CreditPackageDTO.from_package(package, now),
                entry=LedgerEntryDTO.from_entry(entry),
            )
        )
