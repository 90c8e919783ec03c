"""IssueCreditPackage Use Case

Inbound path for credits: creates a package when a client acquires a bundle.
"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.credit_package_repository import CreditPackageRepository
from src.domain.base import utc_now
from src.domain.credit_package import CreditPackage
from .dtos import CreditPackageDTO, IssuePackageCommandDTO

logger = logging.getLogger(__name__)


class IssueCreditPackage:
    """
    Use Case: Issue a credit package to a client

    Business Rules:
    1. credits > 0 (validated by the command DTO)
    2. The package starts unused; its issue is not a ledger movement
    """

    def __init__(
        self,
        uow: UnitOfWork,
        package_repo: CreditPackageRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.package_repo = package_repo
        self.clock = clock

    async def execute(self, command: IssuePackageCommandDTO) -> Result[CreditPackageDTO]:
        now = self.clock()
        try:
            package = CreditPackage(
                client_id=command.client_id,
                name=command.name,
                credits_total=command.credits,
                credits_used=0,
                expires_at=command.expires_at,
                created_at=now,
                updated_at=now,
            )
            created = await self.package_repo.create(package)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to issue package for client {command.client_id}: {e}")
            return Return.err(
                Error(
                    code="ISSUE_PACKAGE_FAILED",
                    message="Failed to issue credit package",
                    reason=str(e),
                )
            )

        logger.info(
            f"Issued package {created.id} with {created.credits_total} credits "
            f"to client {created.client_id}"
        )
        return Return.ok(CreditPackageDTO.from_package(created, now))
