"""DeleteAvailabilityRule Use Case"""

import logging
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.availability_rule_repository import AvailabilityRuleRepository

logger = logging.getLogger(__name__)


class DeleteAvailabilityRule:
    """
    Use Case: Remove a rule from a trainer's calendar

    When trainer_id is given, a rule owned by someone else is reported as
    RULE_NOT_FOUND.
    """

    def __init__(self, uow: UnitOfWork, rule_repo: AvailabilityRuleRepository):
        self.uow = uow
        self.rule_repo = rule_repo

    async def execute(self, rule_id: str, trainer_id: Optional[str] = None) -> Result[str]:
        try:
            rule = await self.rule_repo.get_by_id(rule_id)
            if not rule or (trainer_id is not None and rule.trainer_id != trainer_id):
                await self.uow.rollback()
                return Return.err(
                    Error(code="RULE_NOT_FOUND", message=f"Availability rule {rule_id} not found")
                )

            await self.rule_repo.delete(rule)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to delete availability rule {rule_id}: {e}")
            return Return.err(
                Error(
                    code="DELETE_RULE_FAILED",
                    message="Failed to delete availability rule",
                    reason=str(e),
                )
            )

        logger.info(f"Availability rule {rule_id} deleted for trainer {rule.trainer_id}")
        return Return.ok(rule_id)
