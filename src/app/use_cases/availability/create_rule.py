"""CreateAvailabilityRule Use Case"""

import logging
from datetime import datetime
from typing import Callable
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.availability_rule_repository import AvailabilityRuleRepository
from src.app.use_cases.common import domain_error
from src.domain.availability_rule import AvailabilityRule
from src.domain.base import utc_now
from src.domain.errors import DomainError
from .dtos import AvailabilityRuleDTO, CreateAvailabilityRuleCommandDTO

logger = logging.getLogger(__name__)


class CreateAvailabilityRule:
    """
    Use Case: Add an open or blocked window to a trainer's calendar

    Existing bookings are not revisited when a blocking rule is added.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        rule_repo: AvailabilityRuleRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.uow = uow
        self.rule_repo = rule_repo
        self.clock = clock

    async def execute(self, command: CreateAvailabilityRuleCommandDTO) -> Result[AvailabilityRuleDTO]:
        try:
            rule = AvailabilityRule(
                trainer_id=command.trainer_id,
                kind=command.kind,
                polarity=command.polarity,
                day_of_week=command.day_of_week,
                start_time=command.start_time,
                end_time=command.end_time,
                specific_date=command.specific_date,
                end_date=command.end_date,
                reason=command.reason,
                notes=command.notes,
                created_at=self.clock(),
            )
            rule.check()
            created = await self.rule_repo.create(rule)
            await self.uow.commit()

        except DomainError as e:
            await self.uow.rollback()
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to create availability rule for {command.trainer_id}: {e}")
            return Return.err(
                Error(
                    code="CREATE_RULE_FAILED",
                    message="Failed to create availability rule",
                    reason=str(e),
                )
            )

        logger.info(
            f"Availability rule {created.id} ({created.kind.value}/{created.polarity.value}) "
            f"added for trainer {created.trainer_id}"
        )
        return Return.ok(AvailabilityRuleDTO.from_rule(created))
