"""ListAvailabilityRules Use Case"""

from libs.result import Result, Return
from src.app.repositories.availability_rule_repository import AvailabilityRuleRepository
from .dtos import AvailabilityRuleDTO, ListAvailabilityRulesResponseDTO


class ListAvailabilityRules:
    def __init__(self, rule_repo: AvailabilityRuleRepository):
        self.rule_repo = rule_repo

    async def execute(self, trainer_id: str) -> Result[ListAvailabilityRulesResponseDTO]:
        rules = await self.rule_repo.list_for_trainer(trainer_id)
        return Return.ok(
            ListAvailabilityRulesResponseDTO(
                trainer_id=trainer_id,
                rules=[AvailabilityRuleDTO.from_rule(r) for r in rules],
            )
        )
