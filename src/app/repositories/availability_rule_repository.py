"""Availability Rule Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.availability_rule import AvailabilityRule


class AvailabilityRuleRepository(ABC):

    @abstractmethod
    async def create(self, rule: AvailabilityRule) -> AvailabilityRule:
        pass

    @abstractmethod
    async def get_by_id(self, rule_id: str) -> Optional[AvailabilityRule]:
        pass

    @abstractmethod
    async def list_for_trainer(self, trainer_id: str) -> List[AvailabilityRule]:
        """All of a trainer's rules, weekly and one-off"""
        pass

    @abstractmethod
    async def delete(self, rule: AvailabilityRule) -> None:
        pass
