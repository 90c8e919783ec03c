"""SQLAlchemy implementation of AvailabilityRuleRepository"""

from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.availability_rule_repository import AvailabilityRuleRepository
from src.domain.availability_rule import AvailabilityRule


class SqlAlchemyAvailabilityRuleRepository(AvailabilityRuleRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, rule: AvailabilityRule) -> AvailabilityRule:
        self.session.add(rule)
        await self.session.flush()
        await self.session.refresh(rule)
        return rule

    async def get_by_id(self, rule_id: str) -> Optional[AvailabilityRule]:
        stmt = select(AvailabilityRule).where(AvailabilityRule.id == rule_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_trainer(self, trainer_id: str) -> List[AvailabilityRule]:
        stmt = (
            select(AvailabilityRule)
            .where(AvailabilityRule.trainer_id == trainer_id)
            .order_by(AvailabilityRule.kind, AvailabilityRule.day_of_week, AvailabilityRule.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, rule: AvailabilityRule) -> None:
        await self.session.delete(rule)
        await self.session.flush()
