"""SQLAlchemy implementation of ServiceRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.service_repository import ServiceRepository
from src.domain.service import Service


class SqlAlchemyServiceRepository(ServiceRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, service_id: str) -> Optional[Service]:
        stmt = select(Service).where(Service.id == service_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, service: Service) -> Service:
        self.session.add(service)
        await self.session.flush()
        await self.session.refresh(service)
        return service
