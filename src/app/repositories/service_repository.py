"""Service Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.service import Service


class ServiceRepository(ABC):

    @abstractmethod
    async def get_by_id(self, service_id: str) -> Optional[Service]:
        pass

    @abstractmethod
    async def create(self, service: Service) -> Service:
        pass
