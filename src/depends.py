from functools import lru_cache
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.database import serialize_sqlite_writes
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.studio_policy_provider import ConfigStudioPolicyProvider
from src.app.services.notification_service import NotificationService
from src.app.services.studio_policy_provider import StudioPolicyProvider

engine = serialize_sqlite_writes(
    create_async_engine(ApplicationConfig.DB_URI, echo=ApplicationConfig.DB_ECHO, future=True)
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache
def get_policy_provider() -> StudioPolicyProvider:
    return ConfigStudioPolicyProvider(ApplicationConfig.STUDIO_POLICY)


@lru_cache
def get_notifier() -> NotificationService:
    return create_notification_service(ApplicationConfig.BOOKING_NOTIFICATION_WEBHOOK)
