import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.adapter.database import serialize_sqlite_writes
from src.adapter.services.notification_service import LoggingNotificationService
from src.adapter.services.studio_policy_provider import ConfigStudioPolicyProvider
from src.depends import get_notifier, get_policy_provider, get_session


@pytest_asyncio.fixture(scope="function")
async def engine():
    """Fresh in-memory SQLite database per test (one shared connection)"""
    engine = serialize_sqlite_writes(
        create_async_engine(
            "sqlite+aiosqlite://",
            echo=False,
            future=True,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Create a new database session for each test"""
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    async with Session() as session:
        yield session


@pytest.fixture
def studio_settings():
    """Studio policy used by the API; tests may replace it"""
    return {"cancellation_window_hours": 24, "hold_minutes": 15}


@pytest_asyncio.fixture
async def client(db_session, studio_settings):
    """Create test client with database session and policy overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_policy_provider] = lambda: ConfigStudioPolicyProvider(studio_settings)
    app.dependency_overrides[get_notifier] = lambda: LoggingNotificationService()

    # Use ASGITransport for httpx AsyncClient
    base_url = f"http://test{ApplicationConfig.API_PREFIX}"
    async with AsyncClient(transport=ASGITransport(app=app), base_url=base_url) as ac:
        yield ac
