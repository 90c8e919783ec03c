import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Unit of work whose commit/rollback can be asserted"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def fixed_now():
    """Monday 2024-01-01 09:00 UTC"""
    return datetime(2024, 1, 1, 9, 0)
