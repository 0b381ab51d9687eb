"""Database unit test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest

import recibook.database.connection as db_module
from recibook.core.config import Settings, StoreBackend


if TYPE_CHECKING:
    from collections.abc import Generator

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_database_globals() -> Generator[None]:
    """Reset the global asyncpg pool before and after each test."""
    db_module._pool = None
    yield
    db_module._pool = None


@pytest.fixture
def postgres_settings() -> Settings:
    return Settings(store={"backend": StoreBackend.POSTGRES}, database={"table": "docs"})


@pytest.fixture
def firestore_settings() -> Settings:
    return Settings(
        store={"backend": StoreBackend.FIRESTORE},
        firestore={"project": "demo", "database": "(default)"},
    )


@pytest.fixture
def mock_db_settings() -> MagicMock:
    """Settings double carrying only the pool options."""
    settings = MagicMock()
    settings.database.host = "localhost"
    settings.database.port = 5432
    settings.database.name = "recibook"
    settings.database.user = "recibook"
    settings.database.min_pool_size = 1
    settings.database.max_pool_size = 5
    settings.database.command_timeout = 30.0
    settings.database.ssl = False
    settings.DATABASE_PASSWORD = ""
    return settings
