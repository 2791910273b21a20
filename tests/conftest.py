"""Shared pytest fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from smartlink.config import CacheSettings, DatabaseSettings, Settings
from smartlink.infrastructure.persistence import Database


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        app_name="smartlink-test",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'smartlink.db'}"),
        cache=CacheSettings(backend="memory", profile_ttl_seconds=30),
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with all tables created."""
    db = Database(settings)
    await db.create_tables()
    yield db
    await db.close()
