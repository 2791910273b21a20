"""Unit tests for the Database manager."""

import pytest
from sqlalchemy import text

from smartlink.config import DatabaseSettings, Settings
from smartlink.domain.exceptions import ConfigurationError
from smartlink.infrastructure.persistence import Database


class TestDatabase:
    """Test suite for Database."""

    def test_system_role_requires_postgresql(self) -> None:
        """A system role on SQLite is a configuration error."""
        settings = Settings(
            database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:", system_role="svc")
        )

        with pytest.raises(ConfigurationError):
            Database(settings)

    @pytest.mark.asyncio
    async def test_session_scope_rolls_back_on_error(self, database: Database) -> None:
        """Errors inside session_scope roll back and propagate."""
        with pytest.raises(RuntimeError):
            async with database.session_scope() as session:
                await session.execute(
                    text(
                        "INSERT INTO creator_profiles (id, username, username_normalized, "
                        "is_public, created_at, updated_at) "
                        "VALUES ('p1', 'x', 'x', 1, '2024-01-01', '2024-01-01')"
                    )
                )
                raise RuntimeError("boom")

        async with database.session_scope() as session:
            count = await session.scalar(text("SELECT COUNT(*) FROM creator_profiles"))
        assert count == 0

    @pytest.mark.asyncio
    async def test_system_session_scope_without_role_is_plain(self, database: Database) -> None:
        """Without a role the system scope is an ordinary transaction."""
        async with database.system_session_scope() as session:
            assert await session.scalar(text("SELECT 1")) == 1

    @pytest.mark.asyncio
    async def test_sqlite_foreign_keys_enabled(self, database: Database) -> None:
        """The connect hook turns on SQLite foreign keys."""
        async with database.session_scope() as session:
            assert await session.scalar(text("PRAGMA foreign_keys")) == 1
