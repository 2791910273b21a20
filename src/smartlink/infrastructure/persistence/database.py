"""Database session management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from smartlink.config import Settings
from smartlink.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Database:
    """Database connection and session manager."""

    def __init__(self, settings: Settings) -> None:
        """Initialize database with settings."""
        self.settings = settings
        url = settings.database.url

        engine_kwargs: dict[str, Any] = {
            "echo": settings.database.echo,
            "pool_pre_ping": settings.database.pool_pre_ping,
        }

        # Only apply pool settings for PostgreSQL
        if "postgresql" in url:
            engine_kwargs.update(
                {
                    "pool_size": settings.database.pool_size,
                    "max_overflow": settings.database.max_overflow,
                    "pool_timeout": settings.database.pool_timeout,
                    "pool_recycle": settings.database.pool_recycle,
                }
            )
        elif "sqlite" in url:
            engine_kwargs["connect_args"] = {
                "check_same_thread": False,
                "timeout": 30,  # Wait up to 30s for lock
            }

        self._engine = create_async_engine(url, **engine_kwargs)

        if "sqlite" in url:
            self._enable_sqlite_foreign_keys()

        self._system_role = settings.database.system_role
        if self._system_role and "postgresql" not in url:
            raise ConfigurationError(
                "DATABASE__SYSTEM_ROLE is only supported on PostgreSQL databases"
            )

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def _enable_sqlite_foreign_keys(self) -> None:
        """Enable foreign key constraints for SQLite connections."""

        @event.listens_for(self._engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn: Any, _connection_record: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    @asynccontextmanager
    async def session_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a transactional scope for database operations."""
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                # Rollback on any exception, then re-raise for the caller to handle.
                await session.rollback()
                raise

    # Hey future me, this is the scope for writes the SERVICE performs on its own behalf (click
    # attribution)! The visitor of a /listen redirect is anonymous, so we never run these under
    # a visitor/creator role. SET LOCAL only lasts until the transaction ends, so the pooled
    # connection goes back clean. Keep transactions in here SHORT - one statement, commit, done.
    @asynccontextmanager
    async def system_session_scope(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a short transaction scoped to the system database role."""
        async with self.session_scope() as session:
            if self._system_role:
                # Role names can't be bound parameters; quote as an identifier instead.
                quoted = self._system_role.replace('"', '""')
                await session.execute(text(f'SET LOCAL ROLE "{quoted}"'))
            yield session

    async def close(self) -> None:
        """Close database connection."""
        await self._engine.dispose()

    async def create_tables(self) -> None:
        """Create all tables (for testing and local development only)."""
        from smartlink.infrastructure.persistence.models import Base

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
