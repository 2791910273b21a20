"""Application lifecycle management.

The FastAPI lifespan builds every long-lived object ONCE per process and hangs
it on app.state; api/dependencies.py reads them from there:

    app.state.settings                 Settings
    app.state.db                       Database (engine + session factories)
    app.state.kv_store                 KeyValueStore (memory or Redis)
    app.state.profile_lookup           CachedProfileLookup -> DatabaseProfileLookup
    app.state.candidate_source         json or relational, per LISTEN__CANDIDATE_SOURCE
    app.state.bot_gate                 HeuristicBotGate
    app.state.attribution_dispatcher   detached click-event writer

Shutdown runs in reverse: drain attribution writes (bounded by
LISTEN__SHUTDOWN_DRAIN_TIMEOUT), then close the store and the database.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from smartlink.application.cache import CachedProfileLookup
from smartlink.application.services import AttributionDispatcher, AttributionLogger
from smartlink.application.sources import build_candidate_source
from smartlink.config import Settings, get_settings
from smartlink.domain.exceptions import ConfigurationError
from smartlink.infrastructure.cache import build_key_value_store
from smartlink.infrastructure.http import HeuristicBotGate
from smartlink.infrastructure.observability import configure_logging
from smartlink.infrastructure.persistence import Database, DatabaseProfileLookup

logger = logging.getLogger(__name__)


def _ensure_sqlite_directory(settings: Settings) -> None:
    """Create the parent directory of a file-based SQLite database."""
    db_path = settings.sqlite_db_path()
    if db_path is None or not db_path.parent or str(db_path.parent) == ".":
        return
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to create SQLite database directory '{db_path.parent}': {exc}. "
            "Update DATABASE__URL or adjust directory permissions."
        ) from exc


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    _ensure_sqlite_directory(settings)
    db = Database(settings)
    app.state.db = db
    # SQLite is the dev/test backend; production schemas are managed outside this service
    if settings.database.url.startswith("sqlite"):
        await db.create_tables()
    logger.info("Database initialized: %s", settings.database.url.split("@")[-1])

    store = build_key_value_store(settings)
    app.state.kv_store = store

    app.state.profile_lookup = CachedProfileLookup(
        DatabaseProfileLookup(db),
        store,
        settings.cache.profile_ttl_seconds,
    )
    app.state.candidate_source = build_candidate_source(
        settings.listen.candidate_source, db
    )
    app.state.bot_gate = HeuristicBotGate(store, settings.bot_gate)
    dispatcher = AttributionDispatcher(
        AttributionLogger(db),
        max_in_flight=settings.listen.max_inflight_attribution_writes,
    )
    app.state.attribution_dispatcher = dispatcher
    logger.info(
        "Listen resolution ready (candidate_source=%s, cache=%s)",
        app.state.candidate_source.name,
        settings.cache.backend,
    )

    try:
        yield
    finally:
        logger.info("Shutting down application")
        await dispatcher.drain(timeout=settings.listen.shutdown_drain_timeout)
        logger.info("Attribution stats: %s", dispatcher.get_stats())
        try:
            await store.close()
        except Exception as e:
            logger.warning("Error closing key-value store: %s", e)
        await db.close()
        logger.info("Application shutdown complete")
