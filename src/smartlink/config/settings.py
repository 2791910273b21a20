"""Application settings loaded from environment variables and .env."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseModel):
    """Database connection settings."""

    url: str = Field(
        default="sqlite+aiosqlite:///./smartlink.db",
        description="SQLAlchemy async database URL",
    )
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 3600
    pool_pre_ping: bool = True
    # Hey future me - this is the role attribution writes run under on PostgreSQL.
    # Visitors hitting /listen are anonymous, so click events are written as the service
    # itself, never as whatever role the request session happens to carry. Leave empty
    # on SQLite (no roles there) or when the connecting user already is the system role.
    system_role: str | None = None


class CacheSettings(BaseModel):
    """Key-value store settings (profile cache, bot gate counters)."""

    backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    profile_ttl_seconds: int = Field(default=30, ge=0)


class ListenSettings(BaseModel):
    """Smart-link resolution settings."""

    cookie_name: str = "listen_provider"
    # Which storage shape discography entries are read from. Both stay supported until
    # one of them is declared authoritative.
    candidate_source: Literal["json", "relational"] = "json"
    max_inflight_attribution_writes: int = Field(default=64, ge=1)
    shutdown_drain_timeout: float = Field(default=5.0, ge=0)


class BotGateSettings(BaseModel):
    """Heuristic bot classification settings."""

    burst_limit: int = Field(default=120, ge=1)
    burst_window_seconds: int = Field(default=60, ge=1)


class ObservabilitySettings(BaseModel):
    """Logging settings."""

    log_json_format: bool = False


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "smartlink"
    debug: bool = False
    log_level: str = "INFO"

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    listen: ListenSettings = Field(default_factory=ListenSettings)
    bot_gate: BotGateSettings = Field(default_factory=BotGateSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    # Yo, only meaningful for sqlite URLs! Returns None for anything else (PostgreSQL,
    # in-memory sqlite) so startup can skip directory creation.
    def sqlite_db_path(self) -> Path | None:
        """Return the SQLite database file path, if the URL points at one."""
        url = self.database.url
        if not url.startswith("sqlite"):
            return None
        _, _, path = url.partition(":///")
        if not path or path.startswith(":memory:"):
            return None
        return Path(path)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
