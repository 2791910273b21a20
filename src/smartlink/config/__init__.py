"""Configuration module for SmartLink."""

from .settings import (
    BotGateSettings,
    CacheSettings,
    DatabaseSettings,
    ListenSettings,
    ObservabilitySettings,
    Settings,
    get_settings,
)

__all__ = [
    "BotGateSettings",
    "CacheSettings",
    "DatabaseSettings",
    "ListenSettings",
    "ObservabilitySettings",
    "Settings",
    "get_settings",
]
