"""Caching for the application layer."""

from smartlink.application.cache.memory_store import InMemoryKeyValueStore
from smartlink.application.cache.profile_cache import (
    CachedProfileLookup,
    profile_cache_key,
)

__all__ = [
    "CachedProfileLookup",
    "InMemoryKeyValueStore",
    "profile_cache_key",
]
