"""Profile lookup with a read-through key-value cache."""

import json
import logging

from smartlink.domain.entities import ListenProfile
from smartlink.domain.ports import IProfileLookup, KeyValueStore

logger = logging.getLogger(__name__)


def profile_cache_key(handle: str) -> str:
    """Cache key of a profile handle."""
    return f"profile:{handle}"


class CachedProfileLookup(IProfileLookup):
    """Read-through cache in front of another profile lookup.

    Hey future me - only HITS are cached. A miss (unknown or private handle) goes
    to the inner lookup every time, so a profile flipped to public shows up right
    away instead of after the TTL. The store is a nice-to-have: any store error
    is logged and the request falls through to the inner lookup.
    """

    def __init__(
        self, inner: IProfileLookup, store: KeyValueStore, ttl_seconds: int
    ) -> None:
        """Initialize the cache.

        Args:
            inner: Lookup that owns the truth (usually the database)
            store: Key-value store holding serialized profiles
            ttl_seconds: Entry lifetime, 0 disables caching
        """
        self._inner = inner
        self._store = store
        self._ttl_seconds = ttl_seconds

    async def get_public_by_handle(self, handle: str) -> ListenProfile | None:
        """Get a public profile, from cache when possible."""
        if self._ttl_seconds <= 0:
            return await self._inner.get_public_by_handle(handle)

        key = profile_cache_key(handle)
        cached = await self._read(key)
        if cached is not None:
            return cached

        profile = await self._inner.get_public_by_handle(handle)
        if profile is not None:
            await self._write(key, profile)
        return profile

    async def _read(self, key: str) -> ListenProfile | None:
        try:
            raw = await self._store.get(key)
        except Exception as e:
            logger.warning("Profile cache read failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return ListenProfile.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            # entry written by an incompatible release, ignore it
            logger.warning("Discarding unreadable profile cache entry %s: %s", key, e)
            return None

    async def _write(self, key: str, profile: ListenProfile) -> None:
        try:
            await self._store.set(key, json.dumps(profile.to_dict()), self._ttl_seconds)
        except Exception as e:
            logger.warning("Profile cache write failed for %s: %s", key, e)
