"""Redis-backed key-value store."""

import logging

import redis.asyncio as redis

from smartlink.application.cache import InMemoryKeyValueStore
from smartlink.config import Settings
from smartlink.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)


class RedisKeyValueStore(KeyValueStore):
    """Key-value store shared by all workers through Redis."""

    def __init__(self, redis_url: str, key_prefix: str = "smartlink:") -> None:
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis:
        """Get or create Redis connection."""
        if self._redis is None:
            self._redis = await redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> str | None:
        """Get a value, None if missing or expired."""
        client = await self._get_redis()
        return await client.get(self._key(key))

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Set a value with a time to live."""
        client = await self._get_redis()
        await client.setex(self._key(key), ttl_seconds, value)

    # Hey future me, INCR and EXPIRE go out in ONE transactional pipeline. EXPIRE NX only sets
    # the TTL when the key has none yet, so the window starts at the first hit and later hits
    # don't push it out (fixed window, same as the in-memory store).
    async def increment(self, key: str, ttl_seconds: int) -> int:
        """Increment a counter and return the new value."""
        client = await self._get_redis()
        full_key = self._key(key)
        async with client.pipeline(transaction=True) as pipe:
            pipe.incr(full_key)
            pipe.expire(full_key, ttl_seconds, nx=True)
            count, _ = await pipe.execute()
        return int(count)

    async def close(self) -> None:
        """Close Redis connection."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None


def build_key_value_store(settings: Settings) -> KeyValueStore:
    """Build the key-value store selected by CACHE__BACKEND."""
    if settings.cache.backend == "redis":
        logger.info("Using Redis key-value store")
        return RedisKeyValueStore(settings.cache.redis_url)
    logger.info("Using in-memory key-value store (single worker only)")
    return InMemoryKeyValueStore()
