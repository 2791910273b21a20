"""Key-value store backends."""

from smartlink.infrastructure.cache.redis_store import (
    RedisKeyValueStore,
    build_key_value_store,
)

__all__ = ["RedisKeyValueStore", "build_key_value_store"]
