"""In-memory key-value store for development and tests."""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from smartlink.domain.ports import KeyValueStore


@dataclass
class StoreEntry:
    """Stored value with expiry metadata."""

    value: str
    created_at: float
    ttl_seconds: int

    def is_expired(self, now: float) -> bool:
        """Check if the entry is expired at the given clock reading."""
        return now > (self.created_at + self.ttl_seconds)


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local key-value store.

    Fine for a single worker and for tests. With more than one worker every
    process keeps its own counters, so run the Redis backend in production.
    """

    # Listen up future me, the _lock guards EVERY touch of self._entries. increment() is a
    # read-modify-write and two coroutines interleaving there would lose counts.
    # Monotonic clock by default: NTP jumps must not expire (or resurrect) entries.
    # Read eviction alone would never free a bot-gate counter for an IP that does not come back,
    # so every sweep_every-th write also sweeps the whole map.
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = 1024,
    ) -> None:
        """Initialize the empty store.

        Args:
            clock: Seconds source, injectable so tests can move time
            sweep_every: Writes between full sweeps of expired entries
        """
        self._entries: dict[str, StoreEntry] = {}
        self._lock = asyncio.Lock()
        self._clock = clock
        self._sweep_every = max(1, sweep_every)
        self._writes_since_sweep = 0

    @property
    def size(self) -> int:
        """Number of stored entries, expired ones included until evicted."""
        return len(self._entries)

    def _evict_expired(self, now: float) -> int:
        # caller holds self._lock
        expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired_keys:
            del self._entries[key]
        return len(expired_keys)

    def _count_write(self, now: float) -> None:
        # caller holds self._lock
        self._writes_since_sweep += 1
        if self._writes_since_sweep >= self._sweep_every:
            self._writes_since_sweep = 0
            self._evict_expired(now)

    # Yo, expired entries are evicted on read, same as the old InMemoryCache did. get() has a
    # side effect, don't be surprised.
    async def get(self, key: str) -> str | None:
        """Get a value, None if missing or expired."""
        async with self._lock:
            entry = self._entries.get(key)
            if not entry:
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None

            return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Set a value with a time to live."""
        async with self._lock:
            now = self._clock()
            self._count_write(now)
            self._entries[key] = StoreEntry(
                value=value,
                created_at=now,
                ttl_seconds=ttl_seconds,
            )

    # Hey, the window is FIXED: it starts at the first increment and is not extended by later
    # ones. That matches INCR + EXPIRE NX in the Redis store, so both backends count the same way.
    async def increment(self, key: str, ttl_seconds: int) -> int:
        """Increment a counter and return the new value."""
        async with self._lock:
            now = self._clock()
            self._count_write(now)
            entry = self._entries.get(key)
            if entry is None or entry.is_expired(now):
                self._entries[key] = StoreEntry(
                    value="1", created_at=now, ttl_seconds=ttl_seconds
                )
                return 1

            count = int(entry.value) + 1
            entry.value = str(count)
            return count

    async def cleanup_expired(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            return self._evict_expired(self._clock())

    async def close(self) -> None:
        """Drop all entries."""
        async with self._lock:
            self._entries.clear()
