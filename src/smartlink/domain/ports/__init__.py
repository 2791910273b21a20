"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod

from smartlink.domain.entities import (
    BotCheck,
    ClickEvent,
    ListenProfile,
    RequestMetadata,
)


# Hey future me, IProfileLookup is a PORT! The resolver only needs "public profile for a handle or
# None" - whether that comes straight from SQL or through the key-value cache is an infrastructure
# decision. Implementations MUST filter out private profiles; the resolver treats None as 404.
class IProfileLookup(ABC):
    """Lookup of public creator profiles by handle."""

    @abstractmethod
    async def get_public_by_handle(self, handle: str) -> ListenProfile | None:
        """Get a public profile by its (already lower-cased) handle."""
        pass


class IClickEventRepository(ABC):
    """Repository interface for click events (append-only)."""

    @abstractmethod
    async def add(self, event: ClickEvent) -> str:
        """Stage a click event for insert and return its id."""
        pass

    @abstractmethod
    async def list_for_creator(
        self, creator_profile_id: str, limit: int = 100
    ) -> list[ClickEvent]:
        """List click events of a creator, newest first."""
        pass


# Yo, this replaces the process-local dicts the adjacent collaborators used to keep (profile cache,
# per-IP counters). With these living in an external store, correctness no longer depends on which
# worker process a visitor hits. Keep the surface tiny: get/set/increment is all anyone needs.
class KeyValueStore(ABC):
    """Minimal key-value store with TTLs and counters."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Get a value, None if missing or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Set a value with a time to live."""
        pass

    @abstractmethod
    async def increment(self, key: str, ttl_seconds: int) -> int:
        """Increment a counter and return the new value.

        The TTL is applied when the counter is created, so a counter counts
        within a fixed window that starts at its first increment.
        """
        pass

    async def close(self) -> None:
        """Release connections. No-op by default."""
        return None


class IBotGate(ABC):
    """Classifies requests as automated crawlers."""

    @abstractmethod
    async def check(self, meta: RequestMetadata, path: str) -> BotCheck:
        """Classify a request. Must never raise."""
        pass


__all__ = [
    "IBotGate",
    "IClickEventRepository",
    "IProfileLookup",
    "KeyValueStore",
]
