"""Click attribution: building, persisting and dispatching click events.

Hey future me - attribution is BEST EFFORT by contract. The visitor already got
their 302 before any of this runs; nothing in here may ever turn a successful
redirect into an error. Failures are logged (logger.exception, so the
traceback reaches the operational channel) and dropped. No retries.
"""

import asyncio
import logging
from typing import Any

from smartlink.domain.entities import (
    BotCheck,
    ClickEvent,
    LinkType,
    ProviderCandidate,
    RequestMetadata,
    SelectionReason,
)
from smartlink.domain.value_objects import coerce_link_id, infer_device_type, infer_os
from smartlink.infrastructure.persistence import ClickEventRepository, Database

logger = logging.getLogger(__name__)

PROFILE_FALLBACK_SOURCE = "profile_fallback"


def build_click_event(
    *,
    creator_profile_id: str,
    chosen: ProviderCandidate,
    meta: RequestMetadata,
    bot: BotCheck,
    forced_key: str | None,
    cookie_provider: str | None,
    reason: SelectionReason,
    release_code: str,
    source_name: str | None,
) -> ClickEvent:
    """Build the click event of one resolved listen request.

    Args:
        creator_profile_id: Profile the link belongs to
        chosen: Candidate the visitor is redirected to
        meta: Client metadata of the request
        bot: Bot classification of the request
        forced_key: Normalized ?p= value, if any
        cookie_provider: Normalized cookie value, if any
        reason: Which selection tier decided
        release_code: Trimmed code from the path
        source_name: Candidate source that matched an entry, None when
            only profile-level links were available

    Returns:
        Click event ready to persist
    """
    metadata: dict[str, Any] = {
        "providerKey": chosen.key,
        "forcedProviderKey": forced_key,
        "targetKind": chosen.target_kind.value if chosen.target_kind else None,
        "releaseCode": release_code,
        "releaseId": chosen.release_id,
        "targetUrl": chosen.url,
        "cookieProvider": cookie_provider,
        "source": source_name or PROFILE_FALLBACK_SOURCE,
        "candidateSource": chosen.source.value,
        "selectionReason": reason.value,
    }
    if bot.is_bot:
        metadata["botReason"] = bot.reason

    return ClickEvent(
        creator_profile_id=creator_profile_id,
        link_type=LinkType.LISTEN,
        # link_id is a nullable UUID column - anything not UUID-shaped is dropped
        link_id=coerce_link_id(chosen.link_id),
        ip_address=meta.ip_address,
        user_agent=meta.user_agent,
        referrer=meta.referrer,
        country=meta.country,
        city=meta.city,
        device_type=infer_device_type(meta.user_agent),
        os=infer_os(meta.user_agent),
        is_bot=bot.is_bot,
        metadata=metadata,
    )


class AttributionLogger:
    """Persists click events under the system database role."""

    def __init__(self, database: Database) -> None:
        """Initialize with the database manager."""
        self._database = database

    async def record(self, event: ClickEvent) -> bool:
        """Insert one click event in its own short transaction.

        Returns:
            True if the row was committed, False if the write failed
        """
        try:
            async with self._database.system_session_scope() as session:
                event_id = await ClickEventRepository(session).add(event)
        except Exception:
            logger.exception(
                "Failed to record click event for creator %s", event.creator_profile_id
            )
            return False

        logger.debug(
            "Recorded click event %s (creator=%s, provider=%s)",
            event_id,
            event.creator_profile_id,
            event.metadata.get("providerKey"),
        )
        return True


class AttributionDispatcher:
    """Runs attribution writes as detached tasks with a per-process bound."""

    # Listen up, asyncio only keeps WEAK references to tasks! A task nobody holds can be garbage
    # collected mid-flight, so every task lives in self._tasks until its done-callback removes it.
    # The bound is a drop, not a queue: under a write outage, queuing would grow memory without
    # limit while every queued write fails anyway.
    def __init__(self, attribution_logger: AttributionLogger, max_in_flight: int = 64) -> None:
        """Initialize the dispatcher.

        Args:
            attribution_logger: Logger that performs the actual write
            max_in_flight: Maximum concurrent writes before events are dropped
        """
        self._logger = attribution_logger
        self._max_in_flight = max_in_flight
        self._tasks: set[asyncio.Task[bool]] = set()

        self._dispatched = 0
        self._dropped = 0

    @property
    def in_flight(self) -> int:
        """Number of writes not finished yet."""
        return len(self._tasks)

    def dispatch(self, event: ClickEvent) -> bool:
        """Schedule a write and return immediately.

        Returns:
            True if the write was scheduled, False if it was dropped
        """
        if len(self._tasks) >= self._max_in_flight:
            self._dropped += 1
            logger.warning(
                "Attribution backlog full (%d in flight), dropping click event for creator %s",
                len(self._tasks),
                event.creator_profile_id,
            )
            return False

        task = asyncio.create_task(self._logger.record(event), name="click_attribution")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        self._dispatched += 1
        return True

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight writes (shutdown and tests).

        Args:
            timeout: Seconds to wait before giving up, None waits forever
        """
        if not self._tasks:
            return

        pending = set(self._tasks)
        logger.info("Draining %d attribution write(s)", len(pending))
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            logger.warning(
                "Attribution drain timed out, %d write(s) still in flight",
                len(still_pending),
            )

    def get_stats(self) -> dict[str, int]:
        """Dispatcher counters for monitoring."""
        return {
            "dispatched": self._dispatched,
            "dropped": self._dropped,
            "in_flight": len(self._tasks),
        }
