"""Heuristic classification of automated requests."""

import logging
import re

from smartlink.config import BotGateSettings
from smartlink.domain.entities import BotCheck, RequestMetadata
from smartlink.domain.ports import IBotGate, KeyValueStore

logger = logging.getLogger(__name__)

# Crawlers, link-preview fetchers and HTTP tooling. Link previews matter most here: every chat app
# unfurls a pasted /listen link, and those fetches must not count as listens.
BOT_USER_AGENT_PATTERN = re.compile(
    r"bot|crawl|spider|slurp|facebookexternalhit|facebot|embedly|quora link preview"
    r"|whatsapp|telegram|discord|skypeuripreview|vkshare|pinterest|bitlybot|linkedin"
    r"|headlesschrome|phantomjs|lighthouse|preview"
    r"|curl|wget|python-requests|python-urllib|httpx|aiohttp|go-http-client|okhttp|java/"
    r"|libwww|scrapy|node-fetch|axios",
    re.IGNORECASE,
)


class HeuristicBotGate(IBotGate):
    """Flags bots by user agent and per-IP request bursts.

    Hey future me - this gate only FLAGS. The listen route still redirects bots
    (link previews need the redirect to render a card); the flag just lands in
    the click event and in the response headers. That's also why the burst
    counter failing open is fine: worst case a bot is counted as a visitor.
    """

    def __init__(self, store: KeyValueStore, settings: BotGateSettings) -> None:
        """Initialize the gate.

        Args:
            store: Key-value store holding per-IP burst counters
            settings: Burst limit and window
        """
        self._store = store
        self._burst_limit = settings.burst_limit
        self._burst_window = settings.burst_window_seconds

    async def check(self, meta: RequestMetadata, path: str) -> BotCheck:
        """Classify a request. Never raises."""
        user_agent = meta.user_agent
        if not user_agent:
            return BotCheck(is_bot=True, reason="missing_user_agent", user_agent=None)

        if BOT_USER_AGENT_PATTERN.search(user_agent):
            return BotCheck(is_bot=True, reason="user_agent_pattern", user_agent=user_agent)

        if meta.ip_address and await self._is_burst(meta.ip_address, path):
            return BotCheck(is_bot=True, reason="burst", user_agent=user_agent)

        return BotCheck(is_bot=False, reason=None, user_agent=user_agent)

    async def _is_burst(self, ip_address: str, path: str) -> bool:
        try:
            count = await self._store.increment(
                f"botgate:{ip_address}", self._burst_window
            )
        except Exception as e:
            logger.warning("Bot gate counter unavailable for %s: %s", path, e)
            return False
        return count > self._burst_limit
