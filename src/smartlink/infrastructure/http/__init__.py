"""HTTP request helpers (client metadata, bot classification)."""

from smartlink.infrastructure.http.bot_gate import BOT_USER_AGENT_PATTERN, HeuristicBotGate
from smartlink.infrastructure.http.request_context import (
    build_request_metadata,
    extract_client_ip,
    extract_geo,
)

__all__ = [
    "BOT_USER_AGENT_PATTERN",
    "HeuristicBotGate",
    "build_request_metadata",
    "extract_client_ip",
    "extract_geo",
]
