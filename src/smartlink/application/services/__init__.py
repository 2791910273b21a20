"""Application services."""

from smartlink.application.services.attribution import (
    PROFILE_FALLBACK_SOURCE,
    AttributionDispatcher,
    AttributionLogger,
    build_click_event,
)
from smartlink.application.services.candidate_aggregator import build_candidates
from smartlink.application.services.provider_selection import (
    extract_creator_default,
    select_provider,
)

__all__ = [
    "PROFILE_FALLBACK_SOURCE",
    "AttributionDispatcher",
    "AttributionLogger",
    "build_candidates",
    "build_click_event",
    "extract_creator_default",
    "select_provider",
]
