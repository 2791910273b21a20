"""Candidate sources for smart-link resolution.

Hey future me - pick the source with build_candidate_source() instead of
instantiating one directly, so the feature flag stays the single switch:

    source = build_candidate_source(settings.listen.candidate_source, database)
    entry = await source.find_entry(profile, "xyz")
"""

from typing import Literal

from smartlink.application.sources.candidate_source import CandidateSource
from smartlink.application.sources.json_embedded_source import (
    JsonEmbeddedSource,
    extract_discography_entries,
    find_discography_entry,
)
from smartlink.application.sources.relational_source import (
    RelationalSource,
    entry_from_targets,
)
from smartlink.domain.exceptions import ConfigurationError
from smartlink.infrastructure.persistence import Database


def build_candidate_source(
    flag: Literal["json", "relational"] | str, database: Database | None = None
) -> CandidateSource:
    """Build the candidate source selected by the feature flag."""
    if flag == "json":
        return JsonEmbeddedSource()
    if flag == "relational":
        if database is None:
            raise ConfigurationError("The relational candidate source requires a database")
        return RelationalSource(database)
    raise ConfigurationError(f"Unknown candidate source: {flag!r}")


__all__ = [
    "CandidateSource",
    "JsonEmbeddedSource",
    "RelationalSource",
    "build_candidate_source",
    "entry_from_targets",
    "extract_discography_entries",
    "find_discography_entry",
]
