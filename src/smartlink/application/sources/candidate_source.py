"""CandidateSource protocol.

Hey future me - THIS IS THE ABSTRACTION over the two storage shapes of smart links!

Discography entries live in two places side by side:
- embedded JSON inside the profile settings document (JsonEmbeddedSource)
- the relational smart_link_targets table (RelationalSource)

Nobody has declared which one is authoritative yet, so we DON'T guess. Both
implement the same protocol and the caller picks one via the
LISTEN__CANDIDATE_SOURCE feature flag. The aggregation algorithm exists exactly
once (build_candidates) and never cares where the entry came from.

```
      LISTEN__CANDIDATE_SOURCE
                │
        ┌───────┴────────┐
        ▼                ▼
 JsonEmbeddedSource  RelationalSource
 (settings JSON)     (smart_link_targets)
        └───────┬────────┘
                ▼
       DiscographyEntry | None
                ▼
         build_candidates()
```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from smartlink.domain.entities import DiscographyEntry, ListenProfile


@runtime_checkable
class CandidateSource(Protocol):
    """Protocol for discography entry sources.

    Properties:
        name: Unique identifier, recorded in click metadata as the resolution path

    Methods:
        find_entry: Entry for a code, or None. May raise CandidateSourceError.
    """

    @property
    def name(self) -> str:
        """Unique name for this source (e.g. 'json_embedded', 'relational')."""
        ...

    async def find_entry(
        self, profile: "ListenProfile", code: str
    ) -> "DiscographyEntry | None":
        """Find the discography entry for a code (case-insensitive match)."""
        ...
