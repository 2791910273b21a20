"""Discography entries stored relationally in smart_link_targets.

Hey future me - the relational shape has no "entry" row, so we SYNTHESIZE one
from all target rows of (profile, slug):

- row order comes from SmartLinkTargetRepository.list_for_slug (non-fallback
  first, then priority ascending, then oldest) and becomes candidate order
- fallback rows get provenance FALLBACK, everything else DISCOG
- provider_link_id becomes the candidate's link_id for attribution
- the entry default is the provider of the first row with metadata isDefault=true

The ingestion path that WRITES these rows is not ours - we only read.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from smartlink.domain.entities import (
    CandidateOrigin,
    DiscographyEntry,
    ListenProfile,
    ProviderCandidate,
    SmartLinkTarget,
    TargetKind,
)
from smartlink.domain.exceptions import CandidateSourceError
from smartlink.domain.value_objects import (
    is_supported_url,
    normalize_provider_key,
    normalize_target_kind,
)
from smartlink.infrastructure.persistence import Database, SmartLinkTargetRepository

logger = logging.getLogger(__name__)


def _target_kind(target: SmartLinkTarget) -> TargetKind:
    kind = normalize_target_kind(target.metadata.get("targetKind"))
    if kind:
        return TargetKind(kind)
    return TargetKind.RELEASE if target.release_id else TargetKind.UNKNOWN


def entry_from_targets(code: str, targets: list[SmartLinkTarget]) -> DiscographyEntry | None:
    """Build a discography entry from relational targets, None if none is usable."""
    providers: list[ProviderCandidate] = []
    default_provider: str | None = None

    for target in targets:
        key = normalize_provider_key(target.provider_id)
        if not key or not is_supported_url(target.url):
            continue
        title = target.metadata.get("title")
        providers.append(
            ProviderCandidate(
                key=key,
                url=target.url,
                source=CandidateOrigin.FALLBACK if target.is_fallback else CandidateOrigin.DISCOG,
                target_kind=_target_kind(target),
                link_id=target.provider_link_id,
                release_id=target.release_id,
                release_code=code,
                title=title if isinstance(title, str) else None,
            )
        )
        if default_provider is None and target.metadata.get("isDefault") is True:
            default_provider = key

    if not providers:
        return None

    release_ids = {p.release_id for p in providers if p.release_id}
    return DiscographyEntry(
        code=code,
        providers=tuple(providers),
        default_provider=default_provider,
        target_kind=providers[0].target_kind,
        # a smart link normally points at exactly one release
        id=release_ids.pop() if len(release_ids) == 1 else None,
    )


class RelationalSource:
    """Candidate source reading smart_link_targets."""

    def __init__(self, database: Database) -> None:
        """Initialize with the database manager.

        Args:
            database: Database whose session_scope() is used for the read
        """
        self._database = database

    @property
    def name(self) -> str:
        """Source name."""
        return "relational"

    async def find_entry(
        self, profile: ListenProfile, code: str
    ) -> DiscographyEntry | None:
        """Synthesize the entry for a code from its target rows."""
        try:
            async with self._database.session_scope() as session:
                targets = await SmartLinkTargetRepository(session).list_for_slug(
                    profile.id, code
                )
        except SQLAlchemyError as e:
            raise CandidateSourceError(self.name, f"target lookup failed: {e}") from e

        logger.debug(
            "Relational smart link lookup",
            extra={"profile_id": profile.id, "code": code, "targets": len(targets)},
        )
        return entry_from_targets(code, targets)
