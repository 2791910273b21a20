"""Discography entries embedded in the profile settings document.

Hey future me - the settings JSON has grown several generations of dashboard
formats, so entries can sit under any of these containers:

    settings.discog / discography / listen / listenLinks / releases / music
    settings.listen.entries

Each container is either a list of entries or an object holding "entries".
An entry's providers can be a list of objects or a plain {provider: url} map:

    {"code": "xyz", "defaultProvider": "spotify",
     "providers": [{"provider": "Apple Music", "url": "https://music.apple.com/..."}]}

    {"slug": "xyz", "targetKind": "release",
     "links": {"spotify": "https://open.spotify.com/album/..."}}

Garbage is skipped silently - a broken entry must never break resolution for
the other entries (or for the profile-column fallback).
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from smartlink.domain.entities import (
    CandidateOrigin,
    DiscographyEntry,
    ListenProfile,
    ProviderCandidate,
    TargetKind,
)
from smartlink.domain.value_objects import (
    is_supported_url,
    normalize_provider_key,
    normalize_target_kind,
)

logger = logging.getLogger(__name__)

CONTAINER_KEYS: tuple[str, ...] = (
    "discog",
    "discography",
    "listen",
    "listenLinks",
    "releases",
    "music",
)
PROVIDER_CONTAINER_KEYS: tuple[str, ...] = ("providers", "links", "dsps", "urls", "platforms")


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _target_kind(value: Any) -> TargetKind | None:
    kind = normalize_target_kind(value)
    return TargetKind(kind) if kind else None


def _entry_code(raw: Mapping[str, Any]) -> str | None:
    for key in ("code", "slug", "id"):
        value = raw.get(key)
        if isinstance(value, str):
            return value
    return None


def _providers_from_list(
    items: Iterable[Any], code: str
) -> list[ProviderCandidate]:
    providers: list[ProviderCandidate] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        raw_key = item.get("provider")
        if raw_key is None:
            raw_key = item.get("key")
        key = normalize_provider_key(raw_key)
        url = item.get("url")
        if not key or not is_supported_url(url):
            continue
        providers.append(
            ProviderCandidate(
                key=key,
                url=url,
                source=CandidateOrigin.DISCOG,
                target_kind=_target_kind(item.get("targetKind")),
                link_id=_str_or_none(item.get("linkId")),
                release_id=_str_or_none(item.get("releaseId")),
                release_code=code,
                title=_str_or_none(item.get("title")),
            )
        )
    return providers


def _providers_from_map(
    mapping: Mapping[str, Any], raw: Mapping[str, Any], code: str
) -> list[ProviderCandidate]:
    providers: list[ProviderCandidate] = []
    for provider_key, url in mapping.items():
        key = normalize_provider_key(provider_key)
        if not key or not is_supported_url(url):
            continue
        providers.append(
            ProviderCandidate(
                key=key,
                url=url,
                source=CandidateOrigin.DISCOG,
                target_kind=_target_kind(raw.get("targetKind")),
                release_code=code,
                title=_str_or_none(raw.get("title")),
            )
        )
    return providers


def parse_entry(raw: Any) -> DiscographyEntry | None:
    """Parse one raw entry, None if it has no code or no valid provider."""
    if not isinstance(raw, Mapping):
        return None
    code = _entry_code(raw)
    if code is None:
        return None

    providers_raw: Any = []
    for key in PROVIDER_CONTAINER_KEYS:
        if raw.get(key) is not None:
            providers_raw = raw[key]
            break

    if isinstance(providers_raw, list):
        providers = _providers_from_list(providers_raw, code)
    elif isinstance(providers_raw, Mapping):
        providers = _providers_from_map(providers_raw, raw, code)
    else:
        providers = []

    if not providers:
        return None

    default_provider = _str_or_none(raw.get("defaultProvider")) or _str_or_none(
        raw.get("preferredProvider")
    )
    return DiscographyEntry(
        code=code,
        providers=tuple(providers),
        default_provider=default_provider,
        target_kind=_target_kind(raw.get("targetKind")),
        id=_str_or_none(raw.get("id")),
        title=_str_or_none(raw.get("title")),
    )


def extract_discography_entries(settings: Any) -> list[DiscographyEntry]:
    """Extract every valid discography entry from a settings document."""
    if not isinstance(settings, Mapping):
        return []

    entries: list[DiscographyEntry] = []
    # an object container holds its list under "entries" (this covers listen.entries)
    for container in (settings.get(key) for key in CONTAINER_KEYS):
        if isinstance(container, list):
            raw_entries: Any = container
        elif isinstance(container, Mapping) and isinstance(container.get("entries"), list):
            raw_entries = container["entries"]
        else:
            continue
        for raw in raw_entries:
            entry = parse_entry(raw)
            if entry is not None:
                entries.append(entry)
    return entries


def find_discography_entry(settings: Any, code: str) -> DiscographyEntry | None:
    """Find the first entry whose code matches case-insensitively."""
    wanted = code.lower()
    for entry in extract_discography_entries(settings):
        if entry.code.lower() == wanted:
            return entry
    return None


class JsonEmbeddedSource:
    """Candidate source reading the profile's settings document."""

    @property
    def name(self) -> str:
        """Source name."""
        return "json_embedded"

    async def find_entry(
        self, profile: ListenProfile, code: str
    ) -> DiscographyEntry | None:
        """Find the entry for a code in the profile settings."""
        entry = find_discography_entry(profile.settings, code)
        logger.debug(
            "JSON discography lookup",
            extra={"profile_id": profile.id, "code": code, "found": entry is not None},
        )
        return entry
