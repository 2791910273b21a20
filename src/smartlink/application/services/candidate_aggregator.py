"""Provider candidate aggregation.

Hey future me - this merges THREE structurally different data sources into one
ordered, deduplicated candidate list:

    1. the discography entry for the requested code (release-specific curation)
    2. the creator's active social links that point at a streaming provider
    3. the flat DSP columns on the profile (spotify/apple/youtube)

Precedence is strictly first-writer-wins: once a canonical key is registered,
later sources can never overwrite it. So if the release says spotify=A and a
social link says spotify=B, the visitor gets A.

A candidate whose URL fails is_supported_url() is DISCARDED, not deprioritized -
it must never reach a visitor as a redirect target.
"""

import logging
from dataclasses import replace

from smartlink.domain.entities import (
    CandidateOrigin,
    DiscographyEntry,
    ListenProfile,
    ProviderCandidate,
    TargetKind,
)
from smartlink.domain.value_objects import (
    DSP_KEYS,
    is_supported_url,
    normalize_provider_key,
)

logger = logging.getLogger(__name__)

SPOTIFY_ARTIST_URL = "https://open.spotify.com/artist/{spotify_id}"


class _CandidateRegistry:
    """Ordered first-writer-wins map of canonical key -> candidate."""

    def __init__(self) -> None:
        self._candidates: dict[str, ProviderCandidate] = {}

    def add(self, candidate: ProviderCandidate) -> bool:
        key = normalize_provider_key(candidate.key)
        if not key:
            return False
        if not is_supported_url(candidate.url):
            logger.debug(
                "Dropping candidate with unsupported URL",
                extra={"provider_key": key, "source": candidate.source.value},
            )
            return False
        if key in self._candidates:
            return False

        self._candidates[key] = replace(
            candidate,
            key=key,
            url=candidate.url.strip(),
            target_kind=candidate.target_kind or TargetKind.ARTIST,
        )
        return True

    def values(self) -> list[ProviderCandidate]:
        # dicts keep insertion order, which IS the aggregation order
        return list(self._candidates.values())


def _social_link_key(platform: str, platform_type: str | None) -> str | None:
    # platform_type carries the precise provider ("apple_music") while platform may be
    # a generic bucket; "dsp" is such a bucket and says nothing about the provider.
    source = platform_type if platform_type and platform_type != "dsp" else platform
    return normalize_provider_key(source)


def build_candidates(
    profile: ListenProfile,
    entry: DiscographyEntry | None = None,
    release_code: str | None = None,
) -> list[ProviderCandidate]:
    """Build the ordered, deduplicated candidate list for one resolution.

    Args:
        profile: The resolved public profile
        entry: Discography entry for the requested code, if one was found
        release_code: The requested code, recorded on social candidates for attribution

    Returns:
        Candidates in precedence order, at most one per canonical key
    """
    registry = _CandidateRegistry()

    if entry is not None:
        for provider in entry.providers:
            registry.add(provider)

    for link in profile.social_links:
        if link.is_active is False:
            continue
        key = _social_link_key(link.platform, link.platform_type)
        if not key or key not in DSP_KEYS:
            continue
        registry.add(
            ProviderCandidate(
                key=key,
                url=link.url,
                source=CandidateOrigin.SOCIAL,
                target_kind=TargetKind.ARTIST,
                link_id=link.id,
                release_code=release_code,
            )
        )

    spotify_url = profile.spotify_url
    if not spotify_url and profile.spotify_id:
        spotify_url = SPOTIFY_ARTIST_URL.format(spotify_id=profile.spotify_id)

    for key, url in (
        ("spotify", spotify_url),
        ("apple_music", profile.apple_music_url),
        ("youtube", profile.youtube_url),
    ):
        if url:
            registry.add(
                ProviderCandidate(
                    key=key,
                    url=url,
                    source=CandidateOrigin.PROFILE,
                    target_kind=TargetKind.ARTIST,
                )
            )

    return registry.values()
