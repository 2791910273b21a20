"""Domain entities for smart-link resolution and click attribution."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class TargetKind(str, Enum):
    """What a provider URL points at."""

    RELEASE = "release"
    ARTIST = "artist"
    PLAYLIST = "playlist"
    UNKNOWN = "unknown"


# Hey future me, CandidateOrigin is the provenance tag of a candidate! DISCOG means release-specific
# curation (highest trust), SOCIAL means the creator's social links, PROFILE means the flat DSP
# columns on the profile, FALLBACK is a relational target explicitly marked as fallback. It ends up
# in click metadata so analytics can tell which data source actually produced the redirect.
class CandidateOrigin(str, Enum):
    """Provenance of a provider candidate."""

    DISCOG = "discog"
    PROFILE = "profile"
    SOCIAL = "social"
    FALLBACK = "fallback"


class SelectionReason(str, Enum):
    """Which selection tier produced the chosen candidate."""

    FORCED = "forced"
    CREATOR_DEFAULT = "creator_default"
    COOKIE = "cookie"
    PLATFORM = "platform"
    FIRST_CANDIDATE = "first_candidate"
    NONE = "none"


class LinkType(str, Enum):
    """Click event link types. This subsystem only ever writes LISTEN."""

    LISTEN = "listen"


@dataclass(frozen=True)
class SocialLink:
    """One social link of a creator profile."""

    id: str
    platform: str
    url: str
    platform_type: str | None = None
    is_active: bool | None = True


# Yo, ListenProfile is read-only for the whole resolution! The profile-editing subsystem owns it.
# settings is the free-form JSON document creators edit - it may embed discography entries under
# several legacy container names, see JsonEmbeddedSource.
@dataclass(frozen=True)
class ListenProfile:
    """The creator being resolved."""

    id: str
    handle: str
    spotify_url: str | None = None
    apple_music_url: str | None = None
    youtube_url: str | None = None
    spotify_id: str | None = None
    settings: dict[str, Any] = field(default_factory=dict)
    social_links: tuple[SocialLink, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize for caching."""
        return {
            "id": self.id,
            "handle": self.handle,
            "spotify_url": self.spotify_url,
            "apple_music_url": self.apple_music_url,
            "youtube_url": self.youtube_url,
            "spotify_id": self.spotify_id,
            "settings": self.settings,
            "social_links": [
                {
                    "id": link.id,
                    "platform": link.platform,
                    "url": link.url,
                    "platform_type": link.platform_type,
                    "is_active": link.is_active,
                }
                for link in self.social_links
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ListenProfile":
        """Rebuild a profile from to_dict() output."""
        return cls(
            id=data["id"],
            handle=data["handle"],
            spotify_url=data.get("spotify_url"),
            apple_music_url=data.get("apple_music_url"),
            youtube_url=data.get("youtube_url"),
            spotify_id=data.get("spotify_id"),
            settings=data.get("settings") or {},
            social_links=tuple(
                SocialLink(
                    id=link["id"],
                    platform=link["platform"],
                    url=link["url"],
                    platform_type=link.get("platform_type"),
                    is_active=link.get("is_active", True),
                )
                for link in data.get("social_links") or []
            ),
        )


# Listen up, ProviderCandidate is THE unit the whole algorithm works on. key is always canonical
# (see normalize_provider_key) once it leaves the aggregator. target_kind may be None while a
# candidate is being built - the aggregator fills in ARTIST as default.
@dataclass(frozen=True)
class ProviderCandidate:
    """A provider URL eligible for selection."""

    key: str
    url: str
    source: CandidateOrigin
    target_kind: TargetKind | None = None
    link_id: str | None = None
    release_id: str | None = None
    release_code: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class DiscographyEntry:
    """Creator-curated provider links for one release or track."""

    code: str
    providers: tuple[ProviderCandidate, ...]
    default_provider: str | None = None
    target_kind: TargetKind | None = None
    id: str | None = None
    title: str | None = None


# Hey future me - this is one row of the RELATIONAL smart-link storage shape (smart_link_targets).
# provider_id is whatever the ingestion pipeline wrote - normalize it before using it as a key!
@dataclass(frozen=True)
class SmartLinkTarget:
    """A provider target of a smart link, stored relationally."""

    id: str
    creator_profile_id: str
    smart_link_slug: str
    provider_id: str
    url: str
    provider_link_id: str | None = None
    release_id: str | None = None
    track_id: str | None = None
    is_fallback: bool = False
    priority: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SelectionSignals:
    """The four optional inputs of the selection policy."""

    forced_provider: str | None = None  # query parameter, attacker-controlled
    creator_default: str | None = None  # server-controlled
    cookie_provider: str | None = None  # client-controlled, persisted from a prior visit
    user_agent: str | None = None  # platform hint, derived server-side


@dataclass(frozen=True)
class ProviderSelection:
    """Outcome of the selection policy."""

    chosen: ProviderCandidate | None
    forced_key: str | None
    reason: SelectionReason = SelectionReason.NONE


@dataclass(frozen=True)
class BotCheck:
    """Result of the bot gate."""

    is_bot: bool
    reason: str | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class RequestMetadata:
    """Best-effort visitor metadata extracted from request headers."""

    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None
    country: str | None = None
    city: str | None = None


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - ClickEvent is append-only! Created once per successful resolution and never
# touched again by this subsystem. link_id must already be coerced (UUID-shaped or None) when the
# event is built - the logger trusts it.
@dataclass
class ClickEvent:
    """Attribution record for one listen redirect."""

    creator_profile_id: str
    link_type: LinkType = LinkType.LISTEN
    link_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None
    country: str | None = None
    city: str | None = None
    device_type: str | None = None
    os: str | None = None
    is_bot: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)


__all__ = [
    "BotCheck",
    "CandidateOrigin",
    "ClickEvent",
    "DiscographyEntry",
    "LinkType",
    "ListenProfile",
    "ProviderCandidate",
    "ProviderSelection",
    "RequestMetadata",
    "SelectionReason",
    "SelectionSignals",
    "SmartLinkTarget",
    "SocialLink",
    "TargetKind",
    "utc_now",
]
