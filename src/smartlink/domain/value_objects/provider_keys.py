"""Provider key normalization for smart-link candidates.

Hey future me - this module is the single key space for streaming providers!
Creators type "Apple Music", the ingestion pipeline writes "apple-music", the
visitor's cookie holds "applemusic" and the query string says "APPLEMUSIC".
All of them must land on the same canonical key ("apple_music"), otherwise the
selection policy would miss matches and fall through to the platform heuristic.

Both candidate aggregation AND signal validation (forced provider, creator
default, cookie) go through normalize_provider_key(), so candidates and signals
always share one key space.

Examples:
    >>> normalize_provider_key("Apple Music")
    'apple_music'
    >>> normalize_provider_key("  YouTube-Music ")
    'youtube_music'
    >>> normalize_provider_key("Some New DSP!")
    'some_new_dsp'
    >>> normalize_provider_key("   ") is None
    True
"""

import re
from typing import Any
from urllib.parse import urlsplit

# =============================================================================
# PROVIDER ALIASES
# Hey future me - keys are already trimmed, lower-cased and whitespace-collapsed!
# Only spellings that the generic "non-alnum -> _" fallback gets WRONG need an
# entry here ("applemusic" would otherwise stay "applemusic").
# =============================================================================

PROVIDER_ALIASES: dict[str, str] = {
    "apple": "apple_music",
    "applemusic": "apple_music",
    "apple-music": "apple_music",
    "apple music": "apple_music",
    "youtube": "youtube",
    "youtubemusic": "youtube_music",
    "youtube-music": "youtube_music",
    "youtube music": "youtube_music",
    "you tube": "youtube",
    "soundcloud": "soundcloud",
    "sound-cloud": "soundcloud",
    "amazon": "amazon_music",
    "amazon-music": "amazon_music",
    "amazon music": "amazon_music",
    "tidal": "tidal",
    "deezer": "deezer",
    "spotify": "spotify",
}

# Music-streaming providers a social link may turn into. An Instagram link is a
# perfectly valid social link but must never become a "listen" candidate.
DSP_KEYS: frozenset[str] = frozenset(
    {
        "spotify",
        "apple_music",
        "youtube",
        "youtube_music",
        "soundcloud",
        "deezer",
        "tidal",
        "bandcamp",
        "amazon_music",
        "pandora",
    }
)

TARGET_KINDS: frozenset[str] = frozenset({"release", "artist", "playlist"})

_WHITESPACE_RE = re.compile(r"\s+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:.+")
# Never redirect visitors into script or local content.
_BLOCKED_SCHEMES: frozenset[str] = frozenset({"javascript", "data", "vbscript", "file"})


def normalize_provider_key(value: Any) -> str | None:
    """Map an arbitrary provider spelling to its canonical key.

    Total (never raises) and idempotent. The slug fallback can itself produce
    an alias spelling ("apple!" -> "apple"), so the alias table is consulted
    again on the slug; every alias target is a canonical key, which makes any
    output a fixed point.

    Args:
        value: Raw provider name, platform id, cookie value or query parameter

    Returns:
        Canonical key, or None for missing/blank/all-punctuation input
    """
    if not isinstance(value, str):
        return None

    trimmed = value.strip().lower()
    if not trimmed:
        return None

    alias = PROVIDER_ALIASES.get(_WHITESPACE_RE.sub(" ", trimmed))
    if alias is not None:
        return alias

    slug = _NON_ALNUM_RE.sub("_", trimmed).strip("_")
    if not slug:
        return None
    return PROVIDER_ALIASES.get(slug, slug)


def normalize_target_kind(value: Any) -> str | None:
    """Normalize a target kind to release/artist/playlist/unknown.

    Returns None when no kind was given at all, so callers can apply their own default.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    normalized = value.strip().lower()
    return normalized if normalized in TARGET_KINDS else "unknown"


def is_supported_url(value: Any) -> bool:
    """Check whether a candidate URL may ever be used as a redirect target.

    Accepts well-formed http(s) URLs (scheme AND host) and scheme-prefixed URIs
    used by native apps, e.g. "spotify:artist:4Z8W4fKeB5YxbusRsdQVPb".
    """
    if not isinstance(value, str):
        return False
    url = value.strip()
    if not url or any(ch.isspace() for ch in url):
        return False

    try:
        parts = urlsplit(url)
    except ValueError:
        return False

    scheme = parts.scheme.lower()
    if scheme in _BLOCKED_SCHEMES:
        return False
    if scheme in ("http", "https"):
        return bool(parts.netloc)
    return bool(_SCHEME_RE.match(url))
