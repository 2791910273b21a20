"""Visitor platform inference from the User-Agent header.

The platform is derived server-side and only ever used as a *hint*: it decides
the fallback provider order when no explicit signal (forced, creator default,
cookie) matched a candidate.
"""

from enum import Enum


class Platform(str, Enum):
    """Coarse visitor platform used for provider ordering."""

    IOS = "ios"
    ANDROID = "android"
    DESKTOP = "desktop"


# Hey future me - three FIXED orderings, no per-request tweaking! iOS visitors most
# likely have Apple Music installed, Android visitors Spotify/YouTube. Keep these tuples
# immutable, selection determinism depends on it.
PLATFORM_PROVIDER_ORDER: dict[Platform | None, tuple[str, ...]] = {
    Platform.IOS: ("apple_music", "spotify", "youtube", "soundcloud"),
    Platform.ANDROID: ("spotify", "youtube", "apple_music", "soundcloud"),
}
DEFAULT_PROVIDER_ORDER: tuple[str, ...] = ("spotify", "apple_music", "youtube", "soundcloud")


def detect_platform(user_agent: str | None) -> Platform | None:
    """Detect the visitor platform from a User-Agent string.

    Returns:
        Platform.IOS, Platform.ANDROID, Platform.DESKTOP, or None without a User-Agent
    """
    if not user_agent or not user_agent.strip():
        return None

    ua = user_agent.lower()
    if "iphone" in ua or "ipad" in ua or "ipod" in ua:
        return Platform.IOS
    if "android" in ua:
        return Platform.ANDROID
    return Platform.DESKTOP


def preference_order_for_platform(platform: Platform | None) -> tuple[str, ...]:
    """Provider keys in the order they should be tried for a platform."""
    return PLATFORM_PROVIDER_ORDER.get(platform, DEFAULT_PROVIDER_ORDER)


def infer_device_type(user_agent: str | None) -> str:
    """Classify the device as tablet, mobile, desktop or unknown."""
    if not user_agent:
        return "unknown"
    ua = user_agent.lower()
    if "ipad" in ua or "tablet" in ua:
        return "tablet"
    if "mobi" in ua or "iphone" in ua or "android" in ua:
        return "mobile"
    return "desktop"


def infer_os(user_agent: str | None) -> str | None:
    """Best-effort operating system name for analytics."""
    if not user_agent:
        return None
    ua = user_agent.lower()
    if "iphone" in ua or "ipad" in ua or "ipod" in ua:
        return "ios"
    if "android" in ua:
        return "android"
    if "windows" in ua:
        return "windows"
    if "mac os" in ua or "macintosh" in ua:
        return "macos"
    if "linux" in ua:
        return "linux"
    return None
