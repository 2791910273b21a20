"""Response headers for public smart-link responses."""

from fastapi import Response

# Every /listen response is personal (cookie, platform, forced provider), so nothing may cache it
# and search engines must not index the redirect.
NO_CACHE_HEADERS: dict[str, str] = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "X-Robots-Tag": "noindex, nofollow",
}

BOT_SAFE_HEADERS: dict[str, str] = {
    "X-Robots-Tag": "noindex, nofollow, noarchive, nosnippet",
    "Vary": "User-Agent",
}


def apply_listen_headers(response: Response, is_bot: bool = False) -> Response:
    """Set cache and robots headers, plus the stricter bot set for crawlers."""
    response.headers.update(NO_CACHE_HEADERS)
    if is_bot:
        response.headers.update(BOT_SAFE_HEADERS)
    return response
