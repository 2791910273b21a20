"""Client metadata extracted from request headers."""

from collections.abc import Mapping
from urllib.parse import unquote

from smartlink.domain.entities import RequestMetadata

# Vercel marks unknown locations with "XX"
_UNKNOWN_GEO = {"", "XX"}


def _first_header(headers: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = headers.get(name)
        if value and value.strip():
            return value.strip()
    return None


def _clean_geo(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return None if value.upper() in _UNKNOWN_GEO else value


# Hey future me, proxies APPEND to x-forwarded-for, so the first entry is the original client and
# the rest are hops. This trusts the edge (Vercel/Cloudflare) to overwrite a spoofed header - if the
# app is ever exposed directly, ip_address becomes visitor-controlled. It's attribution data only,
# never an auth input, so that's acceptable.
def extract_client_ip(
    headers: Mapping[str, str], fallback: str | None = None
) -> str | None:
    """Return the client IP from proxy headers, else the socket peer."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return _first_header(headers, "x-real-ip", "cf-connecting-ip") or fallback or None


def extract_geo(headers: Mapping[str, str]) -> tuple[str | None, str | None]:
    """Return (country, city) from edge geo headers."""
    country = _clean_geo(_first_header(headers, "x-vercel-ip-country", "cf-ipcountry"))
    city = headers.get("x-vercel-ip-city")
    # Vercel URL-encodes city names ("S%C3%A3o%20Paulo")
    city = _clean_geo(unquote(city)) if city else None
    return country, city


def build_request_metadata(
    headers: Mapping[str, str], peer: str | None = None
) -> RequestMetadata:
    """Collect everything attribution and bot classification need from a request."""
    country, city = extract_geo(headers)
    return RequestMetadata(
        ip_address=extract_client_ip(headers, peer),
        user_agent=_first_header(headers, "user-agent"),
        referrer=_first_header(headers, "referer"),
        country=country,
        city=city,
    )
