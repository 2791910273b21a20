"""Test data builders."""

from typing import Any

from smartlink.domain.entities import ListenProfile, SocialLink
from smartlink.infrastructure.persistence import (
    CreatorProfileModel,
    Database,
    SmartLinkTargetModel,
    SocialLinkModel,
)

IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)
ANDROID_UA = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Mobile Safari/537.36"
)
DESKTOP_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
PROFILE_ID = "00000000-0000-4000-8000-000000000001"


def build_profile(**overrides: Any) -> ListenProfile:
    """Build a ListenProfile with sensible defaults."""
    data: dict[str, Any] = {
        "id": PROFILE_ID,
        "handle": "alice",
        "settings": {},
        "social_links": (),
    }
    data.update(overrides)
    return ListenProfile(**data)


def build_social_link(platform: str, url: str, **overrides: Any) -> SocialLink:
    """Build an active SocialLink."""
    link_id = overrides.pop("id", f"link-{platform}")
    return SocialLink(id=link_id, platform=platform, url=url, **overrides)


async def seed_profile(
    db: Database,
    *,
    username: str = "alice",
    is_public: bool = True,
    spotify_url: str | None = None,
    apple_music_url: str | None = None,
    youtube_url: str | None = None,
    spotify_id: str | None = None,
    settings: dict[str, Any] | None = None,
    social_links: list[dict[str, Any]] | None = None,
) -> str:
    """Insert a creator profile (and its social links), return its id."""
    async with db.session_scope() as session:
        profile = CreatorProfileModel(
            username=username,
            username_normalized=username.lower(),
            is_public=is_public,
            spotify_url=spotify_url,
            apple_music_url=apple_music_url,
            youtube_url=youtube_url,
            spotify_id=spotify_id,
            settings=settings or {},
        )
        for order, link in enumerate(social_links or []):
            profile.social_links.append(SocialLinkModel(sort_order=order, **link))
        session.add(profile)
        await session.flush()
        return profile.id


async def seed_target(db: Database, creator_profile_id: str, **fields: Any) -> str:
    """Insert a smart_link_targets row, return its id."""
    async with db.session_scope() as session:
        target = SmartLinkTargetModel(creator_profile_id=creator_profile_id, **fields)
        session.add(target)
        await session.flush()
        return target.id
