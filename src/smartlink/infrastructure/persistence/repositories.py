"""Repository implementations for domain entities."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from smartlink.domain.entities import (
    ClickEvent,
    LinkType,
    ListenProfile,
    SmartLinkTarget,
    SocialLink,
)
from smartlink.domain.ports import IClickEventRepository

from .models import (
    ClickEventModel,
    CreatorProfileModel,
    SmartLinkTargetModel,
)


class ProfileRepository:
    """Read-only access to public creator profiles."""

    # Hey future me, this is the Repository pattern! The session is injected and NOT committed here -
    # the caller's session_scope() owns the transaction. Don't create your own session inside repos.
    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    # Yo, private profiles are filtered HERE so the resolver can treat None as "404, nothing to
    # see". selectinload pulls the social links in a second query instead of lazy-loading them
    # later (lazy loads blow up with async sessions!).
    async def get_public_by_handle(self, handle: str) -> ListenProfile | None:
        """Get a public profile by lower-cased handle."""
        stmt = (
            select(CreatorProfileModel)
            .where(
                CreatorProfileModel.username_normalized == handle.lower(),
                CreatorProfileModel.is_public.is_(True),
            )
            .options(selectinload(CreatorProfileModel.social_links))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return ListenProfile(
            id=model.id,
            handle=model.username_normalized,
            spotify_url=model.spotify_url,
            apple_music_url=model.apple_music_url,
            youtube_url=model.youtube_url,
            spotify_id=model.spotify_id,
            settings=dict(model.settings or {}),
            social_links=tuple(
                SocialLink(
                    id=link.id,
                    platform=link.platform,
                    platform_type=link.platform_type,
                    url=link.url,
                    is_active=link.is_active,
                )
                for link in model.social_links
            ),
        )


class SmartLinkTargetRepository:
    """Read-only access to relational smart-link targets."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    # Listen up, ordering is part of the contract: regular targets before fallbacks, then lower
    # priority number first, then oldest first. The aggregator is first-writer-wins, so this order
    # decides which row survives when two rows normalize to the same provider key.
    async def list_for_slug(
        self, creator_profile_id: str, slug: str
    ) -> list[SmartLinkTarget]:
        """List targets of one smart link (case-insensitive slug match)."""
        stmt = (
            select(SmartLinkTargetModel)
            .where(
                SmartLinkTargetModel.creator_profile_id == creator_profile_id,
                func.lower(SmartLinkTargetModel.smart_link_slug) == slug.lower(),
            )
            .order_by(
                SmartLinkTargetModel.is_fallback.asc(),
                SmartLinkTargetModel.priority.asc(),
                SmartLinkTargetModel.created_at.asc(),
                SmartLinkTargetModel.id.asc(),
            )
        )
        result = await self.session.execute(stmt)
        return [
            SmartLinkTarget(
                id=model.id,
                creator_profile_id=model.creator_profile_id,
                smart_link_slug=model.smart_link_slug,
                provider_id=model.provider_id,
                url=model.url,
                provider_link_id=model.provider_link_id,
                release_id=model.release_id,
                track_id=model.track_id,
                is_fallback=model.is_fallback,
                priority=model.priority,
                metadata=dict(model.target_metadata or {}),
            )
            for model in result.scalars().all()
        ]


class ClickEventRepository(IClickEventRepository):
    """SQLAlchemy implementation of the click event repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, event: ClickEvent) -> str:
        """Stage a click event for insert."""
        model = ClickEventModel(
            creator_profile_id=event.creator_profile_id,
            link_id=event.link_id,
            link_type=event.link_type.value,
            ip_address=event.ip_address,
            user_agent=event.user_agent,
            referrer=event.referrer,
            country=event.country,
            city=event.city,
            device_type=event.device_type,
            os=event.os,
            is_bot=event.is_bot,
            event_metadata=event.metadata,
            created_at=event.created_at,
        )
        self.session.add(model)
        # flush so the INSERT (and any constraint violation) happens inside the caller's try block
        await self.session.flush()
        return model.id

    async def list_for_creator(
        self, creator_profile_id: str, limit: int = 100
    ) -> list[ClickEvent]:
        """List click events of a creator, newest first."""
        stmt = (
            select(ClickEventModel)
            .where(
                ClickEventModel.creator_profile_id == creator_profile_id,
                ClickEventModel.link_type == LinkType.LISTEN.value,
            )
            .order_by(ClickEventModel.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [
            ClickEvent(
                creator_profile_id=model.creator_profile_id,
                link_type=LinkType(model.link_type),
                link_id=model.link_id,
                ip_address=model.ip_address,
                user_agent=model.user_agent,
                referrer=model.referrer,
                country=model.country,
                city=model.city,
                device_type=model.device_type,
                os=model.os,
                is_bot=model.is_bot,
                metadata=dict(model.event_metadata or {}),
                created_at=model.created_at,
            )
            for model in result.scalars().all()
        ]
