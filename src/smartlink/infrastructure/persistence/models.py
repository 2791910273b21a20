"""SQLAlchemy ORM models for SmartLink."""

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from smartlink.domain.entities import utc_now


def _uuid() -> str:
    return str(uuid.uuid4())


# Yo, Base is THE foundation of all ORM models! DeclarativeBase is SQLAlchemy 2.0 style. ALL models
# inherit from this so they share one metadata registry (Database.create_tables uses it).
class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Hey future me - this subsystem only READS creator profiles! The profile-editing subsystem owns
# writes. username_normalized is the lower-cased handle we look up by (unique index), is_public
# filters private profiles out of the listen flow. settings is the free-form JSON document that
# may embed discography entries.
class CreatorProfileModel(Base):
    """SQLAlchemy model for creator profiles."""

    __tablename__ = "creator_profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    username_normalized: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    spotify_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    apple_music_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    youtube_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    spotify_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    settings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    social_links: Mapped[list["SocialLinkModel"]] = relationship(
        "SocialLinkModel",
        back_populates="creator_profile",
        cascade="all, delete-orphan",
        order_by="SocialLinkModel.sort_order",
    )


class SocialLinkModel(Base):
    """SQLAlchemy model for creator social links."""

    __tablename__ = "social_links"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    creator_profile_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("creator_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    platform: Mapped[str] = mapped_column(String(64), nullable=False)
    platform_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool | None] = mapped_column(Boolean, nullable=True, default=True)

    creator_profile: Mapped[CreatorProfileModel] = relationship(
        "CreatorProfileModel", back_populates="social_links"
    )


# Hey future me - relational shape of smart links. One row per (profile, slug, provider).
# "metadata" is reserved on declarative classes, hence the target_metadata attribute name.
# Exactly one of release_id/track_id is set upstream; we don't enforce it here because this
# service never writes these rows.
class SmartLinkTargetModel(Base):
    """SQLAlchemy model for relational smart-link targets."""

    __tablename__ = "smart_link_targets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    creator_profile_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("creator_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    smart_link_slug: Mapped[str] = mapped_column(String(128), nullable=False)
    provider_id: Mapped[str] = mapped_column(String(64), nullable=False)
    provider_link_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    release_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    track_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    is_fallback: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        sa.UniqueConstraint(
            "creator_profile_id",
            "smart_link_slug",
            "provider_id",
            name="smart_link_targets_slug_provider",
        ),
    )


# Listen up, click_events is APPEND-ONLY from this service's point of view. link_id has no foreign
# key on purpose: it can reference a social link OR a discography link id from settings JSON, and a
# FK violation would drop the whole attribution row. Deleting a creator cascades their events.
class ClickEventModel(Base):
    """SQLAlchemy model for click attribution events."""

    __tablename__ = "click_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    creator_profile_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("creator_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    link_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    link_type: Mapped[str] = mapped_column(String(20), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)
    referrer: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str | None] = mapped_column(String(64), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    device_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    os: Mapped[str | None] = mapped_column(String(32), nullable=True)
    is_bot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    event_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    __table_args__ = (
        Index(
            "click_events_creator_profile_id_created_at_idx",
            "creator_profile_id",
            "created_at",
        ),
    )


# Slug lookups compare lower(smart_link_slug), so the index has to be on the expression too.
Index(
    "ix_smart_link_targets_profile_slug_lower",
    SmartLinkTargetModel.creator_profile_id,
    func.lower(SmartLinkTargetModel.smart_link_slug),
)
