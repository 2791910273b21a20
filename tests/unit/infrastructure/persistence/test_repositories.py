"""Unit tests for the SQLAlchemy repositories (SQLite temp database)."""

from datetime import timedelta

import pytest
from helpers import seed_profile, seed_target

from smartlink.domain.entities import ClickEvent, utc_now
from smartlink.infrastructure.persistence import (
    ClickEventModel,
    ClickEventRepository,
    Database,
    DatabaseProfileLookup,
    ProfileRepository,
    SmartLinkTargetRepository,
)


class TestProfileRepository:
    """Tests for ProfileRepository."""

    @pytest.mark.asyncio
    async def test_public_profile_with_social_links(self, database: Database) -> None:
        """Public profiles come back with their social links in sort order."""
        profile_id = await seed_profile(
            database,
            username="Alice",
            spotify_url="https://open.spotify.com/artist/a",
            settings={"defaultProvider": "spotify"},
            social_links=[
                {"platform": "youtube", "url": "https://youtube.com/@a"},
                {"platform": "instagram", "url": "https://instagram.com/a", "is_active": False},
            ],
        )

        async with database.session_scope() as session:
            profile = await ProfileRepository(session).get_public_by_handle("ALICE")

        assert profile is not None
        assert profile.id == profile_id
        assert profile.handle == "alice"
        assert profile.settings == {"defaultProvider": "spotify"}
        assert [link.platform for link in profile.social_links] == ["youtube", "instagram"]
        assert profile.social_links[1].is_active is False

    @pytest.mark.asyncio
    async def test_private_profile_is_invisible(self, database: Database) -> None:
        """is_public=False behaves like a missing profile."""
        await seed_profile(database, username="hidden", is_public=False)

        async with database.session_scope() as session:
            assert await ProfileRepository(session).get_public_by_handle("hidden") is None
            assert await ProfileRepository(session).get_public_by_handle("nobody") is None

    @pytest.mark.asyncio
    async def test_database_profile_lookup(self, database: Database) -> None:
        """DatabaseProfileLookup opens its own session."""
        await seed_profile(database, username="bob")

        profile = await DatabaseProfileLookup(database).get_public_by_handle("bob")

        assert profile is not None
        assert profile.handle == "bob"


class TestSmartLinkTargetRepository:
    """Tests for SmartLinkTargetRepository."""

    @pytest.mark.asyncio
    async def test_list_for_slug_maps_metadata(self, database: Database) -> None:
        """The metadata column maps onto SmartLinkTarget.metadata."""
        profile_id = await seed_profile(database)
        await seed_target(
            database,
            profile_id,
            smart_link_slug="xyz",
            provider_id="spotify",
            url="https://open.spotify.com/album/1",
            target_metadata={"isDefault": True},
        )

        async with database.session_scope() as session:
            targets = await SmartLinkTargetRepository(session).list_for_slug(profile_id, "XYZ")

        assert len(targets) == 1
        assert targets[0].metadata == {"isDefault": True}
        assert targets[0].is_fallback is False


class TestClickEventRepository:
    """Tests for ClickEventRepository."""

    @pytest.mark.asyncio
    async def test_add_and_list_newest_first(self, database: Database) -> None:
        """Events are appended and listed newest first."""
        profile_id = await seed_profile(database)
        now = utc_now()

        async with database.session_scope() as session:
            repo = ClickEventRepository(session)
            older_id = await repo.add(
                ClickEvent(
                    creator_profile_id=profile_id,
                    metadata={"providerKey": "spotify"},
                    created_at=now - timedelta(minutes=5),
                )
            )
            newer_id = await repo.add(
                ClickEvent(
                    creator_profile_id=profile_id,
                    is_bot=True,
                    metadata={"providerKey": "youtube"},
                    created_at=now,
                )
            )

        assert older_id != newer_id
        async with database.session_scope() as session:
            events = await ClickEventRepository(session).list_for_creator(profile_id)

        assert [e.metadata["providerKey"] for e in events] == ["youtube", "spotify"]
        assert events[0].is_bot is True
        assert events[0].link_type.value == "listen"

    @pytest.mark.asyncio
    async def test_list_skips_other_link_types(self, database: Database) -> None:
        """Rows written by other click sources (tips, socials) are not listen events."""
        profile_id = await seed_profile(database)

        async with database.session_scope() as session:
            session.add(ClickEventModel(creator_profile_id=profile_id, link_type="tip"))
            await ClickEventRepository(session).add(ClickEvent(creator_profile_id=profile_id))

        async with database.session_scope() as session:
            events = await ClickEventRepository(session).list_for_creator(profile_id)

        assert len(events) == 1
        assert events[0].link_type.value == "listen"
