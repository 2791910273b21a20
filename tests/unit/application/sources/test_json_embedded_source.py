"""Unit tests for the JSON-embedded discography source."""

import pytest
from helpers import build_profile

from smartlink.application.sources import (
    JsonEmbeddedSource,
    extract_discography_entries,
    find_discography_entry,
)
from smartlink.domain.entities import CandidateOrigin, TargetKind


class TestExtractDiscographyEntries:
    """Tests for extract_discography_entries()."""

    def test_list_of_provider_objects(self) -> None:
        """Entries with a providers list of {provider, url} objects."""
        settings = {
            "discog": [
                {
                    "code": "xyz",
                    "title": "First Album",
                    "targetKind": "release",
                    "defaultProvider": "Apple Music",
                    "providers": [
                        {
                            "provider": "Spotify",
                            "url": "https://open.spotify.com/album/1",
                            "linkId": "3f2504e0-4f89-11d3-9a0c-0305e82c3301",
                            "releaseId": "rel-1",
                        },
                        {"key": "apple-music", "url": "https://music.apple.com/album/1"},
                    ],
                }
            ]
        }

        entries = extract_discography_entries(settings)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.code == "xyz"
        assert entry.default_provider == "Apple Music"
        assert entry.target_kind == TargetKind.RELEASE
        assert [p.key for p in entry.providers] == ["spotify", "apple_music"]
        assert entry.providers[0].link_id == "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
        assert entry.providers[0].release_id == "rel-1"
        assert all(p.source == CandidateOrigin.DISCOG for p in entry.providers)

    def test_provider_map_shape(self) -> None:
        """Providers given as {key: url} under 'links'."""
        settings = {
            "releases": {
                "entries": [
                    {
                        "slug": "ep",
                        "links": {
                            "youtube": "https://youtube.com/watch?v=1",
                            "tidal": "https://tidal.com/album/1",
                        },
                    }
                ]
            }
        }

        entry = extract_discography_entries(settings)[0]

        assert entry.code == "ep"
        assert [p.key for p in entry.providers] == ["youtube", "tidal"]

    @pytest.mark.parametrize(
        "container", ["discog", "discography", "listen", "listenLinks", "releases", "music"]
    )
    def test_every_container_key_is_scanned(self, container: str) -> None:
        """Each known container key is a valid home for entries."""
        settings = {
            container: [{"code": "a", "urls": {"spotify": "https://open.spotify.com/a"}}]
        }

        assert [e.code for e in extract_discography_entries(settings)] == ["a"]

    def test_listen_entries(self) -> None:
        """listen.entries is scanned too."""
        settings = {
            "listen": {"entries": [{"id": "z", "dsps": {"deezer": "https://deezer.com/z"}}]}
        }

        assert [e.code for e in extract_discography_entries(settings)] == ["z"]

    def test_invalid_entries_and_providers_are_dropped(self) -> None:
        """Entries without a code or without any valid provider disappear."""
        settings = {
            "discog": [
                "not-a-dict",
                {"providers": [{"provider": "spotify", "url": "https://open.spotify.com/x"}]},
                {"code": 123, "providers": {"spotify": "https://open.spotify.com/x"}},
                {"code": "bad", "providers": [{"provider": "spotify", "url": "javascript:x"}]},
                {"code": "good", "providers": [{"provider": "", "url": "https://a.com"},
                                               {"provider": "spotify", "url": "https://b.com"}]},
            ]
        }

        entries = extract_discography_entries(settings)

        assert [e.code for e in entries] == ["good"]
        assert [p.key for p in entries[0].providers] == ["spotify"]

    def test_key_is_only_used_when_provider_is_absent(self) -> None:
        """An empty provider is a bad provider, it does not fall back to key."""
        settings = {
            "discog": [
                {
                    "code": "xyz",
                    "providers": [
                        {"provider": "", "key": "deezer", "url": "https://deezer.com/a"},
                        {"key": "tidal", "url": "https://tidal.com/b"},
                    ],
                }
            ]
        }

        entries = extract_discography_entries(settings)

        assert [p.key for p in entries[0].providers] == ["tidal"]

    @pytest.mark.parametrize("settings", [None, [], "text", {"discog": "nope"}, {}])
    def test_garbage_settings(self, settings: object) -> None:
        """Non-mapping settings or containers yield nothing."""
        assert extract_discography_entries(settings) == []


class TestFindDiscographyEntry:
    """Tests for find_discography_entry()."""

    def test_code_match_is_case_insensitive(self) -> None:
        """Codes compare case-insensitively, first match wins."""
        settings = {
            "discog": [
                {"code": "XYZ", "providers": {"spotify": "https://open.spotify.com/1"}},
                {"code": "xyz", "providers": {"spotify": "https://open.spotify.com/2"}},
            ]
        }

        entry = find_discography_entry(settings, "xYz")

        assert entry is not None
        assert entry.providers[0].url == "https://open.spotify.com/1"

    def test_missing_code(self) -> None:
        """Unknown code returns None."""
        assert find_discography_entry({"discog": []}, "xyz") is None


class TestJsonEmbeddedSource:
    """Tests for JsonEmbeddedSource."""

    @pytest.mark.asyncio
    async def test_find_entry_reads_profile_settings(self) -> None:
        """The source looks in the profile's settings document."""
        profile = build_profile(
            settings={"discog": [{"code": "xyz", "providers": {"spotify": "https://s.com/x"}}]}
        )
        source = JsonEmbeddedSource()

        entry = await source.find_entry(profile, "xyz")

        assert source.name == "json_embedded"
        assert entry is not None
        assert entry.code == "xyz"
        assert await source.find_entry(profile, "other") is None
