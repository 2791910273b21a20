"""Unit tests for User-Agent platform inference."""

import pytest
from helpers import ANDROID_UA, DESKTOP_UA, IPHONE_UA

from smartlink.domain.value_objects import (
    DEFAULT_PROVIDER_ORDER,
    Platform,
    detect_platform,
    infer_device_type,
    infer_os,
    preference_order_for_platform,
)

IPAD_UA = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148"
MAC_UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) AppleWebKit/605.1.15 Version/17.0 Safari"
LINUX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"


class TestDetectPlatform:
    """Tests for detect_platform()."""

    def test_iphone_and_ipad_are_ios(self) -> None:
        """iPhone/iPad/iPod user agents are iOS."""
        assert detect_platform(IPHONE_UA) == Platform.IOS
        assert detect_platform(IPAD_UA) == Platform.IOS

    def test_android(self) -> None:
        """Android user agents are Android."""
        assert detect_platform(ANDROID_UA) == Platform.ANDROID

    def test_everything_else_is_desktop(self) -> None:
        """Unknown user agents fall back to desktop."""
        assert detect_platform(DESKTOP_UA) == Platform.DESKTOP
        assert detect_platform("curl/8.0") == Platform.DESKTOP

    @pytest.mark.parametrize("ua", [None, "", "   "])
    def test_missing_user_agent(self, ua: str | None) -> None:
        """No User-Agent means no platform."""
        assert detect_platform(ua) is None


class TestPreferenceOrder:
    """Tests for preference_order_for_platform()."""

    def test_ios_prefers_apple_music(self) -> None:
        """iOS tries Apple Music first."""
        assert preference_order_for_platform(Platform.IOS) == (
            "apple_music",
            "spotify",
            "youtube",
            "soundcloud",
        )

    def test_android_prefers_spotify_then_youtube(self) -> None:
        """Android tries Spotify, then YouTube."""
        assert preference_order_for_platform(Platform.ANDROID) == (
            "spotify",
            "youtube",
            "apple_music",
            "soundcloud",
        )

    def test_desktop_and_unknown_use_default_order(self) -> None:
        """Desktop and missing platform share the neutral order."""
        assert preference_order_for_platform(Platform.DESKTOP) == DEFAULT_PROVIDER_ORDER
        assert preference_order_for_platform(None) == DEFAULT_PROVIDER_ORDER


class TestDeviceAndOs:
    """Tests for infer_device_type() and infer_os()."""

    @pytest.mark.parametrize(
        ("ua", "expected"),
        [
            (IPHONE_UA, "mobile"),
            (ANDROID_UA, "mobile"),
            (IPAD_UA, "tablet"),
            (DESKTOP_UA, "desktop"),
            (None, "unknown"),
        ],
    )
    def test_device_type(self, ua: str | None, expected: str) -> None:
        """Device class from the User-Agent."""
        assert infer_device_type(ua) == expected

    @pytest.mark.parametrize(
        ("ua", "expected"),
        [
            (IPHONE_UA, "ios"),
            (ANDROID_UA, "android"),
            (DESKTOP_UA, "windows"),
            (MAC_UA, "macos"),
            (LINUX_UA, "linux"),
            ("SomethingElse/1.0", None),
            (None, None),
        ],
    )
    def test_os(self, ua: str | None, expected: str | None) -> None:
        """Operating system from the User-Agent."""
        assert infer_os(ua) == expected
