"""Domain value objects."""

from smartlink.domain.value_objects.identifiers import coerce_link_id
from smartlink.domain.value_objects.platform import (
    DEFAULT_PROVIDER_ORDER,
    PLATFORM_PROVIDER_ORDER,
    Platform,
    detect_platform,
    infer_device_type,
    infer_os,
    preference_order_for_platform,
)
from smartlink.domain.value_objects.provider_keys import (
    DSP_KEYS,
    PROVIDER_ALIASES,
    TARGET_KINDS,
    is_supported_url,
    normalize_provider_key,
    normalize_target_kind,
)

__all__ = [
    "DEFAULT_PROVIDER_ORDER",
    "DSP_KEYS",
    "PLATFORM_PROVIDER_ORDER",
    "PROVIDER_ALIASES",
    "TARGET_KINDS",
    "Platform",
    "coerce_link_id",
    "detect_platform",
    "infer_device_type",
    "infer_os",
    "is_supported_url",
    "normalize_provider_key",
    "normalize_target_kind",
    "preference_order_for_platform",
]
