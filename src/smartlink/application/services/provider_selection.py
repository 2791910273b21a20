"""Provider selection policy.

Hey future me - this picks EXACTLY ONE candidate per visitor. Precedence, first hit wins:

    1. forced provider   (?p= query parameter, untrusted)
    2. creator default   (settings / discography entry)
    3. cookie            (stickiness from a previous visit)
    4. platform order    (iOS -> Apple Music first, Android -> Spotify first, else neutral)
    5. first candidate   (aggregation order)

The policy is TOTAL (non-empty candidates always produce an answer) and
DETERMINISTIC (it looks at nothing but the candidates and the four signals - no
randomness, no clocks). Every signal is normalized and only ever matched against
the pre-computed candidate set; a signal never builds a URL.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from smartlink.domain.entities import (
    DiscographyEntry,
    ProviderCandidate,
    ProviderSelection,
    SelectionReason,
    SelectionSignals,
)
from smartlink.domain.value_objects import (
    detect_platform,
    normalize_provider_key,
    preference_order_for_platform,
)

# Settings keys creators (and older dashboard versions) used for the default provider,
# checked in this order after the entry's own default.
CREATOR_DEFAULT_SETTING_KEYS: tuple[str, ...] = (
    "defaultProvider",
    "default_dsp",
    "preferredDSP",
    "preferredDsp",
    "preferredProvider",
)


def select_provider(
    candidates: Sequence[ProviderCandidate],
    signals: SelectionSignals,
) -> ProviderSelection:
    """Select the best candidate for this visitor.

    Args:
        candidates: Aggregated candidates (canonical keys, aggregation order)
        signals: Forced provider, creator default, cookie value and User-Agent

    Returns:
        ProviderSelection. chosen is None only when candidates is empty.
        forced_key is the normalized forced provider even when it matched nothing,
        so attribution can record what the visitor tried to force.
    """
    forced_key = normalize_provider_key(signals.forced_provider)

    if not candidates:
        return ProviderSelection(chosen=None, forced_key=forced_key)

    by_key: dict[str, ProviderCandidate] = {}
    for candidate in candidates:
        by_key.setdefault(candidate.key, candidate)

    tiers = (
        (forced_key, SelectionReason.FORCED),
        (normalize_provider_key(signals.creator_default), SelectionReason.CREATOR_DEFAULT),
        (normalize_provider_key(signals.cookie_provider), SelectionReason.COOKIE),
    )
    for key, reason in tiers:
        if key and key in by_key:
            return ProviderSelection(chosen=by_key[key], forced_key=forced_key, reason=reason)

    platform = detect_platform(signals.user_agent)
    for key in preference_order_for_platform(platform):
        if key in by_key:
            return ProviderSelection(
                chosen=by_key[key], forced_key=forced_key, reason=SelectionReason.PLATFORM
            )

    return ProviderSelection(
        chosen=candidates[0], forced_key=forced_key, reason=SelectionReason.FIRST_CANDIDATE
    )


def extract_creator_default(
    settings: Mapping[str, Any] | None,
    entry: DiscographyEntry | None = None,
) -> str | None:
    """Resolve the creator-configured default provider key.

    The entry's own default wins over profile-wide settings. Blank values are skipped.
    """
    values: list[Any] = [entry.default_provider if entry else None]

    if isinstance(settings, Mapping):
        values.extend(settings.get(key) for key in CREATOR_DEFAULT_SETTING_KEYS)
        listen = settings.get("listen")
        if isinstance(listen, Mapping):
            values.append(listen.get("defaultProvider"))

    for value in values:
        if isinstance(value, str) and value.strip():
            return normalize_provider_key(value)
    return None
