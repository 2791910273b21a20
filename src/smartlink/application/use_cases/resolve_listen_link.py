"""Resolve listen link use case."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from smartlink.application.services.attribution import (
    AttributionDispatcher,
    build_click_event,
)
from smartlink.application.services.candidate_aggregator import build_candidates
from smartlink.application.services.provider_selection import (
    extract_creator_default,
    select_provider,
)
from smartlink.application.sources import CandidateSource
from smartlink.application.use_cases import UseCase
from smartlink.domain.entities import (
    BotCheck,
    DiscographyEntry,
    ListenProfile,
    ProviderCandidate,
    ProviderSelection,
    RequestMetadata,
    SelectionSignals,
)
from smartlink.domain.exceptions import CandidateSourceError
from smartlink.domain.ports import IProfileLookup
from smartlink.domain.value_objects import normalize_provider_key

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    """Lifecycle of one listen resolution."""

    REQUEST_RECEIVED = "request_received"
    PROFILE_LOOKUP_PENDING = "profile_lookup_pending"
    ENTRY_LOOKUP_PENDING = "entry_lookup_pending"
    AGGREGATING = "aggregating"
    SELECTING = "selecting"
    REDIRECTING = "redirecting"
    ATTRIBUTION_PENDING = "attribution_pending"
    DONE = "done"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"


@dataclass
class ListenRequest:
    """Request to resolve /{handle}/listen/{code}."""

    handle: str
    code: str
    forced_provider: str | None = None
    cookie_provider: str | None = None
    meta: RequestMetadata = field(default_factory=RequestMetadata)
    bot: BotCheck = field(default_factory=lambda: BotCheck(is_bot=False))


@dataclass
class ListenResolution:
    """Outcome of a listen resolution."""

    state: ResolutionState
    location: str | None = None
    selection: ProviderSelection | None = None
    candidates: list[ProviderCandidate] = field(default_factory=list)
    attribution_scheduled: bool = False

    @property
    def found(self) -> bool:
        """True if the visitor gets redirected."""
        return self.location is not None


class ResolveListenLinkUseCase(UseCase[ListenRequest, ListenResolution]):
    """Use case for resolving a smart link to exactly one provider URL.

    This use case:
    1. Looks up the public profile for the handle
    2. Looks up the discography entry for the code (via the candidate source)
    3. Aggregates candidates (entry, social links, profile columns)
    4. Selects one candidate for this visitor
    5. Schedules the click event without waiting for it
    """

    # Hey future me: the redirect NEVER waits on attribution. dispatch() only schedules a task, and
    # anything that blows up while building the event is logged and ignored - the visitor still
    # gets their 302. Only the READ path (profile + entry lookup) can turn into an error response.
    def __init__(
        self,
        profile_lookup: IProfileLookup,
        candidate_source: CandidateSource,
        dispatcher: AttributionDispatcher,
    ) -> None:
        """Initialize the use case with required dependencies.

        Args:
            profile_lookup: Lookup of public profiles (usually cached)
            candidate_source: Where discography entries come from
            dispatcher: Detached attribution writer
        """
        self._profile_lookup = profile_lookup
        self._candidate_source = candidate_source
        self._dispatcher = dispatcher

    @staticmethod
    def _transition(state: ResolutionState, handle: str, code: str) -> None:
        logger.debug("listen %s/%s -> %s", handle, code, state.value)

    def _not_found(self, handle: str, code: str, why: str) -> ListenResolution:
        self._transition(ResolutionState.NOT_FOUND, handle, code)
        logger.info("Listen link %s/%s not found (%s)", handle, code, why)
        return ListenResolution(state=ResolutionState.NOT_FOUND)

    async def execute(self, request: ListenRequest) -> ListenResolution:
        """Resolve the link.

        Args:
            request: Handle, code and visitor signals

        Returns:
            Resolution with the redirect location, or state NOT_FOUND

        Raises:
            Exception: Unexpected read-path failures propagate to the caller
        """
        handle = request.handle.strip().lower()
        code = request.code.strip()
        self._transition(ResolutionState.REQUEST_RECEIVED, handle, code)

        try:
            if not handle:
                return self._not_found(handle, code, "empty handle")

            self._transition(ResolutionState.PROFILE_LOOKUP_PENDING, handle, code)
            profile = await self._profile_lookup.get_public_by_handle(handle)
            if profile is None:
                return self._not_found(handle, code, "no public profile")

            self._transition(ResolutionState.ENTRY_LOOKUP_PENDING, handle, code)
            entry = await self._find_entry(profile, code)

            self._transition(ResolutionState.AGGREGATING, handle, code)
            candidates = build_candidates(profile, entry, code or None)
            if not candidates:
                return self._not_found(handle, code, "no candidates")

            self._transition(ResolutionState.SELECTING, handle, code)
            cookie_provider = normalize_provider_key(request.cookie_provider)
            selection = select_provider(
                candidates,
                SelectionSignals(
                    forced_provider=request.forced_provider,
                    creator_default=extract_creator_default(profile.settings, entry),
                    cookie_provider=cookie_provider,
                    user_agent=request.meta.user_agent,
                ),
            )
        except Exception:
            self._transition(ResolutionState.INTERNAL_ERROR, handle, code)
            raise

        chosen = selection.chosen
        if chosen is None:
            # unreachable: non-empty candidates always produce a choice
            return self._not_found(handle, code, "no selection")
        self._transition(ResolutionState.REDIRECTING, handle, code)

        self._transition(ResolutionState.ATTRIBUTION_PENDING, handle, code)
        scheduled = self._schedule_attribution(
            request, profile, entry, selection, chosen, code, cookie_provider
        )

        self._transition(ResolutionState.DONE, handle, code)
        return ListenResolution(
            state=ResolutionState.DONE,
            location=chosen.url,
            selection=selection,
            candidates=candidates,
            attribution_scheduled=scheduled,
        )

    async def _find_entry(
        self, profile: ListenProfile, code: str
    ) -> DiscographyEntry | None:
        if not code:
            return None
        try:
            return await self._candidate_source.find_entry(profile, code)
        except CandidateSourceError as e:
            # treated as "no entry" - the profile-level links may still resolve
            logger.warning("Entry lookup failed for %s/%s: %s", profile.handle, code, e.message)
            return None

    def _schedule_attribution(
        self,
        request: ListenRequest,
        profile: ListenProfile,
        entry: DiscographyEntry | None,
        selection: ProviderSelection,
        chosen: ProviderCandidate,
        code: str,
        cookie_provider: str | None,
    ) -> bool:
        try:
            event = build_click_event(
                creator_profile_id=profile.id,
                chosen=chosen,
                meta=request.meta,
                bot=request.bot,
                forced_key=selection.forced_key,
                cookie_provider=cookie_provider,
                reason=selection.reason,
                release_code=code,
                source_name=self._candidate_source.name if entry else None,
            )
            return self._dispatcher.dispatch(event)
        except Exception:
            logger.exception("Failed to schedule click attribution for %s", profile.handle)
            return False
