"""Dependency injection for API endpoints."""

from fastapi import Request

from smartlink.application.use_cases import ResolveListenLinkUseCase
from smartlink.config import Settings
from smartlink.domain.ports import IBotGate


# Hey future me, everything here comes from app.state! The lifespan in main.py builds the long-lived
# objects (database, store, dispatcher) ONCE and hangs them on app.state. Building them per request
# would open a new engine or Redis pool per visitor. Tests swap them with app.dependency_overrides.
def get_app_settings(request: Request) -> Settings:
    """Get the settings the app was created with."""
    return request.app.state.settings


def get_bot_gate(request: Request) -> IBotGate:
    """Get the bot gate from app state."""
    return request.app.state.bot_gate


def get_resolve_listen_link_use_case(request: Request) -> ResolveListenLinkUseCase:
    """Build the resolve use case from app state (cheap, no I/O)."""
    state = request.app.state
    return ResolveListenLinkUseCase(
        profile_lookup=state.profile_lookup,
        candidate_source=state.candidate_source,
        dispatcher=state.attribution_dispatcher,
    )
