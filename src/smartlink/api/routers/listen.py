"""Smart-link resolution endpoint: /{handle}/listen/{code}."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from smartlink.api.dependencies import (
    get_app_settings,
    get_bot_gate,
    get_resolve_listen_link_use_case,
)
from smartlink.api.headers import apply_listen_headers
from smartlink.application.use_cases import ListenRequest, ResolveListenLinkUseCase
from smartlink.config import Settings
from smartlink.domain.entities import BotCheck
from smartlink.domain.ports import IBotGate
from smartlink.infrastructure.http import build_request_metadata

logger = logging.getLogger(__name__)

router = APIRouter(tags=["listen"])

# longer ?p= values are noise, not provider names
MAX_FORCED_PROVIDER_LENGTH = 64


# Hey future me, this route is the PUBLIC hot path - every click on a shared link lands here!
# Rules that must hold:
# - cache/robots headers on EVERY response, including 404 and 500 (hence no HTTPException,
#   the global handlers would skip apply_listen_headers)
# - bots are flagged, never blocked: link previews need the 302 to render a card
# - the 302 never waits for the click event write (the use case only schedules it)
@router.get("/{handle}/listen/{code}", include_in_schema=False)
async def resolve_listen_link(
    handle: str,
    code: str,
    request: Request,
    p: str | None = None,
    use_case: ResolveListenLinkUseCase = Depends(get_resolve_listen_link_use_case),
    bot_gate: IBotGate = Depends(get_bot_gate),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """Redirect a visitor to the best streaming provider for this release."""
    bot = BotCheck(is_bot=False)
    forced_provider = p if p is not None and len(p) <= MAX_FORCED_PROVIDER_LENGTH else None
    try:
        meta = build_request_metadata(
            request.headers, request.client.host if request.client else None
        )
        bot = await bot_gate.check(meta, request.url.path)
        if bot.is_bot:
            logger.info(
                "Bot request on %s (%s)",
                request.url.path,
                bot.reason,
                extra={"bot_reason": bot.reason, "user_agent": bot.user_agent},
            )

        resolution = await use_case.execute(
            ListenRequest(
                handle=handle,
                code=code,
                forced_provider=forced_provider,
                cookie_provider=request.cookies.get(settings.listen.cookie_name),
                meta=meta,
                bot=bot,
            )
        )
    except Exception:
        logger.exception("Listen resolution failed for %s/%s", handle, code)
        return apply_listen_headers(
            PlainTextResponse("Internal Server Error", status_code=500), bot.is_bot
        )

    if not resolution.found or resolution.location is None:
        return apply_listen_headers(
            PlainTextResponse("Not Found", status_code=404), bot.is_bot
        )

    return apply_listen_headers(
        RedirectResponse(resolution.location, status_code=302), bot.is_bot
    )
