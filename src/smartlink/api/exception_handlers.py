"""Exception handlers for the FastAPI application.

Converts domain exceptions into JSON responses for every route that lets them
escape. The /listen route does NOT rely on these: it builds its own 404/500
responses so the cache and robots headers are always applied.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from smartlink.domain.exceptions import (
    ConfigurationError,
    DomainException,
    EntityNotFoundException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# exception type -> (status code, log level, public detail or None to echo exc.message)
_DOMAIN_ERROR_MAP: dict[type[DomainException], tuple[int, int, str | None]] = {
    ValidationException: (422, logging.WARNING, None),
    EntityNotFoundException: (404, logging.INFO, None),
    ConfigurationError: (500, logging.ERROR, "Service misconfigured"),
}
_FALLBACK = (400, logging.WARNING, None)


def _lookup(exc: Exception) -> tuple[int, int, str | None]:
    # walk the MRO so subclasses of a mapped exception share its status
    for cls in type(exc).__mro__:
        if cls in _DOMAIN_ERROR_MAP:
            return _DOMAIN_ERROR_MAP[cls]
    return _FALLBACK


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map a domain exception to its JSON error response."""
    message = getattr(exc, "message", str(exc))
    status_code, level, public_detail = _lookup(exc)
    logger.log(
        level,
        "%s at %s: %s",
        type(exc).__name__,
        request.url.path,
        message,
        extra={"path": request.url.path, "status_code": status_code},
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": public_detail or message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register the domain exception handler.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
