"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from smartlink.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


# Hey future me, this runs OUTSIDE the routes: the correlation id is set here before anything
# else logs, so the resolver's state transitions and the attribution task all carry it. Register
# it as the outermost middleware. One line per request, no "started" line - /listen is a hot path
# and the request line alone doubles log volume.
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with status and duration and echoes the correlation id."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response from application
        """
        # blank header values count as missing
        incoming = request.headers.get(CORRELATION_ID_HEADER, "").strip() or None
        correlation_id = set_correlation_id(incoming)

        method = request.method
        path = request.url.path
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                f"Request failed: {method} {path}",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": int(duration_ms),
                    "error_type": type(e).__name__,
                },
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_emoji = "✓" if response.status_code < 400 else "✗"
        logger.info(
            f"{status_emoji} {method} {path} → {response.status_code} ({duration_ms:.0f}ms)",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": int(duration_ms),
            },
        )

        response.headers[CORRELATION_ID_HEADER] = correlation_id or get_correlation_id()
        return response
