"""Observability: logging and request middleware."""

from smartlink.infrastructure.observability.logging import (
    CorrelationIdFilter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
from smartlink.infrastructure.observability.middleware import (
    CORRELATION_ID_HEADER,
    RequestLoggingMiddleware,
)

__all__ = [
    "CORRELATION_ID_HEADER",
    "CorrelationIdFilter",
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
