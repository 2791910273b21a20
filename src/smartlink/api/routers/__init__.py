"""API routers."""

from smartlink.api.routers import health, listen

__all__ = ["health", "listen"]
