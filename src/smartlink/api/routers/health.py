"""Liveness endpoint."""

from typing import Any

from fastapi import APIRouter, Depends

from smartlink.api.dependencies import get_app_settings
from smartlink.config import Settings

router = APIRouter(tags=["health"])


# Liveness only: no database or Redis round trip, so a store outage (which /listen survives)
# doesn't get the process restarted.
@router.get("/health")
async def health(settings: Settings = Depends(get_app_settings)) -> dict[str, Any]:
    """Report that the process is up."""
    return {"status": "ok", "app": settings.app_name}
