"""FastAPI application factory."""

from fastapi import FastAPI

from smartlink.api.exception_handlers import register_exception_handlers
from smartlink.api.routers import health, listen
from smartlink.config import Settings, get_settings
from smartlink.infrastructure.lifecycle import lifespan
from smartlink.infrastructure.observability import RequestLoggingMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the application.

    Args:
        settings: Settings to run with, defaults to the environment

    Returns:
        Configured FastAPI app (resources are created by the lifespan)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url=None,
    )
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    # health first: /{handle}/listen/{code} can't shadow /health, but keep fixed paths up front
    app.include_router(health.router)
    app.include_router(listen.router)

    return app
