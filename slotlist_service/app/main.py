"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from slotlist_service.app.exception_handlers import configure_exception_handlers
from slotlist_service.app.lifespan import lifespan
from slotlist_service.app.middleware import configure_middleware
from slotlist_service.app.router import setup_routers
from slotlist_service.core.settings import get_settings


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Settings are loaded once and cached via LRU cache.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    app_settings = settings.app

    app = FastAPI(
        title=app_settings.title,
        description=app_settings.description,
        version=app_settings.version,
        docs_url=app_settings.get_docs_url(),
        redoc_url=app_settings.get_redoc_url(),
        openapi_url=app_settings.get_openapi_url(),
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    # Configure exception handlers (must be before middleware)
    configure_exception_handlers(app)

    configure_middleware(app, settings)

    setup_routers(app, app_settings)

    return app


def run() -> None:
    """Serve the application with uvicorn (``slotlist-service`` console script)."""
    import uvicorn

    app_settings = get_settings().app
    uvicorn.run(
        "slotlist_service.app.main:app",
        host=app_settings.host,
        port=app_settings.port,
        log_config=None,
        proxy_headers=True,
    )


# Application instance for uvicorn
app = create_app()
