"""Application lifespan management.

Startup Order:
1. Logging - always runs first
2. Database - conditional on DB_ENABLED

Shutdown Order: Reverse of startup (what starts first, shuts down last)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from slotlist_service.core.settings import (
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
)
from slotlist_service.infra.logging.config import setup_logging
from slotlist_service.infra.logging.config import shutdown as shutdown_logging

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    """Configure logging and report how the service is set up."""
    app = get_app_settings()
    auth = get_auth_settings()

    setup_logging(log_settings=get_logging_settings(), force=True)
    logger.info(
        "Application starting",
        extra={
            "service": app.service_name,
            "version": app.version,
            "environment": app.environment,
        },
    )
    if auth.uses_default_secret:
        logger.warning("Using the default JWT secret, set JWT_SECRET outside of development")


async def _startup_database() -> None:
    from slotlist_service.infra.database import init_database

    if not get_db_settings().enabled:
        logger.info("Database integration disabled")
        return

    await init_database()


async def _shutdown_database() -> None:
    from slotlist_service.infra.database import close_database

    await close_database()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start services in dependency order and stop them in reverse."""
    _ = app
    await _startup_core()
    await _startup_database()
    logger.info("Application startup complete")

    try:
        yield
    finally:
        logger.info("Application shutting down")
        await _shutdown_database()
        shutdown_logging()
