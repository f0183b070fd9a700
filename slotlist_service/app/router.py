"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from slotlist_service.core.settings import get_app_settings
from slotlist_service.features.accounts.router import router as accounts_router
from slotlist_service.features.announcements.router import router as announcements_router
from slotlist_service.features.notifications.router import router as notifications_router
from slotlist_service.features.permissions.router import router as permissions_router
from slotlist_service.features.slot_templates.router import router as slot_templates_router
from slotlist_service.features.status.router import router as status_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from slotlist_service.core.settings import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers under the API prefix.

    Args:
        app: FastAPI application instance.
        app_settings: Optional settings override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    app.include_router(status_router, prefix=api_prefix)
    app.include_router(announcements_router, prefix=api_prefix)
    app.include_router(permissions_router, prefix=api_prefix)
    app.include_router(accounts_router, prefix=api_prefix)
    app.include_router(notifications_router, prefix=api_prefix)
    app.include_router(slot_templates_router, prefix=api_prefix)

    logger.info("Routers registered", extra={"api_prefix": api_prefix})
