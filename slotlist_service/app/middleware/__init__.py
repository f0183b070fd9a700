"""Middleware configuration for FastAPI application.

Middleware is applied in REVERSE order (last added = first to execute).
Execution order, outermost to innermost:

    1. Request ID: unique id in request state, log context and response
    2. Real IP: client address, optionally from CF-Connecting-IP
    3. Security headers: HSTS and browser hardening headers
    4. Timing: X-Process-Time header and slow request logging
    5. CORS: only when APP_CORS_ORIGINS is set
    6. Size limit: rejects oversized bodies with 413
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

from slotlist_service.app.middleware.real_ip import RealIPMiddleware
from slotlist_service.app.middleware.request_id import RequestIDMiddleware
from slotlist_service.app.middleware.security_headers import (
    SecurityHeadersMiddleware,
    get_security_headers,
)
from slotlist_service.app.middleware.size_limit import RequestSizeLimitMiddleware
from slotlist_service.app.middleware.timing import TimingMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from slotlist_service.core.settings import Settings

logger = logging.getLogger(__name__)


def configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure all middleware for the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Unified settings
    """
    app_settings = settings.app
    log_settings = settings.logging

    if app_settings.enable_request_size_limit:
        app.add_middleware(RequestSizeLimitMiddleware, max_size=app_settings.request_size_limit)

    if app_settings.cors_origins:
        logger.info("Configuring CORS", extra={"origins": app_settings.cors_origins})
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.cors_origins,
            allow_credentials=app_settings.cors_allow_credentials,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
            max_age=app_settings.cors_max_age,
        )

    app.add_middleware(
        TimingMiddleware,
        slow_threshold=log_settings.slow_request_threshold if log_settings.log_slow_requests else None,
    )
    app.add_middleware(SecurityHeadersMiddleware, hsts_header=app_settings.hsts_header())
    app.add_middleware(
        RealIPMiddleware,
        trust_cf_connecting_ip=app_settings.trust_cf_connecting_ip,
    )

    if log_settings.include_request_id:
        app.add_middleware(RequestIDMiddleware)

    logger.info("Middleware configured")


__all__ = [
    "RealIPMiddleware",
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
    "TimingMiddleware",
    "configure_middleware",
    "get_security_headers",
]
