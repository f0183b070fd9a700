"""Service configuration, one pydantic-settings class per concern.

    APP_*  AppSettings       HTTP surface, CORS, security headers
    JWT_*  AuthSettings      token signing and validation
    LOG_*  LoggingSettings   log level, format and sinks
    DB_*   DatabaseSettings  engine URL and pool

Values come from init kwargs, then the environment, then ``.env``. Every
instance is frozen; read them through the cached ``get_*`` loaders.
"""

from __future__ import annotations

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .loader import (
    clear_all_caches,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
)
from .logs import LoggingSettings
from .unified import Settings, get_settings

__all__ = [
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "Settings",
    "clear_all_caches",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_settings",
]
