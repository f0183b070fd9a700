"""Cached settings loaders.

Each domain is read from the environment once per process. Tests call
``clear_all_caches()`` after changing environment variables.
"""

from __future__ import annotations

from functools import lru_cache

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    return AuthSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    return DatabaseSettings()


def clear_all_caches() -> None:
    from .unified import get_settings

    for loader in (get_app_settings, get_auth_settings, get_logging_settings, get_db_settings, get_settings):
        loader.cache_clear()
