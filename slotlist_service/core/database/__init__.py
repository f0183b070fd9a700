"""Persistence building blocks: declarative base, mixins and repositories.

Engine and session lifecycle live in ``slotlist_service.infra.database``.
"""

from __future__ import annotations

from slotlist_service.core.database.base import (
    NAMING_CONVENTION,
    Base,
    TimestampMixin,
    UUIDPKMixin,
    UUIDTimestampedBase,
)
from slotlist_service.core.database.exceptions import NotFoundError, RepositoryError
from slotlist_service.core.database.repository import BaseRepository, SearchResult

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "NotFoundError",
    "RepositoryError",
    "SearchResult",
    "TimestampMixin",
    "UUIDPKMixin",
    "UUIDTimestampedBase",
]
