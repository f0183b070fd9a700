"""Pydantic schemas for the announcements feature."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from slotlist_service.core.schemas.base import CustomBase, PaginatedResponse
from slotlist_service.features.announcements.models import AnnouncementType


class AnnouncementCreate(CustomBase):
    """Payload used when creating an announcement."""

    title: str = Field(..., min_length=1, max_length=255, description="Title of the announcement")
    content: str = Field(..., min_length=1, description="Content, may contain HTML")
    announcement_type: AnnouncementType = Field(..., description="Type of announcement")
    visible_from: datetime | None = Field(
        default=None,
        description="Visible from this time on; null for immediately visible",
    )
    send_notifications: bool = Field(
        default=False,
        description="Notify every other active user about the new announcement",
    )


class AnnouncementUpdate(CustomBase):
    """Payload for updating an announcement. Only provided fields change."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    visible_from: datetime | None = None


class AnnouncementResponse(CustomBase):
    """Public announcement representation."""

    uid: UUID
    title: str
    content: str
    announcement_type: AnnouncementType
    visible_from: datetime | None
    user_uid: UUID
    created_at: datetime
    updated_at: datetime


class AnnouncementEnvelope(CustomBase):
    """Single announcement wrapped as ``{"announcement": ...}``."""

    announcement: AnnouncementResponse


class AnnouncementListResponse(PaginatedResponse):
    """Paginated announcement list."""

    announcements: list[AnnouncementResponse]


__all__ = [
    "AnnouncementCreate",
    "AnnouncementEnvelope",
    "AnnouncementListResponse",
    "AnnouncementResponse",
    "AnnouncementUpdate",
]
