"""Pydantic schemas for the notifications feature."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from slotlist_service.core.schemas.base import CustomBase, PaginatedResponse
from slotlist_service.features.notifications.models import NotificationType


class NotificationResponse(CustomBase):
    """Public notification representation.

    ``data`` depends on the type: ``{"message"}`` for generic
    notifications, ``{"announcementUid", "title"}`` for announcements and
    ``{"permission", "communitySlug"}`` for community permission changes.
    """

    uid: UUID
    notification_type: NotificationType
    data: dict[str, Any] = Field(default_factory=dict)
    seen_at: datetime | None
    created_at: datetime


class NotificationListResponse(PaginatedResponse):
    notifications: list[NotificationResponse]


class UnseenCountResponse(CustomBase):
    unseen: int = Field(ge=0, description="Number of notifications not seen yet")


__all__ = [
    "NotificationListResponse",
    "NotificationResponse",
    "UnseenCountResponse",
]
