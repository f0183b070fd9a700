"""SQLAlchemy models for the notifications feature."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, DateTime, ForeignKey, Index
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from slotlist_service.core.database import UUIDTimestampedBase


class NotificationType(str, Enum):
    """Event a notification was created for; decides the shape of ``data``."""

    GENERIC = "generic"
    ANNOUNCEMENT_GENERIC = "announcement.generic"
    ANNOUNCEMENT_UPDATE = "announcement.update"
    COMMUNITY_PERMISSION_GRANTED = "community.permission.granted"
    COMMUNITY_PERMISSION_REVOKED = "community.permission.revoked"


class Notification(UUIDTimestampedBase):
    """In-app notification for a single user.

    ``seen_at`` stays NULL until the notification is returned by the
    user's notification list for the first time.
    """

    __tablename__ = "notifications"

    user_uid: Mapped[UUID] = mapped_column(
        ForeignKey("users.uid", ondelete="CASCADE"),
        nullable=False,
        comment="Recipient",
    )
    notification_type: Mapped[NotificationType] = mapped_column(
        SAEnum(
            NotificationType,
            name="notification_type",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=NotificationType.GENERIC,
        nullable=False,
    )
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        default=dict,
        nullable=False,
        comment="Type-specific payload, e.g. announcementUid and title",
    )
    seen_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_notifications_user_uid_seen_at", "user_uid", "seen_at"),
        Index("ix_notifications_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification(uid={self.uid}, type={self.notification_type.value!r})>"
