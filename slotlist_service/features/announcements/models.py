"""SQLAlchemy models for the announcements feature."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from slotlist_service.core.database import UUIDTimestampedBase


class AnnouncementType(str, Enum):
    """Kind of announcement, used by clients to pick how it is displayed."""

    GENERIC = "generic"
    UPDATE = "update"


class Announcement(UUIDTimestampedBase):
    """Site-wide announcement written by an administrator.

    Announcements with a ``visible_from`` in the future are hidden from
    everyone except holders of ``admin.announcement``.
    """

    __tablename__ = "announcements"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, comment="May contain HTML")
    announcement_type: Mapped[AnnouncementType] = mapped_column(
        SAEnum(
            AnnouncementType,
            name="announcement_type",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=AnnouncementType.GENERIC,
        nullable=False,
    )
    visible_from: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Hidden from regular users until this time; NULL means immediately visible",
    )
    user_uid: Mapped[UUID] = mapped_column(
        ForeignKey("users.uid", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_announcements_created_at", "created_at"),
        Index("ix_announcements_visible_from", "visible_from"),
    )

    def __repr__(self) -> str:
        return f"<Announcement(uid={self.uid}, title={self.title!r})>"
