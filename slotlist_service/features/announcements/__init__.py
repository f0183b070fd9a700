"""Announcements feature: site-wide news managed by administrators."""

from __future__ import annotations

from .models import Announcement, AnnouncementType
from .repository import AnnouncementRepository, get_announcement_repository
from .schemas import AnnouncementCreate, AnnouncementResponse, AnnouncementUpdate

__all__ = [
    "Announcement",
    "AnnouncementCreate",
    "AnnouncementRepository",
    "AnnouncementResponse",
    "AnnouncementType",
    "AnnouncementUpdate",
    "get_announcement_repository",
]
