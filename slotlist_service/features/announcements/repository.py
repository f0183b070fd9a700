"""Repository for the announcements feature."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select

from slotlist_service.core.database.repository import BaseRepository, SearchResult
from slotlist_service.features.announcements.models import Announcement

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class AnnouncementRepository(BaseRepository[Announcement]):
    """Repository for Announcement model.

    Inherits get/get_or_raise/create/delete from BaseRepository.
    """

    def __init__(self) -> None:
        super().__init__(Announcement)

    async def list_announcements(
        self,
        session: AsyncSession,
        *,
        visible_at: datetime | None,
        limit: int,
        offset: int,
    ) -> SearchResult[Announcement]:
        """List announcements, newest first, then by upper-cased title.

        Args:
            session: Database session
            visible_at: Only include announcements visible at this time;
                None includes announcements that are not yet visible
            limit: Page size
            offset: Results to skip
        """
        stmt = select(Announcement)
        if visible_at is not None:
            stmt = stmt.where(
                or_(
                    Announcement.visible_from.is_(None),
                    Announcement.visible_from <= visible_at,
                )
            )
        stmt = stmt.order_by(Announcement.created_at.desc(), func.upper(Announcement.title).asc())

        return await self.search(session, stmt, limit=limit, offset=offset)


_announcement_repository: AnnouncementRepository | None = None


def get_announcement_repository() -> AnnouncementRepository:
    """Get the shared AnnouncementRepository instance."""
    global _announcement_repository
    if _announcement_repository is None:
        _announcement_repository = AnnouncementRepository()
    return _announcement_repository
