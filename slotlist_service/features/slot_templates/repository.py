"""Repository for mission slot templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select

from slotlist_service.core.database.repository import BaseRepository, SearchResult
from slotlist_service.features.slot_templates.models import MissionSlotTemplate, MissionVisibility

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncSession


def _visible_to(viewer_uid: UUID | None) -> ColumnElement[bool]:
    public = MissionSlotTemplate.visibility == MissionVisibility.PUBLIC
    if viewer_uid is None:
        return public
    return or_(public, MissionSlotTemplate.creator_uid == viewer_uid)


class MissionSlotTemplateRepository(BaseRepository[MissionSlotTemplate]):
    """Repository for MissionSlotTemplate model.

    ``see_all`` disables the visibility filter for mission admins.
    """

    def __init__(self) -> None:
        super().__init__(MissionSlotTemplate)

    def _scoped(self, viewer_uid: UUID | None, *, see_all: bool) -> Select[tuple[MissionSlotTemplate]]:
        stmt = select(MissionSlotTemplate)
        if not see_all:
            stmt = stmt.where(_visible_to(viewer_uid))
        return stmt

    async def list_visible(
        self,
        session: AsyncSession,
        viewer_uid: UUID | None,
        *,
        see_all: bool = False,
        limit: int,
        offset: int,
    ) -> SearchResult[MissionSlotTemplate]:
        """Page through the templates a viewer may see, by upper-cased title."""
        stmt = self._scoped(viewer_uid, see_all=see_all).order_by(
            func.upper(MissionSlotTemplate.title).asc(),
            MissionSlotTemplate.created_at.asc(),
        )
        return await self.search(session, stmt, limit=limit, offset=offset)

    async def get_visible(
        self,
        session: AsyncSession,
        uid: UUID,
        viewer_uid: UUID | None,
        *,
        see_all: bool = False,
    ) -> MissionSlotTemplate | None:
        stmt = self._scoped(viewer_uid, see_all=see_all).where(MissionSlotTemplate.uid == uid)
        template = (await session.execute(stmt)).scalar_one_or_none()

        self._lazy.debug(lambda: f"visible template {uid} for {viewer_uid}: {'hit' if template else 'miss'}")
        return template

    async def get_owned(self, session: AsyncSession, uid: UUID, creator_uid: UUID) -> MissionSlotTemplate | None:
        """Get a template only if ``creator_uid`` created it."""
        stmt = select(MissionSlotTemplate).where(
            MissionSlotTemplate.uid == uid,
            MissionSlotTemplate.creator_uid == creator_uid,
        )
        return (await session.execute(stmt)).scalar_one_or_none()


_slot_template_repository: MissionSlotTemplateRepository | None = None


def get_slot_template_repository() -> MissionSlotTemplateRepository:
    """Get the shared MissionSlotTemplateRepository instance."""
    global _slot_template_repository
    if _slot_template_repository is None:
        _slot_template_repository = MissionSlotTemplateRepository()
    return _slot_template_repository
