"""Service layer for mission slot templates.

Reads are filtered by visibility: anonymous callers see public templates,
authenticated callers also see their own, and holders of ``admin.mission``
see every template. Writes are limited to the template's creator; someone
else's template is reported as not found.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from slotlist_service.core.acl import ADMIN_MISSION, PermissionChecker
from slotlist_service.core.database import NotFoundError
from slotlist_service.core.exceptions import UnauthorizedException
from slotlist_service.features.accounts.repository import UserRepository, get_user_repository
from slotlist_service.features.slot_templates.models import MissionSlotTemplate
from slotlist_service.features.slot_templates.repository import (
    MissionSlotTemplateRepository,
    get_slot_template_repository,
)
from slotlist_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from slotlist_service.core.database import SearchResult
    from slotlist_service.core.schemas.auth import AuthUser
    from slotlist_service.features.slot_templates.schemas import (
        SlotTemplateCreate,
        SlotTemplateSlotGroup,
        SlotTemplateUpdate,
    )

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

MODEL_NAME = "MissionSlotTemplate"


def _dump_groups(groups: Sequence[SlotTemplateSlotGroup]) -> list[dict]:
    return [group.model_dump(mode="json", by_alias=True) for group in groups]


class SlotTemplateService:
    """Visibility-scoped reads and creator-scoped writes of slot templates."""

    def __init__(
        self,
        session: AsyncSession,
        repo: MissionSlotTemplateRepository | None = None,
        users: UserRepository | None = None,
    ) -> None:
        self._session = session
        self._repo = repo or get_slot_template_repository()
        self._users = users or get_user_repository()

    def _sees_all(self, user: AuthUser | None, action: str) -> bool:
        if user is None or not PermissionChecker(user).has(ADMIN_MISSION):
            return False
        logger.info(
            "User has mission admin permissions, skipping visibility filter",
            extra={"user_uid": str(user.uid), "action": action},
        )
        return True

    async def list_templates(
        self,
        user: AuthUser | None,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[MissionSlotTemplate]:
        viewer = user.uid if user is not None else None
        result = await self._repo.list_visible(
            self._session,
            viewer,
            see_all=self._sees_all(user, "list"),
            limit=limit,
            offset=offset,
        )
        lazy_logger.debug(
            lambda: f"service.list_templates(viewer={viewer}) -> {len(result.items)}/{result.total}"
        )
        return result

    async def get_template(self, user: AuthUser | None, uid: UUID) -> MissionSlotTemplate:
        """Get one template the caller may see.

        Raises:
            NotFoundError: If it doesn't exist or is hidden from the caller
        """
        viewer = user.uid if user is not None else None
        template = await self._repo.get_visible(
            self._session, uid, viewer, see_all=self._sees_all(user, "details")
        )
        if template is None:
            raise NotFoundError(MODEL_NAME, {"uid": str(uid)})
        return template

    async def create_template(self, user: AuthUser, payload: SlotTemplateCreate) -> MissionSlotTemplate:
        """Create a template owned by the caller.

        Raises:
            UnauthorizedException: If the token's user no longer exists
        """
        creator = await self._users.get_active(self._session, user.uid)
        if creator is None:
            logger.info("User from decoded token not found", extra={"user_uid": str(user.uid)})
            raise UnauthorizedException(detail="Token user not found", type="token-user-not-found")

        template = MissionSlotTemplate(
            title=payload.title,
            visibility=payload.visibility,
            slot_groups=_dump_groups(payload.slot_groups),
            creator_uid=creator.uid,
            creator=creator,
        )
        created = await self._repo.create(self._session, template)

        logger.info(
            "Mission slot template created",
            extra={"slot_template_uid": str(created.uid), "user_uid": str(creator.uid)},
        )
        return created

    async def _owned_or_raise(self, user: AuthUser, uid: UUID) -> MissionSlotTemplate:
        template = await self._repo.get_owned(self._session, uid, user.uid)
        if template is None:
            lazy_logger.debug(lambda: f"template {uid} not owned by {user.uid}")
            raise NotFoundError(MODEL_NAME, {"uid": str(uid)})
        return template

    async def update_template(
        self,
        user: AuthUser,
        uid: UUID,
        payload: SlotTemplateUpdate,
    ) -> MissionSlotTemplate:
        """Change title, visibility and/or slot groups of the caller's template.

        Raises:
            NotFoundError: If the caller has no template with this UID
        """
        template = await self._owned_or_raise(user, uid)
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "title" in changes:
            template.title = payload.title
        if "visibility" in changes:
            template.visibility = payload.visibility
        if "slot_groups" in changes:
            template.slot_groups = _dump_groups(payload.slot_groups)

        await self._session.flush()
        await self._session.refresh(template)

        logger.info(
            "Mission slot template updated",
            extra={"slot_template_uid": str(uid), "user_uid": str(user.uid), "fields": sorted(changes)},
        )
        return template

    async def delete_template(self, user: AuthUser, uid: UUID) -> None:
        """Delete the caller's template.

        Raises:
            NotFoundError: If the caller has no template with this UID
        """
        template = await self._owned_or_raise(user, uid)
        await self._repo.delete(self._session, template)
