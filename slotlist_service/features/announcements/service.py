"""Service layer for the announcements feature."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from slotlist_service.core.acl import ADMIN_ANNOUNCEMENT
from slotlist_service.core.exceptions import UnauthorizedException
from slotlist_service.features.accounts.repository import UserRepository, get_user_repository
from slotlist_service.features.announcements.models import Announcement, AnnouncementType
from slotlist_service.features.announcements.repository import (
    AnnouncementRepository,
    get_announcement_repository,
)
from slotlist_service.features.notifications import NotificationService, NotificationType
from slotlist_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from slotlist_service.core.database import SearchResult
    from slotlist_service.core.schemas.auth import AuthUser
    from slotlist_service.features.announcements.schemas import (
        AnnouncementCreate,
        AnnouncementUpdate,
    )

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

NOTIFICATION_TYPES = {
    AnnouncementType.GENERIC: NotificationType.ANNOUNCEMENT_GENERIC,
    AnnouncementType.UPDATE: NotificationType.ANNOUNCEMENT_UPDATE,
}


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class AnnouncementService:
    """Service for announcement operations.

    Handles business logic for:
    - Visibility filtering (admins see scheduled announcements)
    - Author lookup on creation
    - Partial updates of title, content and visibility
    - Notifying other users on creation, and removing those
      notifications again on deletion
    """

    def __init__(
        self,
        session: AsyncSession,
        repo: AnnouncementRepository | None = None,
        users: UserRepository | None = None,
        notifications: NotificationService | None = None,
    ) -> None:
        self._session = session
        self._repo = repo or get_announcement_repository()
        self._users = users or get_user_repository()
        self._notifications = notifications or NotificationService(session)

    async def list_announcements(
        self,
        user: AuthUser | None,
        *,
        limit: int,
        offset: int,
        now: datetime | None = None,
    ) -> SearchResult[Announcement]:
        """List announcements visible to the caller.

        Holders of ``admin.announcement`` also see announcements whose
        ``visible_from`` lies in the future.
        """
        visible_at: datetime | None = now or datetime.now(UTC)
        if user is not None and user.has_permission(ADMIN_ANNOUNCEMENT):
            logger.info(
                "User has announcement admin permissions, returning all announcements",
                extra={"user_uid": str(user.uid)},
            )
            visible_at = None

        result = await self._repo.list_announcements(
            self._session, visible_at=visible_at, limit=limit, offset=offset
        )
        lazy_logger.debug(
            lambda: f"service.list_announcements(limit={limit}, offset={offset}) "
            f"-> {len(result.items)}/{result.total}"
        )
        return result

    async def create_announcement(self, user: AuthUser, payload: AnnouncementCreate) -> Announcement:
        """Create an announcement authored by the calling user.

        Raises:
            UnauthorizedException: If the token's user no longer exists
        """
        author = await self._users.get(self._session, user.uid)
        if author is None:
            logger.info("User from decoded token not found", extra={"user_uid": str(user.uid)})
            raise UnauthorizedException(detail="Token user not found", type="token-user-not-found")

        announcement = Announcement(
            title=payload.title,
            content=payload.content,
            announcement_type=payload.announcement_type,
            visible_from=_as_utc(payload.visible_from),
            user_uid=author.uid,
        )
        created = await self._repo.create(self._session, announcement)

        logger.info(
            "Announcement created",
            extra={"announcement_uid": str(created.uid), "user_uid": str(author.uid)},
        )
        if payload.send_notifications:
            await self._notify_users(created)
        return created

    async def _notify_users(self, announcement: Announcement) -> None:
        recipients = await self._users.list_active_uids(self._session, exclude=announcement.user_uid)
        await self._notifications.notify(
            recipients,
            NOTIFICATION_TYPES[announcement.announcement_type],
            {"announcementUid": str(announcement.uid), "title": announcement.title},
        )

    async def update_announcement(self, announcement_uid: UUID, payload: AnnouncementUpdate) -> Announcement:
        """Update title, content and/or visibility of an announcement.

        Raises:
            NotFoundError: If the announcement doesn't exist
        """
        announcement = await self._repo.get_or_raise(self._session, announcement_uid)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("title") is not None:
            announcement.title = changes["title"]
        if changes.get("content") is not None:
            announcement.content = changes["content"]
        if "visible_from" in changes:
            announcement.visible_from = _as_utc(changes["visible_from"])

        await self._session.flush()
        await self._session.refresh(announcement)

        lazy_logger.debug(
            lambda: f"service.update_announcement({announcement_uid}) -> {sorted(changes)}"
        )
        return announcement

    async def delete_announcement(self, announcement_uid: UUID) -> None:
        """Delete an announcement and the notifications sent for it.

        Raises:
            NotFoundError: If the announcement doesn't exist
        """
        announcement = await self._repo.get_or_raise(self._session, announcement_uid)
        await self._repo.delete(self._session, announcement)
        removed = await self._notifications.delete_for_announcement(announcement_uid)
        logger.info(
            "Announcement deleted",
            extra={"announcement_uid": str(announcement_uid), "removed_notifications": removed},
        )
