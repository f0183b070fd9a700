"""Service layer for the notifications feature.

Other features create notifications through :meth:`NotificationService.notify`
inside their own unit of work. Creating notifications never fails the
operation that triggered them: errors are logged and swallowed.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy.exc import SQLAlchemyError

from slotlist_service.features.notifications.models import Notification, NotificationType
from slotlist_service.features.notifications.repository import (
    NotificationRepository,
    get_notification_repository,
)
from slotlist_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession

    from slotlist_service.core.database import SearchResult

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class NotificationService:
    """Read, mark and create in-app notifications."""

    def __init__(self, session: AsyncSession, repo: NotificationRepository | None = None) -> None:
        self._session = session
        self._repo = repo or get_notification_repository()

    async def list_notifications(
        self,
        user_uid: UUID,
        *,
        include_seen: bool,
        limit: int,
        offset: int,
        now: datetime | None = None,
    ) -> SearchResult[Notification]:
        """Return one page of notifications and mark them seen.

        The returned objects keep the ``seen_at`` they had before this
        call, so clients can still tell which entries are new.
        """
        result = await self._repo.list_for_user(
            self._session, user_uid, include_seen=include_seen, limit=limit, offset=offset
        )
        await self._repo.mark_seen(self._session, result.items, now or datetime.now(UTC))

        lazy_logger.debug(
            lambda: f"service.list_notifications({user_uid}, include_seen={include_seen}) "
            f"-> {len(result.items)}/{result.total}"
        )
        return result

    async def count_unseen(self, user_uid: UUID) -> int:
        return await self._repo.count_unseen(self._session, user_uid)

    async def notify(
        self,
        user_uids: Iterable[UUID],
        notification_type: NotificationType,
        data: Mapping[str, Any],
    ) -> int:
        """Create one notification per recipient.

        Rows are inserted in a savepoint; if that fails the savepoint is
        rolled back, a warning is logged and the surrounding transaction
        carries on.

        Returns:
            Number of notifications created
        """
        notifications = [
            Notification(user_uid=uid, notification_type=notification_type, data=dict(data))
            for uid in user_uids
        ]
        if not notifications:
            return 0

        try:
            async with self._session.begin_nested():
                await self._repo.add_many(self._session, notifications)
        except SQLAlchemyError:
            logger.warning(
                "Failed to create notifications, ignoring",
                exc_info=True,
                extra={
                    "notification_type": notification_type.value,
                    "recipient_count": len(notifications),
                },
            )
            return 0

        logger.info(
            "Notifications created",
            extra={
                "notification_type": notification_type.value,
                "recipient_count": len(notifications),
            },
        )
        return len(notifications)

    async def delete_for_announcement(self, announcement_uid: UUID) -> int:
        """Remove the notifications that were sent for an announcement."""
        return await self._repo.delete_by_data(self._session, "announcementUid", str(announcement_uid))
