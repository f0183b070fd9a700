"""Repository for the notifications feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select, update

from slotlist_service.core.database.repository import BaseRepository, SearchResult
from slotlist_service.features.notifications.models import Notification

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification model."""

    def __init__(self) -> None:
        super().__init__(Notification)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_uid: UUID,
        *,
        include_seen: bool,
        limit: int,
        offset: int,
    ) -> SearchResult[Notification]:
        """Page through a user's notifications, newest first.

        Args:
            session: Database session
            user_uid: Recipient
            include_seen: Also return notifications seen before
            limit: Page size
            offset: Results to skip
        """
        stmt = select(Notification).where(Notification.user_uid == user_uid)
        if not include_seen:
            stmt = stmt.where(Notification.seen_at.is_(None))
        stmt = stmt.order_by(Notification.created_at.desc())

        return await self.search(session, stmt, limit=limit, offset=offset)

    async def count_unseen(self, session: AsyncSession, user_uid: UUID) -> int:
        stmt = select(func.count()).where(
            Notification.user_uid == user_uid,
            Notification.seen_at.is_(None),
        )
        count = (await session.execute(stmt)).scalar_one()

        self._lazy.debug(lambda: f"unseen notifications of {user_uid}: {count}")
        return count

    async def mark_seen(
        self,
        session: AsyncSession,
        notifications: Sequence[Notification],
        seen_at: datetime,
    ) -> None:
        """Set ``seen_at`` on notifications that have not been seen yet."""
        uids = [n.uid for n in notifications if n.seen_at is None]
        if not uids:
            return

        await session.execute(
            update(Notification)
            .where(Notification.uid.in_(uids))
            .values(seen_at=seen_at)
            .execution_options(synchronize_session=False)
        )
        self._lazy.debug(lambda: f"marked {len(uids)} notifications seen")

    async def add_many(self, session: AsyncSession, notifications: Sequence[Notification]) -> None:
        session.add_all(notifications)
        await session.flush()

    async def delete_by_data(self, session: AsyncSession, key: str, value: str) -> int:
        """Delete every notification whose ``data[key]`` equals ``value``.

        Returns:
            Number of deleted rows
        """
        result = await session.execute(
            delete(Notification)
            .where(Notification.data[key].as_string() == value)
            .execution_options(synchronize_session=False)
        )
        deleted = result.rowcount or 0

        self._logger.info(
            "Notifications deleted",
            extra={"data_key": key, "data_value": value, "count": deleted},
        )
        return deleted


_notification_repository: NotificationRepository | None = None


def get_notification_repository() -> NotificationRepository:
    """Get the shared NotificationRepository instance."""
    global _notification_repository
    if _notification_repository is None:
        _notification_repository = NotificationRepository()
    return _notification_repository
