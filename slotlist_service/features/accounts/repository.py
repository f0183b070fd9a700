"""Repositories for users and their stored permission grants."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from slotlist_service.core.database.repository import BaseRepository, SearchResult
from slotlist_service.core.models import Permission, User

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.ext.asyncio import AsyncSession


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self) -> None:
        super().__init__(User)

    async def get_active(self, session: AsyncSession, uid: UUID) -> User | None:
        """Get a user by UID, ignoring deactivated accounts."""
        user = await self.get(session, uid)
        if user is None or not user.active:
            return None
        return user

    async def list_active_uids(self, session: AsyncSession, *, exclude: UUID | None = None) -> Sequence[UUID]:
        """UIDs of every active user, optionally leaving one out."""
        stmt = select(User.uid).where(User.active.is_(True))
        if exclude is not None:
            stmt = stmt.where(User.uid != exclude)
        uids = (await session.execute(stmt)).scalars().all()

        self._lazy.debug(lambda: f"active users (excluding {exclude}): {len(uids)}")
        return uids


class PermissionRepository(BaseRepository[Permission]):
    """Repository for Permission model (the permission store)."""

    def __init__(self) -> None:
        super().__init__(Permission)

    async def list_for_user(self, session: AsyncSession, user_uid: UUID) -> Sequence[str]:
        """Return the permission strings granted to a user, sorted."""
        stmt = (
            select(Permission.permission)
            .where(Permission.user_uid == user_uid)
            .order_by(Permission.permission.asc())
        )
        result = await session.execute(stmt)
        grants = result.scalars().all()

        self._lazy.debug(lambda: f"grants of {user_uid}: {len(grants)}")
        return grants

    async def get_grant(
        self,
        session: AsyncSession,
        user_uid: UUID,
        permission: str,
    ) -> Permission | None:
        stmt = select(Permission).where(
            Permission.user_uid == user_uid,
            Permission.permission == permission,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def search_by_prefix(
        self,
        session: AsyncSession,
        prefix: str,
        *,
        limit: int,
        offset: int,
    ) -> SearchResult[Permission]:
        """Page through grants whose string starts with ``prefix``.

        Matching is literal: ``%`` and ``_`` in the prefix are escaped.
        """
        escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        stmt = (
            select(Permission)
            .where(Permission.permission.like(f"{escaped}%", escape="\\"))
            .order_by(Permission.permission.asc(), Permission.created_at.asc())
        )
        return await self.search(session, stmt, limit=limit, offset=offset)


_user_repository: UserRepository | None = None
_permission_repository: PermissionRepository | None = None


def get_user_repository() -> UserRepository:
    """Get the shared UserRepository instance."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository


def get_permission_repository() -> PermissionRepository:
    """Get the shared PermissionRepository instance."""
    global _permission_repository
    if _permission_repository is None:
        _permission_repository = PermissionRepository()
    return _permission_repository
