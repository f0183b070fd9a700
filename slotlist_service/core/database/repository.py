"""Generic async repository.

Repositories hold no session; every call takes the ``AsyncSession`` of the
unit of work it belongs to, so services decide when to commit. Queries that
do not fit the helpers below are written against the session directly, as
``PermissionRepository.search_by_prefix`` does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import Select, func, select

from slotlist_service.core.database.exceptions import NotFoundError
from slotlist_service.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class SearchResult(Generic[T]):
    """One page of a larger result set; ``total`` counts every match."""

    items: Sequence[T]
    total: int
    limit: int
    offset: int

    @property
    def has_next(self) -> bool:
        return self.offset + len(self.items) < self.total


class BaseRepository(Generic[T]):
    """get / get_or_raise / get_by / list / search / create / delete for one model."""

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        name = f"repository.{model.__name__}"
        self._logger = logging.getLogger(name)
        self._lazy = get_lazy_logger(name)

    @property
    def _name(self) -> str:
        return self.model.__name__

    async def get(self, session: AsyncSession, uid: Any) -> T | None:
        instance = await session.get(self.model, uid)
        self._lazy.debug(lambda: f"get {self._name}({uid}): {'hit' if instance else 'miss'}")
        return instance

    async def get_or_raise(self, session: AsyncSession, uid: Any) -> T:
        """Like ``get``, but a miss raises ``NotFoundError`` (rendered as 404)."""
        instance = await self.get(session, uid)
        if instance is None:
            raise NotFoundError(self._name, {"uid": str(uid)})
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """First row where ``attr == value``, e.g. ``get_by(s, User.nickname, "Alpha")``."""
        result = await session.execute(select(self.model).where(attr == value))
        return result.scalars().first()

    async def list(self, session: AsyncSession, *, limit: int = 100, offset: int = 0) -> Sequence[T]:
        result = await session.execute(select(self.model).limit(limit).offset(offset))
        return result.scalars().all()

    async def search(
        self,
        session: AsyncSession,
        statement: Select[tuple[T]],
        *,
        limit: int = 25,
        offset: int = 0,
    ) -> SearchResult[T]:
        """Page through ``statement`` and count all rows it matches.

        ``statement`` carries its own filters and ordering; the count query
        drops the ordering.
        """
        count = select(func.count()).select_from(statement.order_by(None).subquery())
        total = (await session.execute(count)).scalar_one()
        page = (await session.execute(statement.limit(limit).offset(offset))).scalars().all()

        self._lazy.debug(lambda: f"search {self._name}[{offset}:{offset + limit}]: {len(page)} of {total}")
        return SearchResult(items=page, total=total, limit=limit, offset=offset)

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Add and flush, so defaults such as ``uid`` and ``created_at`` are populated."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        await session.delete(instance)
        await session.flush()
        self._logger.info(
            "Entity deleted",
            extra={"entity": self._name, "uid": str(getattr(instance, "uid", None))},
        )
