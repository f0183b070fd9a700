"""Database dependencies for FastAPI route handlers.

`get_db_session()` ties a session to the HTTP request. Code outside a
request (startup hooks, scripts) uses `get_async_session()` from
``slotlist_service.infra.database`` directly; both share one session
factory.
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from slotlist_service.core.exceptions import ServiceUnavailableException
from slotlist_service.core.settings import get_db_settings
from slotlist_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Raises:
        ServiceUnavailableException: If database integration is disabled
    """
    if not get_db_settings().enabled:
        raise ServiceUnavailableException(
            detail="Database is not configured",
            type="database-unavailable",
        )
    async with get_async_session() as session:
        yield session


DBSessionDep = Annotated[AsyncSession, Depends(get_db_session)]

__all__ = ["DBSessionDep", "get_db_session"]
