"""API router for the notifications feature.

Endpoints:
    GET /notifications         - List the caller's notifications and mark them seen
    GET /notifications/unseen  - Count the caller's unseen notifications
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from slotlist_service.core.dependencies.auth import AuthUserDep
from slotlist_service.core.dependencies.database import DBSessionDep
from slotlist_service.core.schemas.base import DEFAULT_LIMIT, MAX_LIMIT
from slotlist_service.features.notifications.schemas import (
    NotificationListResponse,
    NotificationResponse,
    UnseenCountResponse,
)
from slotlist_service.features.notifications.service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=NotificationListResponse,
    summary="List notifications",
    description="Newest first. Every returned notification is marked as seen; "
    "seen notifications are only listed again with `includeSeen=true`.",
)
async def list_notifications(
    user: AuthUserDep,
    session: DBSessionDep,
    include_seen: Annotated[bool, Query(alias="includeSeen")] = False,
    limit: Annotated[int, Query(ge=1, le=MAX_LIMIT)] = DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> NotificationListResponse:
    result = await NotificationService(session).list_notifications(
        user.uid, include_seen=include_seen, limit=limit, offset=offset
    )
    await session.commit()

    return NotificationListResponse(
        limit=limit,
        offset=offset,
        count=len(result.items),
        total=result.total,
        more_available=result.has_next,
        notifications=[NotificationResponse.model_validate(n) for n in result.items],
    )


@router.get(
    "/unseen",
    response_model=UnseenCountResponse,
    summary="Count unseen notifications",
)
async def count_unseen_notifications(user: AuthUserDep, session: DBSessionDep) -> UnseenCountResponse:
    unseen = await NotificationService(session).count_unseen(user.uid)
    return UnseenCountResponse(unseen=unseen)
