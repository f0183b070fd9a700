"""Status endpoint: a liveness check echoing an optional ping."""

from __future__ import annotations

import time
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from slotlist_service.core.settings import AppSettings, get_app_settings
from slotlist_service.features.status.schemas import STATUS_RUNNING, StatusResponse

router = APIRouter(tags=["status"])


@router.get(
    "/status",
    response_model=StatusResponse,
    response_model_exclude_none=True,
    summary="Get API status",
)
async def get_status(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    ping: Annotated[str | None, Query(max_length=255)] = None,
) -> StatusResponse:
    return StatusResponse(
        status=STATUS_RUNNING,
        version=settings.version,
        now=int(time.time()),
        pong=ping or None,
    )
