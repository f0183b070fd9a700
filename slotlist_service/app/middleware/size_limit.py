"""Reject request bodies larger than ``APP_REQUEST_SIZE_LIMIT``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.datastructures import Headers
from starlette.responses import JSONResponse

from slotlist_service.app.exception_handlers import PROBLEM_JSON
from slotlist_service.core.exceptions import PayloadTooLargeException

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)


def _declared_length(scope: Scope) -> int | None:
    raw = Headers(scope=scope).get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)


class RequestSizeLimitMiddleware:
    """Answer 413 from the declared Content-Length, before the body is read.

    Requests without a usable Content-Length pass through; the server
    enforces framing for those.
    """

    def __init__(self, app: ASGIApp, max_size: int = 2 * 1024 * 1024) -> None:
        self.app = app
        self.max_size = max_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        length = _declared_length(scope) if scope["type"] == "http" else None
        if length is None or length <= self.max_size:
            await self.app(scope, receive, send)
            return

        logger.warning(
            "Request body too large",
            extra={"path": scope["path"], "content_length": length, "max_size": self.max_size},
        )
        exc = PayloadTooLargeException(
            detail=f"Request size {length} exceeds maximum {self.max_size} bytes",
            instance=scope["path"],
        )
        response = JSONResponse(
            {
                "type": exc.type,
                "title": exc.title,
                "status": exc.status_code,
                "detail": exc.detail,
                "instance": exc.instance,
            },
            status_code=exc.status_code,
            media_type=PROBLEM_JSON,
        )
        await response(scope, receive, send)
