"""``X-Process-Time`` header and slow request warnings."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class TimingMiddleware:
    """Report handler time in seconds with microsecond resolution.

    The clock stops when the response head is sent. With ``slow_threshold``
    set, requests at or above it are logged at WARNING.
    """

    def __init__(self, app: ASGIApp, slow_threshold: float | None = None) -> None:
        self.app = app
        self.slow_threshold = slow_threshold

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()

        async def send_timed(message: Message) -> None:
            if message["type"] == "http.response.start":
                elapsed = time.perf_counter() - started
                MutableHeaders(scope=message)["X-Process-Time"] = f"{elapsed:.6f}"
                if self.slow_threshold is not None and elapsed >= self.slow_threshold:
                    logger.warning(
                        "Slow request",
                        extra={
                            "path": scope["path"],
                            "method": scope["method"],
                            "status_code": message["status"],
                            "duration": round(elapsed, 4),
                        },
                    )
            await send(message)

        await self.app(scope, receive, send_timed)
