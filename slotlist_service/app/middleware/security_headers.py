"""Security headers middleware.

Adds the HTTP hardening headers the API has always sent:

- Strict-Transport-Security (configurable max-age, includeSubDomains, preload)
- X-Content-Type-Options: nosniff
- X-Frame-Options: DENY
- X-XSS-Protection: 1; mode=block
- X-Download-Options: noopen

Example Usage:
    app.add_middleware(
        SecurityHeadersMiddleware,
        hsts_header="max-age=31536000; includeSubDomains; preload",
    )
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

DEFAULT_SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "X-Download-Options": "noopen",
}


def get_security_headers(hsts_header: str | None = None) -> dict[str, str]:
    """Build the header set added to every response.

    Args:
        hsts_header: Strict-Transport-Security value, omitted when None

    Returns:
        Header name to value mapping
    """
    headers = dict(DEFAULT_SECURITY_HEADERS)
    if hsts_header:
        headers["Strict-Transport-Security"] = hsts_header
    return headers


class SecurityHeadersMiddleware:
    """Pure ASGI middleware adding security headers to responses.

    Headers already set by the route are left untouched.
    """

    def __init__(self, app: ASGIApp, hsts_header: str | None = None) -> None:
        self.app = app
        self.headers = get_security_headers(hsts_header)
        logger.debug(
            "Security headers configured",
            extra={"headers": sorted(self.headers)},
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    if name not in headers:
                        headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_headers)
