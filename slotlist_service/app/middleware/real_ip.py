"""Client address resolution behind Cloudflare."""

from __future__ import annotations

from typing import TYPE_CHECKING

from slotlist_service.infra.logging.context import set_log_context

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

CF_CONNECTING_IP = b"cf-connecting-ip"


class RealIPMiddleware:
    """Resolve the caller's address into ``request.state.client_ip``.

    When ``trust_cf_connecting_ip`` is set the ``CF-Connecting-IP`` header
    wins over the socket peer. Only enable it when every request passes
    through Cloudflare, otherwise callers can spoof their address.
    """

    def __init__(self, app: ASGIApp, trust_cf_connecting_ip: bool = False) -> None:
        self.app = app
        self.trust_cf_connecting_ip = trust_cf_connecting_ip

    def resolve(self, scope: Scope) -> str | None:
        if self.trust_cf_connecting_ip:
            for name, value in scope.get("headers", []):
                if name == CF_CONNECTING_IP:
                    forwarded = value.decode("latin-1").strip()
                    if forwarded:
                        return forwarded
                    break

        client = scope.get("client")
        return client[0] if client else None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        client_ip = self.resolve(scope)
        scope.setdefault("state", {})["client_ip"] = client_ip
        if client_ip:
            set_log_context(client_ip=client_ip)

        await self.app(scope, receive, send)
