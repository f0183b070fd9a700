"""Authentication dependencies and route permission guards.

This module provides FastAPI dependencies for authentication and
authorization using the service's own JSON Web Tokens.

**Key Features:**
- ``Authorization: JWT <token>`` (or ``Bearer <token>``) header parsing
- Clean type aliases for common patterns (AuthUserDep, OptionalAuthUser)
- Static per-route permission declarations via ``RouteACL``
- ``{{param}}`` placeholders resolved from the route's path parameters
- RFC 7807 Problem Details error responses (401 before 403)

**Import Recommendation:**
    from slotlist_service.core.dependencies.auth import (
        AuthUserDep,          # Type alias for authenticated user
        OptionalAuthUser,     # Type alias for optional auth
        require_permissions,  # Dependency factory for permission checks
    )

**Examples:**

    # 1. Simple authentication (requires valid token)
    @router.get("/auth/account")
    async def get_account(user: AuthUserDep):
        return {"uid": user.uid}

    # 2. Optional authentication
    @router.get("/announcements")
    async def list_announcements(user: OptionalAuthUser):
        ...

    # 3. Any of several permissions, resolved from the path
    community_admin = require_permissions(
        "community.{{communitySlug}}.founder",
        "community.{{communitySlug}}.leader",
    )

    @router.get("/communities/{communitySlug}/permissions")
    async def list_permissions(user: Annotated[AuthUser, Depends(community_admin)]):
        ...

    # 4. All permissions (strict)
    require_permissions("admin.announcement", "admin.mission", strict=True)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends, Header, Request

from slotlist_service.core.acl import RouteACL
from slotlist_service.core.exceptions import ForbiddenException, UnauthorizedException
from slotlist_service.core.schemas.auth import AuthUser
from slotlist_service.infra.auth.jwt import JWTCodec, TokenValidationError, get_jwt_codec
from slotlist_service.infra.logging.context import set_log_context

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

logger = logging.getLogger(__name__)

JWTCodecDep = Annotated[JWTCodec, Depends(get_jwt_codec)]
AuthorizationHeader = Annotated[str | None, Header(alias="Authorization")]


def extract_token(authorization: str | None, schemes: list[str]) -> str | None:
    """Extract the raw token from an Authorization header value.

    Args:
        authorization: Header value, e.g. ``"JWT eyJ..."``
        schemes: Accepted schemes, lower-case

    Returns:
        The token, or None when the header is missing or uses another scheme
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() not in schemes or not token:
        return None
    return token


def _authenticate(request: Request, authorization: str | None, codec: JWTCodec) -> AuthUser:
    scheme = codec.settings.header_schemes[0].upper() if codec.settings.header_schemes else "JWT"
    token = extract_token(authorization, codec.settings.header_schemes)
    if token is None:
        raise UnauthorizedException(
            detail="Missing authentication",
            type="missing-authentication",
            scheme=scheme,
        )

    try:
        payload = codec.decode(token)
    except TokenValidationError as exc:
        logger.info("Token validation failed", extra={"reason": str(exc)})
        raise UnauthorizedException(
            detail="Invalid token",
            type="invalid-token",
            scheme=scheme,
        ) from exc

    user = AuthUser.from_payload(payload)
    request.state.user = user
    set_log_context(user_uid=str(user.uid))
    return user


async def get_auth_user(
    request: Request,
    codec: JWTCodecDep,
    authorization: AuthorizationHeader = None,
) -> AuthUser:
    """Get the authenticated user from the request's token.

    Raises:
        UnauthorizedException: If the header is missing or the token invalid
    """
    return _authenticate(request, authorization, codec)


async def get_auth_user_optional(
    request: Request,
    codec: JWTCodecDep,
    authorization: AuthorizationHeader = None,
) -> AuthUser | None:
    """Get the authenticated user, or None when missing or invalid."""
    if not authorization:
        return None
    try:
        return _authenticate(request, authorization, codec)
    except UnauthorizedException:
        return None


def require_acl(
    acl: RouteACL,
) -> Callable[..., Coroutine[Any, Any, AuthUser | None]]:
    """Dependency factory enforcing a static route permission declaration.

    Order of checks:
    1. No required permissions -> allowed, authentication is optional
    2. Not authenticated -> 401
    3. Declaration evaluated against the caller's grants and the route's
       path parameters -> 403 on deny

    Args:
        acl: Route declaration, built once at import time

    Returns:
        Dependency returning the authenticated user (or None for
        unrestricted declarations without a token)
    """

    async def permission_checker(
        request: Request,
        codec: JWTCodecDep,
        authorization: AuthorizationHeader = None,
    ) -> AuthUser | None:
        if not acl.is_restricted:
            return await get_auth_user_optional(request, codec, authorization)

        user = _authenticate(request, authorization, codec)
        decision = acl.evaluate(user.permissions, request.path_params)
        request.state.access_decision = decision

        logger.debug(
            "Access decision evaluated",
            extra={"path": request.url.path, **decision.as_log_extra()},
        )

        if not decision.allowed:
            logger.info(
                "User tried to access restricted route without proper permission",
                extra={
                    "user_uid": str(user.uid),
                    "path": request.url.path,
                    "method": request.method,
                    "required_permissions": list(decision.required),
                    "missing_permissions": list(decision.missing),
                    "strict": decision.strict,
                },
            )
            raise ForbiddenException(
                detail="Forbidden",
                type="insufficient-permissions",
            )

        return user

    permission_checker.acl = acl  # type: ignore[attr-defined]
    return permission_checker


def require_permissions(
    *patterns: str,
    strict: bool = False,
) -> Callable[..., Coroutine[Any, Any, AuthUser | None]]:
    """Shortcut for ``require_acl(RouteACL(patterns, strict=strict))``.

    Example:
        @router.post("/announcements")
        async def create(user: Annotated[AuthUser, Depends(require_permissions("admin.announcement"))]):
            ...
    """
    return require_acl(RouteACL(list(patterns), strict=strict))


# ============================================================================
# Type Aliases for Dependency Injection
# ============================================================================

AuthUserDep = Annotated[AuthUser, Depends(get_auth_user)]
"""Authenticated user dependency (required). Raises 401 if authentication fails."""

OptionalAuthUser = Annotated[AuthUser | None, Depends(get_auth_user_optional)]
"""Optional authenticated user dependency. None when missing or invalid."""


__all__ = [
    "AuthUserDep",
    "JWTCodecDep",
    "OptionalAuthUser",
    "extract_token",
    "get_auth_user",
    "get_auth_user_optional",
    "require_acl",
    "require_permissions",
]
