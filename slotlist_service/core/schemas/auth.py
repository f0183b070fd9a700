"""Authentication and authorization schemas.

Tokens are JSON Web Tokens signed by this service. The payload carries the
user's identity and the flat list of permission strings granted at issue
time; permission checks use those strings as the caller's grant set.

Permission syntax:
    - Dot-separated segments (e.g. "community.spezialeinheit-luchs.leader")
    - "*" grants everything
    - "admin.superadmin" grants everything
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from slotlist_service.core.acl.checker import PermissionChecker


def _reject_blank(v: list[str]) -> list[str]:
    if any(not perm.strip() for perm in v):
        msg = "Permissions cannot be empty or whitespace"
        raise ValueError(msg)
    return v


class TokenUser(BaseModel):
    """User identity embedded in a token."""

    uid: UUID = Field(description="User UID")
    nickname: str = Field(min_length=1, max_length=255, description="Display nickname")


class JWTPayload(BaseModel):
    """Decoded and verified token payload."""

    user: TokenUser = Field(description="Authenticated user")
    permissions: list[str] = Field(
        default_factory=list,
        description="Granted permission strings (e.g. 'community.sel.leader')",
    )
    sub: str = Field(min_length=1, max_length=255, description="Subject (user UID)")
    iss: str | None = Field(default=None, description="Issuer")
    aud: str | list[str] | None = Field(default=None, description="Audience")
    iat: int | None = Field(default=None, ge=0, description="Issued-at timestamp")
    nbf: int | None = Field(default=None, ge=0, description="Not-before timestamp")
    exp: int | None = Field(default=None, ge=0, description="Expiration timestamp")

    @field_validator("permissions", mode="after")
    @classmethod
    def validate_permissions(cls, v: list[str]) -> list[str]:
        return _reject_blank(v)

    model_config = ConfigDict(extra="ignore")


class AuthUser(BaseModel):
    """Authenticated caller injected into endpoints.

    Example:
        @router.get("/auth/account")
        async def account(user: AuthUserDep):
            return {"uid": user.uid, "permissions": user.permissions}
    """

    uid: UUID = Field(description="User UID")
    nickname: str = Field(description="Display nickname")
    permissions: list[str] = Field(
        default_factory=list,
        description="Granted permission strings",
    )

    @field_validator("permissions", mode="after")
    @classmethod
    def validate_permissions(cls, v: list[str]) -> list[str]:
        return _reject_blank(v)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_payload(cls, payload: JWTPayload) -> AuthUser:
        return cls(
            uid=payload.user.uid,
            nickname=payload.user.nickname,
            permissions=payload.permissions,
        )

    @property
    def checker(self) -> PermissionChecker:
        return PermissionChecker(self)

    def has_permission(self, pattern: str, **params: object) -> bool:
        """Check a single permission pattern, resolving ``{{name}}`` from params."""
        return self.checker.has(pattern, **params)

    def has_any_permission(self, *patterns: str) -> bool:
        return self.checker.has_any(*patterns)

    def has_all_permissions(self, *patterns: str) -> bool:
        return self.checker.has_all(*patterns)

    @property
    def is_superadmin(self) -> bool:
        """Whether the user holds ``*`` or ``admin.superadmin``."""
        return self.checker.is_superadmin()


class TokenResponse(BaseModel):
    """Freshly issued token."""

    token: str = Field(description="Signed JWT")
