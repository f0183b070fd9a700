"""JWT issuance and verification backed by PyJWT."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt as pyjwt
from pydantic import ValidationError

from slotlist_service.core.schemas.auth import JWTPayload

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

    from slotlist_service.core.settings.auth import AuthSettings

__all__ = ["JWTCodec", "TokenValidationError", "get_jwt_codec"]

logger = logging.getLogger(__name__)


class TokenValidationError(Exception):
    """Raised when a token cannot be decoded or fails validation."""


class JWTCodec:
    """Signs and verifies the service's tokens.

    Verification checks the signature, ``exp``, ``nbf``, audience and
    issuer, then validates the payload shape.

    Example:
        >>> codec = JWTCodec(AuthSettings(secret="s3cret"))
        >>> token = codec.issue(uid, "MorpheusXAUT", ["admin.announcement"])
        >>> codec.decode(token).permissions
        ['admin.announcement']
    """

    def __init__(self, settings: AuthSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> AuthSettings:
        return self._settings

    def issue(
        self,
        uid: UUID,
        nickname: str,
        permissions: Iterable[str],
        *,
        now: datetime | None = None,
        expires_in: timedelta | None = None,
    ) -> str:
        """Issue a signed token for a user.

        Args:
            uid: User UID, also used as ``sub``
            nickname: User nickname
            permissions: Granted permission strings at issue time
            now: Issue time, defaults to the current UTC time
            expires_in: Token lifetime, defaults to the configured expiry

        Returns:
            Encoded JWT
        """
        issued_at = now or datetime.now(UTC)
        lifetime = expires_in or timedelta(seconds=self._settings.expires_in_seconds)
        payload: dict[str, Any] = {
            "user": {"uid": str(uid), "nickname": nickname},
            "permissions": list(permissions),
            "sub": str(uid),
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": issued_at + lifetime,
        }
        return pyjwt.encode(
            payload,
            self._settings.secret.get_secret_value(),
            algorithm=self._settings.signing_algorithm,
        )

    def decode(self, token: str) -> JWTPayload:
        """Verify and decode a token.

        Args:
            token: Encoded JWT

        Returns:
            Validated payload

        Raises:
            TokenValidationError: If the token is invalid for any reason
        """
        try:
            raw = pyjwt.decode(
                token,
                self._settings.secret.get_secret_value(),
                algorithms=self._settings.algorithms,
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                leeway=self._settings.leeway_seconds,
                options={"require": ["exp", "sub"]},
            )
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenValidationError("Token has expired") from exc
        except pyjwt.ImmatureSignatureError as exc:
            raise TokenValidationError("Token is not yet valid") from exc
        except pyjwt.InvalidAudienceError as exc:
            raise TokenValidationError("Invalid audience") from exc
        except pyjwt.InvalidIssuerError as exc:
            raise TokenValidationError("Invalid issuer") from exc
        except pyjwt.PyJWTError as exc:
            raise TokenValidationError(str(exc)) from exc

        try:
            return JWTPayload.model_validate(raw)
        except ValidationError as exc:
            logger.debug("Token payload failed validation", extra={"errors": exc.errors()})
            raise TokenValidationError("Malformed token payload") from exc


def get_jwt_codec() -> JWTCodec:
    """Build a codec from the cached auth settings."""
    from slotlist_service.core.settings import get_auth_settings

    return JWTCodec(get_auth_settings())
