"""Application exceptions rendered as RFC 7807 problem responses.

Raise these from services and dependencies; ``app.exception_handlers``
turns ``status_code``, ``type``, ``title``, ``detail``, ``instance`` and
``extra`` into an ``application/problem+json`` body.
"""

from __future__ import annotations

from typing import Any, ClassVar

_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Unprocessable Entity",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def default_title(status_code: int) -> str:
    return _TITLES.get(status_code, "Error")


class AppException(Exception):
    """Base class for errors that map directly onto an HTTP status.

    ``extra`` members are merged into the problem body; ``headers`` are set
    on the response.

    Example:
        raise AppException(409, "Permission already exists", type="permission-exists")
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or default_title(status_code)
        self.instance = instance
        self.extra = dict(extra or {})
        self.headers = dict(headers or {})


class _StatusException(AppException):
    """Fixed-status subclass; only ``detail`` varies per raise site."""

    status: ClassVar[int]
    default_type: ClassVar[str]
    fixed_title: ClassVar[str | None] = None

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            self.status,
            detail,
            type=type or self.default_type,
            title=self.fixed_title,
            instance=instance,
            extra=extra,
            headers=headers,
        )


class ValidationException(_StatusException):
    """Input that passed schema validation but is still unacceptable.

    Example:
        raise ValidationException(
            "Invalid community permission",
            type="invalid-permission",
            extra={"permission": "community.other.leader"},
        )
    """

    status = 422
    default_type = "validation-error"
    fixed_title = "Validation Error"


class UnauthorizedException(_StatusException):
    """Missing or unusable credentials. Advertises ``WWW-Authenticate: JWT``."""

    status = 401
    default_type = "unauthorized"

    def __init__(
        self,
        detail: str,
        type: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
        scheme: str = "JWT",
    ) -> None:
        super().__init__(detail, type, instance, extra, headers={"WWW-Authenticate": scheme})


class ForbiddenException(_StatusException):
    status = 403
    default_type = "forbidden"


class ConflictException(_StatusException):
    status = 409
    default_type = "conflict"


class PayloadTooLargeException(_StatusException):
    status = 413
    default_type = "payload-too-large"


class ServiceUnavailableException(_StatusException):
    """A backing service is switched off, e.g. ``DB_ENABLED=false``."""

    status = 503
    default_type = "service-unavailable"


__all__ = [
    "AppException",
    "ConflictException",
    "ForbiddenException",
    "PayloadTooLargeException",
    "ServiceUnavailableException",
    "UnauthorizedException",
    "ValidationException",
    "default_title",
]
