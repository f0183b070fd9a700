"""Tests for application exceptions."""

from __future__ import annotations

import pytest

from slotlist_service.core.exceptions import (
    AppException,
    ConflictException,
    ForbiddenException,
    PayloadTooLargeException,
    ServiceUnavailableException,
    UnauthorizedException,
    ValidationException,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("exception_cls", "status_code", "default_type", "title"),
    [
        (ValidationException, 422, "validation-error", "Validation Error"),
        (UnauthorizedException, 401, "unauthorized", "Unauthorized"),
        (ForbiddenException, 403, "forbidden", "Forbidden"),
        (ConflictException, 409, "conflict", "Conflict"),
        (PayloadTooLargeException, 413, "payload-too-large", "Payload Too Large"),
        (ServiceUnavailableException, 503, "service-unavailable", "Service Unavailable"),
    ],
)
def test_subclass_defaults(
    exception_cls: type[AppException], status_code: int, default_type: str, title: str
) -> None:
    exc = exception_cls("Something happened")

    assert isinstance(exc, AppException)
    assert exc.status_code == status_code
    assert exc.type == default_type
    assert exc.title == title
    assert exc.detail == str(exc) == "Something happened"
    assert exc.extra == {}


@pytest.mark.unit
def test_unauthorized_advertises_scheme() -> None:
    assert UnauthorizedException("Missing").headers == {"WWW-Authenticate": "JWT"}
    assert UnauthorizedException("Missing", scheme="BEARER").headers == {"WWW-Authenticate": "BEARER"}


@pytest.mark.unit
def test_base_exception_falls_back_to_generic_title() -> None:
    assert AppException(418, "teapot").title == "Error"
    assert AppException(400, "bad").title == "Bad Request"
    assert AppException(400, "bad").type == "about:blank"
