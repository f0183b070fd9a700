"""Problem-details (RFC 7807) rendering for every error the API returns.

Bodies are ``application/problem+json``. The request id from
``RequestIDMiddleware`` is appended as ``request_id`` when present.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from slotlist_service.core.database.exceptions import NotFoundError
from slotlist_service.core.exceptions import AppException, default_title
from slotlist_service.core.schemas.problem_details import (
    FieldError,
    ProblemDetails,
    ValidationProblemDetails,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"

_CAMEL_WORD = re.compile(r"[A-Z]?[a-z0-9]+|[A-Z]+(?![a-z])")


def _request_extra(request: Request, **fields: Any) -> dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "path": request.url.path,
        "method": request.method,
        **fields,
    }


def _problem_response(
    request: Request,
    problem: ProblemDetails,
    *,
    extra: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body = problem.model_dump(mode="json", exclude_none=True)
    if extra:
        body.update(jsonable_encoder(dict(extra)))
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(
        status_code=problem.status,
        content=body,
        headers=dict(headers) if headers else None,
        media_type=PROBLEM_JSON,
    )


def _field_errors(errors: Iterable[Mapping[str, Any]]) -> list[FieldError]:
    return [
        FieldError(
            field=".".join(map(str, error["loc"])),
            message=error["msg"],
            type=error["type"],
            value=jsonable_encoder(error.get("input")),
        )
        for error in errors
    ]


def _validation_response(request: Request, errors: list[FieldError], what: str) -> JSONResponse:
    problem = ValidationProblemDetails(
        type="validation-error",
        title="Validation Error",
        status=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"{what} validation failed for {len(errors)} field(s)",
        instance=request.url.path,
        errors=errors,
    )
    return _problem_response(request, problem)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an ``AppException`` with its own status, type and headers."""
    logger.warning(
        "Application exception occurred",
        extra=_request_extra(
            request,
            exception_type=exc.type,
            status_code=exc.status_code,
            detail=exc.detail,
        ),
    )
    problem = ProblemDetails(
        type=exc.type,
        title=exc.title,
        status=exc.status_code,
        detail=exc.detail,
        instance=exc.instance or request.url.path,
    )
    return _problem_response(request, problem, extra=exc.extra, headers=exc.headers)


async def not_found_error_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """404 for repository lookups that matched nothing.

    ``MissionSlotTemplate`` becomes type ``mission-slot-template-not-found``
    with detail "Mission slot template not found".
    """
    logger.info("Entity not found", extra=_request_extra(request, model=exc.model_name))
    words = _CAMEL_WORD.findall(exc.model_name) or [exc.model_name]
    problem = ProblemDetails(
        type="-".join(word.lower() for word in words) + "-not-found",
        title=default_title(status.HTTP_404_NOT_FOUND),
        status=status.HTTP_404_NOT_FOUND,
        detail=" ".join(words).capitalize() + " not found",
        instance=request.url.path,
    )
    return _problem_response(request, problem)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = _field_errors(exc.errors())
    logger.warning(
        "Request validation failed",
        extra=_request_extra(
            request,
            error_count=len(errors),
            errors=[error.model_dump(mode="json") for error in errors],
        ),
    )
    return _validation_response(request, errors, "Request")


async def pydantic_validation_exception_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Validation errors raised after request parsing, e.g. building a response model."""
    errors = _field_errors(exc.errors())
    logger.warning("Pydantic validation failed", extra=_request_extra(request, error_count=len(errors)))
    return _validation_response(request, errors, "Data")


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """500 with a fixed message; the traceback only goes to the log."""
    logger.error(
        "Unexpected exception occurred",
        extra=_request_extra(
            request,
            exception_type=type(exc).__name__,
            exception_message=str(exc),
        ),
        exc_info=exc,
    )
    problem = ProblemDetails(
        type="internal-error",
        title=default_title(status.HTTP_500_INTERNAL_SERVER_ERROR),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred while processing your request",
        instance=request.url.path,
    )
    return _problem_response(request, problem)


def configure_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PydanticValidationError, pydantic_validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers configured")
