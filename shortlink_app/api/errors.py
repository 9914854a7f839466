"""
Translate shortener core errors into HTTP responses.

The core raises typed exceptions; this is the only place that knows which
status code each one maps to.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from shortlink_app.core.exceptions import (
    CodeSpaceExhausted,
    DuplicateShortCode,
    QuotaExceeded,
    ShortCodeExpired,
    ShortCodeNotFound,
    ShortcodeCollision,
    ShortenerError,
    UnknownShortCode,
    ValidationFailure,
)
from shortlink_app.schemas.url import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order, first match wins
STATUS_CODES = (
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
    (ShortcodeCollision, status.HTTP_409_CONFLICT),
    (QuotaExceeded, status.HTTP_429_TOO_MANY_REQUESTS),
    (CodeSpaceExhausted, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ShortCodeNotFound, status.HTTP_404_NOT_FOUND),
    (ShortCodeExpired, status.HTTP_410_GONE),
)


def status_code_for(exc: ShortenerError) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def shortener_error_handler(request: Request, exc: ShortenerError) -> JSONResponse:
    status_code = status_code_for(exc)

    if isinstance(exc, (UnknownShortCode, DuplicateShortCode)):
        # Registry and analytics store disagree, should never happen
        logger.error("Store consistency defect on %s %s: %s", request.method, request.url.path, exc)
        body = ErrorResponse(error="Internal server error")
    else:
        body = ErrorResponse(
            error=exc.message,
            expired_at=getattr(exc, "expired_at", None)
        )

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body, by_alias=True, exclude_none=True)
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"

    field = first.get("loc", ())[-1] if first.get("loc") else "request"
    return f"Invalid value for {field}: {first.get('msg', 'invalid')}"


async def request_validation_error_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies get the same {error} shape as core validation failures"""
    message = describe_validation_error(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(ErrorResponse(error=message), by_alias=True, exclude_none=True)
    )


def add_error_handlers(app: FastAPI):
    """
    Register core error translation on a FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(ShortenerError, shortener_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
