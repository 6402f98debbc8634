"""Mapping of domain errors onto HTTP responses.

Every domain error kind has one status code, and the response body always
has the shape ``{"detail": <message>, "kind": <kind>}``.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from quill.domain.error import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    ConflictError: status.HTTP_409_CONFLICT,
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_status(error: DomainError) -> int:
    """HTTP status for a domain error (400 for unknown kinds)."""
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def to_error_response(error: DomainError) -> JSONResponse:
    """Render a domain error as a JSON response."""
    return JSONResponse(
        status_code=error_status(error),
        content={"detail": error.message, "kind": error.kind},
    )


async def _domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logfire.warn(
        "Request failed with domain error",
        path=request.url.path,
        kind=exc.kind,
        error=exc.message,
    )
    return to_error_response(exc)


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logfire.error(
        "Unexpected error handling request",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "kind": "internal_error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain and fallback error handlers on an app."""
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)
