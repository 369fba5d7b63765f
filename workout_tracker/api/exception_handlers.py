"""Exception handlers for the FastAPI application.

Converts service errors, and FastAPI's own request validation errors, into
HTTP responses with the ``{"error", "message", "details"}`` body.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from workout_tracker.core.exceptions import (
    AppError,
    DuplicateKeyError,
    NotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
    ValidationError,
)
from workout_tracker.core.logging import get_logger
from workout_tracker.schemas.base import ErrorResponse

logger = get_logger(__name__)

STATUS_BY_KIND: dict[str, int] = {
    ValidationError.kind: 422,
    NotFoundError.kind: status.HTTP_404_NOT_FOUND,
    DuplicateKeyError.kind: status.HTTP_409_CONFLICT,
    UnauthorizedError.kind: status.HTTP_401_UNAUTHORIZED,
    StoreUnavailableError.kind: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_error_response(
    status_code: int,
    error: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message, details=details).model_dump(
            mode="json"
        ),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle every AppError by its kind."""
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None

    if isinstance(exc, StoreUnavailableError):
        logger.error(
            "Store unavailable",
            extra={
                "context": {
                    "path": request.url.path,
                    "method": request.method,
                    **exc.details,
                }
            },
        )

    return create_error_response(
        status_code=status_code,
        error=exc.kind,
        message=exc.message,
        details=exc.details or None,
        headers=headers,
    )


async def request_validation_error_handler(
    request: Request,  # noqa: ARG001 - Required by FastAPI handler interface
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle FastAPI request validation errors in the same shape."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return create_error_response(
        status_code=422,
        error=ValidationError.kind,
        message="Request validation failed",
        details={"errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)


__all__ = [
    "STATUS_BY_KIND",
    "app_error_handler",
    "create_error_response",
    "register_exception_handlers",
    "request_validation_error_handler",
]
