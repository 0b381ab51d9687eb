"""Custom exceptions and exception handlers.

This module provides structured exception handling with:
- HTTP exception classes for request-level failures
- A mapping from data-layer errors to HTTP error codes
- FastAPI exception handlers rendering one error response shape
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from recibook.auth.exceptions import AuthError
from recibook.database.repositories.exceptions import (
    ProfileError,
    RecipeCreateError,
    RecipeLoadError,
    SocialGraphError,
)
from recibook.database.store.exceptions import PersistenceError
from recibook.observability.logging import get_logger
from recibook.services.feed.exceptions import FeedLoadError
from recibook.services.storage.exceptions import UnsafeImageSourceError, UploadError


if TYPE_CHECKING:
    from fastapi import Request

logger = get_logger(__name__)


class ErrorDetail(BaseModel):
    """Structured error detail for validation errors."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Structured error response."""

    error: str
    message: str
    details: list[ErrorDetail] | None = None
    request_id: str | None = None


class AppException(Exception):
    """Base application exception.

    All HTTP-facing exceptions inherit from this class
    for consistent error handling.
    """

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: list[ErrorDetail] | None = None,
    ) -> None:
        self.status_code = status_code
        self.error = error
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error="NOT_FOUND",
            message=f"{resource} with identifier '{identifier}' not found",
        )


class ServiceUnavailableException(AppException):
    """Service unavailable exception."""

    def __init__(self, message: str = "Service temporarily unavailable") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="SERVICE_UNAVAILABLE",
            message=message,
        )


# Data-layer failures mean an upstream store or bucket misbehaved.
# Subclasses must come before their bases.
DOMAIN_ERROR_CODES: Final[tuple[tuple[type[Exception], str], ...]] = (
    (RecipeCreateError, "RECIPE_CREATE_FAILED"),
    (RecipeLoadError, "RECIPE_LOAD_FAILED"),
    (SocialGraphError, "SOCIAL_GRAPH_FAILED"),
    (ProfileError, "PROFILE_FAILED"),
    (FeedLoadError, "FEED_LOAD_FAILED"),
    (UploadError, "UPLOAD_FAILED"),
    (PersistenceError, "PERSISTENCE_FAILED"),
)


def domain_error_code(exc: Exception) -> str:
    """Return the error code for a data-layer exception."""
    for exc_type, code in DOMAIN_ERROR_CODES:
        if isinstance(exc, exc_type):
            return code
    return "UPSTREAM_ERROR"


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state."""
    return getattr(request.state, "request_id", None)


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: list[ErrorDetail] | None = None,
) -> ORJSONResponse:
    body = ErrorResponse(
        error=error,
        message=message,
        details=details,
        request_id=_get_request_id(request),
    )
    return ORJSONResponse(status_code=status_code, content=body.model_dump())


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> ORJSONResponse:
        return _error_response(
            request, exc.status_code, exc.error, exc.message, exc.details
        )

    @app.exception_handler(AuthError)
    async def auth_exception_handler(
        request: Request,
        exc: AuthError,
    ) -> ORJSONResponse:
        """Requests without a caller identity are unauthorized."""
        return _error_response(
            request, status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED", str(exc)
        )

    async def domain_exception_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        """Data-layer failures are reported as bad gateway."""
        code = domain_error_code(exc)
        logger.warning(
            "Data layer request failed",
            error_code=code,
            error=str(exc),
            cause=str(exc.__cause__) if exc.__cause__ else None,
        )
        return _error_response(request, status.HTTP_502_BAD_GATEWAY, code, str(exc))

    for exc_type, _code in DOMAIN_ERROR_CODES:
        app.add_exception_handler(exc_type, domain_exception_handler)

    @app.exception_handler(UnsafeImageSourceError)
    async def unsafe_image_source_handler(
        request: Request,
        exc: UnsafeImageSourceError,
    ) -> ORJSONResponse:
        """The caller asked for a non-public host; nothing was fetched."""
        return _error_response(
            request, status.HTTP_400_BAD_REQUEST, "UNSAFE_IMAGE_SOURCE", str(exc)
        )

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> ORJSONResponse:
        return _error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        """One detail entry per invalid field, located by dotted path."""
        details = [
            ErrorDetail(
                code="VALIDATION_ERROR",
                message=error["msg"],
                field=".".join(str(loc) for loc in error["loc"]),
            )
            for error in exc.errors()
        ]
        return _error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Request validation failed",
            details,
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        logger.opt(exception=exc).error("Unhandled exception")
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred",
        )
