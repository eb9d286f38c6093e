"""
Standardized error handling for the bug bounty API.

Every failure leaves the API in the same JSON envelope:

    {"status": 404, "error": "Program not found", "details": null}

Handlers raise the ApiError subclasses below; the exception handlers
registered by setup_exception_handlers() turn them (and framework errors)
into responses. Unexpected exceptions are logged and answered with a
generic message so internals never leak to clients.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal Server Error"


# =============================================================================
# Exceptions
# =============================================================================


class ApiError(Exception):
    """Base exception for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_ERROR_MESSAGE

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def body(self) -> dict[str, Any]:
        return {
            "status": self.status_code,
            "error": self.message,
            "details": self.details,
        }


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthenticated(ApiError):
    """Absent, invalid or expired token, or a vanished actor."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(ApiError):
    """Authenticated but lacking role or ownership."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class NotFound(ApiError):
    """Resource id does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(ApiError):
    """Unique constraint violation."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource conflict"


class RateLimited(ApiError):
    """Too many requests from one client inside a window."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests, please try again later."

    def __init__(self, message: str | None = None, retry_after: str = ""):
        super().__init__(message)
        self.retry_after = retry_after

    def body(self) -> dict[str, Any]:
        return {"error": self.message, "retryAfter": self.retry_after}


class InternalError(ApiError):
    """Unexpected persistence or runtime failure."""


def error_response(exc: ApiError, headers: dict[str, str] | None = None) -> JSONResponse:
    """Render an ApiError as a JSON response."""
    return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)


# =============================================================================
# Exception Handlers
# =============================================================================


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Handle errors raised deliberately by route handlers and dependencies."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s -> %d %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
        )
    return error_response(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle framework HTTP exceptions (unknown route, wrong method, ...)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": exc.status_code,
            "error": str(exc.detail) if exc.detail else f"HTTP {exc.status_code}",
            "details": None,
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and out-of-range enum values are plain 400s."""
    details = [
        {
            "loc": [str(part) for part in error.get("loc", [])],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]

    logger.info("Validation error on %s: %d issues", request.url.path, len(details))

    return error_response(ValidationError("Invalid request", details=details))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking internals."""
    logger.error(
        "Unhandled exception on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    from bugbounty.integrations.sentry import capture_exception
    capture_exception(exc, path=request.url.path, method=request.method)

    return error_response(InternalError(GENERIC_ERROR_MESSAGE))


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI app.

    Call during app initialization:
        setup_exception_handlers(app)
    """
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
