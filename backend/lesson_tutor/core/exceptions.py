"""
Custom exception classes for unified error handling.

Every error carries the HTTP status it maps to; the handlers registered in
main.py turn them into a `{"error": message}` JSON body.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

SERVER_ERROR_PREFIX = "There was an error processing your request: "


class AppBaseError(Exception):
    """Base exception for all application errors."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class ValidationError(AppBaseError):
    """Raised when a request is missing required fields or has the wrong shape."""
    status_code = status.HTTP_400_BAD_REQUEST


class EmbeddingError(AppBaseError):
    """Raised when the embedding provider fails or the text is empty after cleaning."""


class StorageError(AppBaseError):
    """Raised when a read or write against the vector index fails."""


class AgentError(AppBaseError):
    """Raised when the agent (LLM, tool or anything it calls) fails during a turn."""


# ── Utility: convert to JSON responses ───────────────────

def error_message(error: AppBaseError) -> str:
    """User-facing message: client errors verbatim, server errors prefixed."""
    if error.status_code >= 500:
        return f"{SERVER_ERROR_PREFIX}{error.message}"
    return error.message


def app_error_to_response(error: AppBaseError) -> JSONResponse:
    """Convert an AppBaseError to a JSONResponse with consistent body."""
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error_message(error)},
    )


async def app_error_handler(request: Request, exc: AppBaseError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return app_error_to_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body schema failures are client errors: 400 with the first problem spelled out."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        reason = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        reason = "malformed body"
    return app_error_to_response(ValidationError(f"Invalid request: {reason}"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": f"{SERVER_ERROR_PREFIX}{exc}"},
    )
