# =============================================================================
# app/exceptions.py - Exception Handlers
# =============================================================================
# Centralized exception handling for the API. The exception classes live in
# core/exceptions.py; this module turns them into JSON responses.
#
# Every error body carries an "error" key, which is what the landing page
# script shows to the visitor.
# =============================================================================

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.exceptions import (
    DuplicateSubscriberError,
    InvalidEmailError,
    MalformedRequestError,
    NafezError,
    PayloadTooLargeError,
    RequestValidationFailed,
    StorageCorruptError,
    StorageIOError,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DuplicateSubscriberError",
    "InvalidEmailError",
    "MalformedRequestError",
    "NafezError",
    "PayloadTooLargeError",
    "RequestValidationFailed",
    "StorageCorruptError",
    "StorageIOError",
    "nafez_exception_handler",
    "validation_exception_handler",
    "unhandled_exception_handler",
]


async def nafez_exception_handler(
    request: Request,
    exc: NafezError
) -> JSONResponse:
    """
    Convert NafezError to JSON response.

    Returns structured error with:
    - error: Human-readable message ("internal error" for 5xx)
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.details}")

    headers = {"Connection": "close"} if isinstance(exc, PayloadTooLargeError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle FastAPI request validation errors.

    Reported as 400 like every other rejected input.
    """
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request.",
            "code": "VALIDATION_ERROR",
            "errors": str(exc),
        }
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions without leaking detail to the client."""
    logger.exception(f"Unexpected error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal error",
            "code": "INTERNAL_ERROR",
        }
    )
