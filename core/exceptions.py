# =============================================================================
# core/exceptions.py - Subscription Error Taxonomy
# =============================================================================
# Framework-agnostic exceptions raised by the models and services.
# Each one carries the HTTP status it maps to, so the app layer can turn
# any of them into a JSON response without a lookup table.
#
# Following the principle: "Errors should tell HOW to fix, not just WHAT failed."
# =============================================================================

from typing import Any


class NafezError(Exception):
    """
    Base exception for the landing page server.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "NAFEZ_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to API response dict.

        Server errors never expose their message or details; those are
        for the server log.
        """
        if self.status_code >= 500:
            return {"error": "internal error", "code": self.code}

        result = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions
# =============================================================================

class RequestValidationFailed(NafezError):
    """Base class for rejected request input (400)."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", **kwargs):
        super().__init__(message=message, code=code, status_code=400, **kwargs)


class InvalidEmailError(RequestValidationFailed):
    """Raised when the email is missing or not shaped like an address."""

    def __init__(self, reason: str = "Valid email is required."):
        super().__init__(
            message=reason,
            code="INVALID_EMAIL",
            suggestion="Provide an address like name@example.com",
        )


class MalformedRequestError(RequestValidationFailed):
    """Raised when the body is not a JSON object."""

    def __init__(self, reason: str = "Request body must be a JSON object."):
        super().__init__(
            message=reason,
            code="MALFORMED_REQUEST",
            suggestion='Send a JSON body such as {"email": "name@example.com"}',
        )


class PayloadTooLargeError(NafezError):
    """Raised when the request body exceeds the configured cap."""

    def __init__(self, max_bytes: int):
        super().__init__(
            message="Request body too large.",
            code="PAYLOAD_TOO_LARGE",
            status_code=413,
            details={"max_bytes": max_bytes},
        )


# =============================================================================
# Subscriber Exceptions
# =============================================================================

class DuplicateSubscriberError(NafezError):
    """Raised when the email is already in the store (case-insensitive)."""

    def __init__(self, email: str):
        super().__init__(
            message="already subscribed",
            code="ALREADY_SUBSCRIBED",
            status_code=409,
        )
        # Kept off the response body
        self.email = email


# =============================================================================
# Storage Exceptions
# =============================================================================
# Both map to a generic 500. The message is for server logs only.

class StorageCorruptError(NafezError):
    """Raised when the store file exists but cannot be parsed."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Subscriber store is corrupt: {error}",
            code="STORAGE_CORRUPT",
            status_code=500,
            details={"path": path, "error": error},
        )


class StorageIOError(NafezError):
    """Raised when the store file cannot be read or written."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Subscriber store I/O failed: {error}",
            code="STORAGE_IO_ERROR",
            status_code=500,
            details={"path": path, "error": error},
        )
