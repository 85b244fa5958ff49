"""
Base exception classes for the Pawzr backend.

Each module should define its own exceptions that inherit from these bases.
Every base carries the HTTP status it is surfaced with, so the API error
handlers can render any PawzrError without knowing the concrete class.
"""

from typing import Optional, Any


class PawzrError(Exception):
    """
    Base exception for all Pawzr errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(PawzrError):
    """Resource not found."""

    status_code = 404


class ValidationError(PawzrError):
    """Input validation failed."""

    status_code = 400


class ConflictError(PawzrError):
    """Resource already exists (duplicate unique key)."""

    status_code = 409


class AuthenticationError(PawzrError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(PawzrError):
    """Authorization failed (insufficient permissions)."""

    status_code = 403


class ExternalServiceError(PawzrError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service


class PersistenceError(PawzrError):
    """A datastore read or write failed."""

    status_code = 500

    def __init__(self, operation: str, reason: str):
        super().__init__(
            "Internal server error",
            code="PERSISTENCE_ERROR",
            details={"operation": operation},
        )
        self.reason = reason
