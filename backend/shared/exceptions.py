"""
Base exception classes for the Privacy Dashboard backend.

Each module should define its own exceptions that inherit from these bases.
Every base carries the HTTP status the API layer answers with, so the
exception handlers in api/app.py never need to know about module errors.
"""

from typing import Optional, Any


class DashboardError(Exception):
    """
    Base exception for all Privacy Dashboard errors.

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
        """Convert exception to a dictionary for logs and internal APIs."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(DashboardError):
    """Required configuration is missing. Fatal at startup."""

    pass


class NotFoundError(DashboardError):
    """Resource not found."""

    status_code = 404


class ValidationError(DashboardError):
    """Input validation failed."""

    status_code = 400


class ConflictError(DashboardError):
    """Write rejected because it conflicts with existing data."""

    status_code = 400


class AuthenticationError(DashboardError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class AuthorizationError(DashboardError):
    """Credentials were presented but are not acceptable."""

    status_code = 403


class ExternalServiceError(DashboardError):
    """Error communicating with an external service."""

    status_code = 500

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
