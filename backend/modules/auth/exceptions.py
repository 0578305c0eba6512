"""
Authentication module exceptions.

These exceptions are raised by the auth module and turned into JSON error
responses by the API exception handlers.
"""

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class PasswordTooShortError(ValidationError):
    """Raised when a new password is shorter than the configured minimum."""

    def __init__(self, min_length: int):
        super().__init__(
            f"Password must be at least {min_length} characters long",
            code="PASSWORD_TOO_SHORT",
            details={"min_length": min_length},
        )


class PasswordTooLongError(ValidationError):
    """Raised when a new password exceeds what bcrypt can hash."""

    def __init__(self, max_bytes: int):
        super().__init__(
            f"Password must be at most {max_bytes} bytes long",
            code="PASSWORD_TOO_LONG",
            details={"max_bytes": max_bytes},
        )


class DuplicateIdentityError(ConflictError):
    """Raised when registering an email that already has an account."""

    def __init__(self, email: str):
        super().__init__(
            "User with this email already exists",
            code="IDENTITY_EXISTS",
            details={"email": email},
        )


class InvalidCredentialsError(AuthenticationError):
    """
    Raised when login fails.

    Unknown email and wrong password produce exactly the same error so the
    response does not reveal whether an account exists.
    """

    def __init__(self):
        super().__init__("Invalid email or password", code="INVALID_CREDENTIALS")


class MissingTokenError(AuthenticationError):
    """Raised when no authentication token is provided."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidTokenError(AuthorizationError):
    """Raised when a session token is invalid or malformed."""

    def __init__(self, message: str = "Invalid or expired token", code: str = "INVALID_TOKEN"):
        super().__init__(message, code=code)


class ExpiredTokenError(InvalidTokenError):
    """Raised when a session token has expired."""

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="TOKEN_EXPIRED")


class UserNotFoundError(NotFoundError):
    """Raised when the authenticated identity no longer exists in the store."""

    def __init__(self, user_id: str):
        super().__init__(
            "User not found",
            code="USER_NOT_FOUND",
            details={"user_id": user_id},
        )


class StoreUnavailableError(ExternalServiceError):
    """Raised when the credential store cannot be reached or fails."""

    def __init__(self, message: str = "Credential store unavailable"):
        super().__init__(message, service="credential_store", code="STORE_UNAVAILABLE")
