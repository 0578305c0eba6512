"""
Authentication module.

Handles credential storage, password hashing, session tokens and the
register/login flows.

Public API:
- IAuthService / ICredentialStore: Interfaces for auth operations and storage
- TokenIssuer: Signed session token minting and verification
- UserRecord, UserPublic, UserProfile: User models
- Auth exceptions: InvalidCredentialsError, InvalidTokenError, etc.
"""

from .interfaces import IAuthService, ICredentialStore
from .models import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserProfile,
    UserPublic,
    UserRecord,
    UserRole,
)
from .tokens import TokenIssuer
from .exceptions import (
    DuplicateIdentityError,
    ExpiredTokenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    PasswordTooLongError,
    PasswordTooShortError,
    StoreUnavailableError,
    UserNotFoundError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "ICredentialStore",
    # Tokens
    "TokenIssuer",
    # Models
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "UserProfile",
    "UserPublic",
    "UserRecord",
    "UserRole",
    # Exceptions
    "DuplicateIdentityError",
    "ExpiredTokenError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingTokenError",
    "PasswordTooLongError",
    "PasswordTooShortError",
    "StoreUnavailableError",
    "UserNotFoundError",
]
