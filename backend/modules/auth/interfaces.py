"""
Authentication module interfaces.

Other modules should depend on IAuthService and ICredentialStore, not the
concrete implementations. This keeps tests free to swap in fakes.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import (
    AuthResponse,
    LoginRequest,
    NewUser,
    RegisterRequest,
    UserProfile,
    UserRecord,
)


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Persistent store of user records.

    Emails are normalized (trimmed, lower-cased) by every implementation
    before they are compared or written.
    """

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Return the user with this email, or None."""
        ...

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        """Return the user with this ID, or None."""
        ...

    def create(self, user: NewUser) -> UserRecord:
        """
        Persist a new user.

        Raises:
            DuplicateIdentityError: If the email is already taken. The check
                is atomic, so concurrent creates cannot both succeed.
            StoreUnavailableError: If the backing store fails.
        """
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for authentication operations.

    This protocol defines the contract that the auth module exposes
    to the API layer. Implementations must provide all these methods.
    """

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """
        Create an account and issue a session token.

        Raises:
            ValidationError: If the password is too short or too long
            DuplicateIdentityError: If the email is already registered
        """
        ...

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Check credentials and issue a session token.

        Raises:
            InvalidCredentialsError: For unknown email or wrong password alike
        """
        ...

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        """
        Validate a session token and return the caller's identity.

        Raises:
            MissingTokenError: If no token was presented
            InvalidTokenError: If the token is malformed, forged or expired
        """
        ...

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Load the profile of an authenticated user.

        Raises:
            UserNotFoundError: If the user no longer exists
        """
        ...
