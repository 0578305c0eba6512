"""
Authentication service implementation.

Composes the credential store, the password verifier and the token issuer
into the register / login / authenticate flows. bcrypt work is CPU-bound,
so it runs in the threadpool, as do the blocking store calls.
"""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from shared.models import AuthenticatedUser

from .exceptions import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    MissingTokenError,
    UserNotFoundError,
)
from .interfaces import IAuthService, ICredentialStore
from .models import (
    AuthResponse,
    LoginRequest,
    NewUser,
    RegisterRequest,
    UserProfile,
)
from .passwords import (
    DEFAULT_MIN_LENGTH,
    DEFAULT_ROUNDS,
    hash_password,
    validate_password,
    verify_password,
)
from .tokens import TokenIssuer

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Sessions are stateless: a token is the whole session, so there is
    nothing to clean up on logout and nothing to revoke.
    """

    def __init__(
        self,
        store: ICredentialStore,
        tokens: TokenIssuer,
        password_min_length: int = DEFAULT_MIN_LENGTH,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self._store = store
        self._tokens = tokens
        self._min_length = password_min_length
        self._rounds = bcrypt_rounds
        self._dummy_digest: Optional[str] = None

    async def register(self, request: RegisterRequest) -> AuthResponse:
        """
        Create an account and issue a session token.

        The email pre-check gives a fast answer for the common case; the
        store's create() is what actually guarantees uniqueness.
        """
        # Fail before any hashing work
        validate_password(request.password, self._min_length)

        if await run_in_threadpool(self._store.find_by_email, request.email) is not None:
            raise DuplicateIdentityError(request.email.lower())

        digest = await run_in_threadpool(
            hash_password, request.password, self._rounds, self._min_length
        )
        user = await run_in_threadpool(
            self._store.create,
            NewUser(name=request.name, email=request.email, password_digest=digest),
        )
        logger.info(f"Registered user {user.id}")

        return AuthResponse(
            token=self._tokens.issue(user.id),
            user=user.to_public(),
            message="User registered successfully",
        )

    async def login(self, request: LoginRequest) -> AuthResponse:
        """Check credentials and issue a session token."""
        user = await run_in_threadpool(self._store.find_by_email, request.email)

        if user is None:
            # Unknown emails pay for one bcrypt check like wrong passwords do
            await run_in_threadpool(verify_password, request.password, await self._get_dummy_digest())
            logger.debug("Login failed: unknown email")
            raise InvalidCredentialsError()

        if not await run_in_threadpool(verify_password, request.password, user.password_digest):
            logger.debug(f"Login failed: wrong password for user {user.id}")
            raise InvalidCredentialsError()

        logger.info(f"User {user.id} logged in")
        return AuthResponse(
            token=self._tokens.issue(user.id),
            user=user.to_public(),
            message="Login successful",
        )

    async def authenticate(self, token: Optional[str]) -> AuthenticatedUser:
        """Validate a session token and return the caller's identity."""
        if not token:
            raise MissingTokenError()
        return AuthenticatedUser(id=self._tokens.verify(token))

    async def get_profile(self, user_id: str) -> UserProfile:
        """Load the profile of an authenticated user."""
        user = await run_in_threadpool(self._store.find_by_id, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user.to_profile()

    async def _get_dummy_digest(self) -> str:
        if self._dummy_digest is None:
            self._dummy_digest = await run_in_threadpool(
                hash_password, "dummy-password-for-timing", self._rounds, 1
            )
        return self._dummy_digest
