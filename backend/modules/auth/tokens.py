"""
Session token issuing and verification.

Tokens are HS256 JWTs carrying only the user ID, issue time and expiry.
There is no server-side session table, so a token stays valid until it
expires; there is no revocation.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt

from shared.exceptions import ConfigurationError

from .exceptions import ExpiredTokenError, InvalidTokenError
from .models import TokenPayload

DEFAULT_TTL = timedelta(days=7)


class TokenIssuer:
    """Mints and checks signed session tokens with a fixed TTL."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
    ):
        if not secret:
            raise ConfigurationError(
                "JWT secret missing. Set the JWT_SECRET environment variable.",
                code="JWT_SECRET_MISSING",
            )
        self._secret = secret
        self._ttl = ttl
        self._algorithm = algorithm

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self, subject: str, now: Optional[datetime] = None) -> str:
        """
        Create a token for a user.

        Args:
            subject: User ID to embed as the `sub` claim
            now: Issue time, defaults to the current UTC time

        Returns:
            Encoded token string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenPayload:
        """
        Verify a token's signature and expiry and return its claims.

        Raises:
            ExpiredTokenError: If the token's expiry has passed
            InvalidTokenError: If the signature, structure or claims are bad
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError:
            raise InvalidTokenError()

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError()
        return TokenPayload(sub=subject, iat=payload["iat"], exp=payload["exp"])

    def verify(self, token: str) -> str:
        """Verify a token and return the user ID it was issued for."""
        return self.decode(token).sub
