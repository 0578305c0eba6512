"""
Password hashing and verification.

Digests are bcrypt strings, so the per-record salt and the cost factor are
embedded in the digest itself and nothing else needs to be stored.
"""

import bcrypt

from .exceptions import PasswordTooLongError, PasswordTooShortError

DEFAULT_MIN_LENGTH = 8
DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def validate_password(password: str, min_length: int = DEFAULT_MIN_LENGTH) -> None:
    """
    Check a new password before it is hashed.

    Raises:
        PasswordTooShortError: If shorter than min_length characters
        PasswordTooLongError: If longer than bcrypt's input limit
    """
    if len(password) < min_length:
        raise PasswordTooShortError(min_length)
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise PasswordTooLongError(MAX_PASSWORD_BYTES)


def hash_password(
    password: str,
    rounds: int = DEFAULT_ROUNDS,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> str:
    """Validate a password and hash it with a fresh salt."""
    validate_password(password, min_length)
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_digest: str) -> bool:
    """
    Verify a password against a stored digest.

    Returns False for a malformed digest instead of raising.
    """
    if not password or not password_digest:
        return False
    candidate = password.encode("utf-8")
    if len(candidate) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(candidate, password_digest.encode("utf-8"))
    except ValueError:
        return False
