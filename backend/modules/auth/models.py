"""
Authentication module data models.

These models define the stored user record, the request/response bodies of
the auth endpoints and the decoded session token payload.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints


def normalize_email(email: str) -> str:
    """Trim and lower-case an email so lookups are case-insensitive."""
    return email.strip().lower()


class UserRole(str, Enum):
    """Account roles."""
    STANDARD = "Standard User"
    ADMIN = "Admin"


class NewUser(BaseModel):
    """A user about to be written to the credential store."""

    name: str
    email: str
    password_digest: str
    role: UserRole = UserRole.STANDARD


class UserRecord(BaseModel):
    """
    A stored user.

    Carries the password digest, so it must never be returned from an
    endpoint. Use to_public() or to_profile() instead.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    email: str
    password_digest: str
    role: UserRole = UserRole.STANDARD
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_public(self) -> "UserPublic":
        return UserPublic(id=self.id, name=self.name, email=self.email, role=self.role)

    def to_profile(self) -> "UserProfile":
        return UserProfile(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            created_at=self.created_at,
        )


class UserPublic(BaseModel):
    """User view returned alongside a token."""

    id: str
    name: str
    email: str
    role: UserRole


class UserProfile(BaseModel):
    """User view returned by the profile endpoint."""

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime


# Only identity fields are trimmed; passwords are kept byte for byte.
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]


class RegisterRequest(BaseModel):
    """Request to create an account."""

    name: TrimmedStr = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., description="Plaintext password, length checked by the service")


class LoginRequest(BaseModel):
    """Request to log in."""

    email: TrimmedStr = Field(..., min_length=1)
    password: str


class AuthResponse(BaseModel):
    """Response of a successful registration or login."""

    token: str
    user: UserPublic
    message: str


class TokenPayload(BaseModel):
    """Decoded session token claims."""

    sub: str = Field(..., description="Subject (user ID)")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")
