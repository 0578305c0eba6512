"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from pydantic import BaseModel, Field


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller.

    Populated from the verified session token and made available to route
    handlers via dependency injection. The token only carries the subject,
    so anything else about the user has to be loaded from the store.
    """

    id: str = Field(..., description="User ID (token subject)")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
