"""
Bearer token authentication dependency.

Reads `Authorization: Bearer <token>`, verifies it through the auth service
and attaches the resolved identity to the request.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.interfaces import IAuthService
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service

# Bearer token extractor. auto_error is off so a missing header surfaces as
# MissingTokenError with the standard error body instead of FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    service: IAuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Raises MissingTokenError (401) without a bearer token and
    InvalidTokenError (403) when the token fails verification.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"user_id": user.id}
    """
    token = credentials.credentials if credentials is not None else None
    user = await service.authenticate(token)
    request.state.user = user
    return user
