"""
User-related endpoints.

Provides the profile endpoint for the logged-in user.
"""

from fastapi import APIRouter, Depends

from modules.auth.interfaces import IAuthService
from modules.auth.models import UserProfile
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service
from ..middleware.auth import get_current_user

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
async def get_current_user_profile(
    user: AuthenticatedUser = Depends(get_current_user),
    service: IAuthService = Depends(get_auth_service),
) -> UserProfile:
    """
    Get the current user's profile.

    Requires authentication. Returns 404 if the account behind a still-valid
    token has been removed.
    """
    return await service.get_profile(user.id)
