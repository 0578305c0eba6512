"""
Auth API endpoints.

Registration and login. Both return a session token plus the public user
view; errors are rendered by the exception handlers in api/app.py.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_auth_service

from .interfaces import IAuthService
from .models import AuthResponse, LoginRequest, RegisterRequest

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new user.

    Returns 400 if the email is taken or the input is invalid.
    """
    return await service.register(request)


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Log in and get a session token.

    Returns 401 with the same message for unknown email and wrong password.
    """
    return await service.login(request)
