"""
Authentication endpoints for EventDrop.

Provides user registration, login and session verification with JWT tokens.
"""

from fastapi import APIRouter, Depends, status

from app.api.deps import get_auth_service, get_current_user_id
from app.schemas.auth import AuthResponse, UserInfo, UserLoginRequest, UserRegisterRequest
from app.services.auth_service import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a photographer account",
    name="register",
)
async def register(
    data: UserRegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new user and log them in.

    Returns 400 if a field is blank or the email is already registered.
    """
    return await service.register(data.email, data.password, data.name)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and get JWT access token",
    name="login",
)
async def login(
    data: UserLoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Authenticate with email and password.

    Returns 401 with the same message whether the email is unknown or the
    password is wrong.
    """
    return await service.login(data.email, data.password)


@router.get(
    "/verify",
    response_model=UserInfo,
    summary="Verify token and return the current user",
)
async def verify(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
) -> UserInfo:
    """Used by clients to restore a session after reload."""
    return await service.whoami(user_id)
