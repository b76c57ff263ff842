"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.access import Principal
from ..core.schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_current_principal

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Register a new user."""
    auth_service = AuthService(session, settings)
    return await auth_service.register_user(request)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Login user and get tokens."""
    auth_service = AuthService(session, settings)
    return await auth_service.authenticate_user(request)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request: RefreshTokenRequest,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Get a new token pair using a refresh token."""
    auth_service = AuthService(session, settings)
    return await auth_service.refresh_token(request)


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Get current user profile."""
    auth_service = AuthService(session, settings)
    return await auth_service.get_current_user(principal.user_id)


@router.put("/me", response_model=UserResponse)
async def update_current_user(
    request: ProfileUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Update current user profile (display name only)."""
    auth_service = AuthService(session, settings)
    return await auth_service.update_profile(principal.user_id, request)


@router.delete("/me", status_code=status.HTTP_200_OK)
async def deactivate_current_user(
    http_request: Request,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Deactivate the account; it can no longer log in."""
    auth_service = AuthService(session, settings)
    access_token = getattr(http_request.state, "access_token", None)
    await auth_service.deactivate_account(principal.user_id, access_token)
    return {"message": "Account deactivated"}


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    http_request: Request,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Logout user: blacklist the access token and revoke refresh tokens."""
    auth_service = AuthService(session, settings)
    access_token = getattr(http_request.state, "access_token", None)
    await auth_service.logout_user(principal.user_id, access_token)
    return {"message": "Logged out successfully"}
