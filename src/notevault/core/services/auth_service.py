"""Authentication service implementation."""

import logging
from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security import (
    blacklist_token,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_and_update,
)
from ..models.user import User
from ..repositories.refresh_token_repository import RefreshTokenRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from .interfaces import IAuthService

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.user_repo = UserRepository(session)
        self.token_repo = RefreshTokenRepository(session)
        self.settings = settings or get_settings()

    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""
        if await self.user_repo.is_email_taken(request.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
            )

        user_data = {
            "email": request.email,
            "name": request.name,
            "password_hash": hash_password(request.password),
            "is_active": True,
        }

        try:
            user = await self.user_repo.create_user(user_data)
        except IntegrityError:
            # lost a race with a concurrent registration
            await self.session.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered"
            )

        logger.info("Registered user %s", user.id)
        return UserResponse.model_validate(user)

    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return tokens."""
        user = await self.user_repo.get_by_email(request.email)
        if not user or not user.can_login():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )

        valid, new_hash = verify_and_update(request.password, user.password_hash)
        if not valid:
            logger.info("Failed login for user %s", user.id)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
            )

        if new_hash:
            # stored hash used an outdated scheme
            await self.user_repo.update_password_hash(user, new_hash)
            logger.info("Upgraded password hash for user %s", user.id)

        return await self._issue_tokens(user)

    async def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Swap a refresh token for a new token pair; the old one is revoked."""
        token_obj = await self.token_repo.get_by_token(request.refresh_token)
        if not token_obj or not token_obj.is_valid:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token"
            )

        user = await self.user_repo.get_by_id(token_obj.user_id)
        if not user or not user.can_login():
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="User account inactive"
            )

        await self.token_repo.revoke(token_obj)
        return await self._issue_tokens(user)

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""
        return UserResponse.model_validate(await self._get_user_or_404(user_id))

    async def update_profile(self, user_id: UUID, request: ProfileUpdateRequest) -> UserResponse:
        """Change the display name; email and account status stay as they are."""
        user = await self._get_user_or_404(user_id)
        user = await self.user_repo.update_user(user, {"name": request.name})
        logger.info("User %s updated profile", user_id)
        return UserResponse.model_validate(user)

    async def deactivate_account(self, user_id: UUID, access_token: Optional[str]) -> None:
        """Soft delete: the account stays, but can no longer log in or refresh."""
        user = await self._get_user_or_404(user_id)
        await self.user_repo.update_user(user, {"is_active": False})
        await self.logout_user(user_id, access_token)
        logger.info("Deactivated user %s", user_id)

    async def logout_user(self, user_id: UUID, access_token: Optional[str]) -> bool:
        """Logout: blacklist the access token and drop all refresh tokens."""
        if access_token and not await blacklist_token(access_token):
            # Redis down or token already expired; refresh tokens still go
            logger.warning("Access token of user %s was not blacklisted", user_id)

        deleted_count = await self.token_repo.delete_user_tokens(user_id)
        logger.info("User %s logged out, %d refresh tokens removed", user_id, deleted_count)
        return True

    async def _get_user_or_404(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        return user

    async def _issue_tokens(self, user: User) -> TokenResponse:
        access_token = create_access_token(data={"sub": str(user.id), "email": user.email})
        refresh_token = create_refresh_token()
        await self.token_repo.issue(
            user.id, refresh_token, expires_days=self.settings.refresh_token_expire_days
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )
