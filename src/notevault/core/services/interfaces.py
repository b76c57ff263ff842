"""
Service interfaces for NoteVault.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from uuid import UUID

from ..access import Principal
from ..schemas.auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteSearchRequest,
    NoteSearchResponse,
    NoteUpdate,
    ReorderResponse,
)
from ..schemas.sharing import PublicNoteResponse


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return tokens."""

    @abstractmethod
    async def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Swap a refresh token for a new token pair."""

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""

    @abstractmethod
    async def update_profile(self, user_id: UUID, request: ProfileUpdateRequest) -> UserResponse:
        """Update profile fields a user may change."""

    @abstractmethod
    async def deactivate_account(self, user_id: UUID, access_token: Optional[str]) -> None:
        """Deactivate the account and end its sessions."""

    @abstractmethod
    async def logout_user(self, user_id: UUID, access_token: Optional[str]) -> bool:
        """Logout user."""


class INoteService(ABC):
    """Note service for CRUD operations."""

    @abstractmethod
    async def create_note(self, principal: Principal, request: NoteCreate) -> NoteResponse:
        """Create new note owned by principal."""

    @abstractmethod
    async def get_note(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Get note by ID."""

    @abstractmethod
    async def list_notes(
        self,
        principal: Principal,
        archived: Optional[bool] = False,
        pinned: Optional[bool] = None,
        page: int = 1,
        per_page: int = 50,
    ) -> NoteListResponse:
        """List owned and collaborating notes."""

    @abstractmethod
    async def update_note(self, note_id: UUID, principal: Principal, request: NoteUpdate) -> NoteResponse:
        """Update existing note."""

    @abstractmethod
    async def toggle_pin(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Flip pinned flag."""

    @abstractmethod
    async def toggle_archive(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Flip archived flag."""

    @abstractmethod
    async def delete_note(self, note_id: UUID, principal: Principal) -> None:
        """Delete note."""

    @abstractmethod
    async def reorder_notes(self, principal: Principal, note_ids: List[UUID]) -> ReorderResponse:
        """Set display order, first id first."""


class ISearchService(ABC):
    """Search service for text and tag filtering."""

    @abstractmethod
    async def search_notes(self, principal: Principal, request: NoteSearchRequest) -> NoteSearchResponse:
        """Search notes with filters."""


class ISharingService(ABC):
    """Collaborators and public links."""

    @abstractmethod
    async def add_collaborator(self, note_id: UUID, principal: Principal, email: str) -> NoteResponse:
        """Grant an email read and edit access."""

    @abstractmethod
    async def remove_collaborator(self, note_id: UUID, principal: Principal, email: str) -> NoteResponse:
        """Revoke a collaborator."""

    @abstractmethod
    async def toggle_public(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Publish or unpublish a note."""

    @abstractmethod
    async def regenerate_share_token(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Replace the share token, killing old links."""

    @abstractmethod
    async def get_public_note(self, share_token: str) -> PublicNoteResponse:
        """Anonymous read through a share link."""


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
