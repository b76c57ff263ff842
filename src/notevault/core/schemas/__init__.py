"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .auth import (
    LoginRequest,
    ProfileUpdateRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from .common import ErrorResponse, HealthCheckResponse, PaginationResponse
from .notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteSearchRequest,
    NoteSearchResponse,
    NoteUpdate,
    ReminderSchema,
    ReorderRequest,
    ReorderResponse,
)
from .sharing import CollaboratorRequest, PublicNoteResponse

__all__ = [
    # Auth schemas
    "LoginRequest",
    "ProfileUpdateRequest",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListResponse",
    "NoteSearchRequest",
    "NoteSearchResponse",
    "ReminderSchema",
    "ReorderRequest",
    "ReorderResponse",
    # Sharing schemas
    "CollaboratorRequest",
    "PublicNoteResponse",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "HealthCheckResponse",
]
