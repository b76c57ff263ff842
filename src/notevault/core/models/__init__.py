"""
Database models for NoteVault.

Models included:
    - User: account with email/password authentication
    - Note: note with encrypted content, display state and share link
    - NoteCollaborator: email granted edit access to a note
    - RefreshToken: login refresh tokens
"""

from .base import BaseModel
from .collaborator import NoteCollaborator
from .note import Note
from .refresh_token import RefreshToken
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "NoteCollaborator",
    "RefreshToken",
]
