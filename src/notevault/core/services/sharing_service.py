"""Sharing service: collaborators, public toggle and share tokens."""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security.share_token import generate_share_token
from ..access import NoteAction, Principal, can_read_public, normalize_email
from ..content_hooks import NoteContentHooks
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteResponse
from ..schemas.sharing import PublicNoteResponse
from .interfaces import ISharingService
from .note_service import NOT_FOUND, NOT_FOUND_OR_NOT_OWNED, NoteAccessMixin

logger = logging.getLogger(__name__)


class SharingService(NoteAccessMixin, ISharingService):
    """Sharing service implementation."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.note_repo = NoteRepository(session, NoteContentHooks(self.settings.encryption_key))

    async def add_collaborator(self, note_id: UUID, principal: Principal, email: str) -> NoteResponse:
        note = await self._get_authorized_note(note_id, principal, NoteAction.MANAGE_COLLABORATORS)
        note = await self.note_repo.add_collaborator(note, normalize_email(email))
        logger.info("Owner %s added a collaborator to note %s", principal.user_id, note_id)
        return self._to_response(note, principal)

    async def remove_collaborator(self, note_id: UUID, principal: Principal, email: str) -> NoteResponse:
        note = await self._get_authorized_note(note_id, principal, NoteAction.MANAGE_COLLABORATORS)
        note = await self.note_repo.remove_collaborator(note, normalize_email(email))
        logger.info("Owner %s removed a collaborator from note %s", principal.user_id, note_id)
        return self._to_response(note, principal)

    async def toggle_public(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Flip public status. The first publish assigns a share token, later
        toggles keep it, so an old link works again after re-publishing."""
        note = await self._get_authorized_note(note_id, principal, NoteAction.MANAGE_SHARING)
        make_public = not note.is_public

        if make_public and not note.share_token:
            note = await self._assign_share_token(note, {"is_public": True})
        else:
            note = await self.note_repo.update_note(note, {"is_public": make_public})

        logger.info("Owner %s set note %s public=%s", principal.user_id, note_id, make_public)
        return self._to_response(note, principal)

    async def regenerate_share_token(self, note_id: UUID, principal: Principal) -> NoteResponse:
        """Issue a fresh token; links with the previous one stop working."""
        note = await self._get_authorized_note(note_id, principal, NoteAction.MANAGE_SHARING)
        note = await self._assign_share_token(note, {})
        logger.info("Owner %s regenerated share token of note %s", principal.user_id, note_id)
        return self._to_response(note, principal)

    async def get_public_note(self, share_token: str) -> PublicNoteResponse:
        note = await self.note_repo.get_by_share_token(share_token)
        if not can_read_public(note, share_token):
            if note is not None:
                logger.info("Share link used for note %s which is not public", note.id)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
        return PublicNoteResponse.model_validate(note)

    async def _assign_share_token(self, note: Note, values: Dict[str, Any]) -> Note:
        """Save a new random share token (plus values), retrying on collisions."""
        note_id = note.id
        max_attempts = self.settings.share_token_max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                return await self.note_repo.update_note(note, {**values, "share_token": generate_share_token()})
            except IntegrityError:
                await self.note_repo.rollback()
                logger.warning(
                    "Share token collision for note %s (attempt %d/%d)", note_id, attempt, max_attempts
                )
                note = await self.note_repo.get_by_id(note_id)
                if note is None:
                    raise HTTPException(
                        status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_OR_NOT_OWNED
                    )

        logger.error("Giving up assigning a share token to note %s", note_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not assign share token"
        )
