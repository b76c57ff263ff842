"""Note service implementation."""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security.share_token import build_share_url
from ..access import NoteAction, Principal, is_allowed, normalize_email, resolve_role, touches_owner_only_fields
from ..content_hooks import NoteContentHooks
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteCreate, NoteListResponse, NoteResponse, NoteUpdate, ReorderResponse
from .interfaces import INoteService

logger = logging.getLogger(__name__)

NOT_FOUND = "Note not found"
NOT_FOUND_OR_NOT_OWNED = "Note not found or not owned by user"


def to_note_response(note: Note, principal: Principal, public_base_url: str) -> NoteResponse:
    """Build the API view of a note; share link details go to the owner only."""
    is_owner = note.owner_id == principal.user_id
    share_token = note.share_token if is_owner else None

    return NoteResponse(
        id=note.id,
        owner_id=note.owner_id,
        title=note.title,
        content=note.content,
        archived=note.archived,
        pinned=note.pinned,
        color=note.color,
        order=note.order,
        tags=list(note.tags or []),
        reminders=list(note.reminders or []),
        collaborators=note.collaborator_emails,
        is_public=note.is_public,
        is_owner=is_owner,
        share_token=share_token,
        share_url=build_share_url(public_base_url, share_token) if share_token else None,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


class NoteAccessMixin:
    """Loads notes on behalf of a principal and enforces the access rules.

    A missing note and a note the principal may not touch look the same to the
    client; only the logs tell them apart.
    """

    note_repo: NoteRepository
    settings: Settings

    async def _get_authorized_note(self, note_id: UUID, principal: Principal, action: NoteAction) -> Note:
        detail = NOT_FOUND if action == NoteAction.READ else NOT_FOUND_OR_NOT_OWNED

        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            logger.info("Note %s not found (action=%s)", note_id, action.value)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

        if not is_allowed(note, principal, action):
            logger.warning(
                "User %s denied %s on note %s (role=%s)",
                principal.user_id,
                action.value,
                note_id,
                resolve_role(note, principal).value,
            )
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

        return note

    def _to_response(self, note: Note, principal: Principal) -> NoteResponse:
        return to_note_response(note, principal, self.settings.public_base_url)


class NoteService(NoteAccessMixin, INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.note_repo = NoteRepository(session, NoteContentHooks(self.settings.encryption_key))

    async def create_note(self, principal: Principal, request: NoteCreate) -> NoteResponse:
        """Create new note; it goes on top of the owner's notes."""
        max_order = await self.note_repo.get_max_order(principal.user_id)

        note_data = request.model_dump(mode="json", exclude={"collaborators"})
        note_data["owner_id"] = principal.user_id
        note_data["order"] = 0 if max_order is None else max_order + 1
        # set semantics, first occurrence keeps its place
        note_data["collaborators"] = list(
            dict.fromkeys(normalize_email(email) for email in request.collaborators)
        )

        note = await self.note_repo.create_note(note_data)
        logger.info("User %s created note %s", principal.user_id, note.id)
        return self._to_response(note, principal)

    async def get_note(self, note_id: UUID, principal: Principal) -> NoteResponse:
        note = await self._get_authorized_note(note_id, principal, NoteAction.READ)
        return self._to_response(note, principal)

    async def list_notes(
        self,
        principal: Principal,
        archived: Optional[bool] = False,
        pinned: Optional[bool] = None,
        page: int = 1,
        per_page: int = 50,
    ) -> NoteListResponse:
        """List owned and collaborating notes, pinned first then by order."""
        per_page = min(max(per_page, 1), self.settings.max_page_size)
        notes, total = await self.note_repo.list_accessible(
            principal.user_id,
            principal.email,
            archived=archived,
            pinned=pinned,
            page=page,
            limit=per_page,
        )
        items = [self._to_response(note, principal) for note in notes]
        return NoteListResponse.create(items=items, total=total, page=page, per_page=per_page)

    async def update_note(self, note_id: UUID, principal: Principal, request: NoteUpdate) -> NoteResponse:
        """Partial update by owner or collaborator.

        Collaborators can't change archived/pinned; such a request is refused
        like any other mutation they're not allowed to make.
        """
        update_data = request.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        note = await self._get_authorized_note(note_id, principal, NoteAction.UPDATE)

        if touches_owner_only_fields(update_data) and not is_allowed(note, principal, NoteAction.TOGGLE_FLAGS):
            logger.warning(
                "Collaborator %s tried to change owner-only fields of note %s", principal.user_id, note_id
            )
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_OR_NOT_OWNED)

        if not update_data:
            return self._to_response(note, principal)

        note = await self.note_repo.update_note(note, update_data)
        return self._to_response(note, principal)

    async def toggle_pin(self, note_id: UUID, principal: Principal) -> NoteResponse:
        note = await self._get_authorized_note(note_id, principal, NoteAction.TOGGLE_FLAGS)
        note = await self.note_repo.update_note(note, {"pinned": not note.pinned})
        return self._to_response(note, principal)

    async def toggle_archive(self, note_id: UUID, principal: Principal) -> NoteResponse:
        note = await self._get_authorized_note(note_id, principal, NoteAction.TOGGLE_FLAGS)
        note = await self.note_repo.update_note(note, {"archived": not note.archived})
        return self._to_response(note, principal)

    async def delete_note(self, note_id: UUID, principal: Principal) -> None:
        note = await self._get_authorized_note(note_id, principal, NoteAction.DELETE)
        await self.note_repo.delete_note(note)
        logger.info("User %s deleted note %s", principal.user_id, note_id)

    async def reorder_notes(self, principal: Principal, note_ids: List[UUID]) -> ReorderResponse:
        """Move note_ids above the owner's other notes, first id highest.

        Repeated ids count once, at their first position. Each note is updated
        in its own transaction; a failure part way leaves earlier notes
        reordered. Ids the principal doesn't own are skipped.
        """
        unique_ids = list(dict.fromkeys(note_ids))
        total = len(unique_ids)
        current_max = await self.note_repo.get_max_order(principal.user_id)
        base = (current_max if current_max is not None else -1) + 1

        reordered = 0
        for index, note_id in enumerate(unique_ids):
            if await self.note_repo.set_order(principal.user_id, note_id, base + total - index):
                reordered += 1

        logger.info("User %s reordered %d of %d notes", principal.user_id, reordered, total)
        return ReorderResponse(reordered=reordered, skipped=total - reordered)
