"""Search service implementation.

Content is ciphertext at rest, so the database only narrows by access and
flags; text and tag matching run on the decrypted notes.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..access import Principal
from ..content_hooks import NoteContentHooks
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..schemas.notes import NoteSearchRequest, NoteSearchResponse
from .interfaces import ISearchService
from .note_service import to_note_response

logger = logging.getLogger(__name__)


def matches_text(note: Note, text: Optional[str]) -> bool:
    """Case-insensitive substring match over title, content and tags."""
    if not text:
        return True
    needle = text.lower()
    haystack = [note.title or "", note.content or "", *(note.tags or [])]
    return any(needle in value.lower() for value in haystack)


def matches_tags(note: Note, tags: Iterable[str]) -> bool:
    """True if the note has any of the tags (case-insensitive)."""
    wanted = {tag.lower() for tag in tags}
    if not wanted:
        return True
    return any(tag.lower() in wanted for tag in (note.tags or []))


class SearchService(ISearchService):
    """Search service implementation."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.note_repo = NoteRepository(session, NoteContentHooks(self.settings.encryption_key))

    async def search_notes(self, principal: Principal, request: NoteSearchRequest) -> NoteSearchResponse:
        """Search accessible notes, keeping the listing's display order."""
        notes = await self.note_repo.list_accessible_all(
            principal.user_id,
            principal.email,
            archived=request.archived,
            pinned=request.pinned,
        )

        matched: List[Note] = [
            note for note in notes if matches_text(note, request.search) and matches_tags(note, request.tags)
        ]
        logger.debug(
            "Search by %s matched %d of %d candidate notes", principal.user_id, len(matched), len(notes)
        )

        start = (request.page - 1) * request.per_page
        page_items = matched[start:start + request.per_page]

        return NoteSearchResponse.create(
            items=[to_note_response(note, principal, self.settings.public_base_url) for note in page_items],
            total=len(matched),
            page=request.page,
            per_page=request.per_page,
            search=request.search,
            tags=request.tags,
        )
