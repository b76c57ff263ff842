"""Note repository for database operations.

Every note that leaves this repository has gone through the content hooks'
read side, and every content value that enters it through the write side.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..content_hooks import NoteContentHooks
from ..models.collaborator import NoteCollaborator
from ..models.base import utcnow
from ..models.note import Note

logger = logging.getLogger(__name__)


class NoteRepository:
    """Repository for note database operations."""

    def __init__(self, session: AsyncSession, hooks: NoteContentHooks):
        self.session = session
        self.hooks = hooks

    def _base_query(self):
        # populate_existing: reload stored ciphertext even if the note is already
        # in the identity map with decrypted content
        return (
            select(Note)
            .options(selectinload(Note.collaborators))
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def _accessible_by(user_id: UUID, email: Optional[str]):
        shared_ids = select(NoteCollaborator.note_id).where(NoteCollaborator.email == email)
        return or_(Note.owner_id == user_id, Note.id.in_(shared_ids))

    @staticmethod
    def _display_order():
        return (desc(Note.pinned), desc(Note.order), desc(Note.updated_at))

    async def create_note(self, note_data: dict) -> Note:
        """Create new note, collaborators given as a list of emails."""
        data = self.hooks.before_write(note_data)
        emails = data.pop("collaborators", None) or []

        note = Note(**data)
        note.collaborators = [NoteCollaborator(email=email) for email in emails]
        self.session.add(note)
        await self.session.commit()

        return await self.get_by_id(note.id)

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        """Get note by ID, content decrypted."""
        stmt = self._base_query().where(Note.id == note_id)
        result = await self.session.execute(stmt)
        return self.hooks.after_read(result.scalar_one_or_none())

    async def get_by_share_token(self, share_token: str) -> Optional[Note]:
        stmt = self._base_query().where(Note.share_token == share_token)
        result = await self.session.execute(stmt)
        return self.hooks.after_read(result.scalar_one_or_none())

    async def list_accessible(
        self,
        user_id: UUID,
        email: Optional[str],
        archived: Optional[bool] = False,
        pinned: Optional[bool] = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[List[Note], int]:
        """List owned and collaborating notes in display order, with total count."""
        conditions = [self._accessible_by(user_id, email)]
        if archived is not None:
            conditions.append(Note.archived == archived)
        if pinned is not None:
            conditions.append(Note.pinned == pinned)

        count_stmt = select(func.count(Note.id)).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            self._base_query()
            .where(*conditions)
            .order_by(*self._display_order())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return self.hooks.after_read_many(result.scalars().all()), total

    async def list_accessible_all(
        self,
        user_id: UUID,
        email: Optional[str],
        archived: Optional[bool] = None,
        pinned: Optional[bool] = None,
    ) -> List[Note]:
        """All accessible notes matching the flag filters, unpaginated, for search."""
        stmt = self._base_query().where(self._accessible_by(user_id, email))
        if archived is not None:
            stmt = stmt.where(Note.archived == archived)
        if pinned is not None:
            stmt = stmt.where(Note.pinned == pinned)
        stmt = stmt.order_by(*self._display_order())

        result = await self.session.execute(stmt)
        return self.hooks.after_read_many(result.scalars().all())

    async def get_max_order(self, owner_id: UUID) -> Optional[int]:
        stmt = select(func.max(Note.order)).where(Note.owner_id == owner_id)
        return (await self.session.execute(stmt)).scalar()

    async def update_note(self, note: Note, update_data: dict) -> Note:
        """Apply field changes to a loaded note and return it re-read."""
        data = self.hooks.before_write(update_data)
        for key, value in data.items():
            setattr(note, key, value)

        await self.session.commit()
        return await self.get_by_id(note.id)

    async def set_order(self, owner_id: UUID, note_id: UUID, order: int) -> bool:
        """Set display order of one owned note in its own transaction."""
        stmt = (
            update(Note)
            .where(Note.id == note_id, Note.owner_id == owner_id)
            .values(order=order)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        if not result.rowcount:
            logger.debug("Skipped reorder of note %s, not owned by %s", note_id, owner_id)
        return result.rowcount > 0

    async def delete_note(self, note: Note) -> None:
        logger.info("Deleting note %s with %d collaborators", note.id, len(note.collaborators))
        await self.session.delete(note)
        await self.session.commit()

    async def add_collaborator(self, note: Note, email: str) -> Note:
        """Add email to collaborators, no-op if already there."""
        if email not in note.collaborator_emails:
            note.collaborators.append(NoteCollaborator(email=email))
            # collaborator changes count as a note mutation
            note.updated_at = utcnow()
            await self.session.commit()
        return await self.get_by_id(note.id)

    async def remove_collaborator(self, note: Note, email: str) -> Note:
        """Remove email from collaborators, no-op if absent."""
        remaining = [c for c in note.collaborators if c.email != email]
        if len(remaining) != len(note.collaborators):
            note.collaborators = remaining
            note.updated_at = utcnow()
            await self.session.commit()
        return await self.get_by_id(note.id)

    async def rollback(self) -> None:
        await self.session.rollback()

    # raw access for maintenance commands, content left as stored

    async def list_all_raw(self) -> List[Note]:
        result = await self.session.execute(
            select(Note).order_by(Note.created_at).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def set_raw_content(self, note_id: UUID, content: str) -> None:
        """Overwrite stored content without touching updated_at."""
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(content=content, updated_at=Note.updated_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

    async def list_public_without_token(self) -> List[Note]:
        stmt = select(Note).where(
            Note.is_public.is_(True), or_(Note.share_token.is_(None), Note.share_token == "")
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_share_token(self, note_id: UUID, share_token: str) -> None:
        """Store a share token and commit, leaving updated_at alone."""
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(share_token=share_token, updated_at=Note.updated_at)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        await self.session.commit()

    async def commit(self) -> None:
        await self.session.commit()

