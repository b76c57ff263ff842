# Note collaborators, granted by email
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note


class NoteCollaborator(BaseModel):
    """Email address allowed to read and edit (not delete) a note.

    The email doesn't have to belong to a registered user yet; access kicks
    in once someone signs up with it.
    """

    __tablename__ = "note_collaborators"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    # stored normalized (trimmed, lower-case)
    email: Mapped[str] = mapped_column(String(255), nullable=False)

    note: Mapped["Note"] = relationship("Note", back_populates="collaborators")

    __table_args__ = (
        UniqueConstraint("note_id", "email", name="uq_note_collaborators_note_email"),
        Index("idx_note_collaborators_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<NoteCollaborator(note_id={self.note_id}, email='{self.email}')>"
