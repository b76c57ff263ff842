# Note model for user content
import uuid
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID, JSONList

if TYPE_CHECKING:
    from .collaborator import NoteCollaborator
    from .user import User


class Note(BaseModel):
    """Note with (encrypted) content, display state and sharing info.

    ``content`` holds ciphertext at rest. Repositories decrypt it on the way
    out without marking the row dirty, so plaintext is never flushed back.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    # display state
    archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    color: Mapped[str] = mapped_column(String(7), default="#ffffff", nullable=False)
    # higher order = shown first
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    tags: Mapped[List[str]] = mapped_column(JSONList, default=list, nullable=False)
    reminders: Mapped[List[Dict[str, Any]]] = mapped_column(JSONList, default=list, nullable=False)

    # public sharing - token survives unpublishing until regenerated
    is_public: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    share_token: Mapped[Optional[str]] = mapped_column(String(128), unique=True, nullable=True)

    # owner reference
    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["User"] = relationship("User", back_populates="notes")

    collaborators: Mapped[List["NoteCollaborator"]] = relationship(
        "NoteCollaborator",
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="NoteCollaborator.created_at",
    )

    __table_args__ = (
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_owner_order", "owner_id", "order"),
        Index("idx_notes_pinned_updated", "pinned", "updated_at"),
        Index("idx_notes_archived_updated", "archived", "updated_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', owner_id={self.owner_id})>"

    @property
    def collaborator_emails(self) -> List[str]:
        return [c.email for c in self.collaborators]

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.owner_id == user_id
