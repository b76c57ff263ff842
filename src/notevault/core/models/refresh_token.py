# Refresh tokens handed out at login
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .user import User


class RefreshToken(BaseModel):
    """Opaque refresh token bound to a user."""

    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    revoked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index("idx_refresh_tokens_user_id", "user_id"),
        Index("idx_refresh_tokens_user_active", "user_id", "is_active"),
    )

    def __repr__(self) -> str:
        token_preview = f"{self.token[:8]}..." if self.token else "None"
        return f"<RefreshToken(user_id={self.user_id}, token={token_preview}, active={self.is_active})>"

    @classmethod
    def issue(cls, user_id: uuid.UUID, token: Optional[str] = None, expires_days: int = 7) -> "RefreshToken":
        """Create a fresh token for user, valid for expires_days."""
        return cls(
            token=token or secrets.token_urlsafe(32),
            user_id=user_id,
            expires_at=datetime.now(timezone.utc) + timedelta(days=expires_days),
        )

    @property
    def is_expired(self) -> bool:
        expires_at = self.expires_at
        if expires_at is None:
            return True
        # SQLite hands back naive datetimes
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) > expires_at

    @property
    def is_valid(self) -> bool:
        return self.is_active and not self.is_expired

    def revoke(self) -> None:
        self.is_active = False
        self.revoked_at = datetime.now(timezone.utc)
