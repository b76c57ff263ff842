"""
Note management schemas.

These schemas define the API contracts for note CRUD, listing, search and
reordering. ``content`` is always plaintext here; encryption happens below
the service layer.
"""

import re
import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import PaginationResponse

HEX_COLOR = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
MAX_TAG_LENGTH = 50


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    # duplicates are kept, order preserved
    if tags is None:
        return tags
    cleaned = [tag.strip() for tag in tags]
    for tag in cleaned:
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags can't exceed {MAX_TAG_LENGTH} characters")
    return cleaned


def _check_color(color: Optional[str]) -> Optional[str]:
    if color is not None and not HEX_COLOR.match(color):
        raise ValueError("Color must be a hex code like #fff or #ffffff")
    return color


def _strip_required(value: Optional[str], field: str) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError(f"{field} cannot be empty")
    return value


class ReminderSchema(BaseModel):
    """A reminder attached to a note."""

    id: str = Field(min_length=1, description="Client generated reminder id")
    date_time: datetime = Field(description="When to remind, ISO-8601")
    text: str = Field(min_length=1, max_length=500, description="Reminder text")


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(min_length=1, description="Note content")
    archived: bool = Field(default=False)
    pinned: bool = Field(default=False)
    color: str = Field(default="#ffffff", description="Hex display color")
    tags: List[str] = Field(default_factory=list, description="Note tags")
    reminders: List[ReminderSchema] = Field(default_factory=list)
    collaborators: List[EmailStr] = Field(
        default_factory=list, description="Emails allowed to read and edit the note"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v, "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return _strip_required(v, "Content")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return _check_color(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Groceries",
                "content": "Milk, eggs, coffee",
                "color": "#fff475",
                "tags": ["home", "errands"],
                "reminders": [
                    {"id": "r1", "date_time": "2026-03-02T18:00:00Z", "text": "Before 7pm"}
                ],
                "collaborators": ["bia@example.com"],
            }
        }
    )


class NoteUpdate(BaseModel):
    """Partial note update; only fields sent are changed."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    archived: Optional[bool] = None
    pinned: Optional[bool] = None
    color: Optional[str] = None
    tags: Optional[List[str]] = None
    reminders: Optional[List[ReminderSchema]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v, "Title")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return _strip_required(v, "Content")

    @field_validator("color")
    @classmethod
    def validate_color(cls, v):
        return _check_color(v)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _clean_tags(v)


class NoteResponse(BaseModel):
    """Note as seen by its owner or a collaborator."""

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    content: str
    archived: bool
    pinned: bool
    color: str
    order: int
    tags: List[str]
    reminders: List[ReminderSchema]
    collaborators: List[str]
    is_public: bool
    is_owner: bool = Field(description="Whether the current user owns this note")

    # only filled in for the owner
    share_token: Optional[str] = None
    share_url: Optional[str] = None

    created_at: datetime
    updated_at: datetime


class NoteListResponse(PaginationResponse[NoteResponse]):
    """Paginated note list response."""


class NoteSearchRequest(BaseModel):
    """Note search parameters."""

    search: Optional[str] = Field(default=None, description="Text to look for")
    tags: List[str] = Field(default_factory=list, description="Match notes with any of these tags")
    archived: Optional[bool] = Field(default=False)
    pinned: Optional[bool] = Field(default=None)
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=50, ge=1, le=100)

    @classmethod
    def from_query(
        cls,
        search: Optional[str],
        tags: Optional[str],
        archived: Optional[bool],
        pinned: Optional[bool],
        page: int,
        per_page: int,
    ) -> "NoteSearchRequest":
        """Build from query string values, tags given comma-separated."""
        tag_list = [t.strip() for t in (tags or "").split(",") if t.strip()]
        return cls(
            search=search.strip() if search and search.strip() else None,
            tags=tag_list,
            archived=archived,
            pinned=pinned,
            page=page,
            per_page=per_page,
        )


class NoteSearchResponse(PaginationResponse[NoteResponse]):
    """Note search results response."""

    search: Optional[str] = Field(default=None, description="Search text used")
    tags: List[str] = Field(default_factory=list, description="Tag filter used")


class ReorderRequest(BaseModel):
    """New display order, first id shown first."""

    note_ids: List[uuid.UUID] = Field(min_length=1, max_length=1000)


class ReorderResponse(BaseModel):
    reordered: int = Field(description="Notes whose order was updated")
    skipped: int = Field(description="Ids ignored because the caller doesn't own them")
