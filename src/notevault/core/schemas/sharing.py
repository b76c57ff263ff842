"""
Sharing schemas: collaborators and public links.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CollaboratorRequest(BaseModel):
    """Add a collaborator by email."""

    email: EmailStr = Field(description="Email to grant read and edit access")

    model_config = ConfigDict(json_schema_extra={"example": {"email": "bia@example.com"}})


class PublicNoteResponse(BaseModel):
    """What an anonymous share-link holder gets to see.

    No id, owner, order or collaborators.
    """

    title: str
    content: str
    color: str
    tags: List[str]
    is_public: bool
    share_token: Optional[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
