"""Search API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.access import Principal
from ..core.schemas.notes import NoteSearchRequest, NoteSearchResponse
from ..core.services import SearchService
from ..database import get_db_session
from ..middleware.auth import get_current_principal

# mounted before the notes router so /notes/search isn't taken for a note id
router = APIRouter(prefix="/notes", tags=["search"])


@router.get("/search", response_model=NoteSearchResponse)
async def search_notes(
    search: Optional[str] = Query(None, description="Text to look for"),
    tags: Optional[str] = Query(None, description="Comma-separated tags, any may match"),
    archived: Optional[bool] = Query(False),
    pinned: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Search accessible notes by text and tags."""
    request = NoteSearchRequest.from_query(search, tags, archived, pinned, page, limit)
    search_service = SearchService(session, settings)
    return await search_service.search_notes(principal, request)
