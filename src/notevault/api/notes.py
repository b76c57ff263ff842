"""Notes API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.access import Principal
from ..core.schemas.common import ErrorResponse
from ..core.schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteUpdate,
    ReorderRequest,
    ReorderResponse,
)
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_current_principal

router = APIRouter(
    prefix="/notes",
    tags=["notes"],
    responses={404: {"model": ErrorResponse, "description": "Note not found or not accessible"}},
)


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Create a new note."""
    note_service = NoteService(session, settings)
    return await note_service.create_note(principal, request)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    archived: Optional[bool] = Query(False),
    pinned: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """List owned and collaborating notes, pinned first."""
    note_service = NoteService(session, settings)
    return await note_service.list_notes(
        principal, archived=archived, pinned=pinned, page=page, per_page=limit
    )


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_notes(
    request: ReorderRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Reorder notes; the first id is displayed first."""
    note_service = NoteService(session, settings)
    return await note_service.reorder_notes(principal, request.note_ids)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Get a specific note."""
    note_service = NoteService(session, settings)
    return await note_service.get_note(note_id, principal)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Update a note (owner or collaborator)."""
    note_service = NoteService(session, settings)
    return await note_service.update_note(note_id, principal, request)


@router.patch("/{note_id}/pin", response_model=NoteResponse)
async def toggle_pin(
    note_id: UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    note_service = NoteService(session, settings)
    return await note_service.toggle_pin(note_id, principal)


@router.patch("/{note_id}/archive", response_model=NoteResponse)
async def toggle_archive(
    note_id: UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    note_service = NoteService(session, settings)
    return await note_service.toggle_archive(note_id, principal)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Delete a note (owner only)."""
    note_service = NoteService(session, settings)
    await note_service.delete_note(note_id, principal)
