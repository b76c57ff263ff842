"""Sharing API endpoints: collaborators, public links and anonymous reads."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..core.access import Principal
from ..core.schemas.common import ErrorResponse
from ..core.schemas.notes import NoteResponse
from ..core.schemas.sharing import CollaboratorRequest, PublicNoteResponse
from ..core.services import SharingService
from ..database import get_db_session
from ..middleware.auth import get_current_principal

NOT_FOUND_RESPONSES = {404: {"model": ErrorResponse, "description": "Note not found or not accessible"}}

router = APIRouter(prefix="/notes", tags=["sharing"], responses=NOT_FOUND_RESPONSES)

# no authentication on this one
public_router = APIRouter(prefix="/public", tags=["public"], responses=NOT_FOUND_RESPONSES)


@router.post("/{note_id}/collaborators", response_model=NoteResponse)
async def add_collaborator(
    note_id: UUID,
    request: CollaboratorRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Grant an email read and edit access to a note."""
    sharing_service = SharingService(session, settings)
    return await sharing_service.add_collaborator(note_id, principal, request.email)


@router.delete("/{note_id}/collaborators/{email}", response_model=NoteResponse)
async def remove_collaborator(
    note_id: UUID,
    email: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Revoke a collaborator."""
    sharing_service = SharingService(session, settings)
    return await sharing_service.remove_collaborator(note_id, principal, email)


@router.patch("/{note_id}/public", response_model=NoteResponse)
async def toggle_public(
    note_id: UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Publish or unpublish a note."""
    sharing_service = SharingService(session, settings)
    return await sharing_service.toggle_public(note_id, principal)


@router.post("/{note_id}/share-token", response_model=NoteResponse)
async def regenerate_share_token(
    note_id: UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Replace the share token; old links stop working."""
    sharing_service = SharingService(session, settings)
    return await sharing_service.regenerate_share_token(note_id, principal)


@public_router.get("/{share_token}", response_model=PublicNoteResponse)
async def get_public_note(
    share_token: str,
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """Read a public note through its share link."""
    sharing_service = SharingService(session, settings)
    return await sharing_service.get_public_note(share_token)
