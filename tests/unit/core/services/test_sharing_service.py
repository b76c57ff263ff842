"""SharingService: collaborators, public toggle, share tokens and public reads."""

import pytest
from fastapi import HTTPException

from src.notevault.core.schemas.notes import NoteCreate
from src.notevault.core.services import sharing_service as sharing_module
from src.notevault.core.services.note_service import NoteService
from src.notevault.core.services.sharing_service import SharingService


@pytest.fixture
def notes(test_session, test_settings):
    return NoteService(session=test_session, settings=test_settings)


@pytest.fixture
def sharing(test_session, test_settings):
    return SharingService(session=test_session, settings=test_settings)


@pytest.fixture
async def note(notes, owner_principal):
    return await notes.create_note(owner_principal, NoteCreate(title="Shared", content="Secret body", tags=["a"]))


async def test_add_and_remove_collaborator(sharing, notes, note, owner_principal, collaborator_principal):
    updated = await sharing.add_collaborator(note.id, owner_principal, "  BIA@example.com ")
    assert updated.collaborators == ["bia@example.com"]
    assert updated.updated_at >= note.updated_at

    again = await sharing.add_collaborator(note.id, owner_principal, "bia@example.com")
    assert again.collaborators == ["bia@example.com"]

    # collaborator sees it now
    assert (await notes.get_note(note.id, collaborator_principal)).title == "Shared"

    removed = await sharing.remove_collaborator(note.id, owner_principal, "Bia@Example.com")
    assert removed.collaborators == []

    with pytest.raises(HTTPException):
        await notes.get_note(note.id, collaborator_principal)


async def test_only_owner_manages_sharing(sharing, note, owner_principal, collaborator_principal):
    await sharing.add_collaborator(note.id, owner_principal, "bia@example.com")

    calls = [
        lambda: sharing.add_collaborator(note.id, collaborator_principal, "dan@example.com"),
        lambda: sharing.remove_collaborator(note.id, collaborator_principal, "bia@example.com"),
        lambda: sharing.toggle_public(note.id, collaborator_principal),
        lambda: sharing.regenerate_share_token(note.id, collaborator_principal),
    ]
    for call in calls:
        with pytest.raises(HTTPException) as exc:
            await call()
        assert exc.value.status_code == 404
        assert exc.value.detail == "Note not found or not owned by user"


async def test_toggle_public_assigns_token_once(sharing, note, owner_principal):
    published = await sharing.toggle_public(note.id, owner_principal)
    token = published.share_token

    assert published.is_public is True
    assert token
    assert published.share_url == f"https://notes.example.com/public/{token}"

    unpublished = await sharing.toggle_public(note.id, owner_principal)
    assert unpublished.is_public is False
    assert unpublished.share_token == token

    republished = await sharing.toggle_public(note.id, owner_principal)
    assert republished.share_token == token


async def test_public_read(sharing, note, owner_principal):
    token = (await sharing.toggle_public(note.id, owner_principal)).share_token

    public = await sharing.get_public_note(token)
    assert public.title == "Shared"
    assert public.content == "Secret body"
    assert public.tags == ["a"]
    dumped = public.model_dump()
    assert "owner_id" not in dumped
    assert "collaborators" not in dumped

    await sharing.toggle_public(note.id, owner_principal)
    with pytest.raises(HTTPException) as exc:
        await sharing.get_public_note(token)
    assert exc.value.status_code == 404
    assert exc.value.detail == "Note not found"


async def test_unknown_token_is_not_found(sharing):
    with pytest.raises(HTTPException) as exc:
        await sharing.get_public_note("does-not-exist")
    assert exc.value.status_code == 404


async def test_regenerate_invalidates_old_link(sharing, note, owner_principal):
    old = (await sharing.toggle_public(note.id, owner_principal)).share_token
    new = (await sharing.regenerate_share_token(note.id, owner_principal)).share_token

    assert new != old
    with pytest.raises(HTTPException):
        await sharing.get_public_note(old)
    assert (await sharing.get_public_note(new)).title == "Shared"


async def test_token_collision_is_retried(sharing, notes, note, owner_principal, monkeypatch):
    other = await notes.create_note(owner_principal, NoteCreate(title="Other", content="x"))
    taken = (await sharing.toggle_public(other.id, owner_principal)).share_token

    tokens = iter([taken, "fresh-token"])
    monkeypatch.setattr(sharing_module, "generate_share_token", lambda: next(tokens))

    published = await sharing.toggle_public(note.id, owner_principal)

    assert published.share_token == "fresh-token"
    assert published.is_public is True


async def test_token_collision_gives_up(sharing, notes, note, owner_principal, monkeypatch):
    other = await notes.create_note(owner_principal, NoteCreate(title="Other", content="x"))
    taken = (await sharing.toggle_public(other.id, owner_principal)).share_token
    monkeypatch.setattr(sharing_module, "generate_share_token", lambda: taken)

    with pytest.raises(HTTPException) as exc:
        await sharing.regenerate_share_token(note.id, owner_principal)

    assert exc.value.status_code == 500
    reloaded = await sharing.note_repo.get_by_id(note.id)
    assert reloaded.share_token is None
    assert reloaded.is_public is False
