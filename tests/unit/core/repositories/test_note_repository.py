"""NoteRepository against SQLite: encryption at rest, access filters, ordering."""

import uuid

import pytest
from sqlalchemy import select

from src.notevault.core.content_hooks import NoteContentHooks
from src.notevault.core.models import Note, NoteCollaborator
from src.notevault.core.repositories.note_repository import NoteRepository
from src.notevault.security.cipher import looks_encrypted


@pytest.fixture
def repo(test_session, test_settings):
    return NoteRepository(test_session, NoteContentHooks(test_settings.encryption_key))


async def stored_content(session, note_id):
    result = await session.execute(select(Note.content).where(Note.id == note_id))
    return result.scalar_one()


async def make(repo, owner, **overrides):
    data = {"title": "Note", "content": "body", "owner_id": owner.id}
    data.update(overrides)
    return await repo.create_note(data)


async def test_create_stores_ciphertext_and_returns_plaintext(repo, test_session, owner):
    note = await make(repo, owner, content="my secret")

    assert note.content == "my secret"
    raw = await stored_content(test_session, note.id)
    assert raw != "my secret"
    assert looks_encrypted(raw)


async def test_empty_content_is_stored_as_is(repo, test_session, owner):
    note = await make(repo, owner, content="")
    assert await stored_content(test_session, note.id) == ""
    assert note.content == ""


async def test_create_with_collaborators(repo, owner):
    note = await make(repo, owner, collaborators=["bia@example.com", "dan@example.com"])
    assert note.collaborator_emails == ["bia@example.com", "dan@example.com"]


async def test_non_content_update_leaves_ciphertext_untouched(repo, test_session, owner):
    note = await make(repo, owner, content="keep me")
    before = await stored_content(test_session, note.id)

    updated = await repo.update_note(note, {"title": "Renamed", "color": "#abcdef"})

    assert updated.title == "Renamed"
    assert updated.content == "keep me"
    assert await stored_content(test_session, note.id) == before


async def test_content_update_is_reencrypted(repo, test_session, owner):
    note = await make(repo, owner, content="v1")
    before = await stored_content(test_session, note.id)

    updated = await repo.update_note(note, {"content": "v2"})

    after = await stored_content(test_session, note.id)
    assert updated.content == "v2"
    assert looks_encrypted(after)
    assert after != before


async def test_rereading_does_not_double_decrypt(repo, owner):
    note = await make(repo, owner, content="stable")
    again = await repo.get_by_id(note.id)
    assert again.content == "stable"
    assert (await repo.get_by_id(note.id)).content == "stable"


async def test_plaintext_with_marker_prefix_survives(repo, test_session, owner):
    # already "encrypted"-looking text isn't encrypted again and can't be decrypted
    note = await make(repo, owner, content="U2FsdGVk... not really")
    assert note.content == "U2FsdGVk... not really"
    assert await stored_content(test_session, note.id) == "U2FsdGVk... not really"


async def test_list_accessible_includes_owned_and_shared(repo, owner, collaborator, stranger):
    await make(repo, owner, title="mine")
    await make(repo, stranger, title="shared with ana", collaborators=["ana@example.com"])
    await make(repo, stranger, title="private")

    notes, total = await repo.list_accessible(owner.id, owner.email)

    assert total == 2
    assert {n.title for n in notes} == {"mine", "shared with ana"}
    assert all(n.content == "body" for n in notes)


async def test_list_accessible_filters_and_order(repo, owner):
    a = await make(repo, owner, title="a", order=1)
    b = await make(repo, owner, title="b", order=5)
    c = await make(repo, owner, title="c", order=0, pinned=True)
    await make(repo, owner, title="gone", archived=True)

    notes, total = await repo.list_accessible(owner.id, owner.email)
    assert total == 3
    assert [n.id for n in notes] == [c.id, b.id, a.id]

    archived, _ = await repo.list_accessible(owner.id, owner.email, archived=True)
    assert [n.title for n in archived] == ["gone"]

    pinned, _ = await repo.list_accessible(owner.id, owner.email, pinned=True)
    assert [n.title for n in pinned] == ["c"]

    everything, total_all = await repo.list_accessible(owner.id, owner.email, archived=None)
    assert total_all == 4
    assert len(everything) == 4


async def test_list_accessible_paginates(repo, owner):
    for i in range(5):
        await make(repo, owner, title=f"n{i}", order=i)

    page1, total = await repo.list_accessible(owner.id, owner.email, page=1, limit=2)
    page3, _ = await repo.list_accessible(owner.id, owner.email, page=3, limit=2)

    assert total == 5
    assert [n.title for n in page1] == ["n4", "n3"]
    assert [n.title for n in page3] == ["n0"]


async def test_get_max_order(repo, owner, stranger):
    assert await repo.get_max_order(owner.id) is None
    await make(repo, owner, order=3)
    await make(repo, owner, order=7)
    await make(repo, stranger, order=99)
    assert await repo.get_max_order(owner.id) == 7


async def test_set_order_only_for_owner(repo, owner, stranger):
    note = await make(repo, owner, order=0)

    assert await repo.set_order(owner.id, note.id, 10) is True
    assert await repo.set_order(stranger.id, note.id, 20) is False
    assert await repo.set_order(owner.id, uuid.uuid4(), 30) is False

    assert (await repo.get_by_id(note.id)).order == 10


async def test_add_and_remove_collaborator(repo, test_session, owner):
    note = await make(repo, owner)

    note = await repo.add_collaborator(note, "bia@example.com")
    note = await repo.add_collaborator(note, "bia@example.com")
    assert note.collaborator_emails == ["bia@example.com"]

    note = await repo.remove_collaborator(note, "bia@example.com")
    note = await repo.remove_collaborator(note, "nobody@example.com")
    assert note.collaborator_emails == []

    rows = (await test_session.execute(select(NoteCollaborator))).scalars().all()
    assert rows == []


async def test_get_by_share_token(repo, owner):
    note = await make(repo, owner, share_token="tok-1", is_public=True)
    found = await repo.get_by_share_token("tok-1")
    assert found.id == note.id
    assert await repo.get_by_share_token("nope") is None


async def test_delete_note_cascades_collaborators(repo, test_session, owner):
    note = await make(repo, owner, collaborators=["bia@example.com"])
    await repo.delete_note(note)

    assert await repo.get_by_id(note.id) is None
    assert (await test_session.execute(select(NoteCollaborator))).scalars().all() == []


async def test_raw_helpers(repo, test_session, owner):
    public = await make(repo, owner, is_public=True)
    await make(repo, owner, is_public=True, share_token="has-one")
    await make(repo, owner)

    missing = await repo.list_public_without_token()
    assert [n.id for n in missing] == [public.id]

    await repo.set_share_token(public.id, "fresh")
    assert await repo.list_public_without_token() == []

    await repo.set_raw_content(public.id, "raw text")
    await repo.commit()
    assert await stored_content(test_session, public.id) == "raw text"

    raw = await repo.list_all_raw()
    assert len(raw) == 3
