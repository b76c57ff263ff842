"""MaintenanceService: encrypting legacy rows, auditing and share token back-fill."""

import pytest
from sqlalchemy import select

from src.notevault.core import content_hooks as hooks_module
from src.notevault.core.models import Note
from src.notevault.core.services import maintenance_service as maintenance_module
from src.notevault.core.services.maintenance_service import MaintenanceService
from src.notevault.security.cipher import CipherError, decrypt, encrypt, looks_encrypted


@pytest.fixture
def service(test_session, test_settings):
    return MaintenanceService(test_session, test_settings)


async def add_raw(session, owner, content, **kw):
    # bypasses the repository so content lands exactly as given
    note = Note(title="raw", content=content, owner_id=owner.id, **kw)
    session.add(note)
    await session.commit()
    return note.id


async def raw_content(session, note_id):
    return (await session.execute(select(Note.content).where(Note.id == note_id))).scalar_one()


async def test_encrypt_existing_notes(service, test_session, test_settings, owner):
    key = test_settings.encryption_key
    plain_id = await add_raw(test_session, owner, "legacy plaintext")
    cipher_id = await add_raw(test_session, owner, encrypt("already", key))
    await add_raw(test_session, owner, "")

    report = await service.encrypt_existing_notes()

    assert report.total == 3
    assert report.encrypted == 1
    assert report.already_encrypted == 1
    assert report.errors == []
    stored = await raw_content(test_session, plain_id)
    assert looks_encrypted(stored)
    assert decrypt(stored, key) == "legacy plaintext"
    assert decrypt(await raw_content(test_session, cipher_id), key) == "already"

    # second run has nothing left to do
    again = await service.encrypt_existing_notes()
    assert again.encrypted == 0
    assert again.already_encrypted == 2


async def test_encrypt_existing_keeps_updated_at(service, test_session, owner):
    note_id = await add_raw(test_session, owner, "legacy")
    before = (await test_session.execute(select(Note.updated_at).where(Note.id == note_id))).scalar_one()

    await service.encrypt_existing_notes()

    after = (await test_session.execute(select(Note.updated_at).where(Note.id == note_id))).scalar_one()
    assert after == before


async def test_encrypt_existing_reports_failures(service, test_session, owner, monkeypatch):
    note_id = await add_raw(test_session, owner, "legacy")

    def broken_encrypt(content, key):
        raise CipherError("no entropy")

    monkeypatch.setattr(hooks_module, "encrypt", broken_encrypt)

    report = await service.encrypt_existing_notes()

    assert report.encrypted == 0
    assert report.errors == [note_id]
    assert await raw_content(test_session, note_id) == "legacy"


async def test_audit_encryption(service, test_session, test_settings, owner):
    ok_id = await add_raw(test_session, owner, encrypt("fine", test_settings.encryption_key))
    plain_id = await add_raw(test_session, owner, "plain")
    fake_id = await add_raw(test_session, owner, "U2FsdGVk... typed by hand")

    report = await service.audit_encryption()

    assert report.total == 3
    assert report.ok == 1
    assert report.plaintext == [plain_id]
    assert report.undecryptable == [fake_id]
    assert ok_id not in report.undecryptable


async def test_fix_missing_share_tokens(service, test_session, owner):
    missing_id = await add_raw(test_session, owner, "x", is_public=True)
    empty_id = await add_raw(test_session, owner, "y", is_public=True, share_token="")
    await add_raw(test_session, owner, "z", is_public=True, share_token="kept")
    await add_raw(test_session, owner, "w")

    report = await service.fix_missing_share_tokens()

    assert report.found == 2
    assert report.fixed == 2
    assert report.failed == []
    tokens = (
        await test_session.execute(select(Note.share_token).where(Note.id.in_([missing_id, empty_id])))
    ).scalars().all()
    assert all(len(token) == 64 for token in tokens)
    assert (await service.fix_missing_share_tokens()).found == 0


async def test_fix_share_token_gives_up_on_collisions(service, test_session, owner, monkeypatch):
    await add_raw(test_session, owner, "a", is_public=True, share_token="taken")
    missing_id = await add_raw(test_session, owner, "b", is_public=True)
    monkeypatch.setattr(maintenance_module, "generate_share_token", lambda: "taken")

    report = await service.fix_missing_share_tokens()

    assert report.found == 1
    assert report.fixed == 0
    assert report.failed == [missing_id]
