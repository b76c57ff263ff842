"""Unit tests for core/content_hooks.py"""

import logging
import uuid

from sqlalchemy import inspect

from src.notevault.core.content_hooks import NoteContentHooks
from src.notevault.core.models import Note
from src.notevault.security.cipher import encrypt, looks_encrypted

KEY = "hooks-test-key"


def test_before_write_encrypts_content_only():
    hooks = NoteContentHooks(KEY)
    values = {"title": "T", "content": "secret"}

    prepared = hooks.before_write(values)

    assert prepared["title"] == "T"
    assert looks_encrypted(prepared["content"])
    # input left alone
    assert values["content"] == "secret"


def test_before_write_without_content_is_noop():
    hooks = NoteContentHooks(KEY)
    values = {"title": "T"}
    assert hooks.before_write(values) is values


def test_encrypt_skips_empty_and_ciphertext():
    hooks = NoteContentHooks(KEY)
    token = encrypt("x", KEY)
    assert hooks.encrypt_content("") == ""
    assert hooks.encrypt_content(None) is None
    assert hooks.encrypt_content(token) == token


def test_encrypt_failure_stores_plaintext(caplog):
    hooks = NoteContentHooks("")
    with caplog.at_level(logging.ERROR):
        assert hooks.encrypt_content("hello") == "hello"
    assert "Failed to encrypt" in caplog.text


def test_decrypt_content_round_trip():
    hooks = NoteContentHooks(KEY)
    assert hooks.decrypt_content(hooks.encrypt_content("olá mundo")) == "olá mundo"


def test_decrypt_plaintext_passthrough():
    hooks = NoteContentHooks(KEY)
    assert hooks.decrypt_content("plain") == "plain"
    assert hooks.decrypt_content("") == ""
    assert hooks.decrypt_content(None) is None


def test_decrypt_fake_prefix_returns_stored_value(caplog):
    hooks = NoteContentHooks(KEY)
    stored = "U2FsdGVk... this is just text"
    with caplog.at_level(logging.WARNING):
        assert hooks.decrypt_content(stored, "n1") == stored
    assert "n1" in caplog.text


def test_decrypt_wrong_key_does_not_raise():
    token = encrypt("secret", KEY)
    result = NoteContentHooks("other-key").decrypt_content(token)
    assert result != "secret"


def test_after_read_swaps_content_without_dirtying():
    hooks = NoteContentHooks(KEY)
    note = Note(id=uuid.uuid4(), title="T", content=encrypt("hello", KEY), owner_id=uuid.uuid4())

    hooks.after_read(note)

    assert note.content == "hello"
    assert not inspect(note).attrs.content.history.has_changes()


def test_after_read_leaves_plaintext_alone():
    hooks = NoteContentHooks(KEY)
    note = Note(id=uuid.uuid4(), title="T", content="plain", owner_id=uuid.uuid4())
    hooks.after_read(note)
    assert note.content == "plain"


def test_after_read_many_and_none():
    hooks = NoteContentHooks(KEY)
    assert hooks.after_read(None) is None
    notes = [
        Note(id=uuid.uuid4(), title=str(i), content=encrypt(f"body {i}", KEY), owner_id=uuid.uuid4())
        for i in range(3)
    ]
    assert [n.content for n in hooks.after_read_many(notes)] == ["body 0", "body 1", "body 2"]
