"""Unit tests for core/access.py"""

import uuid

import pytest

from src.notevault.core.access import (
    NoteAction,
    Principal,
    Role,
    can_read_public,
    is_allowed,
    normalize_email,
    resolve_role,
    touches_owner_only_fields,
)


class Dummy:
    def __init__(self, **kw):
        self.__dict__.update(kw)


OWNER_ID = uuid.uuid4()


def make_note(collaborators=(), is_public=False, share_token=None):
    return Dummy(
        owner_id=OWNER_ID,
        collaborators=[Dummy(email=e) for e in collaborators],
        is_public=is_public,
        share_token=share_token,
    )


owner = Principal(user_id=OWNER_ID, email="ana@example.com")
collab = Principal(user_id=uuid.uuid4(), email="bia@example.com")
other = Principal(user_id=uuid.uuid4(), email="caio@example.com")


def test_resolve_role():
    note = make_note(collaborators=["bia@example.com"])
    assert resolve_role(note, owner) is Role.OWNER
    assert resolve_role(note, collab) is Role.COLLABORATOR
    assert resolve_role(note, other) is Role.NONE
    assert resolve_role(None, owner) is Role.NONE
    assert resolve_role(note, None) is Role.NONE


def test_owner_wins_over_collaborator_entry():
    note = make_note(collaborators=["ana@example.com"])
    assert resolve_role(note, owner) is Role.OWNER


@pytest.mark.parametrize("action", list(NoteAction))
def test_owner_may_do_everything(action):
    assert is_allowed(make_note(), owner, action)


@pytest.mark.parametrize(
    "action, expected",
    [
        (NoteAction.READ, True),
        (NoteAction.UPDATE, True),
        (NoteAction.TOGGLE_FLAGS, False),
        (NoteAction.DELETE, False),
        (NoteAction.MANAGE_COLLABORATORS, False),
        (NoteAction.MANAGE_SHARING, False),
    ],
)
def test_collaborator_permissions(action, expected):
    note = make_note(collaborators=["bia@example.com"])
    assert is_allowed(note, collab, action) is expected


@pytest.mark.parametrize("action", list(NoteAction))
def test_stranger_may_do_nothing(action):
    note = make_note(collaborators=["bia@example.com"], is_public=True, share_token="tok")
    assert not is_allowed(note, other, action)


def test_collaborator_match_is_exact_on_stored_email():
    # stored emails are normalized, principals carry the registered (lower-case) email
    note = make_note(collaborators=["bia@example.com"])
    shouting = Principal(user_id=uuid.uuid4(), email="BIA@example.com")
    assert resolve_role(note, shouting) is Role.NONE


def test_can_read_public():
    note = make_note(is_public=True, share_token="abc123")
    assert can_read_public(note, "abc123")
    assert not can_read_public(note, "abc124")
    assert not can_read_public(note, "")
    assert not can_read_public(note, None)
    assert not can_read_public(None, "abc123")


def test_can_read_public_requires_public_flag():
    note = make_note(is_public=False, share_token="abc123")
    assert not can_read_public(note, "abc123")


def test_can_read_public_without_stored_token():
    note = make_note(is_public=True, share_token=None)
    assert not can_read_public(note, "anything")


def test_can_read_public_handles_non_ascii_tokens():
    note = make_note(is_public=True, share_token="abc")
    assert not can_read_public(note, "ábc")


def test_normalize_email():
    assert normalize_email("  Bia@Example.COM ") == "bia@example.com"


def test_touches_owner_only_fields():
    assert touches_owner_only_fields(["title", "pinned"])
    assert touches_owner_only_fields({"archived"})
    assert not touches_owner_only_fields(["title", "content", "tags", "color"])
