"""
Access control for notes.

Decides what a principal may do with a note:

    action                 owner  collaborator  public token  other
    read                   yes    yes           yes           no
    update                 yes    yes           no            no
    toggle_flags           yes    no            no            no
    delete                 yes    no            no            no
    manage_collaborators   yes    no            no            no
    manage_sharing         yes    no            no            no

Denials are reported by callers as "not found" so note existence is never
disclosed. Everything here is pure: no database access, no HTTP.
"""

import secrets
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class Principal:
    """Authenticated identity acting on a request."""

    user_id: uuid.UUID
    email: str


class Role(str, Enum):
    """Relationship between a principal and a note."""

    OWNER = "owner"
    COLLABORATOR = "collaborator"
    PUBLIC = "public"
    NONE = "none"


class NoteAction(str, Enum):
    """Operations guarded by the resolver."""

    READ = "read"
    UPDATE = "update"
    TOGGLE_FLAGS = "toggle_flags"
    DELETE = "delete"
    MANAGE_COLLABORATORS = "manage_collaborators"
    MANAGE_SHARING = "manage_sharing"


PERMISSIONS: dict[Role, frozenset[NoteAction]] = {
    Role.OWNER: frozenset(NoteAction),
    Role.COLLABORATOR: frozenset({NoteAction.READ, NoteAction.UPDATE}),
    Role.PUBLIC: frozenset({NoteAction.READ}),
    Role.NONE: frozenset(),
}

# Fields only the owner may change through a regular update
OWNER_ONLY_FIELDS = frozenset({"archived", "pinned"})


def normalize_email(email: str) -> str:
    """Collaborator emails are stored trimmed and lower-cased."""
    return email.strip().lower()


def collaborator_emails(note: Any) -> list[str]:
    """Collaborator emails of a note, in insertion order."""
    return [c.email for c in (getattr(note, "collaborators", None) or [])]


def is_collaborator(note: Any, email: Optional[str]) -> bool:
    if not email:
        return False
    return email in collaborator_emails(note)


def resolve_role(note: Any, principal: Optional[Principal]) -> Role:
    """Role of an authenticated principal towards a note."""
    if note is None or principal is None:
        return Role.NONE
    if note.owner_id == principal.user_id:
        return Role.OWNER
    if is_collaborator(note, principal.email):
        return Role.COLLABORATOR
    return Role.NONE


def is_allowed(note: Any, principal: Optional[Principal], action: NoteAction) -> bool:
    """Check if principal may perform action on note."""
    return action in PERMISSIONS[resolve_role(note, principal)]


def can_read_public(note: Any, share_token: Optional[str]) -> bool:
    """Anonymous read through a share link.

    Only public notes qualify, and the token must match the current one, so a
    regenerated or unpublished link stops working right away.
    """
    if note is None or not share_token or not note.is_public or not note.share_token:
        return False
    return secrets.compare_digest(note.share_token.encode("utf-8"), share_token.encode("utf-8"))


def touches_owner_only_fields(fields: Iterable[str]) -> bool:
    return any(field in OWNER_ONLY_FIELDS for field in fields)
