"""Encrypt note content on the way into the database and decrypt it on the way out."""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy.orm import attributes as orm_attributes

from ..security.cipher import CipherError, decrypt, encrypt, looks_encrypted

logger = logging.getLogger(__name__)


class NoteContentHooks:
    """Write-side and read-side content transformations for notes.

    Both sides are best effort. A failed encryption stores the value as given,
    a failed decryption returns the stored value; neither raises.
    """

    def __init__(self, key: str):
        self.key = key

    def encrypt_content(self, content: Optional[str]) -> Optional[str]:
        """Encrypt content unless it's empty or already ciphertext."""
        if not content or looks_encrypted(content):
            return content
        try:
            return encrypt(content, self.key)
        except (CipherError, ValueError) as e:
            logger.error("Failed to encrypt note content, storing as is: %s", e)
            return content

    def before_write(self, values: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of values with ``content`` encrypted."""
        if "content" not in values:
            return values
        prepared = dict(values)
        prepared["content"] = self.encrypt_content(prepared["content"])
        return prepared

    def decrypt_content(self, content: Optional[str], note_id: Any = None) -> Optional[str]:
        """Decrypt stored content, falling back to the stored value."""
        if not looks_encrypted(content):
            return content
        try:
            plaintext = decrypt(content, self.key)
        except CipherError as e:
            logger.warning("Failed to decrypt content of note %s: %s", note_id, e)
            return content
        if plaintext == content:
            logger.warning("Decryption left content of note %s unchanged", note_id)
            return content
        return plaintext

    def after_read(self, note):
        """Swap the loaded ciphertext for plaintext without marking the note dirty."""
        if note is None:
            return None
        plaintext = self.decrypt_content(note.content, note.id)
        if plaintext is not note.content:
            orm_attributes.set_committed_value(note, "content", plaintext)
        return note

    def after_read_many(self, notes: Iterable) -> list:
        return [self.after_read(note) for note in notes]
