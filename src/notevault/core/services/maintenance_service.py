"""Maintenance jobs over stored notes, run from the command line.

These work on content exactly as stored and bypass the read-side decryption
of the repository.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ...security.cipher import CipherError, decrypt, looks_encrypted
from ...security.share_token import generate_share_token
from ..content_hooks import NoteContentHooks
from ..repositories.note_repository import NoteRepository

logger = logging.getLogger(__name__)


@dataclass
class EncryptionReport:
    total: int = 0
    encrypted: int = 0
    already_encrypted: int = 0
    errors: List[UUID] = field(default_factory=list)


@dataclass
class AuditReport:
    total: int = 0
    ok: int = 0
    plaintext: List[UUID] = field(default_factory=list)
    undecryptable: List[UUID] = field(default_factory=list)


@dataclass
class ShareTokenReport:
    found: int = 0
    fixed: int = 0
    failed: List[UUID] = field(default_factory=list)


class MaintenanceService:
    """Encrypt legacy notes, audit ciphertext, back-fill share tokens."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.hooks = NoteContentHooks(self.settings.encryption_key)
        self.note_repo = NoteRepository(session, self.hooks)

    async def encrypt_existing_notes(self) -> EncryptionReport:
        """Encrypt content stored as plaintext; already encrypted notes are skipped."""
        report = EncryptionReport()

        for note in await self.note_repo.list_all_raw():
            report.total += 1
            if not note.content:
                continue
            if looks_encrypted(note.content):
                report.already_encrypted += 1
                continue

            ciphertext = self.hooks.encrypt_content(note.content)
            if ciphertext == note.content:
                # the hooks already logged why
                report.errors.append(note.id)
                continue

            await self.note_repo.set_raw_content(note.id, ciphertext)
            await self.note_repo.commit()

            report.encrypted += 1
            logger.info("Encrypted content of note %s", note.id)

        return report

    async def audit_encryption(self) -> AuditReport:
        """Check every stored note decrypts with the configured key."""
        report = AuditReport()
        key = self.settings.encryption_key

        for note in await self.note_repo.list_all_raw():
            report.total += 1
            if not looks_encrypted(note.content):
                report.plaintext.append(note.id)
                continue

            try:
                plaintext = decrypt(note.content, key)
            except CipherError as e:
                logger.warning("Note %s can't be decrypted: %s", note.id, e)
                report.undecryptable.append(note.id)
                continue

            if plaintext == note.content:
                report.undecryptable.append(note.id)
            else:
                report.ok += 1

        return report

    async def fix_missing_share_tokens(self) -> ShareTokenReport:
        """Give every public note without a share token a fresh one."""
        notes = await self.note_repo.list_public_without_token()
        note_ids = [note.id for note in notes]
        report = ShareTokenReport(found=len(note_ids))

        for note_id in note_ids:
            if await self._fix_share_token(note_id):
                report.fixed += 1
            else:
                report.failed.append(note_id)

        return report

    async def _fix_share_token(self, note_id: UUID) -> bool:
        for attempt in range(1, self.settings.share_token_max_attempts + 1):
            try:
                await self.note_repo.set_share_token(note_id, generate_share_token())
            except IntegrityError:
                await self.note_repo.rollback()
                logger.warning("Share token collision for note %s (attempt %d)", note_id, attempt)
                continue
            logger.info("Assigned share token to public note %s", note_id)
            return True

        logger.error("Could not assign share token to note %s", note_id)
        return False
