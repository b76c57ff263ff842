"""Password hashing utilities."""

from typing import Optional, Tuple

from passlib.context import CryptContext

# bcrypt_sha256 pre-hashes with SHA-256, so long passwords aren't truncated at 72 bytes
pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def verify_and_update(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """Verify a password and return a replacement hash if the stored one is outdated."""
    return pwd_context.verify_and_update(plain_password, hashed_password)


def needs_update(hashed_password: str) -> bool:
    """Check if password hash needs updating."""
    return pwd_context.needs_update(hashed_password)
