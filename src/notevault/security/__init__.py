"""Security utilities."""

from .cipher import CipherError, decrypt, encrypt, looks_encrypted
from .jwt import (
    blacklist_token,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_principal_from_token,
)
from .password import hash_password, needs_update, verify_and_update, verify_password
from .share_token import build_share_url, generate_share_token

__all__ = [
    "hash_password",
    "verify_password",
    "needs_update",
    "verify_and_update",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "get_principal_from_token",
    "blacklist_token",
    "encrypt",
    "decrypt",
    "looks_encrypted",
    "CipherError",
    "generate_share_token",
    "build_share_url",
]
