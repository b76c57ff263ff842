"""Share tokens for public note links."""

import secrets

# 32 random bytes -> 64 hex chars, safe as a URL path segment
SHARE_TOKEN_BYTES = 32


def generate_share_token() -> str:
    """Generate a random share token.

    Uniqueness is enforced by the unique constraint on notes.share_token,
    not here.
    """
    return secrets.token_hex(SHARE_TOKEN_BYTES)


def build_share_url(base_url: str, share_token: str) -> str:
    """Compose the public link for a share token."""
    return f"{base_url.rstrip('/')}/public/{share_token}"
