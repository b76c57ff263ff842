"""JWT token utilities."""

import logging
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from jose import JWTError, jwt

from ..config import get_settings
from ..core.access import Principal
from ..core.redis_client import get_redis_client

logger = logging.getLogger(__name__)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token with JTI for Redis blacklisting."""
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    # Add JWT ID for blacklisting capability
    jti = str(uuid.uuid4())
    to_encode.update({"exp": expire, "type": "access", "jti": jti})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_refresh_token() -> str:
    """Create a random refresh token."""
    return secrets.token_urlsafe(32)


async def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate access token, checking Redis blacklist."""
    try:
        settings = get_settings()
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    # Verify token type
    if payload.get("type") != "access":
        return None

    jti = payload.get("jti")
    if jti and await get_redis_client().is_token_blacklisted(jti):
        return None

    return payload


async def get_principal_from_token(token: str) -> Optional[Principal]:
    """Extract the acting principal (user id + email) from token."""
    payload = await decode_access_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        return None

    try:
        return Principal(user_id=UUID(user_id), email=email)
    except ValueError:
        return None


async def blacklist_token(token: str) -> bool:
    """Add token to Redis blacklist for secure logout."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.warning(f"Refusing to blacklist invalid token: {e}")
        return False

    jti = payload.get("jti")
    exp = payload.get("exp")
    if not jti or not exp:
        return False

    # Only keep the entry as long as the token would have been valid
    expire_time = datetime.fromtimestamp(exp, tz=timezone.utc)
    remaining_seconds = int((expire_time - datetime.now(timezone.utc)).total_seconds())
    if remaining_seconds <= 0:
        return False

    return await get_redis_client().add_to_blacklist(jti, remaining_seconds)
