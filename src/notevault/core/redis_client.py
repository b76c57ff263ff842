"""Redis client for the access token blacklist."""

import logging
import time
from typing import Any, Dict, Optional

import redis.asyncio as redis

from ..config import get_settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Thin async Redis wrapper.

    Every call degrades to a no-op when Redis isn't connected, so the API keeps
    serving requests (without logout blacklisting) if Redis is down.
    """

    def __init__(self):
        self.settings = get_settings()
        self.redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        try:
            self.redis = redis.from_url(
                self.settings.redis_url,
                max_connections=self.settings.redis_max_connections,
                decode_responses=True,
            )
            # Test connection
            await self.redis.ping()
            logger.info("Connected to Redis successfully")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.redis = None
            raise

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value in Redis with optional expiration."""
        if not self.redis:
            return False
        try:
            if expire:
                return bool(await self.redis.setex(key, expire, value))
            return bool(await self.redis.set(key, value))
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        """Check if key exists in Redis."""
        if not self.redis:
            return False
        try:
            return await self.redis.exists(key) > 0
        except Exception as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    async def add_to_blacklist(self, token_jti: str, expire: int = 900) -> bool:
        """Add token to blacklist (for secure logout)."""
        return await self.set(f"blacklist:{token_jti}", "blacklisted", expire)

    async def is_token_blacklisted(self, token_jti: str) -> bool:
        """Check if token is blacklisted."""
        return await self.exists(f"blacklist:{token_jti}")

    async def ping(self) -> Dict[str, Any]:
        """Health probe."""
        if not self.redis:
            return {"connected": False, "status": "unhealthy", "error": "not connected"}
        try:
            start = time.perf_counter()
            await self.redis.ping()
            elapsed_ms = (time.perf_counter() - start) * 1000
            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(elapsed_ms, 2),
            }
        except Exception as e:
            return {"connected": False, "status": "unhealthy", "error": str(e)}


# Singleton instance
_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
