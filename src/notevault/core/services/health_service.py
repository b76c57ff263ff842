"""Health service implementation."""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import Settings, get_settings
from ..redis_client import get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()

    async def get_health_status(self) -> HealthCheckResponse:
        """Overall status. Redis only degrades it, the database is required."""
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        overall_status = "healthy"
        if not db_health["connected"]:
            overall_status = "unhealthy"
        elif not redis_health["connected"]:
            overall_status = "degraded"

        return HealthCheckResponse(
            status=overall_status,
            timestamp=datetime.now(timezone.utc),
            version=self.settings.app_version,
            checks={"database": db_health, "redis": redis_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        try:
            start_time = time.perf_counter()
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
            response_time = (time.perf_counter() - start_time) * 1000

            return {
                "connected": True,
                "status": "healthy",
                "response_time_ms": round(response_time, 2),
            }
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": None,
            }

    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection through the shared client."""
        return await get_redis_client().ping()
