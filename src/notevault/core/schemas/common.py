"""
Shared response schemas - pagination, errors etc
"""

from datetime import datetime, timezone
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaginationResponse(BaseModel, Generic[T]):
    """Pagination wrapper for API responses"""

    items: List[T]
    total: int
    page: int
    per_page: int
    pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def create(cls, items: List[T], total: int, page: int, per_page: int, **extra: Any):
        # calculate page info
        pages = (total + per_page - 1) // per_page

        return cls(
            items=items,
            total=total,
            page=page,
            per_page=per_page,
            pages=pages,
            has_next=page < pages,
            has_prev=page > 1,
            **extra,
        )


class ErrorResponse(BaseModel):
    """Error body as rendered by FastAPI for HTTPException."""

    detail: str = Field(description="Human-readable error message")

    model_config = ConfigDict(json_schema_extra={"example": {"detail": "Note not found"}})


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(default_factory=_utcnow)
    version: str = Field(description="Application version")
    checks: dict[str, dict[str, Any]] = Field(description="Individual component health checks")
    message: Optional[str] = Field(default=None, description="Extra information")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2026-03-02T10:30:00Z",
                "version": "1.0.0",
                "checks": {
                    "database": {"status": "healthy", "response_time_ms": 15},
                    "redis": {"status": "healthy", "response_time_ms": 5},
                },
            }
        }
    )
