# Database engine and per-request sessions
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import Settings, get_settings
from .core.models.base import BaseModel


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # collaborators and refresh tokens rely on ON DELETE CASCADE
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    """Async engine for the configured URL (asyncpg in production, aiosqlite locally)."""
    if settings.database_url.startswith("sqlite"):
        sqlite_engine = create_async_engine(
            settings.database_url,
            echo=settings.database_echo,
            connect_args={"check_same_thread": False},
        )
        event.listen(sqlite_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_async_engine(settings.database_url, echo=settings.database_echo, pool_pre_ping=True)


engine = build_engine(get_settings())

AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """One session per request, closed when the response is sent."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables():
    """Create missing tables; migrations are the normal path, this is for local runs."""
    # make sure every model is registered on the metadata
    from .core import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def dispose_engine():
    await engine.dispose()
