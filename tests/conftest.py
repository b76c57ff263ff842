"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Tell app lifespan to skip real DB init; set before the app module is imported
os.environ.setdefault("NOTEVAULT_SKIP_LIFESPAN_DB", "1")

from src.notevault.config import Settings, get_settings  # noqa: E402
from src.notevault.core.access import Principal  # noqa: E402
from src.notevault.core.models import BaseModel  # noqa: E402
from src.notevault.core.models.user import User  # noqa: E402
from src.notevault.database import get_db_session  # noqa: E402
from src.notevault.main import app  # noqa: E402
from src.notevault.security.jwt import create_access_token  # noqa: E402
from src.notevault.security.password import hash_password  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_ENCRYPTION_KEY = "test-encryption-key-for-notevault-suite"


@pytest.fixture
def test_settings():
    """Settings for tests: SQLite in-memory DB and a fixed encryption key."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="your-secret-key-change-in-production",
        encryption_key=TEST_ENCRYPTION_KEY,
        public_base_url="https://notes.example.com",
        debug=True,
    )


@pytest.fixture
async def test_engine(test_settings):
    """Fresh SQLite in-memory engine per test."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
        poolclass=StaticPool,  # keep the same memory DB across connections
        connect_args={"check_same_thread": False},
    )

    # SQLite needs this for ON DELETE CASCADE
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Database session per test."""
    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def test_app(test_session, test_settings):
    """FastAPI app with DB and settings overridden."""

    async def _override_get_db():
        yield test_session

    app.dependency_overrides[get_db_session] = _override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """Async client talking to the app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_user(session: AsyncSession, email: str, name: str) -> User:
    user = User(email=email, name=name, password_hash=hash_password("TestPassword123!"), is_active=True)
    session.add(user)
    await session.commit()
    return user


@pytest.fixture
async def owner(test_session):
    return await _create_user(test_session, "ana@example.com", "Ana")


@pytest.fixture
async def collaborator(test_session):
    return await _create_user(test_session, "bia@example.com", "Bia")


@pytest.fixture
async def stranger(test_session):
    return await _create_user(test_session, "caio@example.com", "Caio")


def auth_headers_for(user: User) -> dict:
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(owner):
    return auth_headers_for(owner)


@pytest.fixture
def collaborator_headers(collaborator):
    return auth_headers_for(collaborator)


@pytest.fixture
def stranger_headers(stranger):
    return auth_headers_for(stranger)


@pytest.fixture
def owner_principal(owner):
    return Principal(user_id=owner.id, email=owner.email)


@pytest.fixture
def collaborator_principal(collaborator):
    return Principal(user_id=collaborator.id, email=collaborator.email)


@pytest.fixture
def stranger_principal(stranger):
    return Principal(user_id=stranger.id, email=stranger.email)


@pytest.fixture
def random_principal():
    return Principal(user_id=uuid.uuid4(), email="someone@example.com")


@pytest.fixture(autouse=True)
def _propagate_app_logs(monkeypatch):
    """App loggers don't propagate by default; caplog listens on the root logger."""
    for name in ("notevault", "src.notevault"):
        monkeypatch.setattr(logging.getLogger(name), "propagate", True)
