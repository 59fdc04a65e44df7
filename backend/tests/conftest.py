"""Pytest configuration and fixtures for GPP tests.

Tests run against a throw-away SQLite file (via aiosqlite) instead of
PostgreSQL, and against an in-memory stand-in for the Redis revocation
list. The environment is set before the app is imported so the app's own
engine and session factory point at the test database.
"""

import os
import tempfile
from datetime import datetime
from typing import AsyncGenerator, Generator

_TEST_DB_DIR = tempfile.mkdtemp(prefix="gpp-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/test.db"
os.environ["DEBUG"] = "false"
os.environ["ONBOARDING_ROLES"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from gpp.auth.jwt import create_access_token  # noqa: E402
from gpp.auth.password import hash_password  # noqa: E402
from gpp.database import Base, async_session, engine  # noqa: E402
from gpp.main import app  # noqa: E402
from gpp.models.user import User, UserRole  # noqa: E402
from gpp.onboarding.controller import ProfileFields  # noqa: E402
from gpp.onboarding.persistence import PersistenceFailure, ProfileWriter  # noqa: E402
from gpp.routers.onboarding import get_profile_writer  # noqa: E402


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def db_schema() -> AsyncGenerator[None, None]:
    """Fresh tables for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Pooled aiosqlite connections are tied to this test's event loop
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_schema) -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session


# ── Redis stand-in ───────────────────────────────────────────────

class InMemoryRedis:
    """The handful of Redis commands the app uses, kept in a dict."""

    def __init__(self):
        self.store: dict[str, str] = {}

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self.store[key] = value
        return True

    async def exists(self, key: str) -> int:
        return int(key in self.store)

    async def ping(self) -> bool:
        return True


@pytest.fixture(autouse=True)
def redis_store(monkeypatch) -> InMemoryRedis:
    fake = InMemoryRedis()

    async def _get_redis():
        return fake

    monkeypatch.setattr("gpp.auth.revocation.get_redis", _get_redis)
    monkeypatch.setattr("gpp.routers.health.get_redis", _get_redis)
    return fake


# ── HTTP client ──────────────────────────────────────────────────

@pytest_asyncio.fixture
async def client(db_schema) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


# ── Profile writer doubles ───────────────────────────────────────

class RecordingProfileWriter(ProfileWriter):
    """Records every write; optionally fails each one."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[dict] = []

    async def write(self, user_id: str, fields: ProfileFields, timestamp: datetime) -> None:
        self.calls.append({
            "user_id": user_id,
            **fields.to_dict(),
            "onboarded": True,
            "updated_at": timestamp.isoformat(),
        })
        if self.fail:
            raise PersistenceFailure("simulated outage")


@pytest.fixture
def recording_writer() -> Generator[RecordingProfileWriter, None, None]:
    writer = RecordingProfileWriter()
    app.dependency_overrides[get_profile_writer] = lambda: writer
    yield writer
    app.dependency_overrides.pop(get_profile_writer, None)


@pytest.fixture
def failing_writer() -> Generator[RecordingProfileWriter, None, None]:
    writer = RecordingProfileWriter(fail=True)
    app.dependency_overrides[get_profile_writer] = lambda: writer
    yield writer
    app.dependency_overrides.pop(get_profile_writer, None)


# ── Test Data Fixtures ───────────────────────────────────────────

async def _create_user(
    db: AsyncSession,
    email: str = "test@example.com",
    full_name: str | None = "Test User",
    role: UserRole = UserRole.MEMBER,
    password: str = "testpassword123",
    is_active: bool = True,
) -> User:
    user = User(
        email=email,
        full_name=full_name,
        hashed_password=hash_password(password),
        role=role,
        is_active=is_active,
        skills=[],
        interests=[],
        onboarded=False,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token(
        user_id=user.id, role=user.role.value, full_name=user.full_name
    )
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session)


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return _headers(test_user)


@pytest.fixture
def make_user(db_session: AsyncSession):
    """Factory for extra users: `await make_user(email=..., role=...)`."""
    async def _make(**kwargs) -> User:
        return await _create_user(db_session, **kwargs)
    return _make


@pytest.fixture
def headers_for():
    return _headers
