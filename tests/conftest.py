"""
Shared fixtures: an in-memory SQLite database per test and an HTTP client
bound to the ASGI app.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("CREATE_TABLES_ON_STARTUP", "false")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database.models import Base
from database.session import get_db_session
from main import create_app


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app()

    async def _test_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _test_session

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def register_and_login(client, username: str, email: str, password: str = "pw123456"):
    """Register a user and return ``(user_id, auth_headers)``."""
    resp = await client.post(
        "/register",
        json={"username": username, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    user_id = resp.json()["id"]

    resp = await client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return user_id, {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest_asyncio.fixture
async def alice(client):
    return await register_and_login(client, "alice", "alice@example.com")


@pytest_asyncio.fixture
async def bob(client):
    return await register_and_login(client, "bob", "bob@example.com")


@pytest.fixture
def enforce_comment_ownership(monkeypatch):
    from config.settings import config

    monkeypatch.setattr(config, "enforce_comment_ownership", True)


@pytest.fixture
def make_user(client):
    async def _make(username: str, email: str, password: str = "pw123456"):
        return await register_and_login(client, username, email, password)

    return _make
