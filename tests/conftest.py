import uuid
from collections.abc import AsyncGenerator, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from bookmatch.adapters.memory import InMemoryCatalogAdapter, InMemoryRatingStoreAdapter
from bookmatch.config import Settings
from bookmatch.database import Database
from bookmatch.domain.entities import BookRecord
from bookmatch.main import create_app

BASE = "http://test"


@pytest.fixture
def make_book() -> Callable[..., BookRecord]:
    def factory(title: str, genre: str, rating: float = 4.0, author: str = "Test Author") -> BookRecord:
        return BookRecord(id=uuid.uuid4(), title=title, author=author, genre=genre, rating=rating)

    return factory


# ── In-memory adapters ─────────────────────────────


@pytest.fixture
def catalog() -> InMemoryCatalogAdapter:
    return InMemoryCatalogAdapter()


@pytest.fixture
def rating_store(catalog: InMemoryCatalogAdapter) -> InMemoryRatingStoreAdapter:
    return InMemoryRatingStoreAdapter(catalog)


# ── SQLite database ────────────────────────────────


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh SQLite file per test, schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'adapters.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as s:
        yield s


# ── Application ────────────────────────────────────


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        auto_create_schema=True,
        seed_catalog=True,
        jwt_secret="test-secret-key-with-at-least-32-bytes",
    )


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client for an app that has gone through its lifespan (schema + sample catalog)."""
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url=BASE) as c:
            yield c


@pytest.fixture
async def auth_client(client: AsyncClient) -> AsyncClient:
    """Register a user and return a client with auth headers."""
    email = f"test_{uuid.uuid4().hex[:8]}@example.com"
    await client.post(
        "/api/auth/register",
        json={"name": "Test Reader", "email": email, "password": "securepass123"},
    )
    resp = await client.post(
        "/api/auth/login",
        json={"email": email, "password": "securepass123"},
    )
    token = resp.json()["token"]
    client.headers["Authorization"] = f"Bearer {token}"
    return client
