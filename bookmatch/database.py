"""Async engine and session factory, owned by the application lifespan."""

import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from bookmatch.domain.models import Base

logger = logging.getLogger(__name__)


def normalize_async_database_url(raw: str) -> str:
    url = str(raw or "").strip()
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]
    if url.startswith("postgresql://"):
        url = "postgresql+asyncpg://" + url[len("postgresql://") :]
    if url.startswith("sqlite://") and not url.startswith("sqlite+aiosqlite://"):
        url = "sqlite+aiosqlite://" + url[len("sqlite://") :]
    return url


class Database:
    """Holds one engine and its session factory.

    Nothing connects at construction time; the pool opens lazily on first use
    and is released by :meth:`dispose`.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = normalize_async_database_url(url)
        self._engine = create_async_engine(self.url, echo=echo, pool_pre_ping=True)
        self.session_factory = async_sessionmaker(
            self._engine, expire_on_commit=False, class_=AsyncSession
        )

    async def create_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.info("Database connections released")


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a request-scoped session from the app's ``Database``."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
