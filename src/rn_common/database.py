from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings


# Creating the engine does not open a connection; the memory backend never touches it.
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession | None, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request.

    Yields None when the in-memory backend is selected; memory repositories
    ignore the session argument.
    """
    if settings.DATA_BACKEND != "postgres":
        yield None
        return
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def transaction(db: AsyncSession | None) -> AsyncGenerator[None, None]:
    """Wrap a read-modify-write in ``db.begin()``; no-op for the memory backend."""
    if db is None:
        yield
        return
    async with db.begin():
        yield
