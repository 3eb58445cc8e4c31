"""SQLite database connection and session management."""

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, select

from newsbrief.config import get_settings
from newsbrief.models import DEFAULT_CATEGORIES, Category


def make_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the process-wide async engine.

    In-memory databases share one static connection so every session sees
    the same data; file databases get their parent directory created.
    """
    url = make_url(database_url)
    kwargs: dict = {"echo": echo}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        if not url.database or url.database == ":memory:":
            kwargs["poolclass"] = StaticPool
        else:
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    return create_async_engine(url, **kwargs)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


settings = get_settings()

# Create async engine
engine = make_engine(settings.database_url, echo=settings.debug)

# Create async session factory
async_session = make_session_factory(engine)


async def seed_default_categories(session: AsyncSession) -> int:
    """Insert the built-in categories that are missing. Returns how many were added."""
    added = 0
    for data in DEFAULT_CATEGORIES:
        result = await session.execute(select(Category).where(Category.id == data["id"]))
        if result.scalar_one_or_none():
            continue
        session.add(Category(is_default=True, **data))
        # Flush one at a time so creation timestamps keep the seed order
        await session.flush()
        added += 1

    await session.commit()
    return added


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create tables and seed built-in categories."""
    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    async with make_session_factory(bind)() as session:
        await seed_default_categories(session)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()
