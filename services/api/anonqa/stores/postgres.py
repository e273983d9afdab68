"""PostgreSQL connection lifecycle for the board.

One engine per process, created in the app lifespan (or by scripts) and
shared by every SqlStore through the session factory.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from anonqa.settings import get_settings

_NOT_INITIALIZED = "Database not initialized. Call init_db() first."


class Base(DeclarativeBase):
    """Declarative base for board tables."""


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(database_url: str | None = None) -> None:
    """Create the engine and session factory.

    Args:
        database_url: Override for settings.async_database_url (scripts, migrations).
    """
    global _engine, _session_factory

    settings = get_settings()
    _engine = create_async_engine(
        database_url or settings.async_database_url,
        echo=settings.debug,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        # Waiting for a pooled connection counts against the request budget.
        pool_timeout=settings.client_timeout_seconds,
    )
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False)


def _require_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory shared by SqlStore instances."""
    if _session_factory is None:
        raise RuntimeError(_NOT_INITIALIZED)
    return _session_factory


async def ping_db() -> None:
    """SELECT 1 against the pool; raises if Postgres is unreachable."""
    async with _require_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables(*, drop_first: bool = False) -> None:
    """Create board tables directly from the models (dev/seed only; prod uses alembic)."""
    # Models register themselves on Base.metadata at import time.
    import anonqa.models  # noqa: F401

    async with _require_engine().begin() as conn:
        if drop_first:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Dispose of the pool."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
