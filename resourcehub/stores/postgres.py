"""PostgreSQL store with async SQLAlchemy.

Handles:
- Database session management
- Connection pooling
- Translating connection failures into StoreUnavailableError

Every session is one transaction: committed when the block exits cleanly,
rolled back otherwise.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import Insert, Table, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from resourcehub.settings import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class StoreUnavailableError(Exception):
    """The database could not be reached; the whole operation failed."""


# Engine and session factory (initialized on startup)
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


async def init_db(database_url: str | None = None) -> None:
    """Initialize database connection pool.

    Args:
        database_url: Override for the configured URL (tests use sqlite+aiosqlite).
    """
    global _engine, _session_factory

    settings = get_settings()
    url = database_url or settings.async_database_url

    if url.startswith("sqlite") and ":memory:" in url:
        # A single shared connection keeps an in-memory database alive.
        _engine = create_async_engine(url, echo=settings.debug, poolclass=StaticPool)
    elif url.startswith("sqlite"):
        # File databases get one connection per session; writers wait on the lock.
        _engine = create_async_engine(url, echo=settings.debug, connect_args={"timeout": 30})
    else:
        _engine = create_async_engine(
            url,
            echo=settings.debug,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
        )
    _session_factory = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def close_db() -> None:
    """Close database connection pool."""
    global _engine, _session_factory
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def ping_db() -> None:
    """Run a trivial query to validate connectivity."""
    async with get_session() as session:
        await session.execute(text("SELECT 1"))


@asynccontextmanager
async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session context manager.

    Usage:
        async with get_session() as session:
            result = await session.execute(query)

    Raises:
        StoreUnavailableError: If the database cannot be reached.
    """
    if _session_factory is None:
        raise StoreUnavailableError("Database not initialized. Call init_db() first.")

    try:
        async with _session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
    except (OperationalError, InterfaceError, OSError) as e:
        raise StoreUnavailableError(str(e)) from e


async def create_tables() -> None:
    """Create all tables (for development/testing only)."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    # Register every model on Base.metadata before creating tables.
    import resourcehub.models  # noqa: F401

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    """Drop all tables (for testing only)."""
    if _engine is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


def insert_ignore(session: AsyncSession, table: Table) -> Insert:
    """Build an INSERT ... ON CONFLICT DO NOTHING for the session's dialect.

    Used for set-membership inserts: adding ``.returning(...)`` yields a row
    only when the insert actually happened.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(table).on_conflict_do_nothing()
    if dialect == "sqlite":
        return sqlite_insert(table).on_conflict_do_nothing()
    raise NotImplementedError(f"insert_ignore is not supported on {dialect}")
