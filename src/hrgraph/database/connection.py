"""
Database connection management

One async engine and session factory are shared by the whole process. They are
created on first use from ``Settings.database_url`` unless ``init_database``
was called with an explicit URL first.
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_settings
from ..logging import get_logger

logger = get_logger(__name__)

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None
_lock = threading.Lock()


def to_async_url(database_url: str) -> str:
    """Rewrite a plain PostgreSQL URL to use the asyncpg driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def init_database(database_url: str | None = None, force_reinit: bool = False) -> None:
    """Create the shared engine and session factory.

    A no-op once initialized, unless an explicit URL or ``force_reinit`` is given.
    """
    global _engine, _session_factory

    with _lock:
        if _engine is not None and database_url is None and not force_reinit:
            return

        settings = get_settings()
        url = to_async_url(database_url or settings.database_url)

        options: dict = {"echo": settings.sql_echo}
        if url.startswith("postgresql"):
            options.update(
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_pre_ping=True,
            )

        _engine = create_async_engine(url, **options)
        _session_factory = async_sessionmaker(_engine, autoflush=False, expire_on_commit=False)
        logger.info("Database initialized", database_url=_engine.url.render_as_string())


def get_async_engine() -> AsyncEngine:
    if _engine is None:
        init_database()
    assert _engine is not None
    return _engine


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Unit of work: commit when the block exits cleanly, roll back on error."""
    if _session_factory is None:
        init_database()
    assert _session_factory is not None

    async with _session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    """Create the tables declared in ``hrgraph.dbmodels`` that do not exist yet."""
    from ..dbmodels import Base

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))


async def test_database_connection() -> tuple[bool, str | None]:
    """Run ``SELECT 1`` on the shared engine.

    Returns:
        ``(True, None)`` on success, otherwise ``(False, reason)``
    """
    if _engine is None:
        return False, "Database engine not initialized"

    try:
        async with _engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        reason = str(e)
        if "password authentication failed" in reason:
            return False, f"Database authentication failed, check the credentials: {reason}"
        if "Connection refused" in reason or "could not connect" in reason:
            return False, f"Database server is unreachable: {reason}"
        return False, f"Database connection error ({type(e).__name__}): {reason}"
    return True, None
