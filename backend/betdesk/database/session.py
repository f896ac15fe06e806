"""
Database engine and session management.

A DatabaseContext owns the async engine and session factory. One context is
built at startup by init_db() and handed to whatever needs it; get_database()
refuses to hand out anything until that has happened.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from betdesk.database.base import Base

logger = logging.getLogger(__name__)


class DatabaseContext:
    """Async engine plus session factory for one database."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> "DatabaseContext":
        if not url.startswith("sqlite"):
            engine_kwargs.setdefault("pool_size", 5)
            engine_kwargs.setdefault("max_overflow", 10)
            engine_kwargs.setdefault("pool_recycle", 3600)
        engine_kwargs.setdefault("pool_pre_ping", True)
        return cls(create_async_engine(url, **engine_kwargs))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Async context manager for sessions outside FastAPI (tasks, CLI).

        Usage:
            async with context.session() as db:
                await odds_service.ingest_today(db, client)
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self) -> None:
        # Registers every table on Base.metadata
        import betdesk.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


_context: Optional[DatabaseContext] = None


def init_db(url: Optional[str] = None, **engine_kwargs) -> DatabaseContext:
    """Build the process-wide DatabaseContext."""
    global _context
    if url is None:
        from betdesk.config import get_settings

        url = get_settings().database_url
    _context = DatabaseContext.from_url(url, **engine_kwargs)
    return _context


def set_database(context: Optional[DatabaseContext]) -> None:
    """Install an existing context (tests) or clear it."""
    global _context
    _context = context


async def close_db() -> None:
    global _context
    if _context is not None:
        await _context.dispose()
        _context = None


def get_database() -> DatabaseContext:
    if _context is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _context


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Session on the installed context, for Celery tasks and the CLI.

    Usage:
        async with get_db_session() as db:
            result = await db.execute(select(Game))
    """
    async with get_database().session() as session:
        yield session
