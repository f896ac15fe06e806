"""
FastAPI dependency injection for database sessions.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.database.session import get_database


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async database session.

    Usage:
        @router.get("/games")
        async def list_games(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_database().session() as session:
        yield session
