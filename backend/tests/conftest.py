"""Shared fixtures: in-memory database and a fake SportsData feed."""

from contextlib import asynccontextmanager

import pytest
from sqlalchemy.pool import StaticPool

from betdesk.database import DatabaseContext, set_database
from factories import FakeFeed


@pytest.fixture
def database():
    """
    Factory for a fresh in-memory database, opened inside the test's loop.

    Usage:
        async with database() as ctx:
            async with ctx.session() as db:
                ...
    """

    @asynccontextmanager
    async def _open():
        context = DatabaseContext.from_url(
            "sqlite+aiosqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        await context.create_all()
        set_database(context)
        try:
            yield context
        finally:
            set_database(None)
            await context.dispose()

    return _open


@pytest.fixture
def feed() -> FakeFeed:
    return FakeFeed()
