"""Shared plumbing for running an async pass inside a Celery task."""

import asyncio
from typing import Awaitable, Callable

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.database import close_db, get_db_session, init_db
from betdesk.services.sportsdata import SportsDataClient, create_sportsdata_client

Pass = Callable[[AsyncSession, SportsDataClient], Awaitable[BaseModel]]


async def run_pass_async(work: Pass) -> dict:
    """
    Run one pass with a fresh database context and feed client.

    Each task gets its own event loop from asyncio.run, so the engine is
    built and disposed per run instead of shared across loops.
    """
    context = init_db()
    try:
        await context.create_all()
        async with get_db_session() as db, create_sportsdata_client() as client:
            summary = await work(db, client)
    finally:
        await close_db()
    return summary.model_dump(mode="json")


def run_pass(work: Pass) -> dict:
    return asyncio.run(run_pass_async(work))
