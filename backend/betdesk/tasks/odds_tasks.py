"""Odds ingestion Celery tasks."""

import logging

from betdesk.celery_config import celery_app
from betdesk.schemas import ScheduledRunSummary
from betdesk.services import odds_service, result_service
from betdesk.tasks.runner import run_pass

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.ingest_odds", queue="odds")
def ingest_odds():
    """Fetch today's odds for every configured sport."""
    return run_pass(odds_service.ingest_today)


@celery_app.task(name="tasks.ingest_and_resolve", queue="odds")
def ingest_and_resolve():
    """
    Scheduled: every ingest_interval_minutes (hourly by default)

    Ingests today's odds, then runs a resolution pass.
    """

    async def _work(db, client):
        ingestion = await odds_service.ingest_today(db, client)
        if ingestion.failed_sports:
            logger.warning(f"Odds unavailable for {', '.join(ingestion.failed_sports)}")
        resolution = await result_service.resolve_pending_games(db, client)
        return ScheduledRunSummary(ingestion=ingestion, resolution=resolution)

    return run_pass(_work)
