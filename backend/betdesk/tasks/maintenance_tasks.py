"""Maintenance Celery tasks."""

import logging

from betdesk.celery_config import celery_app
from betdesk.services import retirement_service
from betdesk.tasks.runner import run_pass

logger = logging.getLogger(__name__)


@celery_app.task(name="tasks.cleanup_stale_games", queue="maintenance")
def cleanup_stale_games():
    """
    On demand: cancel games that never got a result.

    Not on the beat schedule; stale games with bets get their stakes refunded,
    which should stay an explicit operator action.
    """

    async def _work(db, client):
        return await retirement_service.cancel_stale_games(db)

    summary = run_pass(_work)
    logger.info(
        f"Stale cleanup: {summary['deleted']} deleted, {summary['canceled']} canceled"
    )
    return summary
