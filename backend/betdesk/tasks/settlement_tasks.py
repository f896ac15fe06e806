"""Result resolution Celery tasks."""

from betdesk.celery_config import celery_app
from betdesk.services import result_service
from betdesk.tasks.runner import run_pass


@celery_app.task(name="tasks.resolve_results", queue="settlements")
def resolve_results():
    """
    Scheduled: every resolve_interval_minutes (15 by default)

    Records outcomes for finished games and settles their bets.
    """
    return run_pass(result_service.resolve_pending_games)
