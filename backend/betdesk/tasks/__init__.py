"""Celery tasks module."""

from betdesk.tasks.maintenance_tasks import cleanup_stale_games
from betdesk.tasks.odds_tasks import ingest_and_resolve, ingest_odds
from betdesk.tasks.settlement_tasks import resolve_results

__all__ = [
    # Odds tasks
    "ingest_and_resolve",
    "ingest_odds",
    # Settlement tasks
    "resolve_results",
    # Maintenance tasks
    "cleanup_stale_games",
]
