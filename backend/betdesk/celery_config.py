"""
Celery configuration for the scheduled bookkeeping passes.

- Redis broker and result backend
- Task routing to queues
- Beat schedule for ingestion and resolution
- Logfire instrumentation for worker processes
"""

import logfire
from celery import Celery
from celery.signals import worker_process_init

from betdesk.config import get_settings

settings = get_settings()

celery_app = Celery(
    "betdesk",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "betdesk.tasks.odds_tasks",
        "betdesk.tasks.settlement_tasks",
        "betdesk.tasks.maintenance_tasks",
    ],
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task results
    result_expires=3600,

    task_routes={
        "tasks.ingest_and_resolve": {"queue": "odds"},
        "tasks.ingest_odds": {"queue": "odds"},
        "tasks.resolve_results": {"queue": "settlements"},
        "tasks.cleanup_stale_games": {"queue": "maintenance"},
    },

    # One pass at a time per worker; passes are idempotent but not free
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Failed passes are not retried; the next scheduled run picks the work up
    task_autoretry_for=(),
    task_retry_kwargs={"max_retries": 0},
)

celery_app.conf.beat_schedule = {
    "ingest-and-resolve": {
        "task": "tasks.ingest_and_resolve",
        "schedule": settings.scheduler.ingest_interval_minutes * 60.0,
    },
    "resolve-results": {
        "task": "tasks.resolve_results",
        "schedule": settings.scheduler.resolve_interval_minutes * 60.0,
    },
}


@worker_process_init.connect
def init_worker_process(**kwargs) -> None:
    """Configure logging and observability once per worker process."""
    from betdesk.observability import configure_logging, initialize_logfire

    configure_logging(settings.log_level)
    enabled = initialize_logfire(settings, service_name="betdesk-celery-worker")
    if not enabled:
        logfire.configure(send_to_logfire=False, console=False)

    logfire.info("Celery worker initialized", logfire_enabled=enabled)
