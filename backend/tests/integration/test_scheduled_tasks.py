"""Integration tests for the Celery wiring and task runner."""

import asyncio

from sqlalchemy.pool import StaticPool

from betdesk.database import DatabaseContext, get_database, set_database
from betdesk.enums import Sport
from betdesk.services import odds_service
from betdesk.tasks import runner
from betdesk.utils.time_utils import utc_now
from factories import feed_game


def test_beat_schedule_and_routes() -> None:
    from betdesk.celery_config import celery_app

    schedule = celery_app.conf.beat_schedule
    assert schedule["ingest-and-resolve"]["task"] == "tasks.ingest_and_resolve"
    assert schedule["ingest-and-resolve"]["schedule"] == 3600.0
    assert schedule["resolve-results"]["task"] == "tasks.resolve_results"
    assert schedule["resolve-results"]["schedule"] == 900.0
    assert celery_app.conf.task_routes["tasks.cleanup_stale_games"] == {"queue": "maintenance"}


def test_tasks_are_registered() -> None:
    from betdesk.celery_config import celery_app
    import betdesk.tasks  # noqa: F401

    for name in [
        "tasks.ingest_odds",
        "tasks.ingest_and_resolve",
        "tasks.resolve_results",
        "tasks.cleanup_stale_games",
    ]:
        assert name in celery_app.tasks


def test_run_pass_returns_json_summary(monkeypatch, feed) -> None:
    feed.odds(Sport.NBA, utc_now().date().isoformat(), [feed_game(42)])
    closed = []

    def fake_init_db():
        context = DatabaseContext.from_url(
            "sqlite+aiosqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        set_database(context)
        return context

    async def fake_close_db():
        context = get_database()
        set_database(None)
        await context.dispose()
        closed.append(True)

    monkeypatch.setattr(runner, "init_db", fake_init_db)
    monkeypatch.setattr(runner, "close_db", fake_close_db)
    monkeypatch.setattr(runner, "create_sportsdata_client", feed.client)

    async def work(db, client):
        return await odds_service.ingest_today(db, client, sports=[Sport.NBA])

    summary = asyncio.run(runner.run_pass_async(work))

    assert summary["sports"]["NBA"]["inserted"] == 1
    assert summary["failed_sports"] == []
    assert closed == [True]
