"""BetDesk CLI entry point."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path(__file__).parent.parent / ".env"
load_dotenv(env_file)

from betdesk import __version__
from betdesk.config import get_settings
from betdesk.database import close_db, get_db_session, init_db
from betdesk.observability import configure_logging, initialize_logfire
from betdesk.services import odds_service, result_service, retirement_service
from betdesk.services.sportsdata import create_sportsdata_client
from betdesk.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def _mask(secret: str) -> str:
    if not secret:
        return "✗ Not set"
    return f"✓ Set ({secret[:4]}...)" if len(secret) > 8 else "✓ Set"


def _init_logfire() -> None:
    """Initialize Logfire if configured, without failing commands."""
    try:
        initialize_logfire(get_settings(), service_name="betdesk-cli")
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


async def _with_database(work):
    context = init_db()
    try:
        await context.create_all()
        async with get_db_session() as db:
            return await work(db)
    finally:
        await close_db()


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "betdesk.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create all tables."""
    try:

        async def _init():
            context = init_db()
            try:
                await context.create_all()
                return await context.ping()
            finally:
                await close_db()

        if not asyncio.run(_init()):
            print("\n❌ Database not reachable\n")
            return 1
        print("✓ Database schema created")
        return 0

    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        print(f"\n❌ Database initialization failed: {e}\n")
        return 1


def cmd_ingest(args: argparse.Namespace) -> int:
    """Run one odds ingestion pass."""
    _init_logfire()

    async def _ingest(db):
        async with create_sportsdata_client() as client:
            return await odds_service.ingest_today(db, client)

    try:
        summary = asyncio.run(_with_database(_ingest))
    except Exception as e:
        logger.error(f"Odds ingestion failed: {e}", exc_info=True)
        print(f"\n❌ Odds ingestion failed: {e}\n")
        return 1

    print(f"\n=== Odds Ingestion ({summary.date}) ===\n")
    for sport, stats in summary.sports.items():
        print(
            f"  {sport}: {stats.fetched} fetched, {stats.inserted} new, "
            f"{stats.updated} updated, {stats.skipped_decided} already decided"
        )
    if summary.failed_sports:
        print(f"\n  Unavailable: {', '.join(summary.failed_sports)}")
    print()
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    """Run one result resolution pass."""
    _init_logfire()

    async def _resolve(db):
        async with create_sportsdata_client() as client:
            return await result_service.resolve_pending_games(db, client)

    try:
        summary = asyncio.run(_with_database(_resolve))
    except Exception as e:
        logger.error(f"Result resolution failed: {e}", exc_info=True)
        print(f"\n❌ Result resolution failed: {e}\n")
        return 1

    print("\n=== Result Resolution ===\n")
    print(f"Checked: {summary.checked}")
    print(f"Resolved: {summary.resolved}")
    print(f"Not final: {summary.not_final}")
    print(f"Not found: {summary.not_found}")
    print(f"Failed: {summary.failed}")
    for settlement in summary.settlements:
        print(
            f"  • game {settlement.game_id} ({settlement.outcome}): "
            f"{settlement.won} won, {settlement.lost} lost, {settlement.pushed} pushed, "
            f"${settlement.total_credited} credited"
        )
    print()
    return 0


def cmd_cleanup(args: argparse.Namespace) -> int:
    """Cancel stale games. Lists candidates unless --force is given."""
    settings = get_settings()
    stale_days = settings.settlement.stale_days

    async def _cleanup(db):
        if not args.force:
            return await retirement_service.find_stale_games(db, utc_now(), stale_days)
        return await retirement_service.cancel_stale_games(db, stale_days=stale_days)

    try:
        result = asyncio.run(_with_database(_cleanup))
    except Exception as e:
        logger.error(f"Cleanup failed: {e}", exc_info=True)
        print(f"\n❌ Cleanup failed: {e}\n")
        return 1

    if not args.force:
        print(f"\n{len(result)} games undecided for more than {stale_days} days")
        for game_id in result[:10]:
            print(f"  • {game_id}")
        if len(result) > 10:
            print(f"  ... and {len(result) - 10} more")
        print("\nRe-run with --force to delete or cancel them.\n")
        return 0

    print("\n=== Stale Game Cleanup ===\n")
    print(f"Deleted: {result.deleted}")
    print(f"Canceled: {result.canceled}")
    print(f"Bets refunded: {result.refunded_bets}")
    print(f"Failed: {result.failed}\n")
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Display merged configuration."""
    try:
        settings = get_settings()

        print("\n=== BetDesk Configuration ===\n")
        print(f"Environment: {settings.environment}")
        print(f"Database: {settings.database_url.split('@')[-1]}")
        print(f"Redis: {settings.redis_url.split('@')[-1]}\n")

        print("SportsData:")
        print(f"  Base URL: {settings.sportsdata.base_url}")
        print(f"  Timeout: {settings.sportsdata.timeout_seconds}s")
        print(f"  Sports: {', '.join(s.value for s in settings.sportsdata.sports)}\n")

        print("Betting:")
        print(f"  Starting Balance: ${settings.betting.starting_balance:,.2f}")
        print(f"  Max Start Lag: {settings.betting.max_start_lag_hours}h\n")

        print("Settlement (days):")
        print(f"  Result Lookback: {settings.settlement.result_lookback_days}")
        print(f"  Retention: {settings.settlement.retention_days}")
        print(f"  Stale After: {settings.settlement.stale_days}\n")

        print("Scheduler (minutes):")
        print(f"  Ingest + Resolve: {settings.scheduler.ingest_interval_minutes}")
        print(f"  Resolve: {settings.scheduler.resolve_interval_minutes}\n")

        print("Secrets:")
        print(f"  SportsData API Key: {_mask(settings.sportsdata.api_key)}")
        print(f"  Admin Token: {_mask(settings.admin_token)}")
        print(f"  Logfire: {_mask(settings.logfire_token)}\n")

        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="BetDesk: sports betting backend with odds feed and settlement",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"BetDesk {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_serve = subparsers.add_parser("serve", help="Run the API server")
    parser_serve.add_argument("--host", default=None)
    parser_serve.add_argument("--port", type=int, default=None)
    parser_serve.add_argument("--reload", action="store_true")
    parser_serve.set_defaults(func=cmd_serve)

    parser_init_db = subparsers.add_parser("init-db", help="Create database tables")
    parser_init_db.set_defaults(func=cmd_init_db)

    parser_ingest = subparsers.add_parser("ingest", help="Ingest today's odds")
    parser_ingest.set_defaults(func=cmd_ingest)

    parser_resolve = subparsers.add_parser(
        "resolve",
        help="Resolve finished games and settle their bets",
    )
    parser_resolve.set_defaults(func=cmd_resolve)

    parser_cleanup = subparsers.add_parser(
        "cleanup",
        help="Cancel games that never got a result",
    )
    parser_cleanup.add_argument(
        "--force",
        action="store_true",
        help="Actually delete/cancel instead of listing candidates",
    )
    parser_cleanup.set_defaults(func=cmd_cleanup)

    parser_config = subparsers.add_parser("config", help="Show configuration")
    parser_config.set_defaults(func=cmd_config)

    args = parser.parse_args()

    configure_logging("DEBUG" if args.debug else get_settings().log_level)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
