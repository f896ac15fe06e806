"""Daily odds ingestion."""

import logging
from datetime import date
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.config import get_settings
from betdesk.enums import GameOutcome, GameStatus, Sport
from betdesk.exceptions import UpstreamUnavailableError
from betdesk.models import Game
from betdesk.schemas.summaries import IngestionSummary, SportIngestion
from betdesk.services.sportsdata import SportsDataClient, UpstreamGame
from betdesk.utils.time_utils import start_of_day, utc_now

logger = logging.getLogger(__name__)

UNKNOWN_TEAM = "Unknown"

INSERTED = "inserted"
UPDATED = "updated"
SKIPPED = "skipped"


def normalize_game(sport: Sport, upstream: UpstreamGame) -> Dict[str, Any]:
    """
    Game fields the feed entry actually supplies.

    Missing teams, start time or money line are left out so an update never
    replaces known values; insert_defaults() fills them for new rows.
    """
    values: Dict[str, Any] = {"id": upstream.global_game_id, "sport": sport.value}
    if upstream.home_team:
        values["home_team"] = upstream.home_team
    if upstream.away_team:
        values["away_team"] = upstream.away_team
    if upstream.scheduled_time is not None:
        values["scheduled_time"] = upstream.scheduled_time
    line = upstream.first_odds
    if line is not None:
        values["home_odds"] = line.home_money_line
        values["away_odds"] = line.away_money_line
    return values


def insert_defaults(feed_date: date) -> Dict[str, Any]:
    return {
        "home_team": UNKNOWN_TEAM,
        "away_team": UNKNOWN_TEAM,
        "scheduled_time": start_of_day(feed_date),
        "home_odds": None,
        "away_odds": None,
    }


class OddsService:
    """
    Pulls today's odds per sport and upserts games.

    A game is only ever written while undecided; once it has an outcome the
    feed can keep returning it without effect.
    """

    async def upsert_game(
        self, db: AsyncSession, values: Dict[str, Any], feed_date: date
    ) -> str:
        game_id = values["id"]
        fields = {k: v for k, v in values.items() if k != "id"}

        result = await db.execute(
            update(Game)
            .where(Game.id == game_id)
            .where(Game.outcome == GameOutcome.UNDECIDED.value)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            await db.commit()
            return UPDATED

        existing = await db.execute(select(Game.id).where(Game.id == game_id))
        if existing.scalar_one_or_none() is not None:
            await db.rollback()
            return SKIPPED

        db.add(
            Game(
                **{**insert_defaults(feed_date), **values},
                status=GameStatus.SCHEDULED.value,
                outcome=GameOutcome.UNDECIDED.value,
            )
        )
        try:
            await db.commit()
        except IntegrityError:
            # Inserted by a concurrent pass
            await db.rollback()
            return SKIPPED
        return INSERTED

    async def ingest_sport(
        self,
        db: AsyncSession,
        client: SportsDataClient,
        sport: Sport,
        day: date,
    ) -> SportIngestion:
        stats = SportIngestion()
        upstream_games = await client.get_odds_by_date(sport, day)
        stats.fetched = len(upstream_games)

        for upstream in upstream_games:
            values = normalize_game(sport, upstream)
            try:
                action = await self.upsert_game(db, values, day)
            except Exception as e:
                await db.rollback()
                stats.failed += 1
                logger.error(f"Failed to upsert {sport.value} game {values['id']}: {e}")
                continue

            if action == INSERTED:
                stats.inserted += 1
            elif action == UPDATED:
                stats.updated += 1
            else:
                stats.skipped_decided += 1

        logger.info(
            f"Ingested {sport.value} odds for {day}: {stats.fetched} fetched, "
            f"{stats.inserted} new, {stats.updated} updated, "
            f"{stats.skipped_decided} already decided"
        )
        return stats

    async def ingest_today(
        self,
        db: AsyncSession,
        client: SportsDataClient,
        today: Optional[date] = None,
        sports: Optional[Iterable[Sport]] = None,
    ) -> IngestionSummary:
        """Fetch and store today's odds for every configured sport."""
        day = today or utc_now().date()
        if sports is None:
            sports = get_settings().sportsdata.sports
        summary = IngestionSummary(date=day.isoformat())

        for sport in sports:
            try:
                summary.sports[sport.value] = await self.ingest_sport(db, client, sport, day)
            except UpstreamUnavailableError as e:
                summary.failed_sports.append(sport.value)
                logger.warning(f"Skipping {sport.value} odds for {day}: {e}")
            except Exception as e:
                await db.rollback()
                summary.failed_sports.append(sport.value)
                logger.error(f"Odds ingestion failed for {sport.value}: {e}")

        return summary


# Singleton instance
odds_service = OddsService()
