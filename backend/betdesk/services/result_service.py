"""Game result resolution."""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.config import get_settings
from betdesk.enums import BetStatus, GameOutcome, GameStatus, Sport
from betdesk.exceptions import UpstreamUnavailableError
from betdesk.models import Game, PlacedBet
from betdesk.schemas.summaries import ResolutionSummary
from betdesk.services.retirement_service import retirement_service
from betdesk.services.settlement_service import settlement_service
from betdesk.services.sportsdata import SportsDataClient, UpstreamGame
from betdesk.utils.time_utils import candidate_dates, utc_now

logger = logging.getLogger(__name__)

ScoreCache = Dict[Tuple[Sport, date], Optional[Dict[int, UpstreamGame]]]


def decide_outcome(home_score: int, away_score: int) -> GameOutcome:
    if home_score > away_score:
        return GameOutcome.HOME
    if away_score > home_score:
        return GameOutcome.AWAY
    return GameOutcome.TIE


class ResultService:
    """
    Finds finished games upstream and records their outcome exactly once.

    Process:
    1. Load undecided, unfinished games
    2. Look each one up in the scores feed for today and the prior days
    3. Conditionally record the outcome (only if still undecided)
    4. Settle bets for games this pass decided
    5. Retire old finished games
    """

    async def get_undecided_games(self, db: AsyncSession) -> List[Tuple[int, Sport]]:
        result = await db.execute(
            select(Game.id, Game.sport)
            .where(Game.outcome == GameOutcome.UNDECIDED.value)
            .where(Game.status != GameStatus.FINISHED.value)
            .order_by(Game.scheduled_time)
        )
        return [(game_id, Sport(sport)) for game_id, sport in result.all()]

    async def _scores_for(
        self,
        client: SportsDataClient,
        sport: Sport,
        day: date,
        cache: ScoreCache,
    ) -> Optional[Dict[int, UpstreamGame]]:
        key = (sport, day)
        if key not in cache:
            try:
                games = await client.get_scores_by_date(sport, day)
                cache[key] = {g.global_game_id: g for g in games}
            except UpstreamUnavailableError as e:
                logger.warning(f"Could not fetch {sport.value} scores for {day}: {e}")
                cache[key] = None
        return cache[key]

    async def find_result(
        self,
        client: SportsDataClient,
        sport: Sport,
        game_id: int,
        dates: List[date],
        cache: Optional[ScoreCache] = None,
    ) -> Optional[UpstreamGame]:
        """Probe each candidate date until the game shows up."""
        if cache is None:
            cache = {}
        for day in dates:
            scores = await self._scores_for(client, sport, day, cache)
            if scores and game_id in scores:
                return scores[game_id]
        return None

    async def record_outcome(
        self,
        db: AsyncSession,
        game_id: int,
        outcome: GameOutcome,
        home_score: Optional[int],
        away_score: Optional[int],
    ) -> bool:
        """Set the outcome if nobody else has. Returns whether this call did."""
        result = await db.execute(
            update(Game)
            .where(Game.id == game_id)
            .where(Game.outcome == GameOutcome.UNDECIDED.value)
            .values(
                outcome=outcome.value,
                status=GameStatus.FINISHED.value,
                finished_at=utc_now(),
                home_score=home_score,
                away_score=away_score,
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount == 1

    async def settle_unsettled_games(self, db: AsyncSession) -> list:
        """
        Settle pending bets left on already-decided games.

        Covers a pass that died between recording an outcome and settling.
        """
        result = await db.execute(
            select(Game.id, Game.outcome, Game.auto_canceled)
            .join(PlacedBet, PlacedBet.game_id == Game.id)
            .where(Game.outcome != GameOutcome.UNDECIDED.value)
            .where(PlacedBet.status == BetStatus.PENDING.value)
            .distinct()
        )
        summaries = []
        for game_id, outcome, auto_canceled in result.all():
            if auto_canceled:
                await settlement_service.refund_pending_bets(db, game_id)
                continue
            logger.info(f"Settling leftover pending bets on game {game_id}")
            summaries.append(
                await settlement_service.settle_game(db, game_id, GameOutcome(outcome))
            )
        return summaries

    async def resolve_pending_games(
        self,
        db: AsyncSession,
        client: SportsDataClient,
        today: Optional[date] = None,
    ) -> ResolutionSummary:
        settings = get_settings()
        today = today or utc_now().date()
        dates = candidate_dates(today, settings.settlement.result_lookback_days)
        summary = ResolutionSummary()
        cache: ScoreCache = {}

        games = await self.get_undecided_games(db)
        logger.info(f"Resolving {len(games)} undecided games")

        for game_id, sport in games:
            summary.checked += 1
            try:
                upstream = await self.find_result(client, sport, game_id, dates, cache)
                if upstream is None:
                    summary.not_found += 1
                    logger.debug(f"Game {game_id} not found in {sport.value} scores")
                    continue
                if not upstream.is_final:
                    summary.not_final += 1
                    continue
                if upstream.home_score is None or upstream.away_score is None:
                    summary.not_final += 1
                    logger.warning(f"Game {game_id} is final but has no score yet")
                    continue

                outcome = decide_outcome(upstream.home_score, upstream.away_score)
                applied = await self.record_outcome(
                    db, game_id, outcome, upstream.home_score, upstream.away_score
                )
                if not applied:
                    summary.already_resolved += 1
                    logger.info(f"Game {game_id} already resolved, skipping settlement")
                    continue

                summary.resolved += 1
                logger.info(
                    f"Game {game_id} final {upstream.away_score}-{upstream.home_score}: "
                    f"{outcome.value}"
                )
                summary.settlements.append(
                    await settlement_service.settle_game(db, game_id, outcome)
                )
            except Exception as e:
                await db.rollback()
                summary.failed += 1
                logger.error(f"Failed to resolve game {game_id}: {e}")

        try:
            summary.settlements.extend(await self.settle_unsettled_games(db))
        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to settle leftover bets: {e}")

        try:
            summary.retirement = await retirement_service.retire_finished_games(db)
        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to retire finished games: {e}")

        logger.info(
            f"Resolution pass: {summary.checked} checked, {summary.resolved} resolved, "
            f"{summary.not_found} not found, {summary.failed} failed"
        )
        return summary


# Singleton instance
result_service = ResultService()
