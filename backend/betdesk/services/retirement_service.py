"""Stale game cleanup."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.config import get_settings
from betdesk.enums import GameOutcome, GameStatus
from betdesk.models import Game, PlacedBet
from betdesk.schemas.summaries import RetirementSummary
from betdesk.services.settlement_service import settlement_service
from betdesk.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


class RetirementService:
    """
    Removes games nobody needs anymore.

    Games with bets are never deleted; they stay as the history behind the
    bet records.
    """

    async def count_bets(self, db: AsyncSession, game_id: int) -> int:
        result = await db.execute(
            select(func.count()).select_from(PlacedBet).where(PlacedBet.game_id == game_id)
        )
        return result.scalar_one()

    async def retire_finished_games(
        self,
        db: AsyncSession,
        now: Optional[datetime] = None,
        retention_days: Optional[int] = None,
    ) -> RetirementSummary:
        """Delete finished games past the retention window that have no bets."""
        if retention_days is None:
            retention_days = get_settings().settlement.retention_days
        cutoff = (now or utc_now()) - timedelta(days=retention_days)
        summary = RetirementSummary()

        result = await db.execute(
            select(Game.id)
            .where(Game.status == GameStatus.FINISHED.value)
            .where(Game.finished_at < cutoff)
        )
        game_ids = list(result.scalars().all())

        for game_id in game_ids:
            try:
                if await self.count_bets(db, game_id) > 0:
                    summary.kept += 1
                    continue
                await db.execute(delete(Game).where(Game.id == game_id))
                await db.commit()
                summary.deleted += 1
            except Exception as e:
                await db.rollback()
                summary.failed += 1
                logger.error(f"Failed to retire game {game_id}: {e}")

        if game_ids:
            logger.info(
                f"Retired finished games older than {retention_days}d: "
                f"{summary.deleted} deleted, {summary.kept} kept"
            )
        return summary

    async def find_stale_games(
        self,
        db: AsyncSession,
        now: datetime,
        stale_days: int,
    ) -> list[int]:
        """Undecided games scheduled more than stale_days before now."""
        cutoff = now - timedelta(days=stale_days)
        result = await db.execute(
            select(Game.id)
            .where(Game.outcome == GameOutcome.UNDECIDED.value)
            .where(Game.status != GameStatus.FINISHED.value)
            .where(Game.scheduled_time < cutoff)
            .order_by(Game.scheduled_time)
        )
        return list(result.scalars().all())

    async def cancel_stale_games(
        self,
        db: AsyncSession,
        now: Optional[datetime] = None,
        stale_days: Optional[int] = None,
    ) -> RetirementSummary:
        """
        Force-retire undecided games scheduled more than stale_days ago.

        Games without bets are deleted. Games with bets are finished with no
        winner, flagged auto_canceled, and every pending bet is refunded.
        """
        if stale_days is None:
            stale_days = get_settings().settlement.stale_days
        current = now or utc_now()
        summary = RetirementSummary()

        for game_id in await self.find_stale_games(db, current, stale_days):
            try:
                if await self.count_bets(db, game_id) == 0:
                    deleted = await db.execute(
                        delete(Game)
                        .where(Game.id == game_id)
                        .where(Game.outcome == GameOutcome.UNDECIDED.value)
                    )
                    await db.commit()
                    if deleted.rowcount == 1:
                        summary.deleted += 1
                    else:
                        summary.kept += 1
                    continue

                canceled = await db.execute(
                    update(Game)
                    .where(Game.id == game_id)
                    .where(Game.outcome == GameOutcome.UNDECIDED.value)
                    .values(
                        outcome=GameOutcome.TIE.value,
                        status=GameStatus.FINISHED.value,
                        finished_at=current,
                        auto_canceled=True,
                    )
                    .execution_options(synchronize_session=False)
                )
                await db.commit()
                if canceled.rowcount != 1:
                    # Resolved by a concurrent pass in the meantime
                    summary.kept += 1
                    continue

                summary.canceled += 1
                summary.refunded_bets += await settlement_service.refund_pending_bets(
                    db, game_id
                )
                logger.info(f"Auto-canceled stale game {game_id}")
            except Exception as e:
                await db.rollback()
                summary.failed += 1
                logger.error(f"Failed to cancel stale game {game_id}: {e}")

        logger.info(
            f"Stale game cleanup (older than {stale_days}d): {summary.deleted} deleted, "
            f"{summary.canceled} canceled, {summary.refunded_bets} bets refunded"
        )
        return summary


# Singleton instance
retirement_service = RetirementService()
