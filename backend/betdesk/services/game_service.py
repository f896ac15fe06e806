"""Game queries for the API."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.enums import GameOutcome, GameStatus, Sport
from betdesk.models import Game


class GameService:
    async def get_open_games(
        self,
        db: AsyncSession,
        sport: Optional[Sport] = None,
    ) -> list[Game]:
        """Games still waiting on a result, soonest first."""
        query = (
            select(Game)
            .where(Game.outcome == GameOutcome.UNDECIDED.value)
            .where(Game.status != GameStatus.FINISHED.value)
        )
        if sport is not None:
            query = query.where(Game.sport == sport.value)

        result = await db.execute(query.order_by(Game.scheduled_time, Game.id))
        return list(result.scalars().all())

    async def get_game(self, db: AsyncSession, game_id: int) -> Optional[Game]:
        result = await db.execute(
            select(Game)
            .where(Game.id == game_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()


# Singleton instance
game_service = GameService()
