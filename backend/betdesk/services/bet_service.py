"""Bet placement and history."""

import logging
from datetime import timedelta
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from betdesk.config import get_settings
from betdesk.enums import BetSide, BetStatus, GameStatus
from betdesk.exceptions import ConflictError, InvalidInputError, NotFoundError
from betdesk.models import Game, PlacedBet
from betdesk.services.balance_service import balance_service, parse_amount
from betdesk.utils.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)


def parse_side(value: Any) -> BetSide:
    if value is None or value == "":
        raise InvalidInputError("Missing side", reason="missing_field")
    try:
        return BetSide(str(value).strip().lower())
    except ValueError:
        raise InvalidInputError(
            f"side must be 'home' or 'away', got {value!r}", reason="invalid_side"
        )


def parse_game_id(value: Any) -> int:
    if value is None or value == "":
        raise InvalidInputError("Missing gameId", reason="missing_field")
    if isinstance(value, bool):
        raise InvalidInputError("gameId must be an integer", reason="invalid_game_id")
    # int() would silently truncate 1.9 to 1
    if isinstance(value, float) and not value.is_integer():
        raise InvalidInputError("gameId must be an integer", reason="invalid_game_id")
    if isinstance(value, Decimal) and not (
        value.is_finite() and value == value.to_integral_value()
    ):
        raise InvalidInputError("gameId must be an integer", reason="invalid_game_id")
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError("gameId must be an integer", reason="invalid_game_id")


class BetService:
    """
    Handles bet placement and per-user bet history.
    """

    async def place_bet(
        self,
        db: AsyncSession,
        user_id: str,
        game_id: Any,
        side: Any,
        amount: Any,
    ) -> PlacedBet:
        """
        Place a bet for a user.

        Process:
        1. Validate amount, side and game id
        2. Check the game is open and the chosen side has odds
        3. Debit the balance (guarded on sufficient funds)
        4. Insert the bet in the same transaction as the debit
        """
        stake = parse_amount(amount)
        bet_side = parse_side(side)
        game_key = parse_game_id(game_id)

        result = await db.execute(
            select(Game)
            .where(Game.id == game_key)
            .execution_options(populate_existing=True)
        )
        game = result.scalar_one_or_none()
        if game is None:
            raise NotFoundError(f"Game {game_key} not found", reason="game_not_found")

        if game.is_decided or game.status == GameStatus.FINISHED.value:
            raise ConflictError(
                f"Game {game_key} is already finished", reason="game_finished"
            )

        max_lag = timedelta(hours=get_settings().betting.max_start_lag_hours)
        if as_utc(game.scheduled_time) < utc_now() - max_lag:
            raise ConflictError(
                f"Game {game_key} has already started", reason="game_started"
            )

        odds = game.odds_for(bet_side)
        if odds is None:
            raise ConflictError(
                f"No odds available for the {bet_side.value} side of game {game_key}",
                reason="odds_unavailable",
            )

        await balance_service.get_or_create_balance(db, user_id)
        try:
            await balance_service.debit(db, user_id, stake)
        except ConflictError:
            await db.rollback()
            raise

        bet = PlacedBet(
            user_id=user_id,
            game_id=game_key,
            side=bet_side.value,
            amount=stake,
            odds=odds,
            status=BetStatus.PENDING.value,
        )
        db.add(bet)
        await db.commit()
        await db.refresh(bet)

        logger.info(
            f"Placed bet {bet.id}: {user_id} ${stake} on {bet_side.value} "
            f"({odds:+d}) game {game_key}"
        )
        return bet

    async def get_bet(self, db: AsyncSession, bet_id: int) -> Optional[PlacedBet]:
        result = await db.execute(
            select(PlacedBet)
            .options(selectinload(PlacedBet.game))
            .where(PlacedBet.id == bet_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_user_bets(
        self,
        db: AsyncSession,
        user_id: str,
        status: Optional[BetStatus] = None,
        limit: int = 100,
    ) -> list[PlacedBet]:
        """Betting history for a user, newest first, with games attached."""
        query = (
            select(PlacedBet)
            .options(selectinload(PlacedBet.game))
            .where(PlacedBet.user_id == user_id)
        )
        if status is not None:
            query = query.where(PlacedBet.status == status.value)

        query = (
            query.order_by(PlacedBet.id.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# Singleton instance
bet_service = BetService()
