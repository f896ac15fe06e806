"""Bet settlement for decided games."""

import logging
from decimal import Decimal
from typing import NamedTuple, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from betdesk.enums import BetSide, BetStatus, GameOutcome
from betdesk.models import Game, PlacedBet
from betdesk.schemas.summaries import SettlementSummary
from betdesk.services.balance_service import balance_service
from betdesk.services.payout_calculator import calculate_payout, to_money
from betdesk.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class PendingBet(NamedTuple):
    """Detached copy of a pending bet; ORM rows expire on rollback."""

    id: int
    user_id: str
    game_id: int
    side: BetSide
    amount: Decimal

    @classmethod
    def from_model(cls, bet: PlacedBet) -> "PendingBet":
        return cls(
            id=bet.id,
            user_id=bet.user_id,
            game_id=bet.game_id,
            side=BetSide(bet.side),
            amount=to_money(bet.amount),
        )


class SettlementService:
    """
    Moves pending bets to a terminal status and pays out.

    Every transition is an UPDATE filtered on status = 'pending', committed
    together with the matching balance credit. If the UPDATE touches no row
    another pass got there first and the bet is left alone.
    """

    async def get_pending_bets(self, db: AsyncSession, game_id: int) -> list[PendingBet]:
        result = await db.execute(
            select(PlacedBet)
            .where(PlacedBet.game_id == game_id)
            .where(PlacedBet.status == BetStatus.PENDING.value)
            .order_by(PlacedBet.id)
        )
        return [PendingBet.from_model(bet) for bet in result.scalars().all()]

    def classify(
        self,
        bet: PendingBet,
        outcome: GameOutcome,
        odds: Optional[int],
    ) -> tuple[BetStatus, Decimal]:
        """
        Terminal status and payout for a bet given the game outcome.

        `odds` are the American odds of the side the bet is on. Ties push
        (stake back). A winning bet without odds on record gets its stake
        back but still counts as won.
        """
        if outcome == GameOutcome.TIE:
            return BetStatus.PUSHED, bet.amount
        if bet.side.value == outcome.value:
            if odds is None:
                logger.warning(
                    f"Bet {bet.id} won on game {bet.game_id} with no odds on record, "
                    "refunding stake"
                )
            return BetStatus.WON, calculate_payout(bet.amount, odds)
        return BetStatus.LOST, ZERO

    async def transition(
        self,
        db: AsyncSession,
        bet: PendingBet,
        status: BetStatus,
        payout: Decimal,
    ) -> bool:
        """
        Apply one pending -> terminal transition and credit the payout.

        Returns False when the bet was no longer pending.
        """
        if payout > 0:
            # Make sure the credit has a row to land on before writing anything
            await balance_service.get_or_create_balance(db, bet.user_id)

        result = await db.execute(
            update(PlacedBet)
            .where(PlacedBet.id == bet.id)
            .where(PlacedBet.status == BetStatus.PENDING.value)
            .values(status=status.value, payout=payout, processed_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await db.rollback()
            return False

        if payout > 0:
            await balance_service.credit(db, bet.user_id, payout)
        await db.commit()
        return True

    async def settle_game(
        self,
        db: AsyncSession,
        game_id: int,
        outcome: GameOutcome,
    ) -> SettlementSummary:
        """Settle every pending bet on a decided game."""
        summary = SettlementSummary(game_id=game_id, outcome=outcome.value)
        if not outcome.is_decided:
            logger.warning(f"Refusing to settle undecided game {game_id}")
            return summary

        game = await db.get(Game, game_id)
        if game is None:
            logger.warning(f"Settling bets on missing game {game_id}")
            odds_by_side = {BetSide.HOME: None, BetSide.AWAY: None}
        else:
            odds_by_side = {BetSide.HOME: game.home_odds, BetSide.AWAY: game.away_odds}

        for bet in await self.get_pending_bets(db, game_id):
            try:
                status, payout = self.classify(bet, outcome, odds_by_side[bet.side])
                applied = await self.transition(db, bet, status, payout)
            except Exception as e:
                await db.rollback()
                summary.failed += 1
                logger.error(f"Failed to settle bet {bet.id} on game {game_id}: {e}")
                continue

            if not applied:
                summary.skipped += 1
                logger.info(f"Bet {bet.id} already processed, skipping")
                continue

            if status == BetStatus.WON:
                summary.won += 1
            elif status == BetStatus.PUSHED:
                summary.pushed += 1
            else:
                summary.lost += 1
            summary.total_credited += payout

            logger.info(
                f"Settled bet {bet.id} for {bet.user_id}: {status.value.upper()} ${payout}"
            )

        logger.info(
            f"Settled game {game_id} ({outcome.value}): {summary.won} won, "
            f"{summary.lost} lost, {summary.pushed} pushed, {summary.skipped} skipped, "
            f"{summary.failed} failed, ${summary.total_credited} credited"
        )
        return summary

    async def refund_pending_bets(self, db: AsyncSession, game_id: int) -> int:
        """Return the stake on every pending bet of a canceled game."""
        refunded = 0
        for bet in await self.get_pending_bets(db, game_id):
            try:
                if await self.transition(db, bet, BetStatus.REFUNDED, bet.amount):
                    refunded += 1
                else:
                    logger.info(f"Bet {bet.id} already processed, not refunding")
            except Exception as e:
                await db.rollback()
                logger.error(f"Failed to refund bet {bet.id} on game {game_id}: {e}")
        return refunded


# Singleton instance
settlement_service = SettlementService()
