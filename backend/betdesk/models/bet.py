"""Placed bet database model."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import relationship

from betdesk.database.base import Base
from betdesk.enums import BetSide, BetStatus
from betdesk.models.base import GameIdType, MoneyType


class PlacedBet(Base):
    """A user's wager on one side of a game."""

    __tablename__ = "placed_bets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    game_id = Column(
        GameIdType,
        ForeignKey("games.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Bet details
    side = Column(String(4), nullable=False)
    amount = Column(MoneyType, nullable=False)
    odds = Column(Integer, nullable=True)

    # Settlement
    status = Column(String(10), nullable=False, default=BetStatus.PENDING.value)
    payout = Column(MoneyType, nullable=True)
    placed_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    processed_at = Column(DateTime(timezone=True), nullable=True)

    game = relationship("Game", back_populates="bets", lazy="raise")

    __table_args__ = (
        CheckConstraint("side IN ('home', 'away')", name="valid_bet_side"),
        CheckConstraint("amount > 0", name="positive_amount"),
        CheckConstraint(
            "status IN ('pending', 'won', 'lost', 'pushed', 'refunded')",
            name="valid_bet_status",
        ),
        Index("idx_placed_bets_game_status", "game_id", "status"),
    )

    @property
    def bet_side(self) -> BetSide:
        return BetSide(self.side)

    def __repr__(self) -> str:
        return f"<PlacedBet {self.id} {self.side} ${self.amount} ({self.status})>"
