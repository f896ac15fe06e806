"""Game database model."""

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from betdesk.database.base import Base
from betdesk.enums import BetSide, GameOutcome, GameStatus
from betdesk.models.base import GameIdType, TimestampMixin


class Game(Base, TimestampMixin):
    """A single game with its pregame money lines and final result."""

    __tablename__ = "games"

    # Provider global id, unique across sports
    id = Column(
        GameIdType,
        primary_key=True,
        autoincrement=False,
    )
    sport = Column(String(10), nullable=False, index=True)

    home_team = Column(String(100), nullable=False, default="Unknown")
    away_team = Column(String(100), nullable=False, default="Unknown")
    scheduled_time = Column(DateTime(timezone=True), nullable=False)

    # American odds
    home_odds = Column(Integer, nullable=True)
    away_odds = Column(Integer, nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default=GameStatus.SCHEDULED.value)
    outcome = Column(String(20), nullable=False, default=GameOutcome.UNDECIDED.value)
    home_score = Column(Integer, nullable=True)
    away_score = Column(Integer, nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    auto_canceled = Column(Boolean, nullable=False, default=False)

    bets = relationship("PlacedBet", back_populates="game", lazy="raise")

    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'finished')",
            name="valid_game_status",
        ),
        CheckConstraint(
            "outcome IN ('undecided', 'home', 'away', 'tie')",
            name="valid_game_outcome",
        ),
        Index("idx_games_outcome_status", "outcome", "status"),
        Index("idx_games_finished_at", "finished_at"),
    )

    @property
    def game_outcome(self) -> GameOutcome:
        return GameOutcome(self.outcome)

    @property
    def is_decided(self) -> bool:
        return self.game_outcome.is_decided

    @property
    def winner(self) -> Optional[BetSide]:
        """Winning side, None for a tie or while undecided."""
        if self.outcome in (GameOutcome.HOME.value, GameOutcome.AWAY.value):
            return BetSide(self.outcome)
        return None

    def odds_for(self, side: BetSide) -> Optional[int]:
        return self.home_odds if side == BetSide.HOME else self.away_odds

    def __repr__(self) -> str:
        return f"<Game {self.id} {self.away_team} @ {self.home_team} ({self.outcome})>"
