"""Game Pydantic schemas."""

from datetime import datetime
from typing import Optional

from betdesk.enums import BetSide, GameOutcome, GameStatus, Sport
from betdesk.schemas.common import BaseSchema


class GameResponse(BaseSchema):
    """Game as shown to the client."""

    id: int
    sport: Sport
    home_team: str
    away_team: str
    scheduled_time: datetime
    home_odds: Optional[int]
    away_odds: Optional[int]
    status: GameStatus
    outcome: GameOutcome
    winner: Optional[BetSide]
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    finished_at: Optional[datetime] = None
    auto_canceled: bool = False
