"""Bet Pydantic schemas."""

from datetime import datetime
from typing import Any, Optional

from pydantic import AliasChoices, Field

from betdesk.enums import BetSide, BetStatus
from betdesk.schemas.common import BaseSchema
from betdesk.schemas.game import GameResponse


class PlaceBetRequest(BaseSchema):
    """
    Bet placement body.

    Fields stay loosely typed so the service can report missing or malformed
    values with its own error kinds.
    """

    game_id: Any = None
    side: Any = Field(default=None, validation_alias=AliasChoices("side", "bet"))
    amount: Any = None


class PlacedBetResponse(BaseSchema):
    id: int
    user_id: str
    game_id: int
    side: BetSide
    amount: float
    odds: Optional[int]
    status: BetStatus
    payout: Optional[float]
    placed_at: datetime
    processed_at: Optional[datetime]
    game: Optional[GameResponse] = None
