"""Pydantic schemas for the API and service summaries."""

from betdesk.schemas.balance import BalanceChangeRequest, BalanceResponse
from betdesk.schemas.bet import PlaceBetRequest, PlacedBetResponse
from betdesk.schemas.common import BaseSchema
from betdesk.schemas.game import GameResponse
from betdesk.schemas.summaries import (
    IngestionSummary,
    ResolutionSummary,
    RetirementSummary,
    ScheduledRunSummary,
    SettlementSummary,
    SportIngestion,
)

__all__ = [
    "BaseSchema",
    # Games
    "GameResponse",
    # Bets
    "PlaceBetRequest",
    "PlacedBetResponse",
    # Balance
    "BalanceChangeRequest",
    "BalanceResponse",
    # Bookkeeping passes
    "IngestionSummary",
    "ResolutionSummary",
    "RetirementSummary",
    "ScheduledRunSummary",
    "SettlementSummary",
    "SportIngestion",
]
