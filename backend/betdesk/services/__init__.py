"""Business logic services."""

from betdesk.services.balance_service import balance_service
from betdesk.services.bet_service import bet_service
from betdesk.services.game_service import game_service
from betdesk.services.odds_service import odds_service
from betdesk.services.result_service import result_service
from betdesk.services.retirement_service import retirement_service
from betdesk.services.settlement_service import settlement_service

__all__ = [
    "balance_service",
    "bet_service",
    "game_service",
    "odds_service",
    "result_service",
    "retirement_service",
    "settlement_service",
]
