"""Database models module."""

from betdesk.models.balance import UserBalance
from betdesk.models.bet import PlacedBet
from betdesk.models.game import Game

__all__ = [
    "Game",
    "PlacedBet",
    "UserBalance",
]
