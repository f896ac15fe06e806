"""Enumerations shared by database models, schemas and services."""

from enum import Enum


class Sport(str, Enum):
    """Leagues with a date-keyed odds and scores feed."""

    NBA = "NBA"
    NHL = "NHL"
    MLB = "MLB"

    @property
    def path(self) -> str:
        """URL segment used by the upstream provider."""
        return self.value.lower()


class GameStatus(str, Enum):
    SCHEDULED = "scheduled"
    FINISHED = "finished"


class GameOutcome(str, Enum):
    """Decision state of a game.

    UNDECIDED means no result has been recorded yet. TIE means the game was
    decided without a winner (a push, or an administrative cancellation).
    """

    UNDECIDED = "undecided"
    HOME = "home"
    AWAY = "away"
    TIE = "tie"

    @property
    def is_decided(self) -> bool:
        return self is not GameOutcome.UNDECIDED


class BetSide(str, Enum):
    HOME = "home"
    AWAY = "away"


class BetStatus(str, Enum):
    PENDING = "pending"
    WON = "won"
    LOST = "lost"
    PUSHED = "pushed"
    REFUNDED = "refunded"
