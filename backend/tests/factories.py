"""Test data builders and a fake SportsData feed."""

import json
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Optional

import httpx

from betdesk.config import SportsDataConfig
from betdesk.enums import BetSide, BetStatus, GameOutcome, GameStatus, Sport
from betdesk.models import Game, PlacedBet, UserBalance
from betdesk.services.sportsdata import SportsDataClient
from betdesk.utils.time_utils import utc_now

FEED_BASE_URL = "https://feed.test/v3"


class FakeFeed:
    """
    Serves canned odds and scores payloads keyed by (kind, sport, date).

    Unknown keys return an empty array. Keys listed in `failures` answer
    with the given HTTP status instead.
    """

    def __init__(self):
        self.payloads: dict[tuple[str, str, str], Any] = {}
        self.failures: dict[tuple[str, str, str], int] = {}
        self.requests: list[httpx.Request] = []

    def odds(self, sport: Sport, day: str, games: list[dict]) -> None:
        self.payloads[("odds", sport.path, day)] = games

    def scores(self, sport: Sport, day: str, games: list[dict]) -> None:
        self.payloads[("scores", sport.path, day)] = games

    def fail(self, kind: str, sport: Sport, day: str, status: int = 503) -> None:
        self.failures[(kind, sport.path, day)] = status

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # /v3/{sport}/{kind}/json/{Endpoint}/{date}
        parts = request.url.path.strip("/").split("/")
        sport, kind, day = parts[-5], parts[-4], parts[-1]
        key = (kind, sport, day)

        if key in self.failures:
            return httpx.Response(self.failures[key], json={"message": "unavailable"})
        payload = self.payloads.get(key, [])
        if isinstance(payload, str):
            return httpx.Response(200, content=payload.encode())
        return httpx.Response(200, content=json.dumps(payload).encode())

    def client(self) -> SportsDataClient:
        config = SportsDataConfig(api_key="test-key", base_url=FEED_BASE_URL)
        return SportsDataClient(config, transport=httpx.MockTransport(self.handler))


def feed_game(
    game_id: int,
    home: str = "Celtics",
    away: str = "Knicks",
    home_line: Optional[int] = -150,
    away_line: Optional[int] = 130,
    status: str = "Scheduled",
    home_score: Optional[int] = None,
    away_score: Optional[int] = None,
    when: str = "2026-10-19T23:30:00",
) -> dict:
    """A game object shaped like the provider's feeds."""
    game = {
        "GlobalGameId": game_id,
        "HomeTeamName": home,
        "AwayTeamName": away,
        "DateTimeUTC": when,
        "Status": status,
        "HomeTeamScore": home_score,
        "AwayTeamScore": away_score,
    }
    if home_line is not None or away_line is not None:
        game["PregameOdds"] = [
            {"Sportsbook": "Consensus", "HomeMoneyLine": home_line, "AwayMoneyLine": away_line}
        ]
    return game


async def add_game(
    db,
    game_id: int = 1001,
    sport: Sport = Sport.NBA,
    home_odds: Optional[int] = -150,
    away_odds: Optional[int] = 130,
    scheduled_time: Optional[datetime] = None,
    outcome: GameOutcome = GameOutcome.UNDECIDED,
    finished_at: Optional[datetime] = None,
) -> int:
    """Insert a game row directly and return its id."""
    decided = outcome != GameOutcome.UNDECIDED
    db.add(
        Game(
            id=game_id,
            sport=sport.value,
            home_team="Celtics",
            away_team="Knicks",
            scheduled_time=scheduled_time or utc_now() + timedelta(hours=3),
            home_odds=home_odds,
            away_odds=away_odds,
            status=GameStatus.FINISHED.value if decided else GameStatus.SCHEDULED.value,
            outcome=outcome.value,
            finished_at=finished_at or (utc_now() if decided else None),
        )
    )
    await db.commit()
    return game_id


async def add_bet(
    db,
    game_id: int,
    user_id: str = "alice",
    side: BetSide = BetSide.HOME,
    amount: str = "100",
    status: BetStatus = BetStatus.PENDING,
) -> int:
    """Insert a bet row directly (no balance debit) and return its id."""
    bet = PlacedBet(
        user_id=user_id,
        game_id=game_id,
        side=side.value,
        amount=Decimal(amount),
        status=status.value,
    )
    db.add(bet)
    await db.commit()
    return bet.id


async def set_balance(db, user_id: str, amount: str) -> None:
    db.add(UserBalance(user_id=user_id, amount=Decimal(amount)))
    await db.commit()
