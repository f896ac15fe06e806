from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import BaseModel

# Local feed times are US Eastern
FEED_TIMEZONE = ZoneInfo("America/New_York")

FINAL_EXACT = {"f", "closed"}
FINAL_CONTAINS = ("final", "f/ot", "f/so")


def is_final_status(status: str | None) -> bool:
    if not status:
        return False
    normalized = status.strip().lower()
    return normalized in FINAL_EXACT or any(t in normalized for t in FINAL_CONTAINS)


def _parse_time(value: Any, tz: timezone | ZoneInfo) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed.astimezone(timezone.utc)


def _money_line(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _score(data: dict[str, Any], *keys: str) -> int | None:
    for key in keys:
        value = data.get(key)
        if value is not None:
            try:
                return int(value)
            except (TypeError, ValueError):
                return None
    return None


class OddsLine(BaseModel):
    sportsbook: str = ""
    home_money_line: int | None = None
    away_money_line: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> OddsLine:
        return cls(
            sportsbook=data.get("Sportsbook") or "",
            home_money_line=_money_line(data.get("HomeMoneyLine")),
            away_money_line=_money_line(data.get("AwayMoneyLine")),
        )


class UpstreamGame(BaseModel):
    """One game object from the odds-by-date or scores-by-date feeds."""

    global_game_id: int
    home_team: str | None = None
    away_team: str | None = None
    scheduled_time: datetime | None = None
    status: str | None = None
    home_score: int | None = None
    away_score: int | None = None
    pregame_odds: list[OddsLine] = []

    @property
    def is_final(self) -> bool:
        return is_final_status(self.status)

    @property
    def first_odds(self) -> OddsLine | None:
        return self.pregame_odds[0] if self.pregame_odds else None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> UpstreamGame | None:
        game_id = data.get("GlobalGameId") or data.get("GlobalGameID")
        if game_id is None:
            return None
        try:
            game_id = int(game_id)
        except (TypeError, ValueError):
            return None

        scheduled = _parse_time(data.get("DateTimeUTC"), timezone.utc)
        if scheduled is None:
            scheduled = _parse_time(data.get("DateTime"), FEED_TIMEZONE)

        raw_odds = data.get("PregameOdds") or []
        return cls(
            global_game_id=game_id,
            home_team=data.get("HomeTeamName") or data.get("HomeTeam"),
            away_team=data.get("AwayTeamName") or data.get("AwayTeam"),
            scheduled_time=scheduled,
            status=data.get("Status"),
            home_score=_score(data, "HomeTeamScore", "HomeTeamRuns"),
            away_score=_score(data, "AwayTeamScore", "AwayTeamRuns"),
            pregame_odds=[
                OddsLine.from_api(line) for line in raw_odds if isinstance(line, dict)
            ],
        )
