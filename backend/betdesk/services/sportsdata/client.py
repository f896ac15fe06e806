from __future__ import annotations

import logging
from datetime import date
from typing import Any

import httpx

from betdesk.config import SportsDataConfig
from betdesk.enums import Sport

from .exceptions import (
    SportsDataAPIError,
    SportsDataAuthError,
    SportsDataPayloadError,
)
from .models import UpstreamGame

logger = logging.getLogger(__name__)

ODDS_BY_DATE = "{sport}/odds/json/GameOddsByDate/{date}"
SCORES_BY_DATE = "{sport}/scores/json/GamesByDate/{date}"


class SportsDataClient:
    """
    Async client for the per-sport, date-keyed odds and scores feeds.

    Failures are never retried here; the next scheduled pass picks the work
    up again.
    """

    def __init__(
        self,
        config: SportsDataConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or SportsDataConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if not self.config.api_key:
            logger.warning("SportsDataClient initialized without an API key")

    async def __aenter__(self) -> SportsDataClient:
        limits = httpx.Limits(
            max_connections=self.config.max_connections,
            max_keepalive_connections=self.config.max_keepalive_connections,
        )
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url.rstrip("/") + "/",
            timeout=self.config.timeout_seconds,
            limits=limits,
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: Any,
    ) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(
                "SportsDataClient must be used as async context manager"
            )
        return self._client

    async def _request(self, endpoint: str) -> list[dict[str, Any]]:
        headers = {"Ocp-Apim-Subscription-Key": self.config.api_key}
        params = {"key": self.config.api_key}

        try:
            response = await self.client.get(endpoint, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise SportsDataAPIError(f"Timeout fetching {endpoint}: {e}") from e
        except httpx.RequestError as e:
            raise SportsDataAPIError(f"Network error fetching {endpoint}: {e}") from e

        if response.status_code in (401, 403):
            raise SportsDataAuthError(
                "API key rejected", status_code=response.status_code
            )
        if response.status_code >= 400:
            raise SportsDataAPIError(
                f"HTTP {response.status_code} fetching {endpoint}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise SportsDataPayloadError(f"Malformed JSON from {endpoint}") from e

        if not isinstance(payload, list):
            raise SportsDataPayloadError(
                f"Expected a JSON array from {endpoint}, got {type(payload).__name__}"
            )
        return [item for item in payload if isinstance(item, dict)]

    async def _fetch_games(self, template: str, sport: Sport, day: date) -> list[UpstreamGame]:
        endpoint = template.format(sport=sport.path, date=day.isoformat())
        raw_games = await self._request(endpoint)

        games = []
        for raw in raw_games:
            game = UpstreamGame.from_api(raw)
            if game is None:
                logger.debug(f"Skipping {sport.value} game without a global id")
                continue
            games.append(game)
        return games

    async def get_odds_by_date(self, sport: Sport, day: date) -> list[UpstreamGame]:
        return await self._fetch_games(ODDS_BY_DATE, sport, day)

    async def get_scores_by_date(self, sport: Sport, day: date) -> list[UpstreamGame]:
        return await self._fetch_games(SCORES_BY_DATE, sport, day)


def create_sportsdata_client(
    config: SportsDataConfig | None = None,
) -> SportsDataClient:
    if config is None:
        from betdesk.config import get_settings

        config = get_settings().sportsdata
    return SportsDataClient(config)
