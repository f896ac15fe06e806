"""Integration tests for the SportsData client against a mock transport."""

import asyncio
from datetime import date

import httpx
import pytest

from betdesk.config import SportsDataConfig
from betdesk.enums import Sport
from betdesk.exceptions import UpstreamUnavailableError
from betdesk.services.sportsdata import (
    SportsDataAPIError,
    SportsDataAuthError,
    SportsDataClient,
    SportsDataPayloadError,
)
from factories import feed_game

DAY = date(2026, 10, 19)


def _client(handler) -> SportsDataClient:
    config = SportsDataConfig(api_key="k3y", base_url="https://feed.test/v3")
    return SportsDataClient(config, transport=httpx.MockTransport(handler))


def test_odds_request_shape_and_parsing() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[feed_game(11), {"HomeTeam": "no id"}, "junk"])

    async def run():
        async with _client(handler) as client:
            return await client.get_odds_by_date(Sport.NHL, DAY)

    games = asyncio.run(run())

    assert [g.global_game_id for g in games] == [11]
    request = seen[0]
    assert request.url.path == "/v3/nhl/odds/json/GameOddsByDate/2026-10-19"
    assert request.url.params["key"] == "k3y"
    assert request.headers["Ocp-Apim-Subscription-Key"] == "k3y"


def test_scores_endpoint() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=[])

    async def run():
        async with _client(handler) as client:
            return await client.get_scores_by_date(Sport.MLB, DAY)

    assert asyncio.run(run()) == []
    assert seen == ["/v3/mlb/scores/json/GamesByDate/2026-10-19"]


@pytest.mark.parametrize(
    "response,error",
    [
        (httpx.Response(401, json={}), SportsDataAuthError),
        (httpx.Response(403, json={}), SportsDataAuthError),
        (httpx.Response(500, json={}), SportsDataAPIError),
        (httpx.Response(404, json={}), SportsDataAPIError),
        (httpx.Response(200, content=b"<html>"), SportsDataPayloadError),
        (httpx.Response(200, json={"not": "a list"}), SportsDataPayloadError),
    ],
)
def test_failures_raise_upstream_unavailable(response, error) -> None:
    async def run():
        async with _client(lambda request: response) as client:
            await client.get_odds_by_date(Sport.NBA, DAY)

    with pytest.raises(error) as exc:
        asyncio.run(run())
    assert isinstance(exc.value, UpstreamUnavailableError)
    assert exc.value.status_code == 502


def test_transport_errors_raise_upstream_unavailable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    async def run():
        async with _client(handler) as client:
            await client.get_scores_by_date(Sport.NBA, DAY)

    with pytest.raises(SportsDataAPIError):
        asyncio.run(run())


def test_client_requires_context_manager() -> None:
    with pytest.raises(RuntimeError):
        _client(lambda request: httpx.Response(200, json=[])).client
