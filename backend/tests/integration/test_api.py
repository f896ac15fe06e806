"""Integration tests for the HTTP API."""

import asyncio
from datetime import timedelta
from decimal import Decimal

import httpx
import pytest

from betdesk.api import dependencies
from betdesk.api.dependencies import get_sportsdata_client
from betdesk.config import Settings
from betdesk.enums import BetStatus, GameOutcome, Sport
from betdesk.main import app
from betdesk.utils.time_utils import utc_now
from factories import add_bet, add_game, feed_game, set_balance

ALICE = {"x-user-id": "alice"}


def _call(database, requests, setup=None, feed=None):
    """Seed the database, then issue (method, path, kwargs) requests in order."""

    async def run():
        async with database() as ctx:
            if setup is not None:
                async with ctx.session() as db:
                    await setup(db)

            if feed is not None:

                async def _client():
                    async with feed.client() as client:
                        yield client

                app.dependency_overrides[get_sportsdata_client] = _client
            try:
                transport = httpx.ASGITransport(app=app)
                async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                    return [
                        await client.request(method, path, **kwargs)
                        for method, path, kwargs in requests
                    ]
            finally:
                app.dependency_overrides.clear()

    return asyncio.run(run())


async def _two_games(db):
    await add_game(db, game_id=1001, sport=Sport.NBA)
    await add_game(db, game_id=2002, sport=Sport.NHL)
    await add_game(db, game_id=3003, outcome=GameOutcome.HOME)


def test_root_and_health(database) -> None:
    root, health = _call(database, [("GET", "/", {}), ("GET", "/health", {})])

    assert root.status_code == 200
    assert root.json()["name"] == "BetDesk API"
    assert health.json()["status"] == "healthy"
    assert health.json()["database"] == "connected"


def test_list_open_games(database) -> None:
    all_games, nhl = _call(
        database,
        [("GET", "/api/games", {}), ("GET", "/api/games", {"params": {"sport": "NHL"}})],
        setup=_two_games,
    )

    assert all_games.status_code == 200
    assert sorted(g["id"] for g in all_games.json()) == [1001, 2002]
    game = next(g for g in all_games.json() if g["id"] == 1001)
    assert game["homeTeam"] == "Celtics"
    assert game["homeOdds"] == -150
    assert game["outcome"] == "undecided"
    assert game["winner"] is None
    assert [g["id"] for g in nhl.json()] == [2002]


def test_get_single_game(database) -> None:
    found, missing = _call(
        database,
        [("GET", "/api/games/3003", {}), ("GET", "/api/games/9", {})],
        setup=_two_games,
    )

    assert found.json()["winner"] == "home"
    assert missing.status_code == 404
    assert missing.json()["reason"] == "game_not_found"


@pytest.mark.parametrize(
    "headers",
    [{}, {"x-user-id": ""}, {"x-user-id": "   "}, {"x-user-id": "anonymous"}, {"x-user-id": "Anonymous"}],
)
def test_identity_required(database, headers) -> None:
    responses = _call(
        database,
        [
            ("GET", "/api/balance", {"headers": headers}),
            ("GET", "/api/placed-bets", {"headers": headers}),
            ("POST", "/api/place-bet", {"headers": headers, "json": {"gameId": 1, "bet": "home", "amount": 1}}),
            ("POST", "/api/balance/add", {"headers": headers, "json": {"amount": 1}}),
        ],
    )

    for response in responses:
        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"


def test_balance_endpoints(database) -> None:
    initial, added, deducted, too_much, bad = _call(
        database,
        [
            ("GET", "/api/balance", {"headers": ALICE}),
            ("POST", "/api/balance/add", {"headers": ALICE, "json": {"amount": 25.5}}),
            ("POST", "/api/balance/deduct", {"headers": ALICE, "json": {"amount": "125.50"}}),
            ("POST", "/api/balance/deduct", {"headers": ALICE, "json": {"amount": 901}}),
            ("POST", "/api/balance/add", {"headers": ALICE, "json": {}}),
        ],
    )

    assert initial.json() == {"userId": "alice", "amount": 1000.0}
    assert added.json()["amount"] == 1025.5
    assert deducted.json()["amount"] == 900.0
    assert too_much.status_code == 409
    assert too_much.json()["reason"] == "insufficient_balance"
    assert bad.status_code == 400
    assert bad.json() == {
        "error": "invalid_input",
        "reason": "missing_field",
        "detail": "Missing amount",
    }


def test_place_bet_and_list_history(database) -> None:
    placed, history, balance = _call(
        database,
        [
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": "1001", "bet": "away", "amount": 100}}),
            ("GET", "/api/placed-bets", {"headers": ALICE}),
            ("GET", "/api/balance", {"headers": ALICE}),
        ],
        setup=_two_games,
    )

    assert placed.status_code == 201
    body = placed.json()
    assert body["gameId"] == 1001
    assert body["side"] == "away"
    assert body["odds"] == 130
    assert body["amount"] == 100.0
    assert body["status"] == "pending"
    assert body["game"]["awayTeam"] == "Knicks"

    assert [b["id"] for b in history.json()] == [body["id"]]
    assert balance.json()["amount"] == 900.0


def test_place_bet_accepts_side_field(database) -> None:
    (placed,) = _call(
        database,
        [("POST", "/api/place-bet", {"headers": ALICE, "json": {"game_id": 1001, "side": "home", "amount": 5}})],
        setup=_two_games,
    )

    assert placed.status_code == 201
    assert placed.json()["side"] == "home"


def test_place_bet_errors(database) -> None:
    missing_game, finished, bad_side = _call(
        database,
        [
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": 9, "bet": "home", "amount": 5}}),
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": 3003, "bet": "home", "amount": 5}}),
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": 1001, "bet": "over", "amount": 5}}),
        ],
        setup=_two_games,
    )

    assert missing_game.status_code == 404
    assert finished.status_code == 409
    assert finished.json()["reason"] == "game_finished"
    assert bad_side.status_code == 400
    assert bad_side.json()["reason"] == "invalid_side"


def test_out_of_range_inputs_are_rejected(database) -> None:
    huge_add, huge_deduct, huge_bet, fractional_game, balance = _call(
        database,
        [
            ("POST", "/api/balance/add", {"headers": ALICE, "json": {"amount": "1e27"}}),
            ("POST", "/api/balance/deduct", {"headers": ALICE, "json": {"amount": 1e27}}),
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": 1001, "bet": "home", "amount": "1e27"}}),
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": 1001.9, "bet": "home", "amount": 5}}),
            ("GET", "/api/balance", {"headers": ALICE}),
        ],
        setup=_two_games,
    )

    for response in (huge_add, huge_deduct, huge_bet):
        assert response.status_code == 400
        assert response.json()["reason"] == "invalid_amount"
    assert fractional_game.status_code == 400
    assert fractional_game.json()["reason"] == "invalid_game_id"
    assert balance.json()["amount"] == 1000.0


def test_placed_bets_status_filter(database) -> None:
    async def setup(db):
        await _two_games(db)
        await add_bet(db, 1001, user_id="alice")
        await add_bet(db, 3003, user_id="alice", status=BetStatus.WON)

    won, everything = _call(
        database,
        [
            ("GET", "/api/placed-bets", {"headers": ALICE, "params": {"status": "won"}}),
            ("GET", "/api/placed-bets", {"headers": ALICE}),
        ],
        setup=setup,
    )

    assert [b["gameId"] for b in won.json()] == [3003]
    assert len(everything.json()) == 2


def test_admin_cleanup(database) -> None:
    async def setup(db):
        await add_game(db, game_id=1, scheduled_time=utc_now() - timedelta(days=5))
        await add_game(db, game_id=2, scheduled_time=utc_now() - timedelta(days=5))
        await set_balance(db, "alice", "0")
        await add_bet(db, 2, user_id="alice", amount="12")

    (cleanup,) = _call(database, [("POST", "/api/admin/cleanup-old-games", {})], setup=setup)

    assert cleanup.status_code == 200
    assert cleanup.json()["deleted"] == 1
    assert cleanup.json()["canceled"] == 1
    assert cleanup.json()["refunded_bets"] == 1


def test_admin_token_enforced(database, monkeypatch) -> None:
    settings = Settings(_env_file=None, admin_token="s3cret")
    monkeypatch.setattr(dependencies, "get_settings", lambda: settings)

    denied, allowed = _call(
        database,
        [
            ("POST", "/api/admin/cleanup-old-games", {"headers": {"x-admin-token": "nope"}}),
            ("POST", "/api/admin/cleanup-old-games", {"headers": {"x-admin-token": "s3cret"}}),
        ],
    )

    assert denied.status_code == 401
    assert denied.json()["reason"] == "invalid_admin_token"
    assert allowed.status_code == 200


def test_admin_ingest_then_resolve(database, feed) -> None:
    now = utc_now()
    today = now.date().isoformat()
    tip_off = (now + timedelta(hours=2)).isoformat()
    feed.odds(Sport.NBA, today, [feed_game(5005, home_line=-150, away_line=130, when=tip_off)])
    feed.scores(
        Sport.NBA,
        today,
        [feed_game(5005, status="Final", home_score=98, away_score=101, when=tip_off)],
    )

    async def setup(db):
        await set_balance(db, "alice", "100")

    ingest, bet, resolve, balance = _call(
        database,
        [
            ("POST", "/api/admin/ingest", {}),
            ("POST", "/api/place-bet", {"headers": ALICE, "json": {"gameId": 5005, "bet": "away", "amount": 100}}),
            ("POST", "/api/admin/resolve", {}),
            ("GET", "/api/balance", {"headers": ALICE}),
        ],
        setup=setup,
        feed=feed,
    )

    assert ingest.status_code == 200
    assert ingest.json()["sports"]["NBA"]["inserted"] == 1
    assert bet.status_code == 201
    assert resolve.json()["resolved"] == 1
    assert resolve.json()["settlements"][0]["won"] == 1
    assert Decimal(str(resolve.json()["settlements"][0]["total_credited"])) == Decimal("230.00")
    assert balance.json()["amount"] == 230.0
