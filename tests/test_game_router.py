from decimal import Decimal
from unittest.mock import Mock

import pytest
from dependency_injector import providers

from pcoin.main import app
from pcoin.services.game_service import GameService
from pcoin.services.jackpot_service import JackpotPool


@pytest.fixture
def rng():
    return Mock()


@pytest.fixture
def fixed_games(client, db, test_settings, rng):
    """결과가 고정된 난수원을 쓰는 GameService 주입"""
    container = app.container  # type: ignore
    service = GameService(
        db,
        test_settings,
        jackpot_pool=JackpotPool(Decimal("100.00"), Decimal("0.01")),
        rng=rng,
    )
    container.services.game_service.override(providers.Object(service))
    yield service
    container.services.game_service.reset_override()


def test_list_games(client):
    res = client.get("/api/v1/games")
    assert res.status_code == 200
    assert len(res.json()) == 10


def test_play_win(client, fixed_games, rng, make_user, auth_headers):
    user = make_user("alice", "50.00")
    rng.randint.return_value = 17

    res = client.post(
        "/api/v1/games/play",
        json={
            "game_type": "roulette",
            "bet_amount": "10",
            "game_params": {"selected_numbers": [17]},
        },
        headers=auth_headers(user),
    )

    assert res.status_code == 200
    body = res.json()
    assert body["result"] == "win"
    assert Decimal(body["win_amount"]) == Decimal("360.00")
    assert Decimal(body["new_balance"]) == Decimal("400.00")
    assert body["outcome"]["winning_number"] == 17


def test_play_insufficient_funds(client, fixed_games, make_user, auth_headers):
    user = make_user("alice", "1.00")
    res = client.post(
        "/api/v1/games/play",
        json={"game_type": "cups", "bet_amount": "5", "game_params": {"selected_cup": 0}},
        headers=auth_headers(user),
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "BALANCE_001"


@pytest.mark.parametrize(
    "payload,status",
    [
        ({"game_type": "pachinko", "bet_amount": "1", "game_params": {}}, 404),
        ({"game_type": "cups", "bet_amount": "1", "game_params": {"selected_cup": 7}}, 422),
        ({"game_type": "cups", "bet_amount": "-1", "game_params": {"selected_cup": 0}}, 422),
        (
            {
                "game_type": "roulette",
                "bet_amount": "1",
                "game_params": {"selected_color": "red", "selected_parity": "odd"},
            },
            422,
        ),
    ],
)
def test_play_rejections(client, fixed_games, make_user, auth_headers, payload, status):
    user = make_user("alice", "10.00")
    res = client.post("/api/v1/games/play", json=payload, headers=auth_headers(user))
    assert res.status_code == status
    assert res.json()["success"] is False


def test_game_ban_is_forbidden(client, fixed_games, db, make_user, auth_headers):
    from pcoin.repositories.game_repository import GameRepository

    user = make_user("alice", "10.00")
    GameRepository(db).add_ban(user.id, "cups", "abuse", None)
    db.commit()

    res = client.post(
        "/api/v1/games/play",
        json={"game_type": "cups", "bet_amount": "1", "game_params": {"selected_cup": 0}},
        headers=auth_headers(user),
    )
    assert res.status_code == 403
    assert res.json()["error"]["code"] == "GAME_002"


def test_stats_recent_and_leaderboard(client, fixed_games, rng, make_user, auth_headers):
    user = make_user("alice", "10.00")
    headers = auth_headers(user)
    rng.randrange.return_value = 0
    client.post(
        "/api/v1/games/play",
        json={"game_type": "cups", "bet_amount": "2", "game_params": {"selected_cup": 0}},
        headers=headers,
    )

    stats = client.get("/api/v1/games/stats", headers=headers).json()
    assert stats["games_played"] == 1
    assert Decimal(stats["biggest_win"]) == Decimal("6.00")

    recent = client.get("/api/v1/games/recent", headers=headers).json()
    assert [r["game_type"] for r in recent] == ["cups"]

    board = client.get("/api/v1/games/leaderboard").json()
    assert board[0]["username"] == "alice"


def test_jackpot_amount(client, fixed_games):
    res = client.get("/api/v1/games/jackpot")
    assert res.status_code == 200
    assert Decimal(res.json()["amount"]) == Decimal("100.00")


def test_roulette_lists_single_bet_rule(client):
    games = {g["game_type"]: g for g in client.get("/api/v1/games").json()}
    assert "one bet per spin" in games["roulette"]["description"]


def test_play_over_balance_cap_is_refused_before_drawing(
    client, fixed_games, rng, make_user, auth_headers
):
    user = make_user("whale", "99999000.00")
    res = client.post(
        "/api/v1/games/play",
        json={"game_type": "cups", "bet_amount": "600", "game_params": {"selected_cup": 0}},
        headers=auth_headers(user),
    )
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "AMOUNT_002"
    rng.randrange.assert_not_called()
