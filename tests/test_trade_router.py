from decimal import Decimal


def test_trade_lifecycle(client, make_user, auth_headers):
    alice = make_user("alice", "100.00")
    bob = make_user("bob")

    res = client.post(
        "/api/v1/trades",
        json={"receiver_username": "bob", "amount": "30", "message": "lunch"},
        headers=auth_headers(alice),
    )
    assert res.status_code == 201
    body = res.json()
    trade_id = body["trade"]["id"]
    assert body["trade"]["status"] == "pending"
    assert Decimal(body["new_balance"]) == Decimal("70.00")

    received = client.get("/api/v1/trades/received", headers=auth_headers(bob)).json()
    assert received["total_count"] == 1

    # 송신자는 수락할 수 없음
    res = client.post(f"/api/v1/trades/{trade_id}/accept", headers=auth_headers(alice))
    assert res.status_code == 403

    res = client.post(f"/api/v1/trades/{trade_id}/accept", headers=auth_headers(bob))
    assert res.status_code == 200
    assert Decimal(res.json()["new_balance"]) == Decimal("30.00")

    res = client.post(f"/api/v1/trades/{trade_id}/cancel", headers=auth_headers(alice))
    assert res.status_code == 409


def test_trade_to_unknown_user(client, make_user, auth_headers):
    alice = make_user("alice", "10.00")
    res = client.post(
        "/api/v1/trades",
        json={"receiver_username": "ghost", "amount": "1"},
        headers=auth_headers(alice),
    )
    assert res.status_code == 404


def test_unknown_trade(client, make_user, auth_headers):
    bob = make_user("bob")
    res = client.post("/api/v1/trades/999/accept", headers=auth_headers(bob))
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "TRADE_001"


def test_bank_round_trip(client, make_user, auth_headers):
    user = make_user("saver", "50.00")
    headers = auth_headers(user)

    res = client.post("/api/v1/bank/deposit", json={"amount": "20"}, headers=headers)
    assert res.status_code == 200
    assert Decimal(res.json()["wallet_balance"]) == Decimal("30.00")

    res = client.post("/api/v1/bank/withdraw", json={"amount": "25"}, headers=headers)
    assert res.status_code == 400

    res = client.get("/api/v1/bank/account", headers=headers)
    assert Decimal(res.json()["balance"]) == Decimal("20.00")

    history = client.get("/api/v1/bank/transactions", headers=headers).json()
    assert [h["type"] for h in history] == ["deposit"]


def test_redeem_code(client, db, make_user, auth_headers):
    from pcoin.services.redeem_service import RedeemService

    owner = make_user("owner")
    user = make_user("alice")
    RedeemService(db).generate(
        "12.50", 1, owner.id, code="SPRING"
    )

    res = client.post("/api/v1/redeem", json={"code": "spring"}, headers=auth_headers(user))
    assert res.status_code == 200
    assert Decimal(res.json()["new_balance"]) == Decimal("12.50")

    res = client.post("/api/v1/redeem", json={"code": "SPRING"}, headers=auth_headers(user))
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CODE_003"

    res = client.post("/api/v1/redeem", json={"code": "NOPE"}, headers=auth_headers(user))
    assert res.status_code == 404


def test_out_of_range_amounts_are_422(client, make_user, auth_headers):
    user = make_user("whale", "50.00")
    headers = auth_headers(user)

    res = client.post("/api/v1/bank/deposit", json={"amount": "1e40"}, headers=headers)
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "AMOUNT_001"

    res = client.post(
        "/api/v1/games/play",
        json={"game_type": "cups", "bet_amount": "1e40", "game_params": {"selected_cup": 0}},
        headers=headers,
    )
    assert res.status_code == 422

    res = client.get("/api/v1/wallet/balance", headers=headers)
    assert Decimal(res.json()["balance"]) == Decimal("50.00")
