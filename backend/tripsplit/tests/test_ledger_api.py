"""
End-to-end tests for ledger, balance and settlement endpoints.
"""
import pytest


def entries(items):
    return [(item["user_id"], item["amount_cents"]) for item in items]


@pytest.fixture
def scenario(client, register, make_trip):
    """
    Members A, B, C in a USD trip.
    A pays 100 split equally among A, B, C (34/33/33).
    B pays 60 split equally among B, C (30/30).
    """
    a, b, c = register("Anna"), register("Ben"), register("Cleo")
    trip_id, _ = make_trip(a, [b, c], currency_code="USD")

    first = client.post(
        f"/api/trips/{trip_id}/expenses",
        json={"description": "Groceries", "amount_cents": 100, "currency_code": "USD",
              "split_mode": "equal", "participants": [a[0], b[0], c[0]]},
        headers=a[1]
    )
    assert first.status_code == 201, first.text
    second = client.post(
        f"/api/trips/{trip_id}/expenses",
        json={"description": "Taxi", "amount_cents": 60, "currency_code": "USD",
              "split_mode": "equal", "participants": [b[0], c[0]]},
        headers=b[1]
    )
    assert second.status_code == 201, second.text
    return trip_id, a, b, c, second.json()["id"]


def ledger_of(client, trip_id, user):
    response = client.get(f"/api/trips/{trip_id}/ledger", headers=user[1])
    assert response.status_code == 200, response.text
    return response.json()


def balance_of(client, trip_id, user):
    response = client.get(f"/api/trips/{trip_id}/balance", headers=user[1])
    assert response.status_code == 200, response.text
    return response.json()


def settle(client, trip_id, payer, to_user_id, amount_cents):
    return client.post(
        f"/api/trips/{trip_id}/settlements",
        json={"to_user_id": to_user_id, "amount_cents": amount_cents},
        headers=payer[1]
    )


def test_ledger_before_settlement(client, scenario):
    trip_id, a, b, c, _ = scenario

    ledger = ledger_of(client, trip_id, b)
    assert ledger["currency_code"] == "USD"
    assert entries(ledger["debts"]) == [(a[0], 33)]
    assert entries(ledger["credits"]) == [(c[0], 30)]
    assert ledger["debts"][0]["full_name"] == "Anna"

    assert entries(ledger_of(client, trip_id, a)["credits"]) == [(b[0], 33), (c[0], 33)]
    assert entries(ledger_of(client, trip_id, c)["debts"]) == [(a[0], 33), (b[0], 30)]

    assert balance_of(client, trip_id, b) == {"balance_cents": 3, "currency_code": "USD"}
    assert balance_of(client, trip_id, a)["balance_cents"] == -66
    assert balance_of(client, trip_id, c)["balance_cents"] == 63


def test_settlement_above_debt_is_rejected(client, scenario):
    trip_id, a, b, _, _ = scenario
    response = settle(client, trip_id, b, a[0], 34)
    assert response.status_code == 400
    assert response.json() == {"detail": "Amount exceeds outstanding debt", "code": "exceeds_outstanding_debt"}


def test_settlement_beyond_money_column_is_rejected(client, scenario):
    trip_id, a, b, _, _ = scenario
    response = settle(client, trip_id, b, a[0], 2 ** 63)
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_amount"


def test_settlement_without_debt_is_rejected(client, scenario):
    trip_id, a, b, c, _ = scenario
    response = settle(client, trip_id, b, c[0], 1)
    assert response.status_code == 400
    assert response.json()["code"] == "no_outstanding_debt"

    response = settle(client, trip_id, b, b[0], 1)
    assert response.status_code == 400
    assert response.json()["code"] == "self_settlement"


def test_exact_settlement_clears_pair_only(client, scenario):
    trip_id, a, b, c, _ = scenario
    response = settle(client, trip_id, b, a[0], 33)
    assert response.status_code == 201, response.text
    assert response.json()["currency_code"] == "USD"
    assert response.json()["from_user_id"] == b[0]

    ledger = ledger_of(client, trip_id, b)
    assert ledger["debts"] == []
    assert entries(ledger["credits"]) == [(c[0], 30)]
    assert balance_of(client, trip_id, b)["balance_cents"] == -30

    # A's view of B clears, C is untouched.
    assert entries(ledger_of(client, trip_id, a)["credits"]) == [(c[0], 33)]

    # Nothing left to pay.
    assert settle(client, trip_id, b, a[0], 1).json()["code"] == "no_outstanding_debt"


def test_partial_settlements_reduce_by_exact_amount(client, scenario):
    trip_id, a, b, c, _ = scenario
    assert settle(client, trip_id, c, a[0], 13).status_code == 201
    assert entries(ledger_of(client, trip_id, c)["debts"]) == [(b[0], 30), (a[0], 20)]
    assert settle(client, trip_id, c, a[0], 21).status_code == 400
    assert settle(client, trip_id, c, a[0], 20).status_code == 201
    assert entries(ledger_of(client, trip_id, c)["debts"]) == [(b[0], 30)]


def test_deleting_settlement_restores_debt(client, scenario):
    trip_id, a, b, _, _ = scenario
    settlement_id = settle(client, trip_id, b, a[0], 33).json()["id"]

    listed = client.get(f"/api/trips/{trip_id}/settlements", headers=a[1]).json()
    assert [s["id"] for s in listed] == [settlement_id]

    url = f"/api/trips/{trip_id}/settlements/{settlement_id}"
    assert client.get(url, headers=a[1]).json()["amount_cents"] == 33
    assert client.delete(url, headers=a[1]).status_code == 204
    assert client.get(url, headers=a[1]).status_code == 404

    assert entries(ledger_of(client, trip_id, b)["debts"]) == [(a[0], 33)]


def test_only_parties_or_owner_delete_settlement(client, scenario):
    trip_id, a, b, c, _ = scenario
    settlement_id = settle(client, trip_id, c, b[0], 30).json()["id"]
    url = f"/api/trips/{trip_id}/settlements/{settlement_id}"
    # A owns the trip.
    assert client.delete(url, headers=a[1]).status_code == 204

    settlement_id = settle(client, trip_id, b, a[0], 33).json()["id"]
    url = f"/api/trips/{trip_id}/settlements/{settlement_id}"
    denied = client.delete(url, headers=c[1])
    assert denied.status_code == 403
    assert denied.json()["code"] == "not_settlement_party"
    assert client.delete(url, headers=b[1]).status_code == 204


def test_deleting_expense_removes_its_obligations(client, scenario):
    trip_id, a, b, c, taxi_id = scenario
    assert client.delete(f"/api/trips/{trip_id}/expenses/{taxi_id}", headers=b[1]).status_code == 204

    ledger = ledger_of(client, trip_id, b)
    assert entries(ledger["debts"]) == [(a[0], 33)]
    assert ledger["credits"] == []


def test_ledger_is_stable_across_reads(client, scenario):
    trip_id, _, b, _, _ = scenario
    assert ledger_of(client, trip_id, b) == ledger_of(client, trip_id, b)


def test_empty_trip_ledger(client, register, make_trip):
    solo = register("Solo")
    trip_id, _ = make_trip(solo, currency_code="JPY")
    assert ledger_of(client, trip_id, solo) == {"currency_code": "JPY", "debts": [], "credits": []}
    assert balance_of(client, trip_id, solo) == {"balance_cents": 0, "currency_code": "JPY"}


def test_remainder_cent_owner_settles_full_share(client, register, make_trip):
    a, b, c = register("Anna"), register("Ben"), register("Cleo")
    trip_id, _ = make_trip(a, [b, c])
    client.post(
        f"/api/trips/{trip_id}/expenses",
        json={"description": "Hotel", "amount_cents": 100, "currency_code": "USD",
              "split_mode": "equal", "participants": [b[0], a[0], c[0]]},
        headers=a[1]
    )
    assert entries(ledger_of(client, trip_id, b)["debts"]) == [(a[0], 34)]
    assert settle(client, trip_id, b, a[0], 34).status_code == 201
    assert ledger_of(client, trip_id, b)["debts"] == []
