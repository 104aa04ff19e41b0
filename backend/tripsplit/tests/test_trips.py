"""
Tests for trip, invite and membership endpoints.
"""


def test_create_trip_returns_invite_url(client, register):
    owner = register("Alice")
    response = client.post("/api/trips", json={"name": " Lisbon ", "currency_code": "eur"}, headers=owner[1])
    assert response.status_code == 201
    body = response.json()
    assert body["trip"]["name"] == "Lisbon"
    assert body["trip"]["currency_code"] == "EUR"
    assert body["trip"]["owner_id"] == owner[0]
    assert "/join/" in body["invite_url"]

    invite = client.get(f"/api/trips/{body['trip']['id']}/invite", headers=owner[1])
    assert invite.json()["invite_url"] == body["invite_url"]


def test_create_trip_rejects_bad_currency(client, register):
    owner = register("Alice")
    response = client.post("/api/trips", json={"name": "Trip", "currency_code": "dollars"}, headers=owner[1])
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_currency"


def test_join_is_idempotent(client, register, make_trip):
    alice, bob = register("Alice"), register("Bob")
    trip_id, token = make_trip(alice, [bob])

    again = client.post(f"/api/trips/join/{token}", headers=bob[1])
    assert again.status_code == 200
    assert again.json() == {"joined": True, "trip_id": trip_id, "trip_name": "Road trip", "message": "Already a member"}

    members = client.get(f"/api/trips/{trip_id}/members", headers=bob[1]).json()
    assert [m["user_id"] for m in members] == [bob[0], alice[0]]
    assert {m["role"] for m in members} == {"owner", "member"}


def test_unknown_invite(client, register):
    alice = register("Alice")
    response = client.post("/api/trips/join/nope", headers=alice[1])
    assert response.status_code == 404


def test_non_member_has_no_access(client, register, make_trip):
    alice, mallory = register("Alice"), register("Mallory")
    trip_id, _ = make_trip(alice)

    response = client.get(f"/api/trips/{trip_id}", headers=mallory[1])
    assert response.status_code == 403
    assert response.json()["code"] == "no_access"
    assert client.get(f"/api/trips/{trip_id}/ledger", headers=mallory[1]).status_code == 403
    assert client.get("/api/trips", headers=mallory[1]).json() == []


def test_trip_detail(client, register, make_trip):
    alice, bob = register("Alice"), register("Bob")
    trip_id, _ = make_trip(alice, [bob])
    detail = client.get(f"/api/trips/{trip_id}", headers=bob[1]).json()
    assert detail["owner_full_name"] == "Alice"
    assert detail["my_role"] == "member"


def test_only_owner_deletes_trip(client, register, make_trip):
    alice, bob = register("Alice"), register("Bob")
    trip_id, _ = make_trip(alice, [bob])
    client.post(
        f"/api/trips/{trip_id}/expenses",
        json={"description": "Fuel", "amount_cents": 500, "currency_code": "USD",
              "split_mode": "equal", "participants": [alice[0], bob[0]]},
        headers=alice[1]
    )

    denied = client.delete(f"/api/trips/{trip_id}", headers=bob[1])
    assert denied.status_code == 403
    assert denied.json()["code"] == "owner_only"

    assert client.delete(f"/api/trips/{trip_id}", headers=alice[1]).status_code == 204
    assert client.get(f"/api/trips/{trip_id}", headers=alice[1]).status_code == 404
    assert client.get("/api/trips", headers=bob[1]).json() == []
