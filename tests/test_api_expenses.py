import pytest


def _add(client, **payload):
    resp = client.post("/expenses/", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_applies_defaults(client):
    body = _add(client, amount=300, title="Ramen")
    assert body["currency"] == "TWD"
    assert body["payer"] == "me"
    assert body["category"] == "other"
    assert body["split_count"] == 1
    assert body["date"] is None
    assert body["base_amount"] == 300


def test_create_foreign_expense_shows_base_and_split(client):
    body = _add(
        client,
        amount=3000,
        currency="jpy",
        category="food",
        payer="Alice",
        split_count=4,
        date="2024-05-01",
    )
    assert body["currency"] == "JPY"
    assert body["base_amount"] == 600.0
    assert body["per_person_amount"] == 750.0


@pytest.mark.parametrize(
    "payload",
    [
        {"amount": -1},
        {"amount": 10, "split_count": 0},
        {"amount": 10, "category": "casino"},
        {"amount": 10, "currency": "DOLLARS"},
    ],
)
def test_invalid_payloads_are_rejected(client, payload):
    resp = client.post("/expenses/", json=payload)
    assert resp.status_code == 422
    assert resp.json()["error"] == "validation_error"


def test_summary_settles_two_payers(client):
    _add(client, amount=1000, payer="Alice", date="2024-05-02")
    _add(client, amount=500, payer="Bob", date="2024-05-01")
    summary = client.get("/expenses/summary").json()
    assert summary["base_currency"] == "TWD"
    assert summary["total"] == 1500
    assert summary["by_payer"] == {"Alice": 1000, "Bob": 500}
    settlement = summary["settlement"]
    assert settlement["unique_payers"] == ["Alice", "Bob"]
    assert settlement["participant_count"] == 2
    assert settlement["average_share"] == 750
    assert settlement["net_balances"] == {"Alice": 250, "Bob": -250}
    assert summary["rates_loaded"] is True
    assert summary["unconverted_currencies"] == []


def test_summary_converts_and_breaks_down_by_category(client):
    _add(client, amount=100, currency="USD", payer="Alice", category="ticket")
    _add(client, amount=500, currency="JPY", payer="Alice", category="food")
    summary = client.get("/expenses/summary").json()
    assert summary["total"] == pytest.approx(100 / 0.03 + 100)
    assert summary["by_category"] == {
        "ticket": pytest.approx(3333.3333333),
        "food": pytest.approx(100.0),
    }


def test_summary_participant_override(client):
    _add(client, amount=1000, payer="Alice")
    summary = client.get("/expenses/summary", params={"participants": 5}).json()
    assert summary["settlement"]["participant_count"] == 5
    assert summary["settlement"]["average_share"] == 200


def test_stored_participant_count_is_used_by_default(client):
    _add(client, amount=900, payer="Alice")
    assert client.put("/settings/", json={"participant_count": 3}).status_code == 200
    summary = client.get("/expenses/summary").json()
    assert summary["settlement"]["participant_count"] == 3
    assert summary["settlement"]["net_balances"] == {"Alice": 600}


def test_empty_summary(client):
    summary = client.get("/expenses/summary").json()
    assert summary["total"] == 0
    assert summary["by_category"] == {}
    assert summary["settlement"]["participant_count"] == 1
    assert summary["settlement"]["average_share"] == 0
    assert summary["settlement"]["unique_payers"] == []


def test_summary_without_rates_counts_face_value(offline_client):
    _add(offline_client, amount=100, currency="USD", payer="Alice")
    _add(offline_client, amount=50, payer="Bob")
    summary = offline_client.get("/expenses/summary").json()
    assert summary["rates_loaded"] is False
    assert summary["total"] == 150
    assert summary["unconverted_currencies"] == ["USD"]


def test_list_orders_newest_first_and_filters(client):
    _add(client, amount=1, payer="Alice", date="2024-05-01")
    _add(client, amount=2, payer="Bob", date="2024-05-03")
    _add(client, amount=3, payer="Alice")
    rows = client.get("/expenses/").json()
    assert [r["amount"] for r in rows] == [2, 1, 3]
    only_alice = client.get("/expenses/", params={"payer": "Alice"}).json()
    assert {r["amount"] for r in only_alice} == {1, 3}
    bad = client.get(
        "/expenses/", params={"start_date": "2024-05-03", "end_date": "2024-05-01"}
    )
    assert bad.status_code == 400


def test_payers_in_first_appearance_order(client):
    _add(client, amount=1, payer="Carol", date="2024-05-01")
    _add(client, amount=1, payer="Alice", date="2024-05-03")
    _add(client, amount=1, date="2024-05-02")
    assert client.get("/expenses/payers").json() == ["Alice", "me", "Carol"]


def test_patch_and_delete(client):
    created = _add(client, amount=100, payer="Alice", currency="USD")
    resp = client.patch(f"/expenses/{created['id']}", json={"amount": 200, "payer": None})
    assert resp.status_code == 200
    body = resp.json()
    assert body["amount"] == 200
    assert body["payer"] == "me"
    assert body["currency"] == "USD"

    assert client.patch(f"/expenses/{created['id']}", json={}).status_code == 422
    assert client.delete(f"/expenses/{created['id']}").status_code == 204
    missing = client.get(f"/expenses/{created['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"error": "not_found", "detail": "expense not found"}
    assert client.delete(f"/expenses/{created['id']}").status_code == 404
