from __future__ import annotations

from datetime import datetime, timedelta, timezone

from flask.testing import FlaskClient

EFFECT_URL = "/api/v1/inflation/effect"
HISTORY_URL = "/api/v1/inflation/history"


def post_effect(client: FlaskClient, amount: float, rate: float = 5.0) -> dict:
    resp = client.post(EFFECT_URL, json={"amount_nominal": amount, "inflation_rate": rate, "years": 2})
    assert resp.status_code == 200
    return resp.get_json()["data"]


def test_empty_history(client: FlaskClient):
    resp = client.get(HISTORY_URL)

    assert resp.status_code == 200
    page = resp.get_json()["data"]
    assert page == {"items": [], "total": 0, "limit": 50, "offset": 0}


def test_history_is_paginated_newest_first(client: FlaskClient):
    for amount in (1000, 2000, 3000):
        post_effect(client, amount)

    first = client.get(HISTORY_URL, query_string={"limit": 2}).get_json()["data"]
    second = client.get(HISTORY_URL, query_string={"limit": 2, "offset": 2}).get_json()["data"]

    assert first["total"] == 3
    assert [item["amount_nominal"] for item in first["items"]] == [3000, 2000]
    assert [item["amount_nominal"] for item in second["items"]] == [1000]
    assert second["offset"] == 2


def test_history_limit_is_capped(client: FlaskClient, settings):
    settings.HISTORY_MAX_LIMIT = 2
    for amount in (1000, 2000, 3000):
        post_effect(client, amount)

    page = client.get(HISTORY_URL, query_string={"limit": 100}).get_json()["data"]

    assert page["limit"] == 2
    assert len(page["items"]) == 2


def test_history_rejects_bad_pagination(client: FlaskClient):
    resp = client.get(HISTORY_URL, query_string={"limit": 0})

    assert resp.status_code == 400
    assert "limit" in resp.get_json()["error"]


def test_recent_history(client: FlaskClient):
    for amount in (1000, 2000, 3000):
        post_effect(client, amount)

    resp = client.get(f"{HISTORY_URL}/recent", query_string={"limit": 1})

    items = resp.get_json()["data"]
    assert len(items) == 1
    assert items[0]["amount_nominal"] == 3000


def test_single_record_lookup(client: FlaskClient):
    saved = post_effect(client, 4500, rate=3.0)

    resp = client.get(f"{HISTORY_URL}/{saved['query_id']}")

    assert resp.status_code == 200
    record = resp.get_json()["data"]
    assert record["id"] == saved["query_id"]
    assert record["inflation_rate"] == 3.0
    assert record["real_value"] == saved["real_value"]
    assert record["granularity"] == "none"
    assert record["series"] is None


def test_missing_record_returns_404(client: FlaskClient):
    resp = client.get(f"{HISTORY_URL}/999")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_history_by_date_range(client: FlaskClient):
    post_effect(client, 1000)
    now = datetime.now(timezone.utc)

    inside = client.get(
        f"{HISTORY_URL}/range",
        query_string={
            "start": (now - timedelta(hours=1)).isoformat(),
            "end": (now + timedelta(hours=1)).isoformat(),
        },
    ).get_json()["data"]
    outside = client.get(
        f"{HISTORY_URL}/range",
        query_string={
            "start": (now - timedelta(days=3)).isoformat(),
            "end": (now - timedelta(days=2)).isoformat(),
        },
    ).get_json()["data"]

    assert len(inside) == 1
    assert outside == []


def test_date_range_must_be_ordered(client: FlaskClient):
    resp = client.get(
        f"{HISTORY_URL}/range",
        query_string={"start": "2024-02-01T00:00:00Z", "end": "2024-01-01T00:00:00Z"},
    )

    assert resp.status_code == 400


def test_statistics(client: FlaskClient):
    empty = client.get("/api/v1/inflation/statistics").get_json()["data"]
    assert empty["total_queries"] == 0
    assert empty["avg_amount_nominal"] == 0
    assert empty["first_query"] is None

    post_effect(client, 1000, rate=4.0)
    post_effect(client, 3000, rate=8.0)

    stats = client.get("/api/v1/inflation/statistics").get_json()["data"]
    assert stats["total_queries"] == 2
    assert stats["avg_amount_nominal"] == 2000
    assert stats["avg_inflation_rate"] == 6.0
    assert stats["avg_loss_percent"] > 0
    assert stats["first_query"] <= stats["last_query"]
