"""
Marketing Router Tests
======================

WHAT: HTTP-level tests for /marketing/* and /health.
WHY: The dashboard relies on these payload shapes (unbounded ROI as null,
     400 on bad periods, 422 on malformed snapshots).

REFERENCES:
- attribution_engine/routers/marketing.py
- attribution_engine/schemas.py
"""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


# ============================================================================
# Period resolution
# ============================================================================


def test_resolve_last_7_days(client):
    response = client.get(
        "/marketing/periods/resolve", params={"tag": "last_7_days", "reference_date": "2024-03-15"}
    )

    assert response.status_code == 200
    assert response.json() == {"tag": "last_7_days", "date_from": "2024-03-09", "date_to": "2024-03-15"}


def test_resolve_defaults_to_configured_period(client):
    response = client.get("/marketing/periods/resolve", params={"reference_date": "2024-02-10"})

    assert response.json() == {"tag": "this_month", "date_from": "2024-02-01", "date_to": "2024-02-29"}


def test_resolve_all_time_has_open_bounds(client):
    body = client.get("/marketing/periods/resolve", params={"tag": "all_time"}).json()

    assert body["date_from"] is None
    assert body["date_to"] is None


def test_resolve_unknown_tag_is_400(client):
    response = client.get("/marketing/periods/resolve", params={"tag": "fortnight"})

    assert response.status_code == 400
    assert "fortnight" in response.json()["detail"]


# ============================================================================
# Ranking
# ============================================================================


def test_creative_ranking(client, snapshot_payload, last_7_days):
    response = client.post(
        "/marketing/ranking", json={"snapshot": snapshot_payload, "period": last_7_days, "mode": "creative"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["range"] == {"date_from": "2024-03-09", "date_to": "2024-03-15"}
    assert body["mode"] == "creative"
    assert [row["id"] for row in body["rows"]] == ["X", "Y"]

    hero = body["rows"][0]
    assert hero["name"] == "Hero video"
    assert hero["revenue"] == 200.0
    assert hero["profit"] == 100.0
    assert hero["roi"] == 2.0
    assert hero["roi_unbounded"] is False
    assert hero["cpl"] == 25.0
    assert hero["ctr"] == 2.0

    assert body["summary"]["count"] == 2
    assert body["summary"]["spend"] == 150.0
    assert body["summary"]["revenue"] == 200.0


def test_campaign_ranking_uses_campaign_names(client, snapshot_payload, last_7_days):
    body = client.post(
        "/marketing/ranking", json={"snapshot": snapshot_payload, "period": last_7_days, "mode": "campaign"}
    ).json()

    assert [(row["id"], row["name"]) for row in body["rows"]] == [("C", "Spring Launch"), ("D", "Retargeting")]


def test_ranking_top_k(client, snapshot_payload, last_7_days):
    body = client.post(
        "/marketing/ranking", json={"snapshot": snapshot_payload, "period": last_7_days, "top_k": 1}
    ).json()

    assert len(body["top"]) == 1
    assert len(body["rows"]) == 2


def test_unbounded_roi_serialized_as_null(client, snapshot_payload, last_7_days, test_settings):
    test_settings.RANK_REVENUE_ONLY_ENTITIES = True

    body = client.post("/marketing/ranking", json={"snapshot": snapshot_payload, "period": last_7_days}).json()

    free = body["rows"][0]
    assert free["id"] == "FREE"
    assert free["name"] == "Unknown"
    assert free["roi"] is None
    assert free["roi_unbounded"] is True


def test_ranking_invalid_period_is_400(client, snapshot_payload):
    response = client.post(
        "/marketing/ranking", json={"snapshot": snapshot_payload, "period": {"tag": "last_0_days"}}
    )

    assert response.status_code == 400


def test_ranking_malformed_snapshot_is_422(client, snapshot_payload, last_7_days):
    snapshot_payload["daily_metrics"][0]["spend"] = -5

    response = client.post("/marketing/ranking", json={"snapshot": snapshot_payload, "period": last_7_days})

    assert response.status_code == 422


def test_ranking_bad_date_string_is_422(client, snapshot_payload, last_7_days):
    snapshot_payload["sales"][0]["delivery_date"] = "yesterday-ish"

    response = client.post("/marketing/ranking", json={"snapshot": snapshot_payload, "period": last_7_days})

    assert response.status_code == 422


def test_empty_snapshot_ranks_nothing(client, last_7_days):
    body = client.post("/marketing/ranking", json={"snapshot": {}, "period": last_7_days}).json()

    assert body["rows"] == []
    assert body["top"] == []
    assert body["summary"]["roi"] == 0.0
    assert body["summary"]["count"] == 0


# ============================================================================
# Summary cards & daily table
# ============================================================================


def test_selection_summary_for_campaign(client, snapshot_payload, last_7_days):
    response = client.post(
        "/marketing/summary", json={"snapshot": snapshot_payload, "period": last_7_days, "campaign_id": "C"}
    )

    assert response.status_code == 200
    summary = response.json()["summary"]
    assert summary["spend"] == 100.0
    assert summary["revenue"] == 200.0
    assert summary["qualified_leads"] == 2
    assert summary["count"] == 1


def test_selection_summary_ignores_removed_creatives(client, snapshot_payload, last_7_days):
    summary = client.post(
        "/marketing/summary", json={"snapshot": snapshot_payload, "period": last_7_days}
    ).json()["summary"]

    assert summary["revenue"] == 200.0


def test_daily_table(client, snapshot_payload, last_7_days):
    response = client.post("/marketing/daily", json={"snapshot": snapshot_payload, "period": last_7_days})

    assert response.status_code == 200
    rows = response.json()["rows"]
    assert [row["id"] for row in rows] == ["m2", "m1"]
    assert rows[0]["date"] == "2024-03-12"
    assert rows[0]["campaign_name"] == "Retargeting"
    assert rows[1]["revenue"] == 120.0
    assert rows[1]["creative_name"] == "Hero video"
    assert rows[1]["profit"] == 20.0
    assert rows[1]["roi"] == 1.2
    assert rows[1]["roi_unbounded"] is False


def test_daily_table_zero_spend_day_has_unbounded_roi(client, snapshot_payload, last_7_days):
    snapshot_payload["daily_metrics"][1]["spend"] = 0
    snapshot_payload["sales"].append(
        {"id": "s9", "status": "Delivered", "value": 40, "creative_id": "Y", "delivery_date": "2024-03-12"}
    )

    rows = client.post("/marketing/daily", json={"snapshot": snapshot_payload, "period": last_7_days}).json()["rows"]

    free_day = rows[0]
    assert free_day["id"] == "m2"
    assert free_day["profit"] == 40.0
    assert free_day["roi"] is None
    assert free_day["roi_unbounded"] is True


def test_daily_table_creative_filter(client, snapshot_payload, last_7_days):
    rows = client.post(
        "/marketing/daily", json={"snapshot": snapshot_payload, "period": last_7_days, "creative_ids": ["X"]}
    ).json()["rows"]

    assert [row["creative_id"] for row in rows] == ["X"]


# ============================================================================
# Frustration
# ============================================================================


def test_frustration_breakdown(client, snapshot_payload, last_7_days):
    response = client.post("/marketing/frustration", json={"snapshot": snapshot_payload, "period": last_7_days})

    assert response.status_code == 200
    body = response.json()
    assert body["total_count"] == 4
    assert body["total_value"] == 150.0
    assert body["reason_stats"] == [
        {"reason_id": "r1", "name": "No show", "count": 3, "percentage": 75.0},
        {"reason_id": "unspecified", "name": "Unspecified", "count": 1, "percentage": 25.0},
    ]


def test_frustration_custom_range_outside_data(client, snapshot_payload):
    body = client.post(
        "/marketing/frustration",
        json={
            "snapshot": snapshot_payload,
            "period": {"tag": "custom", "date_from": "2023-01-01", "date_to": "2023-01-31"},
        },
    ).json()

    assert body["total_count"] == 0
    assert body["reason_stats"] == []
