from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture(scope="module")
def client():
    with TestClient(app) as c:
        yield c


def test_health_and_ready(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/ready").json() == {"status": "ready"}


def test_full_comparison(client, plan_a_data, plan_b_data):
    resp = client.post("/api/v1/comparison", json={"planA": plan_a_data, "planB": plan_b_data})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["mode"] == "full"
    result = body["result"]
    assert result["overall_winner"]["plan"] == "A"
    assert [s["name"] for s in result["scenarios"]] == ["Low", "Moderate", "High"]
    assert result["reasoning"]


def test_quick_comparison(client, plan_a_data, plan_b_data):
    resp = client.post(
        "/api/v1/comparison",
        json={"planA": plan_a_data, "planB": plan_b_data, "mode": "quick"},
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["winner"] == "A"
    assert result["winner_plan_id"] == "plan-a"


def test_personalized_comparison(client, plan_a_data, plan_b_data, profile_data):
    resp = client.post(
        "/api/v1/comparison",
        json={"planA": plan_a_data, "planB": plan_b_data, "userProfile": profile_data},
    )
    assert resp.status_code == 200
    assert resp.json()["result"]["personalized"] is True


def test_invalid_plan_is_400(client, plan_a_data, plan_b_data):
    plan_a_data["outOfPocketMax"] = 100
    resp = client.post("/api/v1/comparison", json={"planA": plan_a_data, "planB": plan_b_data})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "Invalid request"
    assert body["details"]


def test_missing_plan_is_400(client, plan_a_data):
    resp = client.post("/api/v1/comparison", json={"planA": plan_a_data})
    assert resp.status_code == 400
    assert any("planB" in d["field"] for d in resp.json()["details"])


def test_unknown_mode_is_400(client, plan_a_data, plan_b_data):
    resp = client.post(
        "/api/v1/comparison",
        json={"planA": plan_a_data, "planB": plan_b_data, "mode": "fast"},
    )
    assert resp.status_code == 400


def test_comparison_description(client):
    body = client.get("/api/v1/comparison").json()
    assert body["modes"] == ["full", "quick"]
    assert "expectedERVisits" in body["profileFields"]


def test_add_on_recommendations(client):
    resp = client.post(
        "/api/v1/add-ons",
        json={
            "ages": [5, 34, 67],
            "preferences": {"excludeCategories": ["life"]},
            "riskFactors": {"hasChronicConditions": True},
        },
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    ids = [r["insurance"]["id"] for r in result["all_recommendations"]]
    assert "term-life" not in ids
    assert len(ids) == 7
    assert [g["group_name"] for g in result["household_age_groups"]] == [
        "Children 0–17",
        "Adults 31–50",
        "Medicare-eligible 65+",
    ]


def test_add_ons_with_custom_catalog(client):
    catalog = [
        {
            "id": "kids-dental",
            "name": "Kids Dental",
            "category": "dental",
            "baseCostPerMonth": 20,
            "ageRecommendations": [
                {"minAge": 0, "maxAge": 17, "priority": "high", "probabilityThreshold": 90, "reasonCode": "CHILDREN_PRESENT"}
            ],
        }
    ]
    resp = client.post("/api/v1/add-ons", json={"ages": [4, 7], "catalog": catalog})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["total_monthly_all_recommended"] == pytest.approx(40.0)


def test_add_ons_invalid_category_is_400(client):
    resp = client.post("/api/v1/add-ons", json={"ages": [30], "preferences": {"excludeCategories": ["pet"]}})
    assert resp.status_code == 400


def test_catalog_listing(client):
    products = client.get("/api/v1/add-ons/catalog").json()["products"]
    assert len(products) == 8
    assert products[0]["id"] == "dental"


def test_add_ons_with_empty_catalog_scores_nothing(client):
    resp = client.post("/api/v1/add-ons", json={"ages": [4, 40], "catalog": []})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["all_recommendations"] == []
    assert result["recommendations"] == []
    assert result["total_monthly_all_recommended"] == 0
    assert len(result["household_age_groups"]) == 2


def test_subsidy_above_premium_is_400(client, plan_a_data, plan_b_data):
    plan_a_data["monthlyPremiumAfterSubsidy"] = 900
    resp = client.post("/api/v1/comparison", json={"planA": plan_a_data, "planB": plan_b_data})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"
