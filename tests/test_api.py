# tests/test_api.py

from dealdesk.adapters.config import config
from dealdesk.api.http import _deal_repo
from fixtures.deals import conservative_purchase, first_time_buyer


def test_score_endpoint(client):
    r = client.post("/score", json=conservative_purchase())
    assert r.status_code == 200, r.text
    assert r.json() == {
        "deal_structure": 70,
        "financial_readiness": 45,
        "experience_level": 55,
        "property_analysis": 80,
        "overall": 60,
    }


def test_match_endpoint(client):
    r = client.post("/lenders/match", json=first_time_buyer())
    assert r.status_code == 200, r.text
    data = r.json()
    assert [m["lender_id"] for m in data["qualifying"]] == ["first_deal_lending", "speedy_cash_lending"]
    assert data["best_match"]["adjusted_rate"] == 7.95
    assert data["summary"]["total_lenders_analyzed"] == 10


def test_analyze_saves_and_lists(client):
    r = client.post("/analyze", json=conservative_purchase())
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["overall_score"] == 60
    assert data["score_breakdown"]["property_analysis"] == 80
    assert "guardrails" in data
    assert "deal_id" in data

    recent = client.get("/deals", params={"limit": 1})
    assert recent.status_code == 200
    [row] = recent.json()
    assert row["deal_id"] == data["deal_id"]
    assert row["analysis_score"] == 60


def test_percent_and_string_inputs(client):
    payload = {"funding_amount": "150000.00", "current_value": " $250,000 ", "credit_score": 712}
    r = client.post("/score", json=payload)
    assert r.status_code == 200, r.text
    assert r.json()["deal_structure"] == 70


def test_non_object_body_is_rejected(client):
    r = client.post("/analyze", json=["not", "a", "deal"])
    assert r.status_code == 422


def test_lenders_catalog(client):
    r = client.get("/lenders")
    assert r.status_code == 200
    data = r.json()
    assert data["version"] == "2025.1"
    assert len(data["lenders"]) == 10


def test_feed_rank_cold_start(client):
    body = {
        "now": "2025-06-01T12:00:00Z",
        "posts": [
            {"id": 1, "content": "fresh", "created_at": "2025-06-01T12:00:00Z"},
            {"id": 2, "content": "liked", "likes_count": 3, "created_at": "2025-06-01T02:00:00Z"},
        ],
    }
    r = client.post("/feed/rank", json=body)
    assert r.status_code == 200, r.text
    posts = r.json()["posts"]
    assert [p["id"] for p in posts] == ["2", "1"]
    assert posts[0]["recommendation_score"] == 110.0


def test_non_finite_credit_is_scored_not_500(client):
    r = client.post(
        "/score",
        content='{"creditScore": Infinity, "fundingAmount": "$150,000"}',
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 200, r.text
    assert 0 <= r.json()["overall"] <= 100


def test_api_deal_store_is_capped(client):
    for _ in range(config.DEAL_STORE_LIMIT + 5):
        _deal_repo.save_analysis({"analysis_score": 0})

    assert len(_deal_repo.all()) == config.DEAL_STORE_LIMIT
