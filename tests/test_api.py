"""
HTTP tests for the trust API, run in-process with FastAPI's TestClient.
"""
import pytest
from fastapi.testclient import TestClient

from lendtrust.api.trust import get_provider
from lendtrust.compute.providers import demo_provider
from lendtrust.main_trust import app

from factories import AS_OF, strong_payload


@pytest.fixture
def client():
    app.dependency_overrides[get_provider] = lambda: demo_provider(AS_OF)
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestService:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"
        assert "X-Request-Id" in r.headers

    def test_trust_health(self, client):
        r = client.get("/v1/trust/health")
        assert r.json()["default_strategy"] in ("comprehensive", "legacy")

    def test_root_lists_endpoints(self, client):
        assert "score" in client.get("/").json()["endpoints"]


class TestScoreEndpoint:
    def test_strong_payload(self, client):
        r = client.post("/v1/trust/score", json=strong_payload())
        assert r.status_code == 200
        body = r.json()
        assert body["score"] == 93
        assert body["risk_category"] == "low"
        assert body["eligible"] is True
        assert set(body["detail"]["factors"]) == {
            "github_activity", "code_quality", "community_engagement", "project_complexity",
            "consistency", "security_practices", "on_chain_history", "verification",
        }

    def test_empty_payload_is_scored_not_rejected(self, client):
        r = client.post("/v1/trust/score", json={})
        assert r.status_code == 200
        assert r.json()["score"] == 11
        assert r.json()["risk_category"] == "critical"
        assert r.json()["eligible"] is False

    def test_legacy_strategy(self, client):
        r = client.post("/v1/trust/score?strategy=legacy", json=strong_payload())
        assert r.status_code == 200
        assert r.json()["scale"] == "legacy"
        assert r.json()["recommendations"] == []

    def test_unknown_strategy(self, client):
        r = client.post("/v1/trust/score?strategy=fico", json={})
        assert r.status_code == 400

    def test_non_mapping_body(self, client):
        r = client.post("/v1/trust/score", json=["not", "a", "payload"])
        assert r.status_code == 422


class TestApplicantEndpoint:
    def test_known_applicant(self, client):
        r = client.get("/v1/trust/applicants/alexcoder")
        assert r.status_code == 200
        body = r.json()
        assert body["handle"] == "alexcoder"
        assert body["risk_category"] == "low"
        assert body["calculated_at"] == AS_OF.isoformat()

    def test_unknown_applicant(self, client):
        r = client.get("/v1/trust/applicants/nobody")
        assert r.status_code == 404

    def test_unknown_strategy(self, client):
        assert client.get("/v1/trust/applicants/alexcoder?strategy=fico").status_code == 400


class TestRiskEndpoint:
    @pytest.mark.parametrize("score,scale,expected", [
        (80, "comprehensive", "low"),
        (64, "comprehensive", "high"),
        (39, "comprehensive", "critical"),
        (750, "legacy", "low"),
        (80, "legacy", "high"),
    ])
    def test_categories(self, client, score, scale, expected):
        r = client.get("/v1/trust/risk", params={"score": score, "scale": scale})
        assert r.status_code == 200
        assert r.json()["risk_category"] == expected

    def test_bad_scale(self, client):
        assert client.get("/v1/trust/risk", params={"score": 50, "scale": "fico"}).status_code == 400

    def test_negative_score(self, client):
        assert client.get("/v1/trust/risk", params={"score": -1}).status_code == 422


class TestRateEndpoint:
    def test_legacy_scale(self, client):
        r = client.get("/v1/trust/rate", params={"score": 650, "base_rate": 8.0})
        body = r.json()
        assert body["multiplier"] == 1.25
        assert body["recommended_rate"] == 10.0
        assert body["recommended_rate_bps"] == 1000

    def test_comprehensive_scale(self, client):
        r = client.get("/v1/trust/rate", params={"score": 93, "base_rate": 8.0, "scale": "comprehensive"})
        assert r.json()["multiplier"] == 1.0
        assert r.json()["recommended_rate_bps"] == 800

    def test_base_rate_must_be_positive(self, client):
        assert client.get("/v1/trust/rate", params={"score": 650, "base_rate": 0}).status_code == 422


class TestDynamicRateEndpoint:
    def test_defaults_to_configured_base_rate(self, client):
        r = client.get("/v1/trust/rate/dynamic", params={"score": 100, "loan_amount": 50_000, "tenor_days": 0})
        assert r.status_code == 200
        body = r.json()
        assert body["rate"] == body["market_base_rate"]
        assert body["scale"] == "comprehensive"

    def test_market_terms(self, client):
        params = {
            "score": 60, "loan_amount": 25_000, "tenor_days": 365, "market_base_rate": 8.0,
            "risk_premium": 1.0, "market_volatility": 0.2, "demand_supply_ratio": 1.5,
        }
        body = client.get("/v1/trust/rate/dynamic", params=params).json()
        # 8 + 4 + 1 + 1 + 1 + 1 + 1.5
        assert body["rate"] == 17.5
        assert body["rate_bps"] == 1750

    def test_volatility_out_of_range(self, client):
        params = {"score": 60, "loan_amount": 1000, "tenor_days": 30, "market_volatility": 2}
        assert client.get("/v1/trust/rate/dynamic", params=params).status_code == 422

    def test_bad_scale(self, client):
        params = {"score": 60, "loan_amount": 1000, "tenor_days": 30, "scale": "fico"}
        assert client.get("/v1/trust/rate/dynamic", params=params).status_code == 400


class TestCompareEndpoint:
    def test_strong_beats_empty(self, client):
        r = client.post("/v1/trust/compare", json={"applicant_a": strong_payload(), "applicant_b": {}})
        assert r.status_code == 200
        body = r.json()
        assert body["safer_applicant"] == "applicant_a"
        assert body["applicant_a"]["eligible"] is True
        assert body["applicant_b"]["risk_category"] == "critical"
        assert body["recommendations_b"][0] == "Focus on completing GitHub verification"

    def test_equal(self, client):
        r = client.post("/v1/trust/compare", json={"applicant_a": {}, "applicant_b": {}})
        assert r.json()["safer_applicant"] == "equal"

    def test_missing_applicant(self, client):
        assert client.post("/v1/trust/compare", json={"applicant_a": {}}).status_code == 422
