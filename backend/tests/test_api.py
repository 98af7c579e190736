"""Tests for the agents HTTP API."""
import pytest
from rest_framework.test import APIClient

from screening.models import HiringDecision
from screening.services import registry as registry_module

pytestmark = pytest.mark.django_db


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def decide(client, strong_profile):
    def _decide(candidate_id, features=None, agent_type="rl", **extra):
        body = {"features": features or strong_profile, "agent_type": agent_type,
                "candidate_id": candidate_id, **extra}
        return client.post("/api/agents/decide", body, format="json")
    return _decide


class TestDecide:
    def test_decision_is_returned_and_recorded(self, decide):
        response = decide("cand-1")
        assert response.status_code == 201
        body = response.json()
        assert body["candidateId"] == "cand-1"
        assert body["decision"] == "HIRE"
        assert 0.0 <= body["confidence"] <= 1.0
        assert body["metadata"]["agentType"] == "rl"
        assert body["metadata"]["algorithmVersion"] == "5.0.0-q-learning"
        assert body["scores"]["composite"] == pytest.approx(88.45)

        row = HiringDecision.objects.get(candidate_id="cand-1")
        assert row.decision == "HIRE"
        assert row.features["technical"] == 90

    def test_defaults_to_rl_and_generates_candidate_id(self, client, weak_profile):
        response = client.post("/api/agents/decide", {"features": weak_profile}, format="json")
        assert response.status_code == 201
        body = response.json()
        assert body["decision"] == "REJECT"
        assert body["metadata"]["agentType"] == "rl"
        assert HiringDecision.objects.filter(candidate_id=body["candidateId"]).exists()

    def test_job_description_is_reflected(self, decide):
        response = decide("cand-jd", job_description="Senior backend engineer working in Python")
        assert any(line.startswith("Job description emphasis") for line in response.json()["reasoning"])

    @pytest.mark.parametrize("agent_type", ["custom", "intelligent", "ensemble"])
    def test_every_agent_type_decides(self, decide, agent_type):
        response = decide(f"cand-{agent_type}", agent_type=agent_type)
        assert response.status_code == 201
        assert response.json()["metadata"]["agentType"] == agent_type

    def test_ensemble_reports_votes(self, decide):
        votes = decide("cand-ens", agent_type="ensemble").json()["metadata"]["votes"]
        assert set(votes) == {"rl", "intelligent", "custom"}

    def test_out_of_range_values_are_clamped(self, decide, strong_profile):
        response = decide("cand-clamp", features={**strong_profile, "technical": 140})
        assert response.status_code == 201
        assert response.json()["metadata"]["clampedFields"] == ["technical"]

    def test_missing_feature_is_rejected(self, decide, strong_profile):
        features = dict(strong_profile)
        del features["technical"]
        response = decide("cand-bad", features=features)
        assert response.status_code == 400
        assert "technical" in response.json()["features"]
        assert not HiringDecision.objects.exists()

    def test_non_numeric_feature_is_rejected(self, decide, strong_profile):
        response = decide("cand-bad", features={**strong_profile, "communication": "great"})
        assert response.status_code == 400

    def test_unknown_agent_type_is_rejected(self, decide):
        assert decide("cand-1", agent_type="oracle").status_code == 400

    def test_duplicate_candidate_is_a_conflict(self, decide):
        decide("cand-1")
        response = decide("cand-1")
        assert response.status_code == 409
        assert HiringDecision.objects.count() == 1

    def test_unavailable_agent(self, decide, monkeypatch):
        def broken(config=None):
            raise RuntimeError("boom")

        monkeypatch.setitem(registry_module.STRATEGY_CLASSES, "custom", broken)
        response = decide("cand-1", agent_type="custom")
        assert response.status_code == 503
        assert "custom" in response.json()["detail"]


class TestTrain:
    def test_single_outcome(self, client, decide, registry):
        decide("cand-1")
        response = client.post(
            "/api/agents/train",
            {"candidate_id": "cand-1", "outcome": True, "performance_rating": 5},
            format="json",
        )
        assert response.status_code == 200
        body = response.json()
        assert body["trained"] == 1
        assert body["insights"]["agentType"] == "rl"
        assert body["insights"]["totalTraining"] == 1

        row = HiringDecision.objects.get(candidate_id="cand-1")
        assert row.outcome is True
        assert row.performance_rating == 5
        assert row.trained_by == "rl"
        assert row.trained_at is not None

    def test_outcome_can_train_another_agent(self, client, decide, registry):
        decide("cand-1")
        response = client.post(
            "/api/agents/train", {"candidate_id": "cand-1", "outcome": False, "agent_type": "custom"},
            format="json",
        )
        assert response.status_code == 200
        assert registry.insights("custom")["totalTraining"] == 1
        assert registry.insights("rl")["totalTraining"] == 0

    def test_second_outcome_is_a_conflict(self, client, decide):
        decide("cand-1")
        client.post("/api/agents/train", {"candidate_id": "cand-1", "outcome": True}, format="json")
        response = client.post("/api/agents/train", {"candidate_id": "cand-1", "outcome": False}, format="json")
        assert response.status_code == 409

    def test_unknown_candidate(self, client):
        response = client.post("/api/agents/train", {"candidate_id": "ghost", "outcome": True}, format="json")
        assert response.status_code == 404
        assert response.json()["candidate_ids"] == ["ghost"]

    def test_rating_out_of_range(self, client, decide):
        decide("cand-1")
        response = client.post(
            "/api/agents/train", {"candidate_id": "cand-1", "outcome": True, "performance_rating": 9},
            format="json",
        )
        assert response.status_code == 400

    def test_batch(self, client, decide, weak_profile):
        decide("cand-1")
        decide("cand-2", features=weak_profile, agent_type="custom")
        response = client.post("/api/agents/train", {"outcomes": [
            {"candidate_id": "cand-1", "outcome": True, "performance_rating": 4},
            {"candidate_id": "cand-2", "outcome": False},
        ]}, format="json")
        assert response.status_code == 200
        body = response.json()
        assert body["trained"] == 2
        assert set(body["insights"]) == {"rl", "custom"}
        assert HiringDecision.objects.filter(trained_at__isnull=False).count() == 2

    def test_batch_with_unknown_candidate_learns_nothing(self, client, decide, registry):
        decide("cand-1")
        response = client.post("/api/agents/train", {"outcomes": [
            {"candidate_id": "cand-1", "outcome": True},
            {"candidate_id": "ghost", "outcome": True},
        ]}, format="json")
        assert response.status_code == 404
        assert registry.insights("rl")["totalTraining"] == 0
        assert HiringDecision.objects.get(candidate_id="cand-1").trained_at is None

    def test_batch_rejects_duplicate_ids(self, client, decide):
        decide("cand-1")
        response = client.post("/api/agents/train", {"outcomes": [
            {"candidate_id": "cand-1", "outcome": True},
            {"candidate_id": "cand-1", "outcome": False},
        ]}, format="json")
        assert response.status_code == 400

    def test_empty_batch_is_rejected(self, client):
        response = client.post("/api/agents/train", {"outcomes": []}, format="json")
        assert response.status_code == 400


class TestLearnedState:
    def test_insights(self, client):
        response = client.get("/api/agents/custom/insights")
        assert response.status_code == 200
        body = response.json()
        assert body["agentType"] == "custom"
        assert body["status"] == "untrained"
        assert len(body["patterns"]) == 8

    def test_unknown_agent(self, client):
        assert client.get("/api/agents/oracle/insights").status_code == 404

    def test_history(self, client, decide):
        decide("cand-1")
        decide("cand-2")
        body = client.get("/api/agents/rl/history?limit=1").json()
        assert body["agentType"] == "rl"
        assert [d["candidateId"] for d in body["recentDecisions"]] == ["cand-2"]
        assert body["trainingHistory"] == []

    def test_export_reset_import(self, client, decide):
        decide("cand-1")
        client.post("/api/agents/train", {"candidate_id": "cand-1", "outcome": True}, format="json")
        snapshot = client.get("/api/agents/rl/export").json()
        assert snapshot["agentType"] == "rl"
        assert snapshot["counters"]["totalTraining"] == 1

        reset = client.post("/api/agents/rl/reset", format="json").json()
        assert reset["insights"]["totalTraining"] == 0

        imported = client.post("/api/agents/rl/import", snapshot, format="json")
        assert imported.status_code == 200
        assert imported.json()["insights"]["totalTraining"] == 1

    def test_import_rejects_non_object(self, client):
        assert client.post("/api/agents/rl/import", [1, 2], format="json").status_code == 400

    def test_import_tolerates_malformed_history(self, client):
        response = client.post("/api/agents/rl/import", {"decisionHistory": 5}, format="json")
        assert response.status_code == 200
        assert response.json()["insights"]["totalDecisions"] == 0

    def test_import_rejects_other_agents_snapshot(self, client):
        snapshot = client.get("/api/agents/custom/export").json()
        assert client.post("/api/agents/rl/import", snapshot, format="json").status_code == 400


class TestDecisions:
    def test_list_is_filterable_and_limited(self, client, decide):
        decide("cand-1")
        decide("cand-2", agent_type="custom")
        decide("cand-3")

        all_rows = client.get("/api/agents/decisions").json()
        assert {row["candidate_id"] for row in all_rows} == {"cand-1", "cand-2", "cand-3"}

        rl_rows = client.get("/api/agents/decisions?agent_type=rl").json()
        assert {row["candidate_id"] for row in rl_rows} == {"cand-1", "cand-3"}

        assert len(client.get("/api/agents/decisions?limit=1").json()) == 1

    def test_detail(self, client, decide):
        decide("cand-1")
        body = client.get("/api/agents/decisions/cand-1").json()
        assert body["decision"] == "HIRE"
        assert body["trained_at"] is None

    def test_detail_not_found(self, client):
        assert client.get("/api/agents/decisions/ghost").status_code == 404


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}
