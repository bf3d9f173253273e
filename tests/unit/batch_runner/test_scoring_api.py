"""
Test the scoring HTTP endpoints
"""
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

import main
from batch_runner.service import get_service
from core.exceptions import PersistenceError


@pytest.fixture
def client(service):
    main.app.dependency_overrides[get_service] = lambda: service
    yield TestClient(main.app)
    main.app.dependency_overrides.clear()


@pytest.fixture
def broken_client():
    """Client whose service fails every call"""
    broken = Mock()
    main.app.dependency_overrides[get_service] = lambda: broken
    yield TestClient(main.app), broken
    main.app.dependency_overrides.clear()


BASE = "/api/v1/scoring"


class TestScoreEndpoint:
    def test_score_answers(self, client, strong_answers):
        response = client.post(f"{BASE}/score", json={"answers": strong_answers})

        assert response.status_code == 200
        data = response.json()
        assert data["total_score"] == 827
        assert data["readiness"] == "Investor Ready"
        assert data["sector"] == "B2B SaaS"
        assert data["stage"] == "seed"
        assert data["business_idea"]["score"] == 90
        assert data["business_idea"]["explanation"]
        assert data["assessment_id"] is None
        assert data["config_version"] == 0

    def test_missing_answer_is_400(self, client, minimal_answers):
        answers = {k: v for k, v in minimal_answers.items() if k != "mrr"}

        response = client.post(f"{BASE}/score", json={"answers": answers})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "VALIDATION_ERROR"
        assert detail["details"]["field"] == "mrr"

    def test_normalize_flag(self, client):
        response = client.post(f"{BASE}/score", json={"answers": {"prototype": True}, "normalize": True})

        assert response.status_code == 200
        assert response.json()["sector"] == "B2C Consumer"

    def test_persist_returns_assessment_id(self, client, strong_answers, service):
        response = client.post(f"{BASE}/score", json={"answers": strong_answers, "persist": True})

        assessment_id = response.json()["assessment_id"]
        assert assessment_id
        assert service.rescore_one(assessment_id).score_difference == 0


class TestConfigEndpoints:
    def test_active_defaults(self, client):
        response = client.get(f"{BASE}/config/active")

        assert response.status_code == 200
        data = response.json()
        assert data["version"] == 0
        assert data["config_data"]["weights"]["businessIdea"] == 0.3

    def test_create_version(self, client, weights_document):
        response = client.post(
            f"{BASE}/config/versions",
            json={"config_data": weights_document, "change_reason": "Initial weights", "created_by": "analyst"},
        )

        assert response.status_code == 201
        assert response.json()["version"] == 1
        assert response.json()["created_by"] == "analyst"
        assert client.get(f"{BASE}/config/active").json()["version"] == 1

    def test_create_invalid_version_is_422(self, client, weights_document):
        document = {**weights_document, "weights": {"businessIdea": 0.9, "financials": 0.1, "team": 0.1}}

        response = client.post(
            f"{BASE}/config/versions", json={"config_data": document, "change_reason": "Bad weights"}
        )

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "INVALID_CONFIGURATION"
        assert client.get(f"{BASE}/config/active").json()["version"] == 0

    def test_blank_reason_rejected(self, client, weights_document):
        response = client.post(f"{BASE}/config/versions", json={"config_data": weights_document, "change_reason": "  "})

        assert response.status_code == 400

    def test_revert_and_history(self, client, weights_document):
        client.post(f"{BASE}/config/versions", json={"config_data": weights_document, "change_reason": "First"})
        client.post(f"{BASE}/config/versions", json={"config_data": weights_document, "change_reason": "Second"})

        response = client.post(f"{BASE}/config/versions/1/revert", json={"reason": "Back to first"})

        assert response.status_code == 201
        assert response.json()["version"] == 3
        assert response.json()["change_reason"] == "Reverted to version 1: Back to first"

        history = client.get(f"{BASE}/config/history").json()
        assert history["total"] == 3
        assert [v["version"] for v in history["versions"]] == [3, 2, 1]
        assert [v["is_active"] for v in history["versions"]] == [True, False, False]

    def test_history_limit(self, client, weights_document):
        for reason in ("First", "Second"):
            client.post(f"{BASE}/config/versions", json={"config_data": weights_document, "change_reason": reason})

        assert client.get(f"{BASE}/config/history", params={"limit": 1}).json()["total"] == 1

    def test_revert_unknown_is_404(self, client):
        response = client.post(f"{BASE}/config/versions/42/revert", json={"reason": "Nope"})

        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "NOT_FOUND"


class TestRescoreEndpoints:
    def test_rescore_one(self, client, service, strong_answers):
        assessment_id, _ = service.submit_assessment(strong_answers)

        response = client.post(f"{BASE}/rescore/{assessment_id}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["new_score"] == 827

    def test_rescore_unknown_is_404(self, client):
        assert client.post(f"{BASE}/rescore/missing").status_code == 404

    def test_rescore_all(self, client, service, strong_answers, minimal_answers):
        service.submit_assessment(strong_answers)
        service.submit_assessment(minimal_answers)

        response = client.post(f"{BASE}/rescore")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["successful"] == 2
        assert len(data["results"]) == 2


class TestErrorMapping:
    def test_persistence_error_is_503(self, broken_client):
        client, service = broken_client
        service.get_active_configuration.side_effect = PersistenceError("database unavailable")

        response = client.get(f"{BASE}/config/active")

        assert response.status_code == 503
        assert response.json()["detail"]["error"] == "PERSISTENCE_ERROR"

    def test_sqlalchemy_error_is_503(self, broken_client):
        client, service = broken_client
        service.get_scoring_history.side_effect = OperationalError("SELECT 1", {}, Exception("gone"))

        assert client.get(f"{BASE}/config/history").status_code == 503

    def test_unexpected_error_is_500(self, broken_client):
        client, service = broken_client
        service.get_active_configuration.side_effect = RuntimeError("boom")

        response = client.get(f"{BASE}/config/active")

        assert response.status_code == 500
        assert response.json()["detail"] == "Internal server error"
