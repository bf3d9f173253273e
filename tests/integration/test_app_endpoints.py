"""
Test application-level endpoints
"""
import pytest
from fastapi.testclient import TestClient

import main


@pytest.fixture
def client():
    return TestClient(main.app)


class TestAppEndpoints:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["environment"] == "test"

    def test_metrics_exposes_request_counts(self, client):
        client.get("/health")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "readiness_http_requests_total" in response.text
        assert 'endpoint="/health"' in response.text
        assert 'endpoint="/metrics"' not in response.text

    def test_scoring_routes_mounted(self, client):
        paths = {getattr(route, "path", None) for route in main.app.routes}

        assert "/api/v1/scoring/score" in paths
        assert "/api/v1/scoring/config/versions/{version}/revert" in paths
        assert "/api/v1/scoring/rescore" in paths
