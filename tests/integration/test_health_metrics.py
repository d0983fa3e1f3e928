"""Integration tests for /health, /healthz and /metrics endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from tripcore.app.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:
    """Test /health and /healthz endpoints."""

    def test_health_always_ok(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_healthz_in_memory_store(self, client: TestClient) -> None:
        """No DATABASE_URL: in-memory stores are always ready."""
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["components"]["db"] == "in_memory"

    @patch("tripcore.app.api.routes.health.check_db")
    def test_healthz_returns_503_when_db_fails(
        self, mock_check_db: MagicMock, client: TestClient
    ) -> None:
        mock_check_db.return_value = (False, "connection refused")

        response = client.get("/healthz")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "degraded"
        assert data["components"]["db"] == "connection refused"


class TestMetricsEndpoint:
    """Test /metrics endpoint."""

    def test_metrics_returns_prometheus_format(self, client: TestClient) -> None:
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]

    def test_metrics_include_mutation_metrics(self, client: TestClient) -> None:
        from tripcore.app.utils.metrics import PrometheusMutationMetrics

        metrics = PrometheusMutationMetrics()
        metrics.record("add_leg", "committed", 12.5)
        metrics.inc_conflict("join_lodging")

        text = client.get("/metrics").text

        assert 'itinerary_mutations_total{mutation="add_leg",outcome="committed"}' in text
        assert 'itinerary_write_conflicts_total{mutation="join_lodging"}' in text
        assert "itinerary_mutation_latency_ms_bucket" in text
