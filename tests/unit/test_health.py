"""Unit tests for health endpoints

Verify the liveness, detailed health and service info endpoints.
"""

import pytest


@pytest.mark.unit
class TestHealthCheck:
    """Test health check endpoints"""

    def test_health_returns_healthy(self, client):
        """Happy path: liveness check returns healthy status"""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "malkhana-custody-service"}

    def test_detailed_health_checks_storage_and_database(self, client):
        response = client.get("/api/v1/health")

        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "healthy"
        assert body["storage_available"] is True
        assert body["database_available"] is True

    def test_detailed_health_reports_degraded_storage(self, client, storage, monkeypatch):
        async def unavailable():
            return False

        monkeypatch.setattr(storage, "health_check", unavailable)

        body = client.get("/api/v1/health").json()

        assert body["status"] == "degraded"
        assert body["storage_available"] is False

    def test_service_info(self, client):
        body = client.get("/").json()

        assert body["service"] == "malkhana-custody-service"
        assert body["status"] == "running"
        assert body["environment"] == "test"
