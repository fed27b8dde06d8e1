"""Tests for the health endpoint and root route."""

from unittest.mock import AsyncMock

from disaster_feed import __version__
from disaster_feed.api.dependencies import get_cache


class TestHealth:
    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["cache_backend"] == "memory"
        assert set(data["live_providers"]) == {"twitter", "bluesky"}
        assert data["websocket_connections"] == 0
        assert data["components"]["cache"]["status"] == "healthy"
        # lifespan started the broadcaster
        assert data["components"]["broadcaster"]["status"] == "healthy"

    def test_degraded_when_cache_down(self, client):
        broken = AsyncMock()
        broken.ping = AsyncMock(side_effect=ConnectionError("redis down"))
        client.app.dependency_overrides[get_cache] = lambda: broken

        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["components"]["cache"]["status"] == "unhealthy"
        assert data["components"]["cache"]["details"] == {"error": "redis down"}


class TestRoot:
    def test_root(self, client):
        data = client.get("/").json()
        assert data["service"] == "Disaster Feed API"
        assert data["docs"] == "/docs"


class TestRequestId:
    def test_generated(self, client):
        response = client.get("/health")
        assert response.headers["X-Request-ID"]

    def test_propagated(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_correlation_id_accepted(self, client):
        response = client.get("/health", headers={"X-Correlation-ID": "corr-9"})
        assert response.headers["X-Request-ID"] == "corr-9"
