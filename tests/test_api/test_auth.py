"""Tests for X-API-KEY authentication."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from disaster_feed.api.app import create_app
from disaster_feed.api.auth import validate_ws_api_key


@pytest.fixture
def keys():
    with patch("disaster_feed.api.auth.get_settings") as mock_settings:
        mock_settings.return_value.api_keys = "key-a, key-b"
        yield


@pytest.fixture
def raw_client():
    """Client without the verify_api_key override."""
    return TestClient(create_app())


class TestHeaderAuth:
    def test_dev_mode_allows_all(self, raw_client):
        with patch("disaster_feed.api.auth.get_settings") as mock_settings:
            mock_settings.return_value.api_keys = None
            response = raw_client.get("/official-updates/sources")

        assert response.status_code == 200

    def test_valid_key(self, keys, raw_client):
        response = raw_client.get("/official-updates/sources", headers={"X-API-KEY": "key-b"})
        assert response.status_code == 200

    def test_missing_key(self, keys, raw_client):
        response = raw_client.get("/official-updates/sources")

        assert response.status_code == 401
        assert "Missing API key" in response.json()["detail"]

    def test_invalid_key(self, keys, raw_client):
        response = raw_client.get("/disasters/1/social-media", headers={"X-API-KEY": "nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid API key"

    def test_mock_feed_is_public(self, keys, raw_client):
        assert raw_client.get("/mock-social-media").status_code == 200

    def test_health_is_public(self, keys, raw_client):
        assert raw_client.get("/health").status_code == 200


class TestWebSocketKey:
    def test_dev_mode(self):
        with patch("disaster_feed.api.auth.get_settings") as mock_settings:
            mock_settings.return_value.api_keys = ""
            assert validate_ws_api_key(None) is True

    def test_configured(self, keys):
        assert validate_ws_api_key("key-a") is True
        assert validate_ws_api_key("key-c") is False
        assert validate_ws_api_key(None) is False
