"""Tests for API rate limiting configuration."""

from unittest.mock import patch

from starlette.requests import Request

from disaster_feed.api.rate_limit import (
    _get_rate_limit_key,
    create_limiter,
    default_limit,
    mock_limit,
)


def _request(headers=None, client=("192.168.1.100", 12345)) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/mock-social-media",
        "headers": headers or [],
        "client": client,
    }
    return Request(scope)


class TestRateLimitKeyExtraction:
    def test_uses_api_key_when_present(self):
        request = _request(headers=[(b"x-api-key", b"test-key-123")])
        assert _get_rate_limit_key(request) == "test-key-123"

    def test_falls_back_to_ip(self):
        assert _get_rate_limit_key(_request()) == "192.168.1.100"


class TestLimits:
    def test_defaults(self):
        with patch("disaster_feed.api.rate_limit.get_settings") as mock_settings:
            mock_settings.return_value.rate_limit_default = "200/minute"
            mock_settings.return_value.rate_limit_mock = "1000/minute"

            assert default_limit() == "200/minute"
            assert mock_limit() == "1000/minute"

    def test_create_limiter_respects_enabled_flag(self):
        with patch("disaster_feed.api.rate_limit.get_settings") as mock_settings:
            settings = mock_settings.return_value
            settings.rate_limit_enabled = False
            settings.rate_limit_default = "200/minute"
            settings.rate_limit_storage_uri = "memory://"

            limiter = create_limiter()

        assert limiter.enabled is False
