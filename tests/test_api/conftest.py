"""Shared fixtures for API tests."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from disaster_feed.api.app import create_app
from disaster_feed.api.auth import verify_api_key
from disaster_feed.api.dependencies import get_official_service, get_social_service
from disaster_feed.cache.gateway import InMemoryCache
from disaster_feed.official.fetcher import UpdateFetcher
from disaster_feed.official.service import OfficialUpdatesService
from disaster_feed.social.fetcher import SocialReportFetcher
from disaster_feed.social.service import SocialMediaService


@pytest.fixture
def cache():
    return InMemoryCache(ttl_seconds=60)


@pytest.fixture
def mock_broadcaster():
    """Stands in for the broadcaster the social service announces to."""
    broadcaster = AsyncMock()
    broadcaster.emit = AsyncMock()
    return broadcaster


@pytest.fixture
def official_service(cache):
    """Fixture-backed official updates service."""
    return OfficialUpdatesService(UpdateFetcher(), cache)


@pytest.fixture
def social_service(cache, mock_broadcaster):
    """Social service with no live providers configured."""
    return SocialMediaService(SocialReportFetcher(), cache, mock_broadcaster)


@pytest.fixture
def client(official_service, social_service):
    """FastAPI TestClient with dependency overrides."""
    app = create_app()

    app.dependency_overrides[verify_api_key] = lambda: "test-key"
    app.dependency_overrides[get_official_service] = lambda: official_service
    app.dependency_overrides[get_social_service] = lambda: social_service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
