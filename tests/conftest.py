"""Pytest fixtures for disaster-feed tests."""

from datetime import datetime, timezone

import pytest

from disaster_feed.config.settings import Settings
from disaster_feed.official.fixtures import fixture_updates
from disaster_feed.official.schemas import UpdateRecord
from disaster_feed.social.fixtures import fixture_posts
from disaster_feed.social.schemas import SocialPost

FIXED_NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    """Settings configured for testing."""
    return Settings(
        environment="development",
        log_level="DEBUG",
        redis_url="redis://localhost:6379/1",  # Use DB 1 for tests
        cache_backend="memory",
    )


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def updates(now) -> list[UpdateRecord]:
    """The five fixture official updates, timestamped against ``now``."""
    return fixture_updates(now)


@pytest.fixture
def posts(now) -> list[SocialPost]:
    """The six fixture social posts, timestamped against ``now``."""
    return fixture_posts(now)
