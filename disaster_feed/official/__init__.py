"""Official updates: source registry, fetcher, filtering/ranking and service."""

from disaster_feed.official.config import OfficialUpdatesConfig
from disaster_feed.official.fetcher import UpdateFetcher
from disaster_feed.official.filters import (
    filter_by_category_and_severity,
    rank_updates,
    search_by_keywords,
)
from disaster_feed.official.providers import (
    FixtureUpdateProvider,
    ScrapingUpdateProvider,
    UpdateProvider,
)
from disaster_feed.official.schemas import Severity, SourceDescriptor, UpdateRecord
from disaster_feed.official.service import OfficialUpdatesService

__all__ = [
    "FixtureUpdateProvider",
    "OfficialUpdatesConfig",
    "OfficialUpdatesService",
    "ScrapingUpdateProvider",
    "Severity",
    "SourceDescriptor",
    "UpdateFetcher",
    "UpdateProvider",
    "UpdateRecord",
    "filter_by_category_and_severity",
    "rank_updates",
    "search_by_keywords",
]
