"""Social-media crisis reports: provider chain, processing and service."""

from disaster_feed.social.config import SocialConfig
from disaster_feed.social.fetcher import SocialReportFetcher
from disaster_feed.social.processor import (
    calculate_relevance_score,
    classify_priority,
    process_posts,
)
from disaster_feed.social.providers import (
    BlueskyProvider,
    FixtureSocialProvider,
    ProviderError,
    SocialProvider,
    TwitterProvider,
)
from disaster_feed.social.schemas import (
    PRIORITY_RANK,
    MockSocialEnvelope,
    Priority,
    SocialFetchResult,
    SocialPost,
    SocialReportsEnvelope,
)
from disaster_feed.social.service import SocialMediaService

__all__ = [
    "BlueskyProvider",
    "FixtureSocialProvider",
    "MockSocialEnvelope",
    "PRIORITY_RANK",
    "Priority",
    "ProviderError",
    "SocialConfig",
    "SocialFetchResult",
    "SocialMediaService",
    "SocialPost",
    "SocialProvider",
    "SocialReportFetcher",
    "SocialReportsEnvelope",
    "TwitterProvider",
    "calculate_relevance_score",
    "classify_priority",
    "process_posts",
]
