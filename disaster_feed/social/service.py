"""
Social media service: cache → provider chain → process → limit → broadcast.
"""

import logging
import time
from datetime import datetime, timezone

from disaster_feed.broadcast.broadcaster import BroadcastPort
from disaster_feed.cache.gateway import DEFAULT_PREFIX, CacheGateway, make_cache_key
from disaster_feed.observability.metrics import get_metrics
from disaster_feed.social.fetcher import SocialReportFetcher
from disaster_feed.social.schemas import (
    MockSocialEnvelope,
    SocialFilters,
    SocialReportsEnvelope,
)
from disaster_feed.text import parse_keywords

logger = logging.getLogger(__name__)

SOCIAL_MEDIA_UPDATED = "social_media_updated"


def _clean(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip().lower()


def _clean_keywords(keywords: str | None) -> str | None:
    """Normalised comma-joined terms, as used in cache keys and envelopes."""
    terms = parse_keywords(keywords)
    return ",".join(terms) if terms else None


class SocialMediaService:
    """Builds social report envelopes and announces fresh results."""

    def __init__(
        self,
        fetcher: SocialReportFetcher,
        cache: CacheGateway,
        broadcaster: BroadcastPort | None = None,
        key_prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._broadcaster = broadcaster
        self._prefix = key_prefix

    async def get_disaster_reports(
        self,
        disaster_id: str,
        keywords: str | None = None,
        disaster_type: str | None = None,
        limit: int = 20,
    ) -> dict:
        """Prioritised social reports for a disaster.

        A freshly computed envelope is cached and its posts are emitted as
        ``social_media_updated``; cache hits are returned silently.
        """
        kind = "social_media"
        disaster_id = disaster_id.strip()
        keywords = _clean_keywords(keywords)
        disaster_type = _clean(disaster_type)

        key = make_cache_key(
            kind,
            prefix=self._prefix,
            disaster_id=disaster_id,
            keywords=keywords,
            disaster_type=disaster_type,
            limit=limit,
        )
        cached = await self._cache.get(key)
        get_metrics().record_cache(kind, hit=cached is not None)
        if cached is not None:
            logger.info("Social media data served from cache for disaster %s", disaster_id)
            return cached

        start = time.perf_counter()
        result = await self._fetcher.fetch(keywords, disaster_type, limit)
        posts = result.posts[:limit]
        envelope = SocialReportsEnvelope(
            disaster_id=disaster_id,
            total_posts=len(posts),
            keywords_used=keywords,
            disaster_type=disaster_type,
            provider=result.provider,
            sources_checked=result.providers_tried,
            filters_applied=SocialFilters(keywords=keywords, disaster_type=disaster_type),
            last_updated=datetime.now(timezone.utc),
            posts=posts,
        ).model_dump(mode="json")
        get_metrics().record_pipeline_latency(kind, time.perf_counter() - start)

        await self._cache.set(key, envelope)
        await self._announce(disaster_id, envelope["posts"])

        logger.info(
            "Social media data fetched for disaster %s: %d posts via %s",
            disaster_id, len(posts), result.provider,
        )
        return envelope

    async def get_mock_reports(
        self,
        keywords: str | None = None,
        disaster_type: str | None = None,
        limit: int = 20,
    ) -> dict:
        """Processed posts without caching or broadcasting."""
        keywords = _clean_keywords(keywords)
        disaster_type = _clean(disaster_type)

        result = await self._fetcher.fetch(keywords, disaster_type, limit)
        posts = result.posts[:limit]
        return MockSocialEnvelope(
            total_posts=len(posts),
            keywords_used=keywords,
            disaster_type=disaster_type,
            timestamp=datetime.now(timezone.utc),
            posts=posts,
        ).model_dump(mode="json")

    async def _announce(self, disaster_id: str, posts: list[dict]) -> None:
        if self._broadcaster is None:
            return

        payload = {"disaster_id": disaster_id, "data": posts}
        try:
            await self._broadcaster.emit(SOCIAL_MEDIA_UPDATED, payload)
        except Exception as e:
            logger.warning("Broadcast of social media update failed for %s: %s", disaster_id, e)
