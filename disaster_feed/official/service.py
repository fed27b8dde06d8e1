"""
Official updates service: cache → fetch → filter → search → rank → limit.

Each public method builds one response envelope. Cache hits are returned
verbatim; misses are computed, dumped to JSON-ready dicts and written
through to the cache.
"""

import logging
import time
from datetime import datetime, timezone

from disaster_feed.cache.gateway import DEFAULT_PREFIX, CacheGateway, make_cache_key
from disaster_feed.observability.metrics import get_metrics
from disaster_feed.official.fetcher import UpdateFetcher
from disaster_feed.official.filters import (
    filter_by_category_and_severity,
    rank_updates,
    search_by_keywords,
)
from disaster_feed.official.registry import list_sources, parse_source_ids
from disaster_feed.official.schemas import (
    CategoryUpdatesEnvelope,
    FiltersApplied,
    OfficialUpdatesEnvelope,
    SearchUpdatesEnvelope,
    SourcesEnvelope,
    UpdateRecord,
)
from disaster_feed.text import parse_keywords

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    """Trim and lower-case an optional filter; blank becomes None."""
    if value is None or not value.strip():
        return None
    return value.strip().lower()


def _clean_keywords(keywords: str | None) -> str | None:
    terms = parse_keywords(keywords)
    return ",".join(terms) if terms else None


class OfficialUpdatesService:
    """Builds official-update envelopes on top of an UpdateFetcher and a cache."""

    def __init__(
        self,
        fetcher: UpdateFetcher,
        cache: CacheGateway,
        key_prefix: str = DEFAULT_PREFIX,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._prefix = key_prefix

    async def _cached(self, kind: str, key: str) -> dict | None:
        cached = await self._cache.get(key)
        get_metrics().record_cache(kind, hit=cached is not None)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", kind, key)
        return cached

    async def _pipeline(
        self,
        source_ids: list[str],
        category: str | None = None,
        severity: str | None = None,
        keywords: str | None = None,
        limit: int | None = None,
    ) -> list[UpdateRecord]:
        updates = await self._fetcher.fetch(source_ids)
        updates = filter_by_category_and_severity(updates, category, severity)
        updates = search_by_keywords(updates, keywords)
        updates = rank_updates(updates)
        if limit is not None and limit > 0:
            updates = updates[:limit]
        return updates

    async def get_disaster_updates(
        self,
        disaster_id: str,
        sources: str | None = None,
        category: str | None = None,
        severity: str | None = None,
        keywords: str | None = None,
        limit: int = 50,
    ) -> dict:
        """Official updates for a disaster, filtered and ranked."""
        kind = "official_updates"
        disaster_id = disaster_id.strip()
        source_ids = parse_source_ids(sources)
        category = _clean(category)
        severity = _clean(severity)
        keywords = _clean_keywords(keywords)

        key = make_cache_key(
            kind,
            prefix=self._prefix,
            disaster_id=disaster_id,
            sources=source_ids,
            category=category,
            severity=severity,
            keywords=keywords,
            limit=limit,
        )
        cached = await self._cached(kind, key)
        if cached is not None:
            logger.info("Official updates served from cache for disaster %s", disaster_id)
            return cached

        start = time.perf_counter()
        updates = await self._pipeline(source_ids, category, severity, keywords, limit)
        envelope = OfficialUpdatesEnvelope(
            disaster_id=disaster_id,
            total_updates=len(updates),
            sources_checked=source_ids,
            filters_applied=FiltersApplied(
                category=category,
                severity=severity,
                keywords=keywords,
            ),
            last_updated=datetime.now(timezone.utc),
            updates=updates,
        ).model_dump(mode="json")
        get_metrics().record_pipeline_latency(kind, time.perf_counter() - start)

        await self._cache.set(key, envelope)
        logger.info(
            "Official updates fetched for disaster %s: %d updates",
            disaster_id, len(updates),
        )
        return envelope

    async def get_updates_by_category(
        self,
        category: str,
        sources: str | None = None,
        limit: int = 20,
    ) -> dict:
        """Updates in one category across every disaster."""
        kind = "updates_by_category"
        source_ids = parse_source_ids(sources)
        category = _clean(category) or ""

        key = make_cache_key(kind, prefix=self._prefix, category=category, sources=source_ids, limit=limit)
        cached = await self._cached(kind, key)
        if cached is not None:
            return cached

        start = time.perf_counter()
        updates = await self._pipeline(source_ids, category=category or None, limit=limit)
        envelope = CategoryUpdatesEnvelope(
            category=category,
            total_updates=len(updates),
            sources_checked=source_ids,
            last_updated=datetime.now(timezone.utc),
            updates=updates,
        ).model_dump(mode="json")
        get_metrics().record_pipeline_latency(kind, time.perf_counter() - start)

        await self._cache.set(key, envelope)
        logger.info("Category updates fetched for %s: %d updates", category, len(updates))
        return envelope

    async def search_updates(
        self,
        query: str,
        sources: str | None = None,
        limit: int = 30,
    ) -> dict:
        """Keyword search across sources. ``query`` must be non-blank."""
        if not query or not query.strip():
            raise ValueError("Search query is required")

        kind = "search_updates"
        query = query.strip()
        source_ids = parse_source_ids(sources)

        key = make_cache_key(
            kind,
            prefix=self._prefix,
            query=_clean_keywords(query),
            sources=source_ids,
            limit=limit,
        )
        cached = await self._cached(kind, key)
        if cached is not None:
            return cached

        start = time.perf_counter()
        results = await self._pipeline(source_ids, keywords=query, limit=limit)
        envelope = SearchUpdatesEnvelope(
            search_query=query,
            total_results=len(results),
            sources_checked=source_ids,
            last_updated=datetime.now(timezone.utc),
            results=results,
        ).model_dump(mode="json")
        get_metrics().record_pipeline_latency(kind, time.perf_counter() - start)

        await self._cache.set(key, envelope)
        logger.info('Search completed for query "%s": %d results', query, len(results))
        return envelope

    def list_sources(self) -> dict:
        """The static source catalog."""
        sources = [s.to_dict() for s in list_sources()]
        return SourcesEnvelope(
            available_sources=sources,
            total_sources=len(sources),
        ).model_dump(mode="json")
