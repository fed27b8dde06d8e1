"""
Dependency injection for FastAPI endpoints.

Shared components are built once by ``build_components`` and stored on
``app.state``; the getters below read them back per request.
"""

from dataclasses import dataclass
from typing import Any

import redis.asyncio as redis
import structlog
from starlette.requests import HTTPConnection

from disaster_feed.broadcast.broadcaster import UpdateBroadcaster
from disaster_feed.cache.gateway import CacheGateway, InMemoryCache, RedisCache
from disaster_feed.config.settings import Settings
from disaster_feed.official.config import OfficialUpdatesConfig
from disaster_feed.official.fetcher import UpdateFetcher
from disaster_feed.official.providers import FixtureUpdateProvider, ScrapingUpdateProvider
from disaster_feed.official.service import OfficialUpdatesService
from disaster_feed.social.config import SocialConfig
from disaster_feed.social.fetcher import SocialReportFetcher
from disaster_feed.social.providers import (
    BlueskyProvider,
    FixtureSocialProvider,
    TwitterProvider,
)
from disaster_feed.social.service import SocialMediaService

logger = structlog.get_logger(__name__)


@dataclass
class Components:
    cache: CacheGateway
    broadcaster: UpdateBroadcaster
    official_service: OfficialUpdatesService
    social_service: SocialMediaService
    redis_client: Any | None = None


def build_official_service(settings: Settings, cache: CacheGateway) -> OfficialUpdatesService:
    """Fixture-only unless OFFICIAL_SCRAPING_ENABLED=true."""
    config = OfficialUpdatesConfig()
    primary = ScrapingUpdateProvider(config) if config.scraping_enabled else None
    return OfficialUpdatesService(
        UpdateFetcher(primary=primary, fallback=FixtureUpdateProvider()),
        cache,
        key_prefix=settings.cache_key_prefix,
    )


def build_social_service(
    settings: Settings,
    cache: CacheGateway,
    broadcaster: UpdateBroadcaster | None = None,
) -> SocialMediaService:
    """Twitter, then Bluesky, then fixtures. Unconfigured providers are skipped."""
    config = SocialConfig()
    fetcher = SocialReportFetcher(
        providers=[
            TwitterProvider(settings.twitter_bearer_token, config),
            BlueskyProvider(settings.bluesky_access_token, config),
        ],
        fallback=FixtureSocialProvider(),
    )
    return SocialMediaService(fetcher, cache, broadcaster, key_prefix=settings.cache_key_prefix)


def build_components(settings: Settings) -> Components:
    """Wire cache, fetchers, services and broadcaster from settings."""
    redis_client = None
    if settings.cache_backend == "redis" or settings.broadcast_use_redis:
        redis_client = redis.from_url(
            str(settings.redis_url),
            encoding="utf-8",
            decode_responses=True,
        )

    if settings.cache_backend == "redis":
        cache: CacheGateway = RedisCache(redis_client, ttl_seconds=settings.cache_ttl_seconds)
    else:
        cache = InMemoryCache(ttl_seconds=settings.cache_ttl_seconds)

    official_service = build_official_service(settings, cache)
    broadcaster = UpdateBroadcaster(
        max_connections=settings.ws_max_connections,
        heartbeat_interval=settings.ws_heartbeat_seconds,
    )

    logger.info(
        "Components built",
        cache_backend=settings.cache_backend,
        twitter=settings.twitter_configured,
        bluesky=settings.bluesky_configured,
    )
    return Components(
        cache=cache,
        broadcaster=broadcaster,
        official_service=official_service,
        social_service=build_social_service(settings, cache, broadcaster),
        redis_client=redis_client,
    )


def get_components(conn: HTTPConnection) -> Components:
    return conn.app.state.components


def get_official_service(conn: HTTPConnection) -> OfficialUpdatesService:
    return get_components(conn).official_service


def get_social_service(conn: HTTPConnection) -> SocialMediaService:
    return get_components(conn).social_service


def get_broadcaster(conn: HTTPConnection) -> UpdateBroadcaster:
    return get_components(conn).broadcaster


def get_cache(conn: HTTPConnection) -> CacheGateway:
    return get_components(conn).cache
