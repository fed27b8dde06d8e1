"""Response cache: gateway protocol, Redis and in-memory stores."""

from disaster_feed.cache.gateway import (
    CacheGateway,
    InMemoryCache,
    RedisCache,
    make_cache_key,
)

__all__ = [
    "CacheGateway",
    "InMemoryCache",
    "RedisCache",
    "make_cache_key",
]
