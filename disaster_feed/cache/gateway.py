"""
Response cache gateway.

Envelopes are cached as JSON under keys derived from the request kind and
its normalised parameters. TTL and eviction belong to the store. Cache
failures degrade to a miss: a broken cache must never fail a request.
"""

import hashlib
import json
import logging
import time
from typing import Any, Protocol

import redis.asyncio as redis

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "disaster_feed:"


class CacheGateway(Protocol):
    """Read-through / write-through key-value store."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def ping(self) -> bool: ...


def _normalize(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return [_normalize(v) for v in value]
    return value


def make_cache_key(kind: str, prefix: str = DEFAULT_PREFIX, **params: Any) -> str:
    """Derive a deterministic cache key.

    Parameters are trimmed and serialised with sorted keys, so two requests
    with the same effective parameters always share an entry.

    Example:
        make_cache_key("official_updates", disaster_id="42", category="shelter")
        -> "disaster_feed:official_updates:3f1c0a9e5b7d2c41"
    """
    canonical = json.dumps(
        {k: _normalize(v) for k, v in params.items()},
        sort_keys=True,
        separators=(",", ":"),
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
    return f"{prefix}{kind}:{digest}"


class RedisCache:
    """Redis-backed cache with a fixed TTL per entry."""

    def __init__(self, redis_client: redis.Redis, ttl_seconds: int = 3600) -> None:
        self._redis = redis_client
        self._ttl = ttl_seconds

    async def get(self, key: str) -> Any | None:
        try:
            cached = await self._redis.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

        if cached is None:
            return None

        try:
            return json.loads(cached)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning("Discarding undecodable cache entry %s: %s", key, e)
            return None

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._redis.setex(key, self._ttl, json.dumps(value))
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    async def ping(self) -> bool:
        await self._redis.ping()
        return True


class InMemoryCache:
    """Process-local TTL cache.

    Values are stored as JSON text so every ``get`` hands out a fresh copy
    that callers may mutate freely.
    """

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self._ttl = ttl_seconds
        self._entries: dict[str, tuple[float, str]] = {}
        self._next_sweep = 0.0

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        expires_at, payload = entry
        if time.monotonic() >= expires_at:
            self._entries.pop(key, None)
            return None
        return json.loads(payload)

    async def set(self, key: str, value: Any) -> None:
        now = time.monotonic()
        if now >= self._next_sweep:
            self._sweep(now)
        self._entries[key] = (now + self._ttl, json.dumps(value))

    def _sweep(self, now: float) -> None:
        """Drop expired entries. Runs at most once per TTL period."""
        expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
        self._next_sweep = now + self._ttl

    async def ping(self) -> bool:
        return True

    def clear(self) -> None:
        self._entries.clear()
