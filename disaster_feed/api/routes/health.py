"""
Health check endpoint.
"""

import time

import structlog
from fastapi import APIRouter, Depends

from disaster_feed import __version__
from disaster_feed.api.dependencies import get_broadcaster, get_cache
from disaster_feed.api.models import ComponentHealth, HealthResponse
from disaster_feed.broadcast.broadcaster import UpdateBroadcaster
from disaster_feed.cache.gateway import CacheGateway
from disaster_feed.config.settings import get_settings

router = APIRouter()
logger = structlog.get_logger(__name__)


async def _check_cache(cache: CacheGateway) -> ComponentHealth:
    """Ping the cache backend and measure latency."""
    start = time.perf_counter()
    try:
        healthy = await cache.ping()
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="healthy" if healthy else "unhealthy",
            latency_ms=round(latency_ms, 2),
        )
    except Exception as e:
        latency_ms = (time.perf_counter() - start) * 1000
        return ComponentHealth(
            status="unhealthy",
            latency_ms=round(latency_ms, 2),
            details={"error": str(e)},
        )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Check the health of the service and its cache backend.",
)
async def health_check(
    cache: CacheGateway = Depends(get_cache),
    broadcaster: UpdateBroadcaster = Depends(get_broadcaster),
) -> HealthResponse:
    """
    Status logic:
    - degraded: cache backend unreachable (requests still served, uncached)
    - healthy: otherwise
    """
    settings = get_settings()

    cache_health = await _check_cache(cache)
    status = "healthy" if cache_health.status == "healthy" else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        cache_backend=settings.cache_backend,
        live_providers={
            "twitter": settings.twitter_configured,
            "bluesky": settings.bluesky_configured,
        },
        websocket_connections=broadcaster.active_connections,
        components={
            "cache": cache_health,
            "broadcaster": ComponentHealth(
                status="healthy" if broadcaster.running else "unhealthy",
            ),
        },
    )
