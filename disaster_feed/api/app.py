"""
FastAPI application factory.
"""

import time
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from disaster_feed import __version__
from disaster_feed.api.dependencies import build_components
from disaster_feed.api.errors import register_error_handlers
from disaster_feed.api.rate_limit import limiter
from disaster_feed.api.routes import health, official_updates, social_media, ws_updates
from disaster_feed.config.settings import get_settings
from disaster_feed.observability.logging import bind_context, clear_context

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Disaster feed API starting up")

    settings = get_settings()
    components = app.state.components

    if settings.ws_enabled:
        redis_client = components.redis_client if settings.broadcast_use_redis else None
        try:
            await components.broadcaster.start(redis_client)
        except Exception as e:
            logger.warning("Failed to start WebSocket broadcaster", error=str(e))

    yield

    logger.info("Disaster feed API shutting down")
    await components.broadcaster.stop()
    if components.redis_client is not None:
        await components.redis_client.aclose()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    openapi_tags = [
        {"name": "health", "description": "Service health checks"},
        {"name": "official-updates", "description": "Agency updates: feed, sources, category, search"},
        {"name": "social-media", "description": "Prioritised social media crisis reports"},
        {"name": "websocket", "description": "Real-time update stream"},
    ]

    app = FastAPI(
        title="Disaster Feed API",
        description="""
Aggregates official agency updates and social media crisis reports for
active disasters.

## Authentication

Requires `X-API-KEY` header when `API_KEYS` is configured.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    app.state.components = build_components(settings)

    # CORS origins from CORS_ORIGINS env var, comma-separated
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request logging and correlation ID
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = (
            request.headers.get("X-Request-ID")
            or request.headers.get("X-Correlation-ID")
            or str(uuid.uuid4())
        )
        bind_context(request_id=request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            response.headers["X-Request-ID"] = request_id

            logger.info(
                "HTTP request",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 2),
            )
            return response
        finally:
            clear_context()

    # Rate limiting (no-op unless RATE_LIMIT_ENABLED=true)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_error_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(official_updates.router, tags=["official-updates"])
    app.include_router(social_media.router, tags=["social-media"])
    app.include_router(ws_updates.router, tags=["websocket"])

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": "Disaster Feed API",
            "version": __version__,
            "docs": "/docs",
        }

    return app
