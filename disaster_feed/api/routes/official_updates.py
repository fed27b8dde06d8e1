"""
Official updates endpoints: per-disaster feed, source catalog, category
listing and keyword search.
"""

from fastapi import APIRouter, Depends, Query, status
from starlette.requests import Request
import structlog

from disaster_feed.api.auth import verify_api_key
from disaster_feed.api.dependencies import get_official_service
from disaster_feed.api.errors import APIError, internal_error
from disaster_feed.api.models import ErrorResponse
from disaster_feed.api.rate_limit import default_limit, limiter
from disaster_feed.official.schemas import (
    CategoryUpdatesEnvelope,
    OfficialUpdatesEnvelope,
    SearchUpdatesEnvelope,
    SourcesEnvelope,
)
from disaster_feed.official.service import OfficialUpdatesService

logger = structlog.get_logger(__name__)
router = APIRouter()

_ERRORS = {
    401: {"model": ErrorResponse, "description": "Invalid API key"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
}


@router.get(
    "/disasters/{disaster_id}/official-updates",
    response_model=OfficialUpdatesEnvelope,
    responses=_ERRORS,
    summary="Official updates for a disaster",
    description="""
    Aggregated updates from emergency agencies, ranked by severity and then
    recency.

    - `sources`: comma-separated source ids, or `all` (default)
    - `category`, `severity`: exact match, case-insensitive
    - `keywords`: comma-separated; a record matches if any term appears in
      its title or content
    """,
)
@limiter.limit(default_limit)
async def get_official_updates(
    request: Request,
    disaster_id: str,
    sources: str = Query(default="all"),
    category: str | None = Query(default=None),
    severity: str | None = Query(default=None),
    keywords: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    api_key: str = Depends(verify_api_key),
    service: OfficialUpdatesService = Depends(get_official_service),
) -> dict:
    try:
        return await service.get_disaster_updates(
            disaster_id,
            sources=sources,
            category=category,
            severity=severity,
            keywords=keywords,
            limit=limit,
        )
    except Exception as e:
        logger.error("Official updates fetch failed", disaster_id=disaster_id, error=str(e), exc_info=True)
        raise internal_error("Official updates fetch")


@router.get(
    "/official-updates/sources",
    response_model=SourcesEnvelope,
    responses=_ERRORS,
    summary="List official update sources",
)
@limiter.limit(default_limit)
async def get_sources(
    request: Request,
    api_key: str = Depends(verify_api_key),
    service: OfficialUpdatesService = Depends(get_official_service),
) -> dict:
    try:
        return service.list_sources()
    except Exception as e:
        logger.error("Source listing failed", error=str(e), exc_info=True)
        raise internal_error("Source listing")


@router.get(
    "/official-updates/category/{category}",
    response_model=CategoryUpdatesEnvelope,
    responses=_ERRORS,
    summary="Official updates in one category",
)
@limiter.limit(default_limit)
async def get_updates_by_category(
    request: Request,
    category: str,
    sources: str = Query(default="all"),
    limit: int = Query(default=20, ge=1, le=200),
    api_key: str = Depends(verify_api_key),
    service: OfficialUpdatesService = Depends(get_official_service),
) -> dict:
    try:
        return await service.get_updates_by_category(category, sources=sources, limit=limit)
    except Exception as e:
        logger.error("Category updates fetch failed", category=category, error=str(e), exc_info=True)
        raise internal_error("Category updates fetch")


@router.get(
    "/official-updates/search",
    response_model=SearchUpdatesEnvelope,
    responses={**_ERRORS, 400: {"model": ErrorResponse, "description": "Missing query"}},
    summary="Search official updates",
)
@limiter.limit(default_limit)
async def search_updates(
    request: Request,
    q: str | None = Query(default=None, description="Comma-separated search terms"),
    sources: str = Query(default="all"),
    limit: int = Query(default=30, ge=1, le=200),
    api_key: str = Depends(verify_api_key),
    service: OfficialUpdatesService = Depends(get_official_service),
) -> dict:
    if not q or not q.strip():
        raise APIError(
            status.HTTP_400_BAD_REQUEST,
            "Search query is required",
            "Please provide a search query using the 'q' parameter",
        )

    try:
        return await service.search_updates(q, sources=sources, limit=limit)
    except Exception as e:
        logger.error("Official updates search failed", query_length=len(q), error=str(e), exc_info=True)
        raise internal_error("Search")
