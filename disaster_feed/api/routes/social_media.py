"""
Social media endpoints: prioritised crisis reports per disaster, plus an
uncached mock feed for client development.
"""

from fastapi import APIRouter, Depends, Query
from starlette.requests import Request
import structlog

from disaster_feed.api.auth import verify_api_key
from disaster_feed.api.dependencies import get_social_service
from disaster_feed.api.errors import internal_error
from disaster_feed.api.models import ErrorResponse
from disaster_feed.api.rate_limit import default_limit, limiter, mock_limit
from disaster_feed.social.schemas import MockSocialEnvelope, SocialReportsEnvelope
from disaster_feed.social.service import SocialMediaService

logger = structlog.get_logger(__name__)
router = APIRouter()

_ERRORS = {
    401: {"model": ErrorResponse, "description": "Invalid API key"},
    500: {"model": ErrorResponse, "description": "Unexpected failure"},
}


@router.get(
    "/disasters/{disaster_id}/social-media",
    response_model=SocialReportsEnvelope,
    responses=_ERRORS,
    summary="Social media reports for a disaster",
    description="""
    Crisis reports from the first social provider that returns data,
    sorted by priority (urgent, high, medium, low) and then relevance to
    `keywords`. Fresh results are pushed to WebSocket clients as
    `social_media_updated`.
    """,
)
@limiter.limit(default_limit)
async def get_social_media(
    request: Request,
    disaster_id: str,
    keywords: str | None = Query(default=None),
    disaster_type: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=200),
    api_key: str = Depends(verify_api_key),
    service: SocialMediaService = Depends(get_social_service),
) -> dict:
    try:
        return await service.get_disaster_reports(
            disaster_id,
            keywords=keywords,
            disaster_type=disaster_type,
            limit=limit,
        )
    except Exception as e:
        logger.error("Social media fetch failed", disaster_id=disaster_id, error=str(e), exc_info=True)
        raise internal_error("Social media fetch")


@router.get(
    "/mock-social-media",
    response_model=MockSocialEnvelope,
    responses=_ERRORS,
    summary="Mock social media reports",
)
@limiter.limit(mock_limit)
async def get_mock_social_media(
    request: Request,
    keywords: str | None = Query(default=None),
    disaster_type: str | None = Query(default=None),
    limit: int = Query(default=20, ge=1, le=200),
    service: SocialMediaService = Depends(get_social_service),
) -> dict:
    try:
        return await service.get_mock_reports(
            keywords=keywords,
            disaster_type=disaster_type,
            limit=limit,
        )
    except Exception as e:
        logger.error("Mock social media fetch failed", error=str(e), exc_info=True)
        raise internal_error("Mock data generation")
