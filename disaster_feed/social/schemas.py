"""
Data models for social-media crisis reports.

``priority``, ``relevance_score`` and ``processed_at`` are computed by the
processor; values supplied by a provider are not authoritative.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class Priority(str, Enum):
    """Social-post urgency tier, assigned by keyword heuristic."""

    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.URGENT: 3,
    Priority.HIGH: 2,
    Priority.MEDIUM: 1,
    Priority.LOW: 0,
}


class SocialPost(BaseModel):
    """A short user-authored crisis report."""

    id: str
    post: str = Field(..., description="Free-text body of the post")
    user: str
    timestamp: datetime
    priority: Priority = Priority.LOW
    verified: bool = False
    location: str | None = None
    hashtags: list[str] = Field(default_factory=list)

    # Computed during processing
    relevance_score: int | None = None
    processed_at: datetime | None = None


class SocialFetchResult(BaseModel):
    """Processed posts plus which providers were consulted."""

    posts: list[SocialPost]
    provider: str
    providers_tried: list[str]


class SocialFilters(BaseModel):
    keywords: str | None = None
    disaster_type: str | None = None


class SocialReportsEnvelope(BaseModel):
    """Prioritised social reports for one disaster."""

    disaster_id: str
    total_posts: int
    keywords_used: str | None
    disaster_type: str | None
    provider: str
    sources_checked: list[str]
    filters_applied: SocialFilters
    last_updated: datetime
    posts: list[SocialPost]


class MockSocialEnvelope(BaseModel):
    """Processed posts for the uncached, non-broadcasting test endpoint."""

    message: str = "Mock social media data"
    total_posts: int
    keywords_used: str | None
    disaster_type: str | None
    timestamp: datetime
    posts: list[SocialPost]
