"""
Data models for official update bulletins.

UpdateRecord is produced by the update providers and flows unchanged
through filtering, search and ranking. SourceDescriptor describes one
entry of the static source registry.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Official-update urgency tier."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


SEVERITY_RANK: dict[Severity, int] = {
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


class UpdateRecord(BaseModel):
    """A bulletin attributed to a relief or government organization."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Record identifier, unique per source")
    source: str = Field(..., description="Display name of the publishing organization")
    title: str
    content: str
    url: str
    published_at: datetime = Field(..., description="Publication time (timezone-aware)")
    severity: Severity
    category: str = Field(..., description="Single topical category, e.g. shelter")
    contact: str | None = None


@dataclass(frozen=True)
class SourceDescriptor:
    """A known official update source.

    ``categories`` describes what the source usually publishes; it is
    informational and never used to filter records.
    """

    id: str
    name: str
    description: str
    url: str
    categories: frozenset[str] = field(default_factory=frozenset)
    active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "categories": sorted(self.categories),
            "active": self.active,
        }


# Response envelopes. Built fresh per request and cached as their JSON dump.


class FiltersApplied(BaseModel):
    category: str | None = None
    severity: str | None = None
    keywords: str | None = None


class OfficialUpdatesEnvelope(BaseModel):
    """Official updates for one disaster."""

    disaster_id: str
    total_updates: int
    sources_checked: list[str]
    filters_applied: FiltersApplied
    last_updated: datetime
    updates: list[UpdateRecord]


class CategoryUpdatesEnvelope(BaseModel):
    """Official updates in one category, across all disasters."""

    category: str
    total_updates: int
    sources_checked: list[str]
    last_updated: datetime
    updates: list[UpdateRecord]


class SearchUpdatesEnvelope(BaseModel):
    """Keyword search results across sources."""

    search_query: str
    total_results: int
    sources_checked: list[str]
    last_updated: datetime
    results: list[UpdateRecord]


class SourcesEnvelope(BaseModel):
    available_sources: list[dict]
    total_sources: int
