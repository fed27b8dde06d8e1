"""Static catalog of official update sources.

Adding a source only needs a descriptor here. Fixture records and scrape
selectors are keyed by the descriptor and are optional.
"""

import logging

from disaster_feed.official.schemas import SourceDescriptor

logger = logging.getLogger(__name__)

ALL_SOURCES = "all"

SOURCE_REGISTRY: tuple[SourceDescriptor, ...] = (
    SourceDescriptor(
        id="fema",
        name="FEMA",
        description="Federal Emergency Management Agency",
        url="https://fema.gov",
        categories=frozenset({"shelter", "official", "federal"}),
    ),
    SourceDescriptor(
        id="redcross",
        name="Red Cross",
        description="American Red Cross",
        url="https://redcross.org",
        categories=frozenset({"volunteer", "shelter", "supplies"}),
    ),
    SourceDescriptor(
        id="nyc",
        name="NYC Emergency Management",
        description="New York City Emergency Management",
        url="https://nyc.gov/emergency",
        categories=frozenset({"local", "supplies", "official"}),
    ),
    SourceDescriptor(
        id="weather",
        name="National Weather Service",
        description="National Weather Service Alerts",
        url="https://weather.gov",
        categories=frozenset({"weather", "alerts", "federal"}),
    ),
)


def list_sources(active_only: bool = False) -> list[SourceDescriptor]:
    """Return registry entries in declaration order."""
    if active_only:
        return [s for s in SOURCE_REGISTRY if s.active]
    return list(SOURCE_REGISTRY)


def get_source(source_id: str) -> SourceDescriptor | None:
    """Look up a descriptor by id (case-insensitive)."""
    wanted = source_id.strip().lower()
    for source in SOURCE_REGISTRY:
        if source.id == wanted:
            return source
    return None


def parse_source_ids(raw: str | None) -> list[str]:
    """Parse the ``sources`` query parameter.

    ``None``, blank or ``all`` yield ``["all"]``; otherwise a trimmed,
    lower-cased id list with empty segments dropped.
    """
    if raw is None or not raw.strip() or raw.strip().lower() == ALL_SOURCES:
        return [ALL_SOURCES]

    ids = [part.strip().lower() for part in raw.split(",") if part.strip()]
    return ids or [ALL_SOURCES]


def resolve_sources(source_ids: list[str]) -> list[SourceDescriptor]:
    """Map requested ids onto active descriptors, in registry order.

    ``all`` anywhere in the list selects every active source. Unknown ids
    are ignored.
    """
    active = list_sources(active_only=True)
    wanted = {s.lower() for s in source_ids}
    if ALL_SOURCES in wanted:
        return active

    unknown = wanted - {s.id for s in SOURCE_REGISTRY}
    if unknown:
        logger.debug("Ignoring unknown source ids: %s", sorted(unknown))

    return [s for s in active if s.id in wanted]
