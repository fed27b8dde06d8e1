"""Pure narrowing and ranking operations over official updates.

Every function here is order preserving (except ``rank_updates``, which
is a stable sort) and returns a new list.
"""

from disaster_feed.official.schemas import SEVERITY_RANK, UpdateRecord
from disaster_feed.text import parse_keywords


def filter_by_category_and_severity(
    records: list[UpdateRecord],
    category: str | None = None,
    severity: str | None = None,
) -> list[UpdateRecord]:
    """Keep records whose category and/or severity equal the given values.

    Comparison is case-insensitive. Omitted filters match everything.
    """
    filtered = list(records)

    if category:
        wanted = category.strip().lower()
        filtered = [r for r in filtered if r.category and r.category.lower() == wanted]

    if severity:
        wanted = severity.strip().lower()
        filtered = [r for r in filtered if r.severity.value == wanted]

    return filtered


def search_by_keywords(records: list[UpdateRecord], keywords: str | None) -> list[UpdateRecord]:
    """Keep records where any keyword term occurs in title or content."""
    terms = parse_keywords(keywords)
    if not terms:
        return list(records)

    def matches(record: UpdateRecord) -> bool:
        text = f"{record.title} {record.content}".lower()
        return any(term in text for term in terms)

    return [r for r in records if matches(r)]


def rank_updates(records: list[UpdateRecord]) -> list[UpdateRecord]:
    """Sort by severity (high first), newest first within a severity."""
    return sorted(
        records,
        key=lambda r: (SEVERITY_RANK[r.severity], r.published_at.timestamp()),
        reverse=True,
    )
