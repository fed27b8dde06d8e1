"""
Social report processor: priority tiers and query relevance.

Priority is assigned by scanning the lower-cased post text for keyword
sets in precedence order; the first matching tier wins. Relevance scores
text matches above hashtag matches above location matches.
"""

from datetime import datetime, timezone

from disaster_feed.social.schemas import PRIORITY_RANK, Priority, SocialPost
from disaster_feed.text import parse_keywords

# Checked in this order; first hit wins.
PRIORITY_KEYWORDS: tuple[tuple[Priority, tuple[str, ...]], ...] = (
    (Priority.URGENT, ("urgent", "sos", "emergency", "evacuate")),
    (Priority.HIGH, ("need", "help", "stranded", "trapped")),
    (Priority.MEDIUM, ("offering", "volunteer", "shelter", "donate")),
)

TEXT_MATCH_POINTS = 3
HASHTAG_MATCH_POINTS = 2
LOCATION_MATCH_POINTS = 1

# Score when no keywords are supplied. Keywords that match nothing score 0.
BASELINE_RELEVANCE = 1


def classify_priority(text: str) -> Priority:
    lowered = text.lower()
    for priority, terms in PRIORITY_KEYWORDS:
        if any(term in lowered for term in terms):
            return priority
    return Priority.LOW


def calculate_relevance_score(post: SocialPost, keywords: str | None) -> int:
    """Score how strongly ``post`` matches a comma-separated keyword query."""
    terms = parse_keywords(keywords)
    if not terms:
        return BASELINE_RELEVANCE

    text = post.post.lower()
    hashtags = [h.lower() for h in post.hashtags]
    location = post.location.lower() if post.location else ""

    score = 0
    for term in terms:
        if term in text:
            score += TEXT_MATCH_POINTS
        if any(term in tag for tag in hashtags):
            score += HASHTAG_MATCH_POINTS
        if location and term in location:
            score += LOCATION_MATCH_POINTS
    return score


def process_posts(
    posts: list[SocialPost],
    keywords: str | None = None,
    now: datetime | None = None,
) -> list[SocialPost]:
    """Annotate posts and sort by (priority, relevance), both descending.

    Returns annotated copies; the input posts are left untouched. The sort
    is stable, so ties keep their input order.
    """
    processed_at = now or datetime.now(timezone.utc)
    annotated = [
        post.model_copy(
            update={
                "priority": classify_priority(post.post),
                "relevance_score": calculate_relevance_score(post, keywords),
                "processed_at": processed_at,
            }
        )
        for post in posts
    ]
    return sorted(
        annotated,
        key=lambda p: (PRIORITY_RANK[p.priority], p.relevance_score),
        reverse=True,
    )
