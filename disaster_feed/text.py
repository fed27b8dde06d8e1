"""Text helpers shared by the official and social pipelines."""

import re

_HASHTAG_PATTERN = re.compile(r"#\w+")


def parse_keywords(keywords: str | None) -> list[str]:
    """Split a comma-separated keyword string into trimmed, lower-cased terms.

    Empty terms are dropped, so ``None``, ``""`` and ``" , "`` all yield ``[]``.
    """
    if not keywords:
        return []
    return [term.strip().lower() for term in keywords.split(",") if term.strip()]


def extract_hashtags(text: str) -> list[str]:
    """Hashtags in order of first appearance, ``#`` included."""
    seen: list[str] = []
    for tag in _HASHTAG_PATTERN.findall(text):
        if tag not in seen:
            seen.append(tag)
    return seen
