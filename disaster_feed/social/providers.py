"""
Social report providers.

The fetcher walks these in order: Twitter API v2, then Bluesky, then the
fixture set. Live providers only take part when their credential is
configured. Providers raise ``ProviderError`` on HTTP failure; the fetcher
decides what to do about it.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

import httpx

from disaster_feed.social.config import SocialConfig
from disaster_feed.social.fixtures import fixture_posts
from disaster_feed.social.schemas import SocialPost
from disaster_feed.text import extract_hashtags, parse_keywords

logger = logging.getLogger(__name__)

TWITTER_SEARCH_RECENT = "https://api.twitter.com/2/tweets/search/recent"
BLUESKY_SEARCH_POSTS = "https://bsky.social/xrpc/app.bsky.feed.searchPosts"


class ProviderError(Exception):
    """Raised when a social provider request fails."""

    def __init__(self, message: str, provider: str, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _search_terms(keywords: str | None, disaster_type: str | None) -> list[str]:
    terms = parse_keywords(keywords)
    if disaster_type and disaster_type.strip():
        dt = disaster_type.strip().lower()
        if dt not in terms:
            terms.append(dt)
    return terms


class SocialProvider(ABC):
    """Interface shared by every social report provider."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @property
    def configured(self) -> bool:
        """Whether this provider can be attempted at all."""
        return True

    @abstractmethod
    async def fetch(
        self,
        keywords: str | None,
        disaster_type: str | None,
        limit: int,
    ) -> list[SocialPost]:
        ...


class _HTTPSocialProvider(SocialProvider):
    """Shared plumbing for bearer-token JSON search APIs."""

    def __init__(
        self,
        token: str | None,
        config: SocialConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._token = token
        self._config = config or SocialConfig()
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self._token)

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "User-Agent": "DisasterFeed/1.0",
        }
        try:
            if self._client is not None:
                response = await self._client.get(url, headers=headers, params=params)
            else:
                async with httpx.AsyncClient(timeout=self._config.request_timeout_seconds) as client:
                    response = await client.get(url, headers=headers, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"{self.name} API returned HTTP {e.response.status_code}",
                provider=self.name,
                status_code=e.response.status_code,
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderError(f"{self.name} request failed: {e}", provider=self.name) from e


class TwitterProvider(_HTTPSocialProvider):
    """Twitter API v2 recent search."""

    @property
    def name(self) -> str:
        return "twitter"

    def build_query(self, keywords: str | None, disaster_type: str | None) -> str:
        terms = _search_terms(keywords, disaster_type)
        if not terms:
            base = self._config.default_query
        else:
            base = " OR ".join(f'"{t}"' if " " in t else t for t in terms)
        return f"({base}) -is:retweet lang:en"

    async def fetch(
        self,
        keywords: str | None,
        disaster_type: str | None,
        limit: int,
    ) -> list[SocialPost]:
        params = {
            "query": self.build_query(keywords, disaster_type),
            "max_results": max(10, min(limit, 100)),
            "tweet.fields": "created_at,author_id,entities",
            "expansions": "author_id",
            "user.fields": "username,verified,location",
        }
        data = await self._get_json(TWITTER_SEARCH_RECENT, params)

        authors = {u["id"]: u for u in data.get("includes", {}).get("users", [])}
        posts = []
        for tweet in data.get("data", []):
            author = authors.get(tweet.get("author_id"), {})
            tags = [f"#{h['tag']}" for h in tweet.get("entities", {}).get("hashtags", [])]
            text = tweet.get("text", "")
            posts.append(
                SocialPost(
                    id=f"twitter_{tweet['id']}",
                    post=text,
                    user=author.get("username", tweet.get("author_id", "unknown")),
                    timestamp=_parse_timestamp(tweet.get("created_at")),
                    verified=bool(author.get("verified", False)),
                    location=author.get("location") or None,
                    hashtags=tags or extract_hashtags(text),
                )
            )

        logger.info("Twitter returned %d posts", len(posts))
        return posts


class BlueskyProvider(_HTTPSocialProvider):
    """Bluesky ``app.bsky.feed.searchPosts``."""

    @property
    def name(self) -> str:
        return "bluesky"

    def build_query(self, keywords: str | None, disaster_type: str | None) -> str:
        terms = _search_terms(keywords, disaster_type)
        return " OR ".join(terms) if terms else self._config.default_query

    async def fetch(
        self,
        keywords: str | None,
        disaster_type: str | None,
        limit: int,
    ) -> list[SocialPost]:
        params = {
            "q": self.build_query(keywords, disaster_type),
            "limit": max(1, min(limit, 100)),
        }
        data = await self._get_json(BLUESKY_SEARCH_POSTS, params)

        posts = []
        for item in data.get("posts", []):
            record = item.get("record", {})
            author = item.get("author", {})
            text = record.get("text", "")
            posts.append(
                SocialPost(
                    id=f"bluesky_{item.get('cid') or item.get('uri')}",
                    post=text,
                    user=author.get("handle", "unknown"),
                    timestamp=_parse_timestamp(record.get("createdAt") or item.get("indexedAt")),
                    hashtags=extract_hashtags(text),
                )
            )

        logger.info("Bluesky returned %d posts", len(posts))
        return posts


class FixtureSocialProvider(SocialProvider):
    """Fixture posts narrowed by keyword and disaster type.

    A post passes the keyword filter when any term appears in its text or
    in any hashtag; the disaster type filter then applies the same test
    with the single disaster type term.
    """

    @property
    def name(self) -> str:
        return "fixture"

    async def fetch(
        self,
        keywords: str | None = None,
        disaster_type: str | None = None,
        limit: int = 20,
    ) -> list[SocialPost]:
        posts = fixture_posts()

        terms = parse_keywords(keywords)
        if terms:
            posts = [p for p in posts if any(self._mentions(p, t) for t in terms)]

        if disaster_type and disaster_type.strip():
            dt = disaster_type.strip().lower()
            posts = [p for p in posts if self._mentions(p, dt)]

        logger.info("Fixture social data fetched: %d posts", len(posts))
        return posts

    def all_posts(self) -> list[SocialPost]:
        return fixture_posts()

    @staticmethod
    def _mentions(post: SocialPost, term: str) -> bool:
        return term in post.post.lower() or any(term in h.lower() for h in post.hashtags)
