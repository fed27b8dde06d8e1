"""
Social report fetcher: walk the provider chain, process the winner.

Providers are tried in order. Unconfigured providers are skipped, failures
are logged and fall through, and the first non-empty result wins. The
fixture provider is always the last attempt. Whatever is chosen goes
through the processor before it is returned.
"""

import logging
from collections.abc import Callable

from disaster_feed.observability.metrics import get_metrics
from disaster_feed.social.processor import process_posts
from disaster_feed.social.providers import FixtureSocialProvider, SocialProvider
from disaster_feed.social.schemas import SocialFetchResult, SocialPost

logger = logging.getLogger(__name__)

Processor = Callable[[list[SocialPost], str | None], list[SocialPost]]


class SocialReportFetcher:
    """Provider chain with a guaranteed fixture fallback.

    Args:
        providers: Live providers in priority order.
        fallback: Fixture provider tried after every live provider.
        processor: Annotates and sorts the chosen posts.
    """

    def __init__(
        self,
        providers: list[SocialProvider] | None = None,
        fallback: FixtureSocialProvider | None = None,
        processor: Processor = process_posts,
    ) -> None:
        self._providers = list(providers or [])
        self._fallback = fallback or FixtureSocialProvider()
        self._processor = processor

    @property
    def provider_names(self) -> list[str]:
        return [p.name for p in self._providers] + [self._fallback.name]

    async def fetch(
        self,
        keywords: str | None = None,
        disaster_type: str | None = None,
        limit: int = 20,
    ) -> SocialFetchResult:
        """Fetch and process posts. Never raises; does not truncate."""
        try:
            posts, provider, tried = await self._run_chain(keywords, disaster_type, limit)
            processed = self._processor(posts, keywords)
        except Exception:
            logger.exception("Social report fetch failed, processing full fixture set")
            get_metrics().record_fallback("social", "all", reason="error")
            return SocialFetchResult(
                posts=self._processor(self._fallback.all_posts(), keywords),
                provider=self._fallback.name,
                providers_tried=[self._fallback.name],
            )

        get_metrics().record_social_provider(provider)
        return SocialFetchResult(posts=processed, provider=provider, providers_tried=tried)

    async def _run_chain(
        self,
        keywords: str | None,
        disaster_type: str | None,
        limit: int,
    ) -> tuple[list[SocialPost], str, list[str]]:
        tried: list[str] = []

        for provider in self._providers:
            if not provider.configured:
                logger.debug("Skipping unconfigured social provider %s", provider.name)
                continue

            tried.append(provider.name)
            try:
                posts = await provider.fetch(keywords, disaster_type, limit)
            except Exception as e:
                logger.warning("Social provider %s failed: %s", provider.name, e)
                get_metrics().record_fallback("social", provider.name, reason="error")
                continue

            if posts:
                logger.info("Social posts fetched from %s: %d", provider.name, len(posts))
                return posts, provider.name, tried

            logger.info("Social provider %s returned no posts", provider.name)
            get_metrics().record_fallback("social", provider.name, reason="empty")

        tried.append(self._fallback.name)
        posts = await self._fallback.fetch(keywords, disaster_type, limit)
        return posts, self._fallback.name, tried
