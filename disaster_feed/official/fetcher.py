"""
Update fetcher: aggregate official updates across requested sources.

Sources are retrieved independently. A failing or empty source is
replaced by its fixture records without affecting the others, and an
empty aggregate is replaced by the full fixture set. The fetcher never
raises and never sorts; ranking is a separate step.
"""

import logging

from disaster_feed.observability.metrics import get_metrics
from disaster_feed.official.providers import FixtureUpdateProvider, UpdateProvider
from disaster_feed.official.registry import resolve_sources
from disaster_feed.official.schemas import SourceDescriptor, UpdateRecord

logger = logging.getLogger(__name__)


class UpdateFetcher:
    """Per-source retrieval with fixture substitution.

    Args:
        primary: Live provider, or None to serve fixtures only.
        fallback: Fixture provider used for substitution.
    """

    def __init__(
        self,
        primary: UpdateProvider | None = None,
        fallback: FixtureUpdateProvider | None = None,
    ) -> None:
        self._primary = primary
        self._fallback = fallback or FixtureUpdateProvider()

    @property
    def live(self) -> bool:
        return self._primary is not None

    async def fetch(self, source_ids: list[str]) -> list[UpdateRecord]:
        """Fetch updates for ``source_ids`` (which may contain ``all``)."""
        updates: list[UpdateRecord] = []
        for source in resolve_sources(source_ids):
            updates.extend(await self._fetch_source(source))

        if not updates:
            logger.info("No official updates retrieved, using full fixture set")
            get_metrics().record_fallback("official", "all", reason="aggregate_empty")
            return self._fallback.all_records()

        logger.info("Fetched %d official updates", len(updates))
        return updates

    async def _fetch_source(self, source: SourceDescriptor) -> list[UpdateRecord]:
        if self._primary is None:
            return self._fallback.records_for(source)

        try:
            records = await self._primary.fetch(source)
        except Exception as e:
            logger.warning(
                "Retrieval failed for %s via %s, using fixtures: %s",
                source.id, self._primary.name, e,
            )
            get_metrics().record_fallback("official", source.id, reason="error")
            return self._fallback.records_for(source)

        if not records:
            logger.warning("%s returned no updates for %s, using fixtures", self._primary.name, source.id)
            get_metrics().record_fallback("official", source.id, reason="empty")
            return self._fallback.records_for(source)

        return records
