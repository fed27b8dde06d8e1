"""
Update providers: where official update records come from.

Each provider answers for one registry source at a time. The fixture
provider is always available and is what the fetcher falls back to; the
scraping provider pulls bulletins from the source's public website.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from disaster_feed.official.config import OfficialUpdatesConfig
from disaster_feed.official.fixtures import fixture_updates
from disaster_feed.official.schemas import Severity, SourceDescriptor, UpdateRecord

logger = logging.getLogger(__name__)


class ScrapeError(Exception):
    """Raised when a source page cannot be fetched or parsed."""

    def __init__(self, message: str, source_id: str, status_code: int | None = None):
        super().__init__(message)
        self.source_id = source_id
        self.status_code = status_code


class UpdateProvider(ABC):
    """Interface shared by every official update provider."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name used in logs and metrics."""
        ...

    @abstractmethod
    async def fetch(self, source: SourceDescriptor) -> list[UpdateRecord]:
        """Return the current updates published by ``source``.

        May raise; the fetcher isolates failures per source.
        """
        ...


class FixtureUpdateProvider(UpdateProvider):
    """Serves the fixed fixture set, matched to sources by display name."""

    @property
    def name(self) -> str:
        return "fixture"

    async def fetch(self, source: SourceDescriptor) -> list[UpdateRecord]:
        return self.records_for(source)

    def records_for(self, source: SourceDescriptor) -> list[UpdateRecord]:
        return [r for r in fixture_updates() if r.source == source.name]

    def all_records(self) -> list[UpdateRecord]:
        return fixture_updates()


@dataclass(frozen=True)
class ScrapeSelectors:
    """CSS selectors locating bulletin items on a source page."""

    page_url: str
    container: str = "article"
    title: str = "h2, h3"
    content: str = "p"
    link: str = "a"
    date: str = "time"


DEFAULT_SELECTORS: dict[str, ScrapeSelectors] = {
    "fema": ScrapeSelectors(
        page_url="https://www.fema.gov/disasters",
        container=".disaster-item",
        title=".title",
        content=".description",
        date=".date",
    ),
    "redcross": ScrapeSelectors(page_url="https://www.redcross.org/about-us/news-and-events.html"),
    "nyc": ScrapeSelectors(page_url="https://www.nyc.gov/site/em/about/press-releases.page"),
    "weather": ScrapeSelectors(page_url="https://www.weather.gov/alerts"),
}


def _parse_published(raw: str, fallback: datetime) -> datetime:
    """Parse an ISO-8601 or RFC 2822 date; ``fallback`` when neither works."""
    raw = raw.strip()
    if not raw:
        return fallback

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = parsedate_to_datetime(raw)
        except (TypeError, ValueError):
            return fallback

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ScrapingUpdateProvider(UpdateProvider):
    """Scrapes bulletins from a source's website.

    Items without both a title and a content snippet are skipped. Scraped
    records default to ``medium`` severity and the ``official`` category
    since source pages carry neither.
    """

    def __init__(
        self,
        config: OfficialUpdatesConfig | None = None,
        selectors: dict[str, ScrapeSelectors] | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._config = config or OfficialUpdatesConfig()
        self._selectors = selectors if selectors is not None else DEFAULT_SELECTORS
        self._client = client

    @property
    def name(self) -> str:
        return "scraper"

    async def fetch(self, source: SourceDescriptor) -> list[UpdateRecord]:
        selectors = self._selectors.get(source.id)
        if selectors is None:
            logger.debug("No scrape selectors for source %s", source.id)
            return []

        html = await self._get_page(source, selectors.page_url)
        return self.parse(source, selectors, html)

    async def _get_page(self, source: SourceDescriptor, url: str) -> str:
        headers = {"User-Agent": self._config.user_agent}
        try:
            if self._client is not None:
                response = await self._client.get(url, headers=headers)
            else:
                async with httpx.AsyncClient(
                    timeout=self._config.request_timeout_seconds,
                    follow_redirects=True,
                ) as client:
                    response = await client.get(url, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ScrapeError(
                f"{source.name} returned HTTP {e.response.status_code}",
                source_id=source.id,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ScrapeError(f"{source.name} request failed: {e}", source_id=source.id) from e

        return response.text

    def parse(
        self,
        source: SourceDescriptor,
        selectors: ScrapeSelectors,
        html: str,
    ) -> list[UpdateRecord]:
        """Extract update records from a source page."""
        soup = BeautifulSoup(html, "html.parser")
        now = datetime.now(timezone.utc)
        origin = "{0.scheme}://{0.netloc}".format(urlparse(selectors.page_url))
        max_len = self._config.max_content_length

        records: list[UpdateRecord] = []
        for index, element in enumerate(soup.select(selectors.container)):
            title_el = element.select_one(selectors.title)
            content_el = element.select_one(selectors.content)
            title = title_el.get_text(strip=True) if title_el else ""
            content = content_el.get_text(" ", strip=True) if content_el else ""
            if not title or not content:
                continue

            link_el = element.select_one(selectors.link)
            href = link_el.get("href") if link_el else None
            url = urljoin(origin + "/", href) if href else selectors.page_url

            date_el = element.select_one(selectors.date)
            raw_date = ""
            if date_el is not None:
                raw_date = date_el.get("datetime") or date_el.get_text(strip=True)

            records.append(
                UpdateRecord(
                    id=f"{source.id}_{index}",
                    source=source.name,
                    title=title,
                    content=content[:max_len],
                    url=url,
                    published_at=_parse_published(raw_date, now),
                    severity=Severity.MEDIUM,
                    category="official",
                )
            )

        logger.info("Scraped %d updates from %s", len(records), source.name)
        return records
