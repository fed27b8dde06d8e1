"""Tests for ScrapingUpdateProvider HTML parsing and HTTP error handling."""

from datetime import datetime, timezone

import httpx
import pytest
import respx

from disaster_feed.official.config import OfficialUpdatesConfig
from disaster_feed.official.providers import (
    DEFAULT_SELECTORS,
    ScrapeError,
    ScrapeSelectors,
    ScrapingUpdateProvider,
)
from disaster_feed.official.registry import get_source
from disaster_feed.official.schemas import Severity

FEMA_PAGE = """
<html><body>
  <div class="disaster-item">
    <a href="/disaster/4701"><span class="title">Flooding in Queens</span></a>
    <p class="description">Federal assistance approved for Queens County.</p>
    <span class="date">2026-02-28T09:30:00Z</span>
  </div>
  <div class="disaster-item">
    <span class="title">Missing description</span>
  </div>
  <div class="disaster-item">
    <span class="title">Winter Storm</span>
    <p class="description">Shelters open across the region.</p>
    <span class="date">Sat, 28 Feb 2026 07:00:00 GMT</span>
  </div>
</body></html>
"""


@pytest.fixture
def provider():
    return ScrapingUpdateProvider(OfficialUpdatesConfig(max_content_length=20))


class TestParse:
    def test_extracts_items(self, provider):
        fema = get_source("fema")

        records = provider.parse(fema, DEFAULT_SELECTORS["fema"], FEMA_PAGE)

        assert [r.id for r in records] == ["fema_0", "fema_2"]
        first = records[0]
        assert first.source == "FEMA"
        assert first.title == "Flooding in Queens"
        assert first.url == "https://www.fema.gov/disaster/4701"
        assert first.published_at == datetime(2026, 2, 28, 9, 30, tzinfo=timezone.utc)
        assert first.severity == Severity.MEDIUM
        assert first.category == "official"

    def test_content_truncated(self, provider):
        records = provider.parse(get_source("fema"), DEFAULT_SELECTORS["fema"], FEMA_PAGE)
        assert records[0].content == "Federal assistance a"

    def test_rfc2822_date_and_page_url_fallback(self, provider):
        records = provider.parse(get_source("fema"), DEFAULT_SELECTORS["fema"], FEMA_PAGE)

        storm = records[1]
        assert storm.published_at == datetime(2026, 2, 28, 7, 0, tzinfo=timezone.utc)
        assert storm.url == "https://www.fema.gov/disasters"

    def test_empty_page(self, provider):
        assert provider.parse(get_source("fema"), DEFAULT_SELECTORS["fema"], "<html></html>") == []


class TestFetch:
    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_parses_page(self, provider):
        respx.get("https://www.fema.gov/disasters").mock(
            return_value=httpx.Response(200, text=FEMA_PAGE)
        )

        records = await provider.fetch(get_source("fema"))

        assert len(records) == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_raises_scrape_error(self, provider):
        respx.get("https://www.weather.gov/alerts").mock(return_value=httpx.Response(503))

        with pytest.raises(ScrapeError) as exc_info:
            await provider.fetch(get_source("weather"))

        assert exc_info.value.status_code == 503
        assert exc_info.value.source_id == "weather"

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_raises_scrape_error(self, provider):
        respx.get("https://www.weather.gov/alerts").mock(side_effect=httpx.ConnectError("down"))

        with pytest.raises(ScrapeError):
            await provider.fetch(get_source("weather"))

    @pytest.mark.asyncio
    async def test_source_without_selectors_returns_nothing(self):
        provider = ScrapingUpdateProvider(selectors={"fema": ScrapeSelectors(page_url="https://x.test")})
        assert await provider.fetch(get_source("nyc")) == []
