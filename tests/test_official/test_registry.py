"""Tests for the official source registry."""

import pytest

from disaster_feed.official.registry import (
    get_source,
    list_sources,
    parse_source_ids,
    resolve_sources,
)


class TestListSources:
    def test_declaration_order(self):
        assert [s.id for s in list_sources()] == ["fema", "redcross", "nyc", "weather"]

    def test_to_dict_sorts_categories(self):
        fema = get_source("fema").to_dict()

        assert fema["name"] == "FEMA"
        assert fema["categories"] == ["federal", "official", "shelter"]
        assert fema["active"] is True


class TestGetSource:
    def test_case_insensitive(self):
        assert get_source(" Weather ").name == "National Weather Service"

    def test_unknown(self):
        assert get_source("unicef") is None


class TestParseSourceIds:
    @pytest.mark.parametrize("raw", [None, "", "   ", "all", "ALL"])
    def test_defaults_to_all(self, raw):
        assert parse_source_ids(raw) == ["all"]

    def test_comma_list(self):
        assert parse_source_ids(" FEMA, nyc ,,") == ["fema", "nyc"]

    def test_only_separators(self):
        assert parse_source_ids(",,") == ["all"]


class TestResolveSources:
    def test_all(self):
        assert len(resolve_sources(["all"])) == 4

    def test_registry_order_not_request_order(self):
        assert [s.id for s in resolve_sources(["weather", "fema"])] == ["fema", "weather"]

    def test_unknown_ids_ignored(self):
        assert [s.id for s in resolve_sources(["nyc", "unicef"])] == ["nyc"]
        assert resolve_sources(["unicef"]) == []
