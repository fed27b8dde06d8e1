"""Tests for official update filtering, keyword search and ranking."""

from datetime import timedelta

from disaster_feed.official.filters import (
    filter_by_category_and_severity,
    rank_updates,
    search_by_keywords,
)
from disaster_feed.official.schemas import Severity


def _ids(records):
    return [r.id for r in records]


class TestFilterByCategoryAndSeverity:
    def test_category_shelter_returns_fema_record(self, updates):
        result = filter_by_category_and_severity(updates, category="shelter")

        assert _ids(result) == ["1"]
        assert result[0].source == "FEMA"
        assert result[0].title == "Emergency Shelter Locations Updated"

    def test_category_is_case_insensitive(self, updates):
        result = filter_by_category_and_severity(updates, category="  SHELTER ")
        assert _ids(result) == ["1"]

    def test_severity_filter(self, updates):
        result = filter_by_category_and_severity(updates, severity="high")

        assert _ids(result) == ["1", "4"]
        assert all(r.severity == Severity.HIGH for r in result)

    def test_both_filters_and_together(self, updates):
        assert _ids(filter_by_category_and_severity(updates, "weather", "HIGH")) == ["4"]
        assert filter_by_category_and_severity(updates, "weather", "low") == []

    def test_no_filters_is_identity(self, updates):
        result = filter_by_category_and_severity(updates)

        assert result == updates
        assert result is not updates

    def test_unknown_category_matches_nothing(self, updates):
        assert filter_by_category_and_severity(updates, category="tsunami") == []


class TestSearchByKeywords:
    def test_union_of_terms(self, updates):
        result = search_by_keywords(updates, "water,volunteer")
        assert _ids(result) == ["2", "3"]

    def test_terms_are_trimmed_and_lowercased(self, updates):
        result = search_by_keywords(updates, "  WATER , Volunteer ")
        assert _ids(result) == ["2", "3"]

    def test_matches_content_as_well_as_title(self, updates):
        # "indoors" only appears in the weather record's content
        assert _ids(search_by_keywords(updates, "indoors")) == ["4"]

    def test_empty_keywords_is_identity(self, updates):
        assert search_by_keywords(updates, None) == updates
        assert search_by_keywords(updates, "") == updates
        assert search_by_keywords(updates, " , ") == updates

    def test_preserves_input_order(self, updates):
        reversed_updates = list(reversed(updates))
        result = search_by_keywords(reversed_updates, "water,volunteer")
        assert _ids(result) == ["3", "2"]

    def test_no_match(self, updates):
        assert search_by_keywords(updates, "volcano") == []


class TestRankUpdates:
    def test_severity_then_recency(self, updates):
        # high: 4 (30m), 1 (4h); medium: 2 (2h), 5 (6h); low: 3
        assert _ids(rank_updates(updates)) == ["4", "1", "2", "5", "3"]

    def test_ranking_ignores_input_order(self, updates):
        assert _ids(rank_updates(list(reversed(updates)))) == ["4", "1", "2", "5", "3"]

    def test_equal_keys_keep_input_order(self, updates):
        first = updates[0]
        twin = first.model_copy(update={"id": "1b"})
        result = rank_updates([first, twin])
        assert _ids(result) == ["1", "1b"]

    def test_newer_wins_within_severity(self, updates):
        older = updates[0]
        newer = older.model_copy(update={"id": "new", "published_at": older.published_at + timedelta(hours=1)})
        assert _ids(rank_updates([older, newer])) == ["new", "1"]

    def test_does_not_mutate_input(self, updates):
        before = _ids(updates)
        rank_updates(updates)
        assert _ids(updates) == before
