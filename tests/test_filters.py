"""Unit tests for search filter parsing and WHERE-clause assembly."""

from datetime import date

import pytest

from events.filters import (
    ConditionBuilder,
    InvalidFilterError,
    SearchFilters,
    contains_pattern,
    search_conditions,
)


class TestSearchFiltersFromParams:
    """Tests for SearchFilters.from_params."""

    def test_no_params_means_no_filters(self):
        assert SearchFilters.from_params() == SearchFilters()

    def test_empty_strings_are_absent(self):
        filters = SearchFilters.from_params(date_value="", location="", category="", query="")
        assert filters == SearchFilters()

    def test_category_all_is_no_filter(self):
        assert SearchFilters.from_params(category="all").category_id is None
        assert SearchFilters.from_params(category="ALL").category_id is None

    def test_numeric_category_is_parsed(self):
        assert SearchFilters.from_params(category="3").category_id == 3

    def test_negative_category_is_parsed(self):
        assert SearchFilters.from_params(category="-3").category_id == -3

    def test_out_of_range_category_matches_nothing(self):
        assert SearchFilters.from_params(category="3000000000").matches_nothing
        assert SearchFilters.from_params(category="-2147483649").matches_nothing
        assert not SearchFilters.from_params(category="2147483647").matches_nothing
        assert not SearchFilters.from_params(category="all").matches_nothing

    def test_non_numeric_category_is_rejected(self):
        with pytest.raises(InvalidFilterError) as excinfo:
            SearchFilters.from_params(category="music")
        assert excinfo.value.field_name == "category"

    def test_date_is_parsed(self):
        filters = SearchFilters.from_params(date_value="2025-03-15")
        assert filters.event_date == date(2025, 3, 15)

    def test_bad_date_is_rejected(self):
        with pytest.raises(InvalidFilterError) as excinfo:
            SearchFilters.from_params(date_value="15/03/2025")
        assert excinfo.value.field_name == "date"


class TestContainsPattern:
    """Tests for contains_pattern."""

    def test_wraps_value_in_wildcards(self):
        assert contains_pattern("Sydney") == "%Sydney%"

    def test_escapes_like_metacharacters(self):
        assert contains_pattern("100%_off\\") == "%100\\%\\_off\\\\%"


class TestSearchConditions:
    """Tests for search_conditions."""

    def test_no_filters_keeps_only_base_clause(self):
        builder = search_conditions(SearchFilters())
        assert builder.conditions == []
        assert builder.params == []
        assert builder.where("ce.is_active = true") == "WHERE ce.is_active = true"

    def test_all_filters_are_anded_in_order(self):
        filters = SearchFilters(
            event_date=date(2025, 1, 1),
            location="Syd",
            category_id=2,
            query="run",
        )
        builder = search_conditions(filters)

        assert builder.params == [date(2025, 1, 1), "%Syd%", 2, "%run%"]
        assert builder.conditions[0] == "ce.event_date = $1"
        assert "ce.location ILIKE $2" in builder.conditions[1]
        assert "ce.venue_name ILIKE $2" in builder.conditions[1]
        assert builder.conditions[2] == "ce.category_id = $3"
        for column in ("ce.title", "ce.short_description", "ce.full_description"):
            assert f"{column} ILIKE $4" in builder.conditions[3]

        where = builder.where("ce.is_active = true")
        assert where.startswith("WHERE ce.is_active = true")
        assert where.count("\n  AND ") == 4

    def test_user_text_never_lands_in_sql(self):
        hostile = "x'; DROP TABLE charity_events; --"
        builder = search_conditions(SearchFilters(location=hostile, query=hostile))
        assert all(hostile not in condition for condition in builder.conditions)
        assert builder.params == [contains_pattern(hostile), contains_pattern(hostile)]

    def test_only_category_filter(self):
        builder = search_conditions(SearchFilters(category_id=7))
        assert builder.conditions == ["ce.category_id = $1"]
        assert builder.params == [7]


class TestConditionBuilder:
    """Tests for ConditionBuilder."""

    def test_bind_numbers_placeholders_sequentially(self):
        builder = ConditionBuilder()
        assert builder.bind("a") == "$1"
        assert builder.bind("b") == "$2"
        assert builder.params == ["a", "b"]

    def test_where_is_empty_without_clauses(self):
        assert ConditionBuilder().where() == ""
