"""Tests for filter state and the shared argument helpers."""

from datetime import date

import pytest

from netops.rpc.common import (
    ALL,
    FilterState,
    dedupe_casefold,
    default_date_range,
    first_day_of_month,
    flatten,
    is_iso_date,
    parse_grain,
    parse_region,
    projects_param,
    recent_months,
    region_param,
    to_nullable,
    yyyymm_from_iso,
)


class TestFilterState:
    def test_from_params_normalizes_blanks(self):
        state = FilterState.from_params(region="North", subregion="  ", grid=ALL, district=None, sitename=" ISB-001 ")
        assert state == FilterState(region="North", sitename="ISB-001")

    def test_ignores_unknown_params(self):
        assert FilterState.from_params(page="2") == FilterState()

    def test_with_changes(self):
        state = FilterState(subregion="North-1", grid="G-1")
        changed = state.with_changes(grid=None)
        assert changed.grid is None
        assert state.grid == "G-1"

    def test_has_range(self):
        assert FilterState(date_from="2024-05-01", date_to="2024-05-07").has_range
        assert not FilterState(date_from="2024-05-01").has_range


class TestNormalizers:
    @pytest.mark.parametrize("value,expected", [(None, None), ("", None), ("  ", None), (ALL, None), (" x ", "x"), (5, "5")])
    def test_to_nullable(self, value, expected):
        assert to_nullable(value) == expected

    @pytest.mark.parametrize("value,expected", [("north", "North"), (" SOUTH ", "South"), ("east", ALL), (None, ALL)])
    def test_parse_region(self, value, expected):
        assert parse_region(value) == expected

    def test_region_param(self):
        assert region_param("central") == "Central"
        assert region_param("All") is None

    @pytest.mark.parametrize("value,expected", [("weekly", "Weekly"), ("MONTHLY", "Monthly"), ("hourly", "Daily"), (None, "Daily")])
    def test_parse_grain(self, value, expected):
        assert parse_grain(value) == expected

    def test_projects_param(self):
        assert projects_param(["P1", "", None]) == ["P1"]
        assert projects_param([]) is None
        assert projects_param(None) is None


class TestPicklistHelpers:
    def test_flatten_skips_blanks_and_non_text(self):
        rows = [{"grid": "G-1"}, {"grid": ""}, {"grid": None}, {"grid": 7}, {"other": "x"}, "junk"]
        assert flatten(rows, "grid") == ["G-1"]

    def test_dedupe_keeps_first_spelling(self):
        assert dedupe_casefold(["North-1", " NORTH-1", "South-1", None, ""]) == ["North-1", "South-1"]


class TestDates:
    @pytest.mark.parametrize("value,expected", [
        ("2024-02-29", True),
        ("2023-02-29", False),
        ("2024-5-1", False),
        ("2024-05-01T00:00:00", False),
        (None, False),
    ])
    def test_is_iso_date(self, value, expected):
        assert is_iso_date(value) is expected

    def test_month_helpers(self):
        assert first_day_of_month("2024-03") == "2024-03-01"
        assert first_day_of_month("March") == ""
        assert yyyymm_from_iso("2024-03-15") == "2024-03"
        assert yyyymm_from_iso("bad") == ""

    def test_recent_months_cross_year(self):
        assert recent_months("2024-02-10", count=4) == ["2024-02", "2024-01", "2023-12", "2023-11"]
        assert recent_months("nope") == []

    def test_default_date_range(self):
        assert default_date_range(30, today=date(2024, 5, 31)) == ("2024-05-01", "2024-05-31")
