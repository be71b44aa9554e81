"""Tests for local calendar-date parsing and arithmetic."""

from datetime import date, datetime

import pytest

from club_kernel.domain.dates import (
    add_years,
    format_date,
    is_valid_date,
    last_day_of_month,
    parse_local_date,
    whole_years_between,
)


class TestParseLocalDate:

    def test_iso_string_is_that_calendar_day(self):
        assert parse_local_date("1962-03-15") == date(1962, 3, 15)

    def test_time_suffix_discarded_not_converted(self):
        assert parse_local_date("1985-03-15T00:00:00.000Z") == date(1985, 3, 15)
        assert parse_local_date("1985-03-15T23:59:59-08:00") == date(1985, 3, 15)

    def test_single_digit_components(self):
        assert parse_local_date("2011-7-1") == date(2011, 7, 1)

    def test_date_and_datetime_inputs(self):
        assert parse_local_date(date(2020, 2, 29)) == date(2020, 2, 29)
        assert parse_local_date(datetime(2020, 2, 29, 23, 30)) == date(2020, 2, 29)

    @pytest.mark.parametrize("value", [
        None,
        "",
        "   ",
        "not a date",
        "03/15/1962",
        "1962-02-30",
        "2023-02-29",
        "1962-13-01",
        "1899-12-31",
        "2101-01-01",
        19620315,
    ])
    def test_invalid_values_return_none(self, value):
        assert parse_local_date(value) is None

    def test_is_valid_date(self):
        assert is_valid_date("2024-02-29")
        assert not is_valid_date("2025-02-29")


class TestWholeYears:

    def test_floor_before_anniversary(self):
        assert whole_years_between(date(1963, 7, 1), date(2025, 6, 30)) == 61

    def test_counts_on_anniversary(self):
        assert whole_years_between(date(1963, 7, 1), date(2025, 7, 1)) == 62

    def test_negative_when_end_precedes_start(self):
        assert whole_years_between(date(2025, 6, 2), date(2025, 6, 1)) == -1


class TestAddYears:

    def test_ordinary_anniversary(self):
        assert add_years(date(1995, 10, 15), 30) == date(2025, 10, 15)

    def test_leap_day_in_non_leap_year_is_march_first(self):
        assert add_years(date(1964, 2, 29), 61) == date(2025, 3, 1)

    def test_leap_day_in_leap_year(self):
        assert add_years(date(1964, 2, 29), 60) == date(2024, 2, 29)


class TestMonthHelpers:

    def test_last_day_of_february(self):
        assert last_day_of_month(2025, 2) == date(2025, 2, 28)
        assert last_day_of_month(2028, 2) == date(2028, 2, 29)

    def test_format_date(self):
        assert format_date("1985-03-15") == "Mar 15, 1985"
        assert format_date("garbage") == ""
