"""Tests for the calendar / period resolver."""

from datetime import date
from decimal import Decimal

import pytest

from club_engines.calendar import (
    WEDNESDAY,
    PeriodPhase,
    billing_quarter,
    billing_year_bounds,
    billing_year_of,
    collection_period_status,
    first_weekday_of_month,
    fiscal_year_label,
    is_in_billing_year,
    proration_multiplier,
    reverse_proration_multiplier,
    work_hour_review_status,
    work_year_label,
)


class TestYearLabels:

    @pytest.mark.parametrize("d, expected", [
        (date(2025, 7, 1), "2025-2026"),
        (date(2025, 12, 31), "2025-2026"),
        (date(2026, 6, 30), "2025-2026"),
        (date(2025, 6, 30), "2024-2025"),
    ])
    def test_fiscal_year_starts_july_first(self, d, expected):
        assert fiscal_year_label(d) == expected

    @pytest.mark.parametrize("d, expected", [
        (date(2026, 3, 1), "2026-2027"),
        (date(2026, 2, 28), "2025-2026"),
        (date(2025, 7, 15), "2025-2026"),
    ])
    def test_work_year_starts_march_first(self, d, expected):
        assert work_year_label(d) == expected


class TestBillingYear:

    def test_billing_year_of(self):
        assert billing_year_of(date(2026, 3, 1)) == 2026
        assert billing_year_of(date(2026, 2, 28)) == 2025

    def test_bounds_end_on_true_last_day_of_february(self):
        assert billing_year_bounds(date(2026, 1, 15)) == (date(2025, 3, 1), date(2026, 2, 28))
        assert billing_year_bounds(date(2027, 6, 1)) == (date(2027, 3, 1), date(2028, 2, 29))

    def test_leap_day_inside_billing_year(self):
        assert is_in_billing_year(date(2028, 2, 29), date(2027, 6, 1))

    def test_outside_billing_year(self):
        as_of = date(2025, 6, 1)
        assert not is_in_billing_year(date(2025, 2, 28), as_of)
        assert not is_in_billing_year(date(2026, 3, 1), as_of)
        assert is_in_billing_year(date(2025, 3, 1), as_of)


class TestQuarters:

    @pytest.mark.parametrize("month, quarter", [
        (3, 1), (4, 1), (5, 1),
        (6, 2), (7, 2), (8, 2),
        (9, 3), (10, 3), (11, 3),
        (12, 4), (1, 4), (2, 4),
    ])
    def test_quarter_from_march_epoch(self, month, quarter):
        assert billing_quarter(date(2025, month, 15)) == quarter

    def test_proration_multipliers(self):
        assert [proration_multiplier(q) for q in (1, 2, 3, 4)] == [
            Decimal("1.00"), Decimal("0.75"), Decimal("0.50"), Decimal("0.25"),
        ]

    def test_reverse_proration_multipliers(self):
        assert [reverse_proration_multiplier(q) for q in (1, 2, 3, 4)] == [
            Decimal("0"), Decimal("0.25"), Decimal("0.50"), Decimal("0.75"),
        ]

    @pytest.mark.parametrize("quarter", [0, 5, -1])
    def test_invalid_quarter(self, quarter):
        with pytest.raises(ValueError):
            proration_multiplier(quarter)
        with pytest.raises(ValueError):
            reverse_proration_multiplier(quarter)


class TestCollectionPeriod:

    def test_first_wednesday_of_june(self):
        assert first_weekday_of_month(2025, 6, WEDNESDAY) == date(2025, 6, 4)
        assert first_weekday_of_month(2026, 6, WEDNESDAY) == date(2026, 6, 3)

    def test_first_weekday_when_month_starts_on_it(self):
        # 2022-06-01 was a Wednesday
        assert first_weekday_of_month(2022, 6, WEDNESDAY) == date(2022, 6, 1)

    def test_pre_counts_down_to_april_first(self):
        status = collection_period_status(date(2025, 3, 22))
        assert status.status == PeriodPhase.PRE
        assert status.days_remaining == 10
        assert status.message == "Collection opens in 10 days"

    def test_open_counts_down_to_deadline(self):
        status = collection_period_status(date(2025, 4, 1))
        assert status.status == PeriodPhase.OPEN
        assert status.deadline == date(2025, 6, 4)
        assert status.days_remaining == 64

    def test_deadline_day_is_still_open(self):
        status = collection_period_status(date(2025, 6, 4))
        assert status.status == PeriodPhase.OPEN
        assert status.days_remaining == 0

    def test_closed_after_deadline(self):
        status = collection_period_status(date(2025, 6, 5))
        assert status.status == PeriodPhase.CLOSED
        assert status.days_remaining is None


class TestWorkHourReview:

    def test_open_before_year_end(self):
        status = work_hour_review_status(date(2026, 1, 15))
        assert status.status == PeriodPhase.OPEN
        assert status.days_remaining == 44
        assert status.work_year == "2025-2026"

    def test_review_window_starts_feb_28(self):
        status = work_hour_review_status(date(2026, 2, 28))
        assert status.status == PeriodPhase.REVIEW
        assert status.days_remaining == 30
        assert status.review_deadline == date(2026, 3, 30)

    def test_leap_day_is_in_review(self):
        assert work_hour_review_status(date(2028, 2, 29)).status == PeriodPhase.REVIEW

    def test_deadline_day_is_still_review(self):
        status = work_hour_review_status(date(2026, 3, 30))
        assert status.status == PeriodPhase.REVIEW
        assert status.days_remaining == 0

    def test_early_march_is_review_not_complete(self):
        assert work_hour_review_status(date(2026, 3, 5)).status == PeriodPhase.REVIEW

    def test_complete_after_deadline(self):
        status = work_hour_review_status(date(2026, 3, 31))
        assert status.status == PeriodPhase.COMPLETE
        assert status.review_deadline == date(2027, 3, 30)
        assert status.days_remaining is None
