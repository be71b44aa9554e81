"""
Module: club_engines.calendar
Responsibility:
    Resolve a calendar date into the club's administrative periods.  The
    club runs three overlapping calendars:

    - Fiscal (dues) year, July 1 - June 30, labelled "2025-2026".
    - Work-hour year, March 1 - end of February.
    - Billing year, the same March 1 epoch, split into quarters used for
      dues proration: Q1 Mar-May, Q2 Jun-Aug, Q3 Sep-Nov, Q4 Dec-Feb.

    Also reports the dues collection window (April 1 through the first
    Wednesday of June) and the work-hour review window (February 28 through
    March 30).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import club_kernel.domain.

Invariants enforced:
    - Purity: "today" is always an explicit ``as_of`` argument.
    - Billing years end on the true last day of February (29th in leap
      years).

Usage:
    from datetime import date
    from club_engines.calendar import billing_quarter, proration_multiplier

    q = billing_quarter(date(2025, 10, 15))      # 3
    proration_multiplier(q)                      # Decimal("0.50")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum

from club_kernel.domain.dates import last_day_of_month

FISCAL_YEAR_START_MONTH = 7
WORK_YEAR_START_MONTH = 3
BILLING_YEAR_START_MONTH = WORK_YEAR_START_MONTH

WEDNESDAY = 2  # date.weekday()

_PRORATION = {
    1: Decimal("1.00"),
    2: Decimal("0.75"),
    3: Decimal("0.50"),
    4: Decimal("0.25"),
}

# Share of the year still owed by a member who turns Life-eligible
# during the given quarter.
_REVERSE_PRORATION = {
    1: Decimal("0"),
    2: Decimal("0.25"),
    3: Decimal("0.50"),
    4: Decimal("0.75"),
}


def _year_label(d: date, start_month: int) -> str:
    if d.month >= start_month:
        return f"{d.year}-{d.year + 1}"
    return f"{d.year - 1}-{d.year}"


def fiscal_year_label(d: date) -> str:
    """Fiscal (dues) year containing ``d``, e.g. ``"2025-2026"``."""
    return _year_label(d, FISCAL_YEAR_START_MONTH)


def work_year_label(d: date) -> str:
    """Work-hour year containing ``d``, e.g. ``"2025-2026"``."""
    return _year_label(d, WORK_YEAR_START_MONTH)


def billing_year_of(d: date) -> int:
    """Calendar year in which the billing year containing ``d`` starts."""
    if d.month >= BILLING_YEAR_START_MONTH:
        return d.year
    return d.year - 1


def billing_year_bounds(as_of: date) -> tuple[date, date]:
    """First and last day of the billing year containing ``as_of``."""
    start_year = billing_year_of(as_of)
    start = date(start_year, BILLING_YEAR_START_MONTH, 1)
    end = last_day_of_month(start_year + 1, 2)
    return start, end


def is_in_billing_year(d: date, as_of: date) -> bool:
    """True if ``d`` falls within the billing year containing ``as_of``."""
    start, end = billing_year_bounds(as_of)
    return start <= d <= end


def billing_quarter(d: date) -> int:
    """Billing-year quarter (1-4) of ``d``, March 1 epoch."""
    if 3 <= d.month <= 5:
        return 1
    if 6 <= d.month <= 8:
        return 2
    if 9 <= d.month <= 11:
        return 3
    return 4


def proration_multiplier(quarter: int) -> Decimal:
    """Share of full dues owed by a member joining in ``quarter``."""
    try:
        return _PRORATION[quarter]
    except KeyError:
        raise ValueError(f"quarter must be 1-4, got {quarter}") from None


def reverse_proration_multiplier(quarter: int) -> Decimal:
    """Share of full dues owed by a member turning Life-eligible in ``quarter``."""
    try:
        return _REVERSE_PRORATION[quarter]
    except KeyError:
        raise ValueError(f"quarter must be 1-4, got {quarter}") from None


def first_weekday_of_month(year: int, month: int, weekday: int) -> date:
    """First date in the month whose ``weekday()`` equals ``weekday``."""
    first = date(year, month, 1)
    return first + timedelta(days=(weekday - first.weekday()) % 7)


# ============================================================================
# Administrative windows
# ============================================================================


class PeriodPhase(str, Enum):
    """Phase of an administrative window relative to ``as_of``."""

    PRE = "pre"
    OPEN = "open"
    REVIEW = "review"
    CLOSED = "closed"
    COMPLETE = "complete"


@dataclass(frozen=True)
class CollectionPeriodStatus:
    """
    Dues collection window status.

    Attributes:
        status: PRE, OPEN or CLOSED
        message: Human-readable countdown
        opens_on: April 1 of the year of ``as_of``
        deadline: First Wednesday of June of the year of ``as_of``
        days_remaining: Days until opening (PRE) or deadline (OPEN), else None
    """

    status: PeriodPhase
    message: str
    opens_on: date
    deadline: date
    days_remaining: int | None = None


@dataclass(frozen=True)
class WorkHourReviewStatus:
    """
    Work-hour year / review window status.

    Attributes:
        status: OPEN, REVIEW or COMPLETE
        message: Human-readable countdown
        review_deadline: March 30 ending the current or next review window
        work_year: Label of the work-hour year being accumulated or reviewed
        days_remaining: Days until Feb 28 (OPEN) or the deadline (REVIEW)
    """

    status: PeriodPhase
    message: str
    review_deadline: date
    work_year: str
    days_remaining: int | None = None


def collection_period_status(as_of: date) -> CollectionPeriodStatus:
    """Where ``as_of`` falls relative to the April 1 - first-Wednesday-of-June window."""
    opens_on = date(as_of.year, 4, 1)
    deadline = first_weekday_of_month(as_of.year, 6, WEDNESDAY)

    if as_of < opens_on:
        days = (opens_on - as_of).days
        return CollectionPeriodStatus(
            status=PeriodPhase.PRE,
            message=f"Collection opens in {days} days",
            opens_on=opens_on,
            deadline=deadline,
            days_remaining=days,
        )

    if as_of <= deadline:
        days = (deadline - as_of).days
        return CollectionPeriodStatus(
            status=PeriodPhase.OPEN,
            message=f"{days} days until deadline",
            opens_on=opens_on,
            deadline=deadline,
            days_remaining=days,
        )

    return CollectionPeriodStatus(
        status=PeriodPhase.CLOSED,
        message="Collection period closed",
        opens_on=opens_on,
        deadline=deadline,
    )


def work_hour_review_status(as_of: date) -> WorkHourReviewStatus:
    """
    Where ``as_of`` falls in the work-hour cycle.

    The work-hour year closes on February 28; entries may be caught up and
    approved until March 30.  From March 31 the review of the year just
    ended is complete and the next deadline is March 30 of the following
    year.
    """
    year_end = date(as_of.year, 2, 28)
    review_deadline = date(as_of.year, 3, 30)
    closing_year = f"{as_of.year - 1}-{as_of.year}"

    if as_of < year_end:
        days = (year_end - as_of).days
        return WorkHourReviewStatus(
            status=PeriodPhase.OPEN,
            message=f"{days} days left in work hour year",
            review_deadline=review_deadline,
            work_year=closing_year,
            days_remaining=days,
        )

    if as_of <= review_deadline:
        days = (review_deadline - as_of).days
        return WorkHourReviewStatus(
            status=PeriodPhase.REVIEW,
            message=f"Review work hours - {days} days until deadline",
            review_deadline=review_deadline,
            work_year=closing_year,
            days_remaining=days,
        )

    return WorkHourReviewStatus(
        status=PeriodPhase.COMPLETE,
        message="Review period closed",
        review_deadline=date(as_of.year + 1, 3, 30),
        work_year=closing_year,
    )
