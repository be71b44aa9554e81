"""
Dates -- Local calendar-date parsing and arithmetic.

Responsibility:
    The single place where calendar dates enter the engine.  Every date the
    engine sees (date of birth, original join date, "today") is a
    ``datetime.date`` built from explicit year/month/day components.  A
    string such as "1962-03-15" is March 15 in every timezone; no instant or
    timestamp type is ever constructed from it.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - ``parse_local_date`` never raises for bad input; it returns ``None``
      for malformed strings, impossible dates (Feb 30), and years outside
      the supported range.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Any

MIN_YEAR = 1900
MAX_YEAR = 2100

_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")


def parse_local_date(value: Any) -> date | None:
    """
    Parse a calendar date from a ``date``, ``datetime`` or ``YYYY-MM-DD``
    string.

    A trailing time component (``"1985-03-15T00:00:00.000Z"``) is discarded
    rather than converted, so the calendar day is never shifted.

    Returns:
        The calendar date, or None if the value is missing or invalid.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip().split("T", 1)[0].split(" ", 1)[0]
    match = _DATE_PATTERN.match(text)
    if match is None:
        return None

    year, month, day = (int(part) for part in match.groups())
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def is_valid_date(value: Any) -> bool:
    """True if ``value`` parses to a real calendar date."""
    return parse_local_date(value) is not None


def add_years(start: date, years: int) -> date:
    """
    Return the anniversary of ``start`` after ``years`` years.

    A February 29 anniversary falls on March 1 in non-leap years, which
    keeps it consistent with ``whole_years_between``: the anniversary has
    not been reached on February 28.
    """
    target_year = start.year + years
    if start.month == 2 and start.day == 29 and not calendar.isleap(target_year):
        return date(target_year, 3, 1)
    return start.replace(year=target_year)


def whole_years_between(start: date, end: date) -> int:
    """
    Number of complete years from ``start`` to ``end``.

    Floor semantics: the count only increments once the month/day of
    ``start`` has been reached in ``end``'s year.  Negative when ``end``
    precedes ``start``.
    """
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def last_day_of_month(year: int, month: int) -> date:
    """Last calendar day of the given month (handles leap Februaries)."""
    return date(year, month, calendar.monthrange(year, month)[1])


def format_date(value: Any) -> str:
    """Display format, e.g. ``Mar 15, 1985``. Empty string for bad input."""
    parsed = parse_local_date(value)
    if parsed is None:
        return ""
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}"
