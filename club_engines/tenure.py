"""
Tenure -- Age and consecutive-membership-years calculations.

Pure functions with deterministic behavior. No I/O.

Both counts are whole years with floor semantics: a member born on
1963-07-01 is 61 on 2025-06-30 and 62 on 2025-07-01.  Unknown or
unusable dates give ``None`` instead of a number, so callers can tell
"not old enough" apart from "we don't know".

Usage:
    from datetime import date
    from club_engines.tenure import calculate_age, calculate_consecutive_years

    calculate_age("1955-01-01", date(2025, 6, 1))                # 70
    calculate_consecutive_years("1990-01-01", date(2025, 6, 1))  # 35
"""

from __future__ import annotations

from datetime import date
from typing import Any

from club_kernel.domain.dates import parse_local_date, whole_years_between


def calculate_age(date_of_birth: Any, as_of: date) -> int | None:
    """
    Age in whole years on ``as_of``.

    Returns:
        The age, or None when the date of birth is missing, invalid or
        later than ``as_of``.
    """
    born = parse_local_date(date_of_birth)
    if born is None or born > as_of:
        return None
    return whole_years_between(born, as_of)


def calculate_consecutive_years(original_join_date: Any, as_of: date) -> int | None:
    """
    Whole years of membership since ``original_join_date``.

    Returns:
        The year count; 0 for a join date after ``as_of``; None when the
        join date is missing or invalid.
    """
    joined = parse_local_date(original_join_date)
    if joined is None:
        return None
    return max(0, whole_years_between(joined, as_of))
