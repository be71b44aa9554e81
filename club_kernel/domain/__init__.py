"""
Pure domain layer.

This module contains the immutable records the rules engine consumes,
with NO dependencies on:
- Database
- Time/clock (except the injectable Clock)
- I/O

All domain objects are immutable and deterministic.
"""

from club_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from club_kernel.domain.dates import (
    add_years,
    format_date,
    is_valid_date,
    last_day_of_month,
    parse_local_date,
    whole_years_between,
)
from club_kernel.domain.member import (
    ASSESSMENT_YEARS,
    NON_BILLED_TIERS,
    Member,
    MemberStatus,
    Tier,
)
from club_kernel.domain.settings import (
    DEFAULT_LIFE_RULES,
    DEFAULT_RATES,
    LifeRules,
    RateSettings,
)
from club_kernel.domain.values import (
    CENTS,
    MAX_MAGNITUDE,
    TENTHS,
    ZERO,
    round_currency,
    round_hours,
    to_decimal,
)

__all__ = [
    # Clock
    "Clock",
    "DeterministicClock",
    "SystemClock",
    # Dates
    "add_years",
    "format_date",
    "is_valid_date",
    "last_day_of_month",
    "parse_local_date",
    "whole_years_between",
    # Member
    "ASSESSMENT_YEARS",
    "NON_BILLED_TIERS",
    "Member",
    "MemberStatus",
    "Tier",
    # Settings
    "DEFAULT_LIFE_RULES",
    "DEFAULT_RATES",
    "LifeRules",
    "RateSettings",
    # Values
    "CENTS",
    "MAX_MAGNITUDE",
    "TENTHS",
    "ZERO",
    "round_currency",
    "round_hours",
    "to_decimal",
]
