"""
Module: club_engines.forecast
Responsibility:
    Read-only planning views over Life eligibility:

    - ``near_eligibility``: members who do not qualify yet but are within
      a small window (two years by default) of Longevity or of the
      age-and-service rule that matches their join date, with one status
      message describing the remaining gap.
    - ``life_forecast_row``: years to the Longevity threshold and years to
      the qualifying age, filtered by ``within_horizon`` for the yearly
      "approaching Life membership" report.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Not on the billing path.

Invariants enforced:
    - A member who qualifies today, or who is screened out (encumbered,
      already Life, inactive, Waitlist), is never "near".
    - Status messages follow the same gap precedence as
      ``check_life_eligibility``: service met first, then age met, then
      longevity.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from club_engines.eligibility import (
    LifeRule,
    effective_encumbrance,
    qualifying_rule,
    screening_reason,
)
from club_engines.tenure import calculate_age, calculate_consecutive_years
from club_kernel.domain.member import Member, Tier
from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules

DEFAULT_NEAR_WINDOW = 2
DEFAULT_FORECAST_HORIZON = 5
DEFAULT_FORECAST_MIN_SERVICE = 15


@dataclass(frozen=True)
class NearEligibility:
    """
    A member approaching Life eligibility.

    Attributes:
        member_id: Member identifier
        rule: The path the member is closest to
        message: Human-readable remaining gap
        age: Current age, None if unknown
        consecutive_years: Current service years
        years_to_longevity: Years until the Longevity threshold
        years_to_age: Years until the qualifying age, None if age unknown
        years_to_service: Service years still needed under the age rule
    """

    member_id: str
    rule: LifeRule
    message: str
    age: int | None
    consecutive_years: int
    years_to_longevity: int
    years_to_age: int | None
    years_to_service: int


@dataclass(frozen=True)
class LifeForecastRow:
    """One row of the Life eligibility forecast report."""

    member_id: str
    tier: Tier
    age: int | None
    consecutive_years: int | None
    original_join_date: date | None
    years_to_longevity: int | None
    years_to_age: int | None

    def within_horizon(
        self,
        horizon: int = DEFAULT_FORECAST_HORIZON,
        min_service: int = DEFAULT_FORECAST_MIN_SERVICE,
    ) -> bool:
        """
        True if the member reaches Longevity within ``horizon`` years, or
        reaches the qualifying age within ``horizon`` years with at least
        ``min_service`` years already served.
        """
        if self.years_to_longevity is not None and self.years_to_longevity <= horizon:
            return True
        return (
            self.years_to_age is not None
            and self.years_to_age <= horizon
            and self.consecutive_years is not None
            and self.consecutive_years >= min_service
        )

    @property
    def sort_key(self) -> tuple[int, str]:
        """Soonest threshold first; unknown gaps sort last."""
        gaps = [g for g in (self.years_to_longevity, self.years_to_age) if g is not None]
        return (min(gaps) if gaps else 10**6, self.member_id)


def near_eligibility(
    member: Member | Mapping[str, Any] | None,
    has_active_encumbrance: bool | None = None,
    *,
    as_of: date,
    rules: LifeRules = DEFAULT_LIFE_RULES,
    window: int = DEFAULT_NEAR_WINDOW,
) -> NearEligibility | None:
    """
    Describe how close ``member`` is to Life eligibility.

    Returns:
        NearEligibility when the member is not eligible today but is within
        ``window`` years of a rule; otherwise None.
    """
    member = Member.coerce(member)
    if screening_reason(member, effective_encumbrance(member, has_active_encumbrance)):
        return None
    if member.tier == Tier.HONORARY:
        return None

    years = calculate_consecutive_years(member.original_join_date, as_of)
    if years is None:
        return None
    age = calculate_age(member.date_of_birth, as_of)
    if qualifying_rule(member, age, years, rules) != LifeRule.NONE:
        return None

    joined = member.original_join_date
    required = rules.service_years_required(joined)
    age_rule = LifeRule.LEGACY if rules.is_legacy(joined) else LifeRule.STANDARD

    years_to_longevity = rules.longevity_years - years
    years_to_service = max(0, required - years)
    years_to_age = None if age is None else max(0, rules.qualifying_age - age)

    near_longevity = years_to_longevity <= window
    near_age_rule = (
        years_to_age is not None
        and years_to_age <= window
        and years_to_service <= window
    )

    if near_age_rule:
        if years_to_service == 0:
            message = f"{years_to_age} years until age eligible"
        elif years_to_age == 0:
            message = f"{years_to_service} more years of membership needed"
        else:
            gap = max(years_to_age, years_to_service)
            message = f"{gap} years until age and service eligible"
        rule = age_rule
    elif near_longevity:
        message = f"{years_to_longevity} years until longevity eligible"
        rule = LifeRule.LONGEVITY
    else:
        return None

    return NearEligibility(
        member_id=member.member_id,
        rule=rule,
        message=message,
        age=age,
        consecutive_years=years,
        years_to_longevity=years_to_longevity,
        years_to_age=years_to_age,
        years_to_service=years_to_service,
    )


def life_forecast_row(
    member: Member | Mapping[str, Any] | None,
    *,
    as_of: date,
    rules: LifeRules = DEFAULT_LIFE_RULES,
) -> LifeForecastRow:
    """Years until each Life threshold for one member."""
    member = Member.coerce(member)
    age = calculate_age(member.date_of_birth, as_of)
    years = calculate_consecutive_years(member.original_join_date, as_of)
    return LifeForecastRow(
        member_id=member.member_id,
        tier=member.tier,
        age=age,
        consecutive_years=years,
        original_join_date=member.original_join_date,
        years_to_longevity=None if years is None else max(0, rules.longevity_years - years),
        years_to_age=None if age is None else max(0, rules.qualifying_age - age),
    )
