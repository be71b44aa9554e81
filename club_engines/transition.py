"""
Module: club_engines.transition
Responsibility:
    Find the date, inside the billing year containing ``as_of``, on which a
    member who does not yet qualify for Life membership will first satisfy
    a rule.  The billing calculator uses this date to charge only for the
    part of the year before the member leaves the paying pool.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Thresholds crossed:
    - Longevity: the member has 29 consecutive years and their 30th join
      anniversary falls in the billing year.
    - Legacy / Standard: the member is 61, already holds the service years
      their join date requires (10 or 20), and their 62nd birthday falls in
      the billing year.

    The result is a forecast ("will become eligible"), not a confirmed
    eligibility check; see club_engines.eligibility for the latter.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from club_engines.calendar import is_in_billing_year
from club_engines.eligibility import effective_encumbrance, screening_reason
from club_engines.tenure import calculate_age, calculate_consecutive_years
from club_kernel.domain.dates import add_years
from club_kernel.domain.member import Member
from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules


def get_life_eligibility_date(
    member: Member | Mapping[str, Any] | None,
    has_active_encumbrance: bool | None = None,
    *,
    as_of: date,
    rules: LifeRules = DEFAULT_LIFE_RULES,
) -> date | None:
    """
    Date this billing year on which ``member`` crosses a Life threshold.

    Returns:
        The 30th join anniversary or the 62nd birthday, or None when the
        member is screened out, a needed date is unknown, or no threshold
        is crossed in the billing year containing ``as_of``.
    """
    member = Member.coerce(member)
    if screening_reason(member, effective_encumbrance(member, has_active_encumbrance)):
        return None

    joined = member.original_join_date
    if joined is None:
        return None

    years = calculate_consecutive_years(joined, as_of)
    if years == rules.longevity_years - 1:
        longevity_date = add_years(joined, rules.longevity_years)
        if is_in_billing_year(longevity_date, as_of):
            return longevity_date

    born = member.date_of_birth
    age = calculate_age(born, as_of)
    if born is None or age != rules.qualifying_age - 1:
        return None
    if years < rules.service_years_required(joined):
        return None

    age_date = add_years(born, rules.qualifying_age)
    if is_in_billing_year(age_date, as_of):
        return age_date
    return None
