"""
Module: club_engines.eligibility
Responsibility:
    Decide whether a member currently qualifies for Life membership and,
    when they don't, describe the closest path to qualifying.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import club_kernel.domain and sibling engines.

Rules (first match wins):
    1. Active encumbrance        -> not eligible
    2. Already Life              -> not eligible
    3. Not Active                -> not eligible
    4. Waitlist applicant        -> not eligible
    5. Longevity                 -> 30+ consecutive years, any age
    6. Legacy                    -> joined before 2011-07-01, age 62+, 10+ years
    7. Standard                  -> joined on/after 2011-07-01, age 62+, 20+ years
    8. Otherwise                 -> not eligible, reason names the closest gap

    The numeric thresholds come from ``LifeRules`` and are configurable.

Invariants enforced:
    - ``eligible`` is never True while an encumbrance is active, whether
      the flag comes from the caller or from the member record.
    - Unknown ages never satisfy an age threshold.

Failure modes:
    - InvalidMemberRecordError for a missing member record.  Every other
      outcome is a normal EligibilityResult.

Usage:
    from datetime import date
    from club_engines.eligibility import check_life_eligibility

    result = check_life_eligibility(member, as_of=date(2025, 6, 1))
    if result.eligible:
        print(result.rule.value, result.reason)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from club_engines.tenure import calculate_age, calculate_consecutive_years
from club_engines.tracer import traced_engine
from club_kernel.domain.member import Member, Tier
from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules
from club_kernel.logging_config import get_logger

logger = get_logger("engines.eligibility")

REASON_ENCUMBERED = "Has active encumbrance"
REASON_ALREADY_LIFE = "Already Life member"
REASON_NOT_ACTIVE = "Member is not active"
REASON_WAITLIST = "Waitlist applicants are not members"
REASON_JOIN_DATE_UNKNOWN = "Original join date unknown"
REASON_BIRTH_DATE_UNKNOWN = "Date of birth unknown"


class LifeRule(str, Enum):
    """Life-membership qualification rules."""

    LONGEVITY = "Longevity"
    LEGACY = "Legacy"
    STANDARD = "Standard"
    NONE = "None"


@dataclass(frozen=True)
class EligibilityResult:
    """
    Outcome of a Life-eligibility check.

    Attributes:
        eligible: True if the member qualifies today
        rule: The rule that qualified them, LifeRule.NONE otherwise
        reason: Human-readable justification or closest gap
        age: Age as evaluated, None if unknown or not evaluated
        consecutive_years: Service years as evaluated, None if unknown
    """

    eligible: bool
    rule: LifeRule
    reason: str
    age: int | None = None
    consecutive_years: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "eligible": self.eligible,
            "rule": None if self.rule == LifeRule.NONE else self.rule.value,
            "reason": self.reason,
        }


def effective_encumbrance(member: Member, has_active_encumbrance: bool | None) -> bool:
    """An encumbrance counts if either the caller or the member record reports one."""
    return bool(has_active_encumbrance) or member.has_active_encumbrance


def screening_reason(member: Member, encumbered: bool) -> str | None:
    """
    Reason a member is excluded before any rule is evaluated.

    Shared by the eligibility check, the transition date and the forecast
    so all three apply the same precedence.
    """
    if encumbered:
        return REASON_ENCUMBERED
    if member.tier == Tier.LIFE:
        return REASON_ALREADY_LIFE
    if not member.is_active:
        return REASON_NOT_ACTIVE
    if member.tier == Tier.WAITLIST:
        return REASON_WAITLIST
    return None


def qualifying_rule(
    member: Member,
    age: int | None,
    years: int | None,
    rules: LifeRules,
) -> LifeRule:
    """The first rule ``member`` satisfies with the given age and years."""
    if years is None or member.original_join_date is None:
        return LifeRule.NONE
    if years >= rules.longevity_years:
        return LifeRule.LONGEVITY
    if age is None or age < rules.qualifying_age:
        return LifeRule.NONE
    if years < rules.service_years_required(member.original_join_date):
        return LifeRule.NONE
    if rules.is_legacy(member.original_join_date):
        return LifeRule.LEGACY
    return LifeRule.STANDARD


def qualifying_reason(
    rule: LifeRule,
    age: int | None,
    years: int | None,
    rules: LifeRules,
) -> str:
    """Justification string for an eligible result."""
    if rule == LifeRule.LONGEVITY:
        return f"{years} consecutive years ({rules.longevity_years}+ required)"
    if rule == LifeRule.LEGACY:
        return (
            f"Age {age} ({rules.qualifying_age}+ required), "
            f"{years} consecutive years ({rules.legacy_years}+ required), "
            f"joined before {rules.legacy_cutoff:%B %Y}"
        )
    return (
        f"Age {age} ({rules.qualifying_age}+ required), "
        f"{years} consecutive years ({rules.standard_years}+ required)"
    )


def closest_gap(
    member: Member,
    age: int | None,
    years: int | None,
    rules: LifeRules,
) -> str:
    """
    Single closest gap for a member who does not qualify.

    Checked in order: service met but age short, age met but service
    short, then years until longevity.
    """
    if years is None or member.original_join_date is None:
        return REASON_JOIN_DATE_UNKNOWN

    required = rules.service_years_required(member.original_join_date)
    service_met = years >= required
    age_met = age is not None and age >= rules.qualifying_age

    if service_met and not age_met:
        if age is None:
            return REASON_BIRTH_DATE_UNKNOWN
        return f"{rules.qualifying_age - age} years until age eligible"
    if age_met and not service_met:
        return f"{required - years} more years of membership needed"
    return f"{rules.longevity_years - years} years until longevity eligible"


@traced_engine(
    "life_eligibility", "1.0",
    fingerprint_fields=("member", "has_active_encumbrance", "as_of", "rules"),
)
def check_life_eligibility(
    member: Member | Mapping[str, Any] | None,
    has_active_encumbrance: bool | None = None,
    *,
    as_of: date,
    rules: LifeRules = DEFAULT_LIFE_RULES,
) -> EligibilityResult:
    """
    Check whether a member qualifies for Life membership on ``as_of``.

    Args:
        member: Member or storage-layer member record.
        has_active_encumbrance: Caller-computed encumbrance flag; None
            defers to the member record.
        as_of: Evaluation date.
        rules: Life-membership thresholds.

    Returns:
        EligibilityResult; never raises for business outcomes.
    """
    member = Member.coerce(member)
    encumbered = effective_encumbrance(member, has_active_encumbrance)

    excluded = screening_reason(member, encumbered)
    if excluded is not None:
        logger.debug("life_eligibility_screened_out", extra={
            "member_id": member.member_id,
            "reason": excluded,
        })
        return EligibilityResult(eligible=False, rule=LifeRule.NONE, reason=excluded)

    age = calculate_age(member.date_of_birth, as_of)
    years = calculate_consecutive_years(member.original_join_date, as_of)

    rule = qualifying_rule(member, age, years, rules)
    if rule != LifeRule.NONE:
        result = EligibilityResult(
            eligible=True,
            rule=rule,
            reason=qualifying_reason(rule, age, years, rules),
            age=age,
            consecutive_years=years,
        )
    else:
        result = EligibilityResult(
            eligible=False,
            rule=LifeRule.NONE,
            reason=closest_gap(member, age, years, rules),
            age=age,
            consecutive_years=years,
        )

    logger.info("life_eligibility_checked", extra={
        "member_id": member.member_id,
        "eligible": result.eligible,
        "rule": result.rule.value,
        "age": age,
        "consecutive_years": years,
    })
    return result
