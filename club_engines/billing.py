"""
Membership Billing Engine.

Pure functions with deterministic behavior. No I/O.

This engine computes one member's bill for the billing year containing
``as_of``: dues, the new-member assessment, the buyout charged for unworked
volunteer hours, cabaret tax and the total owed.

Tier handling:
- Life, Honorary, Waitlist (and any non-Active member) -- nothing owed
- Absentee -- flat dues plus tax, no hours, no assessment, no proration
- Regular -- dues and hours, prorated in the year of joining and
  reverse-prorated in the year the member turns Life-eligible

Rounding:
    Currency is rounded to cents at every accumulation step, hours to
    tenths, both ROUND_HALF_UP, so stored totals never drift by a cent
    from a step-by-step recomputation.

Usage:
    from datetime import date
    from club_engines.billing import compute_billing
    from club_kernel.domain import Member, RateSettings

    member = Member(member_id="M-100", tier="Regular",
                    original_join_date="2025-10-01",
                    date_of_birth="1980-04-12")
    result = compute_billing(member, RateSettings(), work_hours_completed=2,
                             as_of=date(2025, 11, 1))
    result.total   # Decimal("...")
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Any

from club_engines.calendar import (
    billing_quarter,
    billing_year_of,
    proration_multiplier,
    reverse_proration_multiplier,
)
from club_engines.eligibility import effective_encumbrance
from club_engines.tracer import traced_engine
from club_engines.transition import get_life_eligibility_date
from club_kernel.domain.member import NON_BILLED_TIERS, Member, Tier
from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules, RateSettings
from club_kernel.domain.values import ZERO, round_currency, round_hours, to_decimal
from club_kernel.exceptions import InvalidWorkHoursError
from club_kernel.logging_config import get_logger

logger = get_logger("engines.billing")


# ============================================================================
# Value Objects
# ============================================================================

_CAMEL_CASE_KEYS = {
    "dues": "dues",
    "assessment": "assessment",
    "work_hours_required": "workHoursRequired",
    "work_hours_completed": "workHoursCompleted",
    "work_hours_short": "workHoursShort",
    "buyout": "buyout",
    "subtotal": "subtotal",
    "tax": "tax",
    "total": "total",
}


@dataclass(frozen=True)
class BillingResult:
    """
    One member's bill for a billing year.

    Currency fields are rounded to cents, hour fields to tenths.
    """

    dues: Decimal = ZERO
    assessment: Decimal = ZERO
    work_hours_required: Decimal = ZERO
    work_hours_completed: Decimal = ZERO
    work_hours_short: Decimal = ZERO
    buyout: Decimal = ZERO
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO

    @property
    def is_zero(self) -> bool:
        return all(getattr(self, f.name) == ZERO for f in fields(self))

    def as_dict(self) -> dict[str, Decimal]:
        """Field values keyed by the data layer's column names."""
        return {
            _CAMEL_CASE_KEYS[f.name]: getattr(self, f.name) for f in fields(self)
        }


ZERO_BILL = BillingResult()


# ============================================================================
# Helpers
# ============================================================================


def prorate_dues(base_dues: Decimal, join_date: date) -> Decimal:
    """Dues owed by a member joining on ``join_date``."""
    multiplier = proration_multiplier(billing_quarter(join_date))
    return round_currency(base_dues * multiplier)


def prorate_hours(base_hours: Decimal, join_date: date) -> Decimal:
    """Work hours owed by a member joining on ``join_date``."""
    multiplier = proration_multiplier(billing_quarter(join_date))
    return round_hours(base_hours * multiplier)


def calculate_tax(subtotal: Decimal, tax_rate: Decimal) -> Decimal:
    """Cabaret tax on a subtotal, rounded to cents."""
    return round_currency(subtotal * tax_rate)


def _parse_hours_completed(value: Any) -> Decimal:
    if value is None:
        return ZERO
    hours = to_decimal(value)
    if hours is None or hours < 0:
        raise InvalidWorkHoursError(value)
    return round_hours(hours)


def _joined_this_billing_year(member: Member, as_of: date) -> bool:
    joined = member.original_join_date
    return joined is not None and billing_year_of(joined) == billing_year_of(as_of)


def _totals(
    dues: Decimal,
    assessment: Decimal,
    hours_required: Decimal,
    hours_completed: Decimal,
    settings: RateSettings,
) -> BillingResult:
    short = max(ZERO, hours_required - hours_completed)
    buyout = round_currency(short * settings.buyout_rate)
    subtotal = round_currency(dues + assessment + buyout)
    tax = calculate_tax(subtotal, settings.cabaret_tax_rate)
    return BillingResult(
        dues=dues,
        assessment=assessment,
        work_hours_required=hours_required,
        work_hours_completed=hours_completed,
        work_hours_short=round_hours(short),
        buyout=buyout,
        subtotal=subtotal,
        tax=tax,
        total=round_currency(subtotal + tax),
    )


# ============================================================================
# Engine
# ============================================================================


@traced_engine(
    "billing", "1.0",
    fingerprint_fields=(
        "member", "settings", "work_hours_completed",
        "has_active_encumbrance", "as_of", "rules",
    ),
)
def compute_billing(
    member: Member | Mapping[str, Any] | None,
    settings: RateSettings | Mapping[str, Any] | None,
    work_hours_completed: Any = 0,
    has_active_encumbrance: bool | None = None,
    *,
    as_of: date,
    rules: LifeRules = DEFAULT_LIFE_RULES,
) -> BillingResult:
    """
    Compute one member's bill for the billing year containing ``as_of``.

    Args:
        member: Member or storage-layer member record.
        settings: RateSettings or raw settings mapping; None uses defaults.
        work_hours_completed: Approved hours for the work-hour year.
        has_active_encumbrance: Caller-computed encumbrance flag.
        as_of: Billing date.
        rules: Life thresholds used for mid-year transitions.

    Returns:
        BillingResult.

    Raises:
        InvalidMemberRecordError: member is None or malformed.
        InvalidWorkHoursError: work hours negative or non-numeric.
    """
    member = Member.coerce(member)
    settings = RateSettings.coerce(settings)
    hours_completed = _parse_hours_completed(work_hours_completed)

    if member.tier in NON_BILLED_TIERS or not member.is_active:
        logger.debug("billing_not_billed", extra={
            "member_id": member.member_id,
            "tier": member.tier.value,
            "status": member.status.value,
        })
        return ZERO_BILL

    if member.tier == Tier.ABSENTEE:
        dues = round_currency(settings.absentee_dues)
        result = _totals(dues, ZERO, ZERO, hours_completed, settings)
        basis = "absentee"
    else:
        if _joined_this_billing_year(member, as_of):
            dues = prorate_dues(settings.regular_dues, member.original_join_date)
            hours_required = prorate_hours(
                settings.work_hours_required, member.original_join_date,
            )
            basis = "new_member"
        else:
            eligibility_date = get_life_eligibility_date(
                member,
                effective_encumbrance(member, has_active_encumbrance),
                as_of=as_of,
                rules=rules,
            )
            if eligibility_date is not None:
                multiplier = reverse_proration_multiplier(billing_quarter(eligibility_date))
                dues = round_currency(settings.regular_dues * multiplier)
                hours_required = round_hours(settings.work_hours_required * multiplier)
                basis = "life_transition"
            else:
                dues = round_currency(settings.regular_dues)
                hours_required = round_hours(settings.work_hours_required)
                basis = "full_year"

        assessment = (
            round_currency(settings.assessment_amount) if member.owes_assessment else ZERO
        )
        result = _totals(dues, assessment, hours_required, hours_completed, settings)

    logger.info("billing_calculation_completed", extra={
        "member_id": member.member_id,
        "tier": member.tier.value,
        "basis": basis,
        "total": str(result.total),
    })
    return result


def billing_preview(
    settings: RateSettings | Mapping[str, Any] | None = None,
) -> BillingResult:
    """
    Bill owed by a new Regular member joining at the start of the year who
    has worked no hours.  Shown alongside the rate settings as an example.
    """
    settings = RateSettings.coerce(settings)
    return _totals(
        round_currency(settings.regular_dues),
        round_currency(settings.assessment_amount),
        round_hours(settings.work_hours_required),
        ZERO,
        settings,
    )
