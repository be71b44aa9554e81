"""
Module: club_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for higher
    layers (club_services, scripts).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import club_kernel (and sibling engine modules).
    MUST NOT import club_services or club_config.

Invariants enforced:
    - Purity: engines never call ``date.today()``.  "Today" is always an
      explicit ``as_of`` argument supplied by the caller.
    - Decimal-only arithmetic: money and hours are ``Decimal``, rounded at
      every accumulation step.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Billing and eligibility invocations are traced via ``@traced_engine``
    (see ``club_engines.tracer``), emitting CLUB_ENGINE_TRACE log records
    with engine name, version, input fingerprint and duration.

Usage:
    from club_engines import compute_billing, check_life_eligibility
    from club_engines.calendar import fiscal_year_label
"""

from club_kernel.logging_config import get_logger

logger = get_logger("engines")

from club_engines.billing import (
    ZERO_BILL,
    BillingResult,
    billing_preview,
    calculate_tax,
    compute_billing,
    prorate_dues,
    prorate_hours,
)
from club_engines.calendar import (
    CollectionPeriodStatus,
    PeriodPhase,
    WorkHourReviewStatus,
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
from club_engines.eligibility import (
    EligibilityResult,
    LifeRule,
    check_life_eligibility,
)
from club_engines.forecast import (
    LifeForecastRow,
    NearEligibility,
    life_forecast_row,
    near_eligibility,
)
from club_engines.ledger import (
    EncumbranceRecord,
    PaymentStatus,
    WorkHourEntry,
    WorkHourSummary,
    approved_hours_by_member,
    assessment_years_after_payment,
    encumbered_member_ids,
    has_active_encumbrance,
    payment_status,
    summarize_work_hours,
)
from club_engines.tenure import calculate_age, calculate_consecutive_years
from club_engines.tracer import compute_input_fingerprint, traced_engine
from club_engines.transition import get_life_eligibility_date

__all__ = [
    # Billing
    "ZERO_BILL",
    "BillingResult",
    "billing_preview",
    "calculate_tax",
    "compute_billing",
    "prorate_dues",
    "prorate_hours",
    # Calendar
    "CollectionPeriodStatus",
    "PeriodPhase",
    "WorkHourReviewStatus",
    "billing_quarter",
    "billing_year_bounds",
    "billing_year_of",
    "collection_period_status",
    "first_weekday_of_month",
    "fiscal_year_label",
    "is_in_billing_year",
    "proration_multiplier",
    "reverse_proration_multiplier",
    "work_hour_review_status",
    "work_year_label",
    # Eligibility
    "EligibilityResult",
    "LifeRule",
    "check_life_eligibility",
    # Forecast
    "LifeForecastRow",
    "NearEligibility",
    "life_forecast_row",
    "near_eligibility",
    # Ledger
    "EncumbranceRecord",
    "PaymentStatus",
    "WorkHourEntry",
    "WorkHourSummary",
    "approved_hours_by_member",
    "assessment_years_after_payment",
    "encumbered_member_ids",
    "has_active_encumbrance",
    "payment_status",
    "summarize_work_hours",
    # Tenure
    "calculate_age",
    "calculate_consecutive_years",
    # Tracer
    "compute_input_fingerprint",
    "traced_engine",
    # Transition
    "get_life_eligibility_date",
]
