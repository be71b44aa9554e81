"""
Settings -- Immutable rate parameters and Life-membership rule thresholds.

Responsibility:
    ``RateSettings`` is the explicit, read-only settings value passed into
    every billing calculation.  ``LifeRules`` carries the thresholds of the
    Longevity, Legacy and Standard Life-membership rules.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Populated from the
    storage layer's key/value settings table (``RateSettings.from_mapping``)
    or from YAML by ``club_config``.

Invariants enforced:
    - Every rate is a finite, non-negative Decimal.  Missing or malformed
      values fall back to the documented default, so NaN can never reach a
      currency total.
    - Instances are frozen; there is no shared or global settings object.

Failure modes:
    - ``LifeRules`` raises ValueError for non-positive thresholds.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from typing import Any

from club_kernel.domain.values import to_decimal
from club_kernel.logging_config import get_logger

logger = get_logger("domain.settings")


# Documented fallbacks, keyed by the storage layer's setting names
DEFAULT_RATES: dict[str, Decimal] = {
    "regular_dues": Decimal("300"),
    "absentee_dues": Decimal("50"),
    "work_hours_required": Decimal("10"),
    "buyout_rate": Decimal("20"),
    "assessment_amount": Decimal("50"),
    "cabaret_tax_rate": Decimal("0.10"),
}


@dataclass(frozen=True)
class RateSettings:
    """
    Billing rate parameters.

    Attributes:
        regular_dues: Full-year dues for a Regular member
        absentee_dues: Flat dues for an Absentee member
        work_hours_required: Volunteer hours owed per work-hour year
        buyout_rate: Charge per unworked hour
        assessment_amount: Yearly new-member assessment (first five years)
        cabaret_tax_rate: Tax rate applied to the subtotal (0.10 = 10%)
    """

    regular_dues: Decimal = DEFAULT_RATES["regular_dues"]
    absentee_dues: Decimal = DEFAULT_RATES["absentee_dues"]
    work_hours_required: Decimal = DEFAULT_RATES["work_hours_required"]
    buyout_rate: Decimal = DEFAULT_RATES["buyout_rate"]
    assessment_amount: Decimal = DEFAULT_RATES["assessment_amount"]
    cabaret_tax_rate: Decimal = DEFAULT_RATES["cabaret_tax_rate"]

    def __post_init__(self) -> None:
        for f in fields(self):
            raw = getattr(self, f.name)
            value = _parse_rate(f.name, raw)
            if value is not raw:
                object.__setattr__(self, f.name, value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> RateSettings:
        """
        Build settings from a key/value mapping.

        Keys that are absent use the documented default; unknown keys are
        ignored.  Values may be numbers or numeric strings.
        """
        mapping = mapping or {}
        known = {f.name for f in fields(cls)}
        values = {key: mapping[key] for key in known if key in mapping}
        return cls(**values)

    @classmethod
    def coerce(cls, settings: RateSettings | Mapping[str, Any] | None) -> RateSettings:
        """Accept either a RateSettings instance or a raw settings mapping."""
        if isinstance(settings, RateSettings):
            return settings
        return cls.from_mapping(settings)

    def as_dict(self) -> dict[str, Decimal]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _parse_rate(name: str, raw: Any) -> Decimal:
    """Parse one rate value, falling back to its default when unusable."""
    value = to_decimal(raw)
    if value is not None and value >= 0:
        return value

    default = DEFAULT_RATES[name]
    logger.warning("settings_value_defaulted", extra={
        "setting": name,
        "raw_value": repr(raw),
        "default": str(default),
    })
    return default


@dataclass(frozen=True)
class LifeRules:
    """
    Life-membership rule thresholds.

    Attributes:
        longevity_years: Consecutive years that qualify at any age
        qualifying_age: Minimum age for the Legacy and Standard rules
        legacy_years: Service years required of members who joined
            before ``legacy_cutoff``
        standard_years: Service years required of members who joined on
            or after ``legacy_cutoff``
        legacy_cutoff: Join dates strictly before this use the Legacy rule
    """

    longevity_years: int = 30
    qualifying_age: int = 62
    legacy_years: int = 10
    standard_years: int = 20
    legacy_cutoff: date = date(2011, 7, 1)

    def __post_init__(self) -> None:
        for attr in ("longevity_years", "qualifying_age", "legacy_years", "standard_years"):
            if getattr(self, attr) <= 0:
                raise ValueError(f"{attr} must be positive")

    def is_legacy(self, original_join_date: date) -> bool:
        """True if the join date falls under the Legacy rule."""
        return original_join_date < self.legacy_cutoff

    def service_years_required(self, original_join_date: date) -> int:
        """Service years the age-based rule requires for this join date."""
        if self.is_legacy(original_join_date):
            return self.legacy_years
        return self.standard_years


DEFAULT_LIFE_RULES = LifeRules()
