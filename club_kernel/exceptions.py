"""
Typed Exception Hierarchy for the Club Kernel.

===============================================================================
WHEN THE ENGINE RAISES
===============================================================================

The rules engine encodes every business outcome as a normal return value:
"not eligible", "zero billing", "age unknown". Exceptions are reserved for
structurally invalid input that a caller must fix before the engine can say
anything meaningful (a missing member record, an unknown tier, a negative
work-hour total, an unreadable configuration file).

Every exception:
  1. Has a TYPED class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable)
  3. Carries its context as attributes (survives structured logging)

Example:
    try:
        result = compute_billing(record, settings, hours, as_of=today)
    except InvalidMemberRecordError as e:
        log.warning("skipping member", extra={"code": e.code, "field": e.field})

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    ClubKernelError (base)
    |
    +-- MemberError
    |   +-- InvalidMemberRecordError
    |   +-- InvalidTierError
    |   +-- InvalidStatusError
    |
    +-- BillingError
    |   +-- InvalidWorkHoursError
    |
    +-- ConfigurationError
        +-- InvalidConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Member          | INVALID_MEMBER_RECORD       | Record missing or not a mapping
                | INVALID_TIER                | Tier is not one of the five tiers
                | INVALID_STATUS              | Status is not one of the four statuses
----------------|-----------------------------|-----------------------------------------
Billing         | INVALID_WORK_HOURS          | Work-hour total negative or non-numeric
----------------|-----------------------------|-----------------------------------------
Configuration   | INVALID_CONFIGURATION       | YAML section has the wrong shape
===============================================================================
"""

from typing import Any


class ClubKernelError(Exception):
    """
    Base exception for all club kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "CLUB_KERNEL_ERROR"


# Member record exceptions


class MemberError(ClubKernelError):
    """Base exception for member record errors."""

    code: str = "MEMBER_ERROR"


class InvalidMemberRecordError(MemberError):
    """Member record is missing or structurally unusable."""

    code: str = "INVALID_MEMBER_RECORD"

    def __init__(self, reason: str, field: str | None = None):
        self.reason = reason
        self.field = field
        super().__init__(f"Invalid member record: {reason}")


class InvalidTierError(InvalidMemberRecordError):
    """Tier value is not one of the supported membership tiers."""

    code: str = "INVALID_TIER"

    def __init__(self, tier: Any):
        self.tier = str(tier)
        super().__init__(f"unknown tier {tier!r}", field="tier")


class InvalidStatusError(InvalidMemberRecordError):
    """Status value is not one of the supported member statuses."""

    code: str = "INVALID_STATUS"

    def __init__(self, status: Any):
        self.status = str(status)
        super().__init__(f"unknown status {status!r}", field="status")


# Billing exceptions


class BillingError(ClubKernelError):
    """Base exception for billing input errors."""

    code: str = "BILLING_ERROR"


class InvalidWorkHoursError(BillingError):
    """Completed work-hour total is negative or not a number."""

    code: str = "INVALID_WORK_HOURS"

    def __init__(self, value: Any):
        self.value = str(value)
        super().__init__(f"Invalid work hours completed: {value!r}")


# Configuration exceptions


class ConfigurationError(ClubKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class InvalidConfigurationError(ConfigurationError):
    """Configuration file parsed but a section has the wrong shape."""

    code: str = "INVALID_CONFIGURATION"

    def __init__(self, source: str, section: str, reason: str):
        self.source = source
        self.section = section
        self.reason = reason
        super().__init__(
            f"Invalid configuration in {source}, section '{section}': {reason}"
        )
