"""
Services layer -- orchestration over the club engines.

Services receive a Clock and configuration values via constructor
injection and never read the system clock or configuration files
themselves.
"""

from club_services.billing_run import (
    BillingRun,
    BillingRunService,
    MemberBill,
    MemberBillFailure,
)
from club_services.eligibility_review import (
    EligibilityReviewService,
    EligibleMember,
    LifeTransition,
)

__all__ = [
    "BillingRun",
    "BillingRunService",
    "EligibilityReviewService",
    "EligibleMember",
    "LifeTransition",
    "MemberBill",
    "MemberBillFailure",
]
