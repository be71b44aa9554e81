"""
Ledger helpers -- work-hour, encumbrance and payment ledgers.

Pure functions with deterministic behavior. No I/O.

The billing and eligibility engines take pre-aggregated inputs: an
approved-hours total and an encumbrance flag per member.  This module
derives those inputs from the ledger rows the data layer stores, and
classifies payments against a bill.

Usage:
    from club_engines.ledger import (
        WorkHourEntry,
        approved_hours_by_member,
        encumbered_member_ids,
    )

    hours = approved_hours_by_member(entries)
    blocked = encumbered_member_ids(encumbrances)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from club_engines.billing import BillingResult
from club_kernel.domain.dates import parse_local_date
from club_kernel.domain.member import ASSESSMENT_YEARS, Member
from club_kernel.domain.values import ZERO, round_currency, round_hours, to_decimal
from club_kernel.exceptions import InvalidWorkHoursError


# ============================================================================
# Work hours
# ============================================================================


@dataclass(frozen=True)
class WorkHourEntry:
    """
    One logged block of volunteer work.

    Attributes:
        member_id: Member who did the work
        hours: Hours worked, non-negative
        approved: True once an administrator has approved the entry
        work_date: Calendar date the work was done
        work_year: Work-hour year label, e.g. "2025-2026"
    """

    member_id: str
    hours: Decimal
    approved: bool = False
    work_date: date | None = None
    work_year: str | None = None

    def __post_init__(self) -> None:
        hours = to_decimal(self.hours)
        if hours is None or hours < 0:
            raise InvalidWorkHoursError(self.hours)
        object.__setattr__(self, "member_id", str(self.member_id))
        object.__setattr__(self, "hours", hours)
        object.__setattr__(self, "approved", bool(self.approved))
        object.__setattr__(self, "work_date", parse_local_date(self.work_date))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> WorkHourEntry:
        """Build an entry from a ``work_hours`` table row."""
        return cls(
            member_id=record["member_id"],
            hours=record.get("hours_worked", record.get("hours")),
            approved=record.get("approved", False),
            work_date=record.get("hours_date", record.get("work_date")),
            work_year=record.get("work_year"),
        )


@dataclass(frozen=True)
class WorkHourSummary:
    """Hours logged by one member against the yearly requirement."""

    total: Decimal
    approved: Decimal
    pending: Decimal
    short: Decimal
    entry_count: int

    @property
    def requirement_met(self) -> bool:
        return self.short == ZERO


def summarize_work_hours(
    entries: Iterable[WorkHourEntry],
    required: Any,
) -> WorkHourSummary:
    """
    Total, approved and pending hours, plus the shortfall against
    ``required``.  Only approved hours count toward the requirement.
    """
    total = approved = pending = ZERO
    count = 0
    for entry in entries:
        total += entry.hours
        if entry.approved:
            approved += entry.hours
        else:
            pending += entry.hours
        count += 1

    required_hours = to_decimal(required) or ZERO
    return WorkHourSummary(
        total=round_hours(total),
        approved=round_hours(approved),
        pending=round_hours(pending),
        short=round_hours(max(ZERO, required_hours - approved)),
        entry_count=count,
    )


def approved_hours_by_member(
    entries: Iterable[WorkHourEntry],
    work_year: str | None = None,
) -> dict[str, Decimal]:
    """Approved hours per member, optionally restricted to one work year."""
    totals: dict[str, Decimal] = {}
    for entry in entries:
        if not entry.approved:
            continue
        if work_year is not None and entry.work_year != work_year:
            continue
        totals[entry.member_id] = totals.get(entry.member_id, ZERO) + entry.hours
    return {member_id: round_hours(hours) for member_id, hours in totals.items()}


# ============================================================================
# Encumbrances
# ============================================================================


@dataclass(frozen=True)
class EncumbranceRecord:
    """A disciplinary hold; active until ``date_removed`` is set."""

    member_id: str
    date_applied: date | None = None
    date_removed: date | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "member_id", str(self.member_id))
        object.__setattr__(self, "date_applied", parse_local_date(self.date_applied))
        object.__setattr__(self, "date_removed", parse_local_date(self.date_removed))

    @property
    def is_active(self) -> bool:
        return self.date_removed is None


def has_active_encumbrance(records: Iterable[EncumbranceRecord], member_id: str) -> bool:
    """True iff any record for ``member_id`` has no removal date."""
    member_id = str(member_id)
    return any(r.member_id == member_id and r.is_active for r in records)


def encumbered_member_ids(records: Iterable[EncumbranceRecord]) -> frozenset[str]:
    """IDs of every member with at least one active encumbrance."""
    return frozenset(r.member_id for r in records if r.is_active)


# ============================================================================
# Payments
# ============================================================================


class PaymentStatus(str, Enum):
    """Payment state of a yearly bill."""

    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"


def payment_status(total_owed: Any, total_paid: Any) -> PaymentStatus:
    """Classify the amount paid against the amount owed."""
    owed = round_currency(to_decimal(total_owed) or ZERO)
    paid = round_currency(to_decimal(total_paid) or ZERO)
    if paid >= owed:
        return PaymentStatus.PAID
    if paid > ZERO:
        return PaymentStatus.PARTIAL
    return PaymentStatus.UNPAID


def assessment_years_after_payment(
    member: Member,
    billing: BillingResult,
    status: PaymentStatus,
) -> int:
    """
    Assessment counter after a payment is recorded.

    A bill paid in full that included an assessment counts one more
    assessment year, up to the five-year cap.
    """
    years = member.assessment_years_completed
    if status == PaymentStatus.PAID and billing.assessment > ZERO and years < ASSESSMENT_YEARS:
        return years + 1
    return years
