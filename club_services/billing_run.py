"""
club_services.billing_run -- Bulk yearly bill generation.

Responsibility:
    Price every member on a roster for the current billing year and package
    the non-zero bills as membership-year records for the data layer.  All
    pricing lives in ``club_engines.billing``; this service adds the roster
    loop, failure isolation and run-level logging.

Architecture position:
    Services -- orchestration over engines + kernel.
    Time comes from the injected Clock; rates and thresholds are passed in.

Invariants enforced:
    - One member's bad record never aborts the run: structural errors are
      caught per member, logged with exc_info and reported as failures.
    - Only bills with a positive total are returned; Life, Honorary,
      Waitlist and inactive members are counted as skipped.
    - Persisting the records is the caller's job; this service has no I/O.

Audit relevance:
    Every run gets a run_id bound into LogContext, and logs
    ``billing_run_started`` / ``billing_run_completed`` with counts and the
    grand total.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import uuid4

from club_engines.billing import BillingResult, compute_billing
from club_engines.calendar import fiscal_year_label
from club_engines.ledger import PaymentStatus
from club_kernel.domain.clock import Clock
from club_kernel.domain.member import Member, Tier
from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules, RateSettings
from club_kernel.domain.values import ZERO
from club_kernel.exceptions import ClubKernelError
from club_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.billing_run")


@dataclass(frozen=True)
class MemberBill:
    """A priced, non-zero bill for one member."""

    member_id: str
    tier: Tier
    result: BillingResult

    def to_membership_year_record(self, fiscal_year: str) -> dict[str, Any]:
        """Row for the data layer's ``membership_years`` table."""
        r = self.result
        return {
            "member_id": self.member_id,
            "fiscal_year": fiscal_year,
            "dues_owed": r.dues,
            "assessment_owed": r.assessment,
            "work_hours_required": r.work_hours_required,
            "work_hours_completed": r.work_hours_completed,
            "work_hours_bought_out": r.work_hours_short,
            "buyout_owed": r.buyout,
            "tax_owed": r.tax,
            "total_owed": r.total,
            "payment_status": PaymentStatus.UNPAID.value,
        }


@dataclass(frozen=True)
class MemberBillFailure:
    """A member whose record could not be priced."""

    member_id: str | None
    error_code: str
    message: str


@dataclass(frozen=True)
class BillingRun:
    """Outcome of one bulk billing run."""

    run_id: str
    as_of: date
    fiscal_year: str
    bills: tuple[MemberBill, ...]
    failures: tuple[MemberBillFailure, ...]
    skipped: int

    @property
    def total_owed(self) -> Decimal:
        return sum((b.result.total for b in self.bills), ZERO)

    @property
    def succeeded(self) -> bool:
        return not self.failures

    def membership_year_records(self) -> list[dict[str, Any]]:
        return [b.to_membership_year_record(self.fiscal_year) for b in self.bills]


def _record_member_id(record: Any) -> str | None:
    if isinstance(record, Member):
        return record.member_id
    if isinstance(record, Mapping):
        raw = record.get("member_id", record.get("id"))
        return None if raw is None else str(raw)
    return None


class BillingRunService:
    """
    Generates yearly bills for a roster.

    Contract:
        Receives the Clock, RateSettings and LifeRules via constructor
        injection.
    Guarantees:
        - ``run`` prices every record exactly once and never raises for a
          member-level data problem.
        - Repeated runs with the same inputs and clock produce the same
          bills (run_id aside).
    """

    def __init__(
        self,
        clock: Clock,
        settings: RateSettings | Mapping[str, Any] | None = None,
        rules: LifeRules = DEFAULT_LIFE_RULES,
    ) -> None:
        self._clock = clock
        self._settings = RateSettings.coerce(settings)
        self._rules = rules

    @property
    def settings(self) -> RateSettings:
        return self._settings

    def run(
        self,
        members: Iterable[Member | Mapping[str, Any]],
        hours_by_member: Mapping[str, Any] | None = None,
        encumbered_ids: Collection[str] = frozenset(),
    ) -> BillingRun:
        """
        Price every member in ``members``.

        Args:
            members: Members or storage-layer member records.
            hours_by_member: Approved work hours keyed by member id.
            encumbered_ids: Members with an active encumbrance.

        Returns:
            BillingRun with the non-zero bills and any per-member failures.
        """
        as_of = self._clock.today()
        fiscal_year = fiscal_year_label(as_of)
        hours_by_member = hours_by_member or {}
        run_id = str(uuid4())

        bills: list[MemberBill] = []
        failures: list[MemberBillFailure] = []
        skipped = 0

        with LogContext.bind(run_id=run_id):
            logger.info("billing_run_started", extra={
                "as_of": as_of,
                "fiscal_year": fiscal_year,
            })

            for record in members:
                member_id = _record_member_id(record)
                with LogContext.bind(member_id=member_id):
                    try:
                        member = Member.coerce(record)
                        result = compute_billing(
                            member,
                            self._settings,
                            hours_by_member.get(member.member_id, 0),
                            member.member_id in encumbered_ids,
                            as_of=as_of,
                            rules=self._rules,
                        )
                    except ClubKernelError as exc:
                        logger.warning("billing_member_failed", extra={
                            "failed_member_id": member_id,
                            "error_code": exc.code,
                        }, exc_info=True)
                        failures.append(MemberBillFailure(
                            member_id=member_id,
                            error_code=exc.code,
                            message=str(exc),
                        ))
                        continue

                if result.total > ZERO:
                    bills.append(MemberBill(member.member_id, member.tier, result))
                else:
                    skipped += 1

            run = BillingRun(
                run_id=run_id,
                as_of=as_of,
                fiscal_year=fiscal_year,
                bills=tuple(bills),
                failures=tuple(failures),
                skipped=skipped,
            )

            logger.info("billing_run_completed", extra={
                "fiscal_year": fiscal_year,
                "bill_count": len(run.bills),
                "failure_count": len(run.failures),
                "skipped": skipped,
                "total_owed": str(run.total_owed),
            })
        return run
