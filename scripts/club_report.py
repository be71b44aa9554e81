#!/usr/bin/env python3
"""
Print club billing and Life-eligibility reports from a YAML roster.

The roster file holds the records the data layer would normally supply:

    members:
      - id: M-001
        tier: Regular
        status: Active
        date_of_birth: 1963-07-01
        original_join_date: 2015-07-01
        assessment_years_completed: 5
    work_hours:
      - member_id: M-001
        hours_worked: 4.5
        approved: true
    encumbrances:
      - member_id: M-002
        date_applied: 2024-11-02
        date_removed: null

Reports:
    billing      bills for every member with a non-zero total
    eligibility  members who qualify for Life membership today
    near         members within two years of qualifying
    forecast     members reaching a Life threshold within five years
    calendar     fiscal/work/billing periods and the open windows

Usage:
    python3 scripts/club_report.py --roster roster.yaml billing
    python3 scripts/club_report.py --roster roster.yaml --as-of 2025-06-01 eligibility
    python3 scripts/club_report.py --roster roster.yaml --config club.yaml forecast
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from club_config import ClubConfiguration, load_club_config  # noqa: E402
from club_engines.billing import billing_preview  # noqa: E402
from club_engines.calendar import (  # noqa: E402
    billing_quarter,
    billing_year_bounds,
    collection_period_status,
    fiscal_year_label,
    work_hour_review_status,
    work_year_label,
)
from club_engines.ledger import (  # noqa: E402
    EncumbranceRecord,
    WorkHourEntry,
    approved_hours_by_member,
    encumbered_member_ids,
)
from club_kernel.domain.clock import Clock, DeterministicClock, SystemClock  # noqa: E402
from club_kernel.domain.dates import format_date, parse_local_date  # noqa: E402
from club_kernel.logging_config import configure_logging  # noqa: E402
from club_services import BillingRunService, EligibilityReviewService  # noqa: E402

REPORTS = ("billing", "eligibility", "near", "forecast", "calendar")


@dataclass
class Roster:
    members: list[dict[str, Any]] = field(default_factory=list)
    work_hours: list[WorkHourEntry] = field(default_factory=list)
    encumbrances: list[EncumbranceRecord] = field(default_factory=list)

    @property
    def encumbered_ids(self) -> frozenset[str]:
        return encumbered_member_ids(self.encumbrances)


def load_roster(path: Path) -> Roster:
    """Read a roster YAML file."""
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Roster {path} must be a mapping")

    return Roster(
        members=list(data.get("members") or []),
        work_hours=[WorkHourEntry.from_record(r) for r in data.get("work_hours") or []],
        encumbrances=[
            EncumbranceRecord(
                member_id=r["member_id"],
                date_applied=r.get("date_applied"),
                date_removed=r.get("date_removed"),
                reason=r.get("reason"),
            )
            for r in data.get("encumbrances") or []
        ],
    )


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def render_billing(roster: Roster, config: ClubConfiguration, clock: Clock) -> str:
    service = BillingRunService(clock, config.settings, config.life_rules)
    run = service.run(
        roster.members,
        approved_hours_by_member(roster.work_hours),
        roster.encumbered_ids,
    )

    lines = [
        f"Billing -- fiscal year {run.fiscal_year} (as of {run.as_of.isoformat()})",
        f"{'Member':<10} {'Tier':<9} {'Dues':>9} {'Assess':>8} {'Short':>6} "
        f"{'Buyout':>8} {'Tax':>8} {'Total':>9}",
    ]
    for bill in run.bills:
        r = bill.result
        lines.append(
            f"{bill.member_id:<10} {bill.tier.value:<9} {r.dues:>9} {r.assessment:>8} "
            f"{r.work_hours_short:>6} {r.buyout:>8} {r.tax:>8} {r.total:>9}"
        )
    lines.append(f"Bills: {len(run.bills)}  Skipped: {run.skipped}  Total owed: {run.total_owed}")
    for failure in run.failures:
        lines.append(f"FAILED {failure.member_id or '?'}: [{failure.error_code}] {failure.message}")

    preview = billing_preview(config.settings)
    lines.append(f"New Regular member, no hours: {preview.total}")
    return "\n".join(lines)


def render_eligibility(roster: Roster, config: ClubConfiguration, clock: Clock) -> str:
    service = EligibilityReviewService(clock, config.life_rules)
    eligible = service.eligible_members(roster.members, roster.encumbered_ids)
    transitions = service.transitions_this_year(roster.members, roster.encumbered_ids)

    lines = [f"Life eligible -- as of {clock.today().isoformat()}"]
    for item in eligible:
        lines.append(f"{item.member.member_id:<10} {item.eligibility.rule.value:<10} {item.eligibility.reason}")
    if not eligible:
        lines.append("(none)")

    lines.append("Becoming eligible this billing year")
    for t in transitions:
        lines.append(f"{t.member.member_id:<10} {format_date(t.eligibility_date)}")
    if not transitions:
        lines.append("(none)")
    return "\n".join(lines)


def render_near(roster: Roster, config: ClubConfiguration, clock: Clock) -> str:
    service = EligibilityReviewService(clock, config.life_rules)
    near = service.near_eligible_members(roster.members, roster.encumbered_ids)

    lines = [f"Near Life eligibility -- as of {clock.today().isoformat()}"]
    for n in near:
        age = "?" if n.age is None else n.age
        lines.append(f"{n.member_id:<10} age {age:<4} years {n.consecutive_years:<4} {n.message}")
    if not near:
        lines.append("(none)")
    return "\n".join(lines)


def render_forecast(roster: Roster, config: ClubConfiguration, clock: Clock) -> str:
    service = EligibilityReviewService(clock, config.life_rules)
    rows = service.life_forecast(roster.members)

    def _show(value: int | None) -> str:
        return "?" if value is None else str(value)

    lines = [
        f"Life eligibility forecast -- as of {clock.today().isoformat()}",
        f"{'Member':<10} {'Tier':<9} {'Age':>4} {'Years':>6} {'To 30y':>7} {'To 62':>6}",
    ]
    for r in rows:
        lines.append(
            f"{r.member_id:<10} {r.tier.value:<9} {_show(r.age):>4} "
            f"{_show(r.consecutive_years):>6} {_show(r.years_to_longevity):>7} "
            f"{_show(r.years_to_age):>6}"
        )
    if not rows:
        lines.append("(none)")
    return "\n".join(lines)


def render_calendar(clock: Clock) -> str:
    as_of = clock.today()
    start, end = billing_year_bounds(as_of)
    collection = collection_period_status(as_of)
    review = work_hour_review_status(as_of)
    return "\n".join([
        f"As of:            {format_date(as_of)}",
        f"Fiscal year:      {fiscal_year_label(as_of)}",
        f"Work-hour year:   {work_year_label(as_of)}",
        f"Billing year:     {format_date(start)} - {format_date(end)} (Q{billing_quarter(as_of)})",
        f"Collection:       {collection.status.value} -- {collection.message}",
        f"Work-hour review: {review.status.value} -- {review.message}",
    ])


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Club billing and Life-eligibility reports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--roster", type=Path, required=True, help="Path to roster YAML")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Club configuration YAML (default: bundled club_config/sets/default.yaml)",
    )
    parser.add_argument(
        "--as-of",
        type=str,
        default=None,
        help="Report date YYYY-MM-DD (default: today)",
    )
    parser.add_argument("report", choices=REPORTS, help="Report to print")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.roster.exists():
        print(f"ERROR: Roster file not found: {args.roster}", file=sys.stderr)
        return 1

    clock: Clock = SystemClock()
    if args.as_of:
        as_of = parse_local_date(args.as_of)
        if as_of is None:
            print(f"ERROR: Invalid --as-of date (use YYYY-MM-DD): {args.as_of}", file=sys.stderr)
            return 1
        clock = DeterministicClock(as_of)

    try:
        config = load_club_config(args.config)
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {args.config}", file=sys.stderr)
        return 1

    configure_logging(level=config.logging.level)

    roster = load_roster(args.roster)
    if args.report == "billing":
        text = render_billing(roster, config, clock)
    elif args.report == "eligibility":
        text = render_eligibility(roster, config, clock)
    elif args.report == "near":
        text = render_near(roster, config, clock)
    elif args.report == "forecast":
        text = render_forecast(roster, config, clock)
    else:
        text = render_calendar(clock)

    print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
