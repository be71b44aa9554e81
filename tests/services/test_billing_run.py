"""
Tests for BillingRunService -- bulk yearly bill generation.
"""

from datetime import date
from decimal import Decimal

import pytest

from club_kernel.domain.clock import DeterministicClock
from club_kernel.domain.member import MemberStatus, Tier
from club_services import BillingRunService


@pytest.fixture
def service(deterministic_clock):
    return BillingRunService(deterministic_clock)


class TestBillingRun:

    def test_bills_only_non_zero_members(self, service, make_member):
        members = [
            make_member(member_id="M-1"),
            make_member(member_id="M-2", tier=Tier.ABSENTEE),
            make_member(member_id="M-3", tier=Tier.LIFE),
            make_member(member_id="M-4", tier=Tier.HONORARY),
            make_member(member_id="M-5", status=MemberStatus.RESIGNED),
        ]

        run = service.run(members)

        assert [b.member_id for b in run.bills] == ["M-1", "M-2"]
        assert run.skipped == 3
        assert run.succeeded
        assert run.total_owed == Decimal("605.00")
        assert run.fiscal_year == "2024-2025"
        assert run.as_of == date(2025, 6, 1)

    def test_hours_and_encumbrances_applied(self, service, make_member):
        members = [
            make_member(member_id="M-1"),
            make_member(member_id="M-2", original_join_date=date(1995, 10, 15)),
        ]

        run = service.run(
            members,
            hours_by_member={"M-1": Decimal("10")},
            encumbered_ids={"M-2"},
        )

        by_id = {b.member_id: b.result for b in run.bills}
        assert by_id["M-1"].total == Decimal("330.00")
        assert by_id["M-2"].dues == Decimal("300.00")

    def test_bad_record_isolated(self, service, make_member):
        members = [
            make_member(member_id="M-1"),
            {"id": "M-2", "tier": "Platinum"},
            {"tier": "Regular"},
            None,
        ]

        run = service.run(members, hours_by_member={"M-1": 0})

        assert [b.member_id for b in run.bills] == ["M-1"]
        assert not run.succeeded
        codes = [(f.member_id, f.error_code) for f in run.failures]
        assert codes == [
            ("M-2", "INVALID_TIER"),
            (None, "INVALID_MEMBER_RECORD"),
            (None, "INVALID_MEMBER_RECORD"),
        ]

    def test_invalid_hours_isolated(self, service, make_member):
        run = service.run(
            [make_member(member_id="M-1"), make_member(member_id="M-2")],
            hours_by_member={"M-1": "-3"},
        )

        assert [b.member_id for b in run.bills] == ["M-2"]
        assert run.failures[0].error_code == "INVALID_WORK_HOURS"

    def test_oversized_hours_isolated(self, service, make_member):
        run = service.run(
            [make_member(member_id="A"), make_member(member_id="B")],
            hours_by_member={"A": "1e30"},
        )

        assert [b.member_id for b in run.bills] == ["B"]
        assert [(f.member_id, f.error_code) for f in run.failures] == [("A", "INVALID_WORK_HOURS")]

    def test_settings_from_mapping(self, deterministic_clock, make_member):
        service = BillingRunService(deterministic_clock, {"regular_dues": 400})

        run = service.run([make_member()])

        assert service.settings.regular_dues == Decimal("400")
        assert run.bills[0].result.dues == Decimal("400.00")

    def test_uses_injected_clock(self, make_member):
        service = BillingRunService(DeterministicClock(date(2025, 11, 20)))
        member = make_member(original_join_date=date(2025, 10, 1))

        run = service.run([member])

        assert run.fiscal_year == "2025-2026"
        assert run.bills[0].result.dues == Decimal("150.00")


class TestMembershipYearRecords:

    def test_record_shape(self, service, make_member):
        run = service.run([make_member(member_id="M-1")], {"M-1": "4.5"})

        (record,) = run.membership_year_records()

        assert record == {
            "member_id": "M-1",
            "fiscal_year": "2024-2025",
            "dues_owed": Decimal("300.00"),
            "assessment_owed": Decimal("0"),
            "work_hours_required": Decimal("10"),
            "work_hours_completed": Decimal("4.5"),
            "work_hours_bought_out": Decimal("5.5"),
            "buyout_owed": Decimal("110.00"),
            "tax_owed": Decimal("41.00"),
            "total_owed": Decimal("451.00"),
            "payment_status": "Unpaid",
        }


class TestBillingRunLogging:

    def test_run_logs_bound_to_run_id(self, service, make_member, captured_logs):
        run = service.run([make_member(), {"id": "M-X", "tier": "Bogus"}])

        logs = captured_logs()
        started = [r for r in logs if r["message"] == "billing_run_started"]
        completed = [r for r in logs if r["message"] == "billing_run_completed"]
        failed = [r for r in logs if r["message"] == "billing_member_failed"]

        assert started[0]["run_id"] == run.run_id
        assert completed[0]["bill_count"] == 1
        assert completed[0]["failure_count"] == 1
        assert failed[0]["failed_member_id"] == "M-X"
        assert failed[0]["exc_type"] == "InvalidTierError"

    def test_member_id_bound_while_pricing(self, service, make_member, captured_logs):
        service.run([make_member(member_id="M-77")])

        completed = [
            r for r in captured_logs() if r["message"] == "billing_calculation_completed"
        ]
        assert completed[0]["member_id"] == "M-77"
        assert "run_id" in completed[0]
        ended = [r for r in captured_logs() if r["message"] == "billing_run_completed"]
        assert "member_id" not in ended[0]
