"""
Tests for the club_report command-line script.
"""

import pytest

from scripts.club_report import load_roster, main

ROSTER = """\
members:
  - id: M-001
    tier: Regular
    status: Active
    date_of_birth: 1980-04-12
    original_join_date: 2005-09-15
    assessment_years_completed: 5
  - id: M-002
    tier: Absentee
    status: Active
    original_join_date: 2010-01-01
    assessment_years_completed: 5
  - id: M-003
    tier: Life
    status: Active
    original_join_date: 1970-01-01
  - id: M-004
    tier: Regular
    status: Active
    date_of_birth: 1950-01-01
    original_join_date: 1990-01-01
    assessment_years_completed: 5
  - id: M-005
    tier: Regular
    status: Active
    date_of_birth: 1952-01-01
    original_join_date: 1990-01-01
    assessment_years_completed: 5
work_hours:
  - member_id: M-001
    hours_worked: 4.5
    approved: true
  - member_id: M-001
    hours_worked: 3
    approved: false
encumbrances:
  - member_id: M-004
    date_applied: 2024-11-02
    date_removed: null
"""


@pytest.fixture
def roster_path(tmp_path):
    path = tmp_path / "roster.yaml"
    path.write_text(ROSTER)
    return path


def run_report(capsys, roster_path, report, *extra):
    code = main(["--roster", str(roster_path), "--as-of", "2025-06-01", *extra, report])
    return code, capsys.readouterr()


class TestLoadRoster:

    def test_load(self, roster_path):
        roster = load_roster(roster_path)

        assert len(roster.members) == 5
        assert len(roster.work_hours) == 2
        assert roster.encumbered_ids == frozenset({"M-004"})


class TestReports:

    def test_billing(self, capsys, roster_path):
        code, out = run_report(capsys, roster_path, "billing")

        assert code == 0
        assert "fiscal year 2024-2025" in out.out
        assert "451.00" in out.out
        assert "Skipped: 1" in out.out
        assert "Total owed: 1606.00" in out.out
        assert "New Regular member, no hours: 605.00" in out.out

    def test_eligibility(self, capsys, roster_path):
        code, out = run_report(capsys, roster_path, "eligibility")

        assert code == 0
        assert "M-005" in out.out
        assert "Longevity" in out.out
        assert "M-004" not in out.out

    def test_near(self, capsys, roster_path):
        code, out = run_report(capsys, roster_path, "near")

        assert code == 0
        assert "(none)" in out.out

    def test_forecast(self, capsys, roster_path):
        code, out = run_report(capsys, roster_path, "forecast")

        assert code == 0
        assert "M-004" in out.out
        assert "M-003" not in out.out

    def test_calendar(self, capsys, roster_path):
        code, out = run_report(capsys, roster_path, "calendar")

        assert code == 0
        assert "Fiscal year:      2024-2025" in out.out
        assert "3 days until deadline" in out.out
        assert "Review period closed" in out.out

    def test_custom_config(self, capsys, roster_path, tmp_path):
        config = tmp_path / "club.yaml"
        config.write_text("settings:\n  absentee_dues: 80\n")

        code, out = run_report(capsys, roster_path, "billing", "--config", str(config))

        assert code == 0
        assert "88.00" in out.out


class TestErrors:

    def test_missing_roster(self, capsys, tmp_path):
        code = main(["--roster", str(tmp_path / "none.yaml"), "billing"])

        assert code == 1
        assert "Roster file not found" in capsys.readouterr().err

    def test_bad_as_of(self, capsys, roster_path):
        code = main(["--roster", str(roster_path), "--as-of", "June 1st", "billing"])

        assert code == 1
        assert "Invalid --as-of" in capsys.readouterr().err

    def test_missing_config(self, capsys, roster_path, tmp_path):
        code = main([
            "--roster", str(roster_path), "--config", str(tmp_path / "none.yaml"), "billing",
        ])

        assert code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_unknown_report(self, roster_path):
        with pytest.raises(SystemExit):
            main(["--roster", str(roster_path), "ledger"])
