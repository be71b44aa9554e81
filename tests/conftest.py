"""
Pytest fixtures for the club rules engine test suite.

Provides:
- Structured logging configured once per session
- ``captured_logs`` for asserting on emitted JSON log records
- A deterministic clock and member/settings factories
"""

import json
import logging
from datetime import date
from io import StringIO

import pytest

from club_kernel.domain.clock import DeterministicClock
from club_kernel.domain.member import Member, MemberStatus, Tier
from club_kernel.domain.settings import RateSettings
from club_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# Default "today" for engine tests; a Sunday in billing-year Q2
TODAY = date(2025, 6, 1)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture club_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_billing(member, settings, as_of=TODAY)
            logs = captured_logs()
            assert any(r["message"] == "billing_calculation_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("club_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock fixed at TODAY."""
    return DeterministicClock(TODAY)


@pytest.fixture
def default_settings() -> RateSettings:
    return RateSettings()


@pytest.fixture
def make_member():
    """
    Factory for Member values with sensible defaults.

    Defaults describe a long-standing Regular member (joined 2005, born
    1980) who has finished the assessment.
    """

    counter = {"n": 0}

    def _make(**overrides) -> Member:
        counter["n"] += 1
        values = {
            "member_id": f"M-{counter['n']:03d}",
            "tier": Tier.REGULAR,
            "status": MemberStatus.ACTIVE,
            "date_of_birth": date(1980, 4, 12),
            "original_join_date": date(2005, 9, 15),
            "assessment_years_completed": 5,
        }
        values.update(overrides)
        return Member(**values)

    return _make
