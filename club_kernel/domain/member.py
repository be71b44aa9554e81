"""
Member -- Typed member snapshot consumed by the rules engine.

Responsibility:
    Converts the storage layer's member record (a loosely typed mapping) into
    an immutable ``Member`` value at the engine boundary.  Enum values are
    validated, dates parsed as local calendar dates, and the assessment
    counter clamped to its 0-5 range.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - ``tier`` and ``status`` are always enum members.
    - ``date_of_birth`` / ``original_join_date`` are ``date`` or None; an
      unparseable value becomes None (age/years UNKNOWN), never an error.
    - ``0 <= assessment_years_completed <= 5``.
    - ``has_active_encumbrance`` is a real bool; "false", "0" and "no"
      read as False.

Failure modes:
    - InvalidMemberRecordError when the record is missing or not a mapping.
    - InvalidTierError / InvalidStatusError for unknown enum values.
    - InvalidMemberRecordError for an encumbrance flag that is not
      recognizably true or false.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from club_kernel.domain.dates import parse_local_date
from club_kernel.exceptions import (
    InvalidMemberRecordError,
    InvalidStatusError,
    InvalidTierError,
)
from club_kernel.logging_config import get_logger

logger = get_logger("domain.member")

ASSESSMENT_YEARS = 5


class Tier(str, Enum):
    """Membership tiers."""

    REGULAR = "Regular"
    ABSENTEE = "Absentee"
    LIFE = "Life"
    HONORARY = "Honorary"
    WAITLIST = "Waitlist"  # pre-member, never billed


class MemberStatus(str, Enum):
    """Member lifecycle status. Only ACTIVE members are billed or reviewed."""

    ACTIVE = "Active"
    DECEASED = "Deceased"
    RESIGNED = "Resigned"
    EXPELLED = "Expelled"


NON_BILLED_TIERS = frozenset({Tier.LIFE, Tier.HONORARY, Tier.WAITLIST})


@dataclass(frozen=True)
class Member:
    """
    Immutable member snapshot for one calculation.

    Attributes:
        member_id: Unique member identifier
        tier: Membership tier
        status: Lifecycle status
        date_of_birth: Calendar date of birth, None if unknown
        original_join_date: Calendar date of original admission
        assessment_years_completed: Paid assessment years, 0-5
        has_active_encumbrance: Disciplinary hold blocking Life conversion
    """

    member_id: str
    tier: Tier
    status: MemberStatus = MemberStatus.ACTIVE
    date_of_birth: date | None = None
    original_join_date: date | None = None
    assessment_years_completed: int = 0
    has_active_encumbrance: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "member_id", str(self.member_id))
        object.__setattr__(self, "tier", _parse_tier(self.tier))
        object.__setattr__(self, "status", _parse_status(self.status))
        for attr in ("date_of_birth", "original_join_date"):
            raw = getattr(self, attr)
            parsed = parse_local_date(raw)
            if raw is not None and parsed is None:
                logger.warning("member_date_invalid", extra={
                    "member_id": self.member_id,
                    "field": attr,
                    "raw_value": repr(raw),
                })
            object.__setattr__(self, attr, parsed)
        object.__setattr__(
            self,
            "assessment_years_completed",
            _clamp_assessment_years(self.assessment_years_completed),
        )
        object.__setattr__(
            self, "has_active_encumbrance", _parse_flag(self.has_active_encumbrance),
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any] | None) -> Member:
        """
        Build a Member from a storage-layer record.

        Accepts ``id`` or ``member_id`` as the identifier and the column
        names of the members table for everything else.

        Raises:
            InvalidMemberRecordError: If the record is None, not a mapping,
                or has no identifier.
            InvalidTierError / InvalidStatusError: For unknown enum values.
        """
        if record is None:
            raise InvalidMemberRecordError("record is missing")
        if not isinstance(record, Mapping):
            raise InvalidMemberRecordError(
                f"expected a mapping, got {type(record).__name__}"
            )

        member_id = record.get("member_id", record.get("id"))
        if member_id is None or str(member_id).strip() == "":
            raise InvalidMemberRecordError("member identifier is missing", field="member_id")
        if record.get("tier") is None:
            raise InvalidTierError(None)

        return cls(
            member_id=str(member_id),
            tier=record["tier"],
            status=record.get("status") or MemberStatus.ACTIVE,
            date_of_birth=record.get("date_of_birth"),
            original_join_date=record.get("original_join_date"),
            assessment_years_completed=record.get("assessment_years_completed") or 0,
            has_active_encumbrance=record.get("has_active_encumbrance", False),
        )

    @classmethod
    def coerce(cls, member: Member | Mapping[str, Any] | None) -> Member:
        """Accept either a Member or a raw record."""
        if isinstance(member, Member):
            return member
        return cls.from_record(member)

    @property
    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    @property
    def owes_assessment(self) -> bool:
        """True while fewer than five assessment years have been paid."""
        return self.assessment_years_completed < ASSESSMENT_YEARS


def _parse_tier(value: Any) -> Tier:
    if isinstance(value, Tier):
        return value
    try:
        return Tier(str(value).strip().title())
    except ValueError:
        raise InvalidTierError(value) from None


def _parse_status(value: Any) -> MemberStatus:
    if isinstance(value, MemberStatus):
        return value
    try:
        return MemberStatus(str(value).strip().title())
    except ValueError:
        raise InvalidStatusError(value) from None


def _clamp_assessment_years(value: Any) -> int:
    try:
        years = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(ASSESSMENT_YEARS, years))


_TRUE_TEXT = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_TEXT = frozenset({"false", "f", "no", "n", "0", ""})


def _parse_flag(value: Any) -> bool:
    """Boolean column value; storage layers hand these over as text or 0/1."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    raise InvalidMemberRecordError(
        f"has_active_encumbrance is not a boolean: {value!r}",
        field="has_active_encumbrance",
    )
