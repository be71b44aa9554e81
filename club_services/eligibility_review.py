"""
club_services.eligibility_review -- Life-membership review reports.

Responsibility:
    Run the eligibility, transition and forecast engines over a roster to
    produce the lists the membership committee reviews: members who
    qualify now, members close to qualifying, members who cross a
    threshold during the current billing year, and the multi-year forecast.

Architecture position:
    Services -- orchestration over engines + kernel.
    Time comes from the injected Clock.

Invariants enforced:
    - Encumbered members never appear as eligible.
    - Report order is deterministic: by member id, or by soonest threshold
      for the forecast.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from club_engines.eligibility import EligibilityResult, check_life_eligibility
from club_engines.forecast import (
    DEFAULT_FORECAST_HORIZON,
    DEFAULT_FORECAST_MIN_SERVICE,
    DEFAULT_NEAR_WINDOW,
    LifeForecastRow,
    NearEligibility,
    life_forecast_row,
    near_eligibility,
)
from club_engines.transition import get_life_eligibility_date
from club_kernel.domain.clock import Clock
from club_kernel.domain.member import Member, Tier
from club_kernel.domain.settings import DEFAULT_LIFE_RULES, LifeRules
from club_kernel.exceptions import ClubKernelError
from club_kernel.logging_config import get_logger

logger = get_logger("services.eligibility_review")

MemberInput = Member | Mapping[str, Any]


@dataclass(frozen=True)
class EligibleMember:
    member: Member
    eligibility: EligibilityResult


@dataclass(frozen=True)
class LifeTransition:
    """A member crossing a Life threshold during the billing year."""

    member: Member
    eligibility_date: date


class EligibilityReviewService:
    """Life-membership review over a roster."""

    def __init__(self, clock: Clock, rules: LifeRules = DEFAULT_LIFE_RULES) -> None:
        self._clock = clock
        self._rules = rules

    def _members(self, members: Iterable[MemberInput]) -> list[Member]:
        parsed = []
        for record in members:
            try:
                parsed.append(Member.coerce(record))
            except ClubKernelError as exc:
                logger.warning("life_review_member_skipped", extra={
                    "error_code": exc.code,
                }, exc_info=True)
        return sorted(parsed, key=lambda m: m.member_id)

    def eligible_members(
        self,
        members: Iterable[MemberInput],
        encumbered_ids: Collection[str] = frozenset(),
    ) -> list[EligibleMember]:
        """Members who qualify for Life membership today."""
        as_of = self._clock.today()
        found = []
        for member in self._members(members):
            result = check_life_eligibility(
                member, member.member_id in encumbered_ids, as_of=as_of, rules=self._rules,
            )
            if result.eligible:
                found.append(EligibleMember(member, result))

        logger.info("life_review_eligible", extra={"as_of": as_of, "count": len(found)})
        return found

    def near_eligible_members(
        self,
        members: Iterable[MemberInput],
        encumbered_ids: Collection[str] = frozenset(),
        window: int = DEFAULT_NEAR_WINDOW,
    ) -> list[NearEligibility]:
        """Members within ``window`` years of qualifying."""
        as_of = self._clock.today()
        found = []
        for member in self._members(members):
            near = near_eligibility(
                member,
                member.member_id in encumbered_ids,
                as_of=as_of,
                rules=self._rules,
                window=window,
            )
            if near is not None:
                found.append(near)

        logger.info("life_review_near", extra={
            "as_of": as_of,
            "window": window,
            "count": len(found),
        })
        return found

    def transitions_this_year(
        self,
        members: Iterable[MemberInput],
        encumbered_ids: Collection[str] = frozenset(),
    ) -> list[LifeTransition]:
        """Members who cross a threshold in the current billing year, by date."""
        as_of = self._clock.today()
        found = []
        for member in self._members(members):
            crossing = get_life_eligibility_date(
                member, member.member_id in encumbered_ids, as_of=as_of, rules=self._rules,
            )
            if crossing is not None:
                found.append(LifeTransition(member, crossing))
        found.sort(key=lambda t: (t.eligibility_date, t.member.member_id))
        return found

    def life_forecast(
        self,
        members: Iterable[MemberInput],
        horizon: int = DEFAULT_FORECAST_HORIZON,
        min_service: int = DEFAULT_FORECAST_MIN_SERVICE,
    ) -> list[LifeForecastRow]:
        """Active non-Life members reaching a threshold within ``horizon`` years."""
        as_of = self._clock.today()
        rows = [
            life_forecast_row(member, as_of=as_of, rules=self._rules)
            for member in self._members(members)
            if member.is_active and member.tier != Tier.LIFE
        ]
        rows = [r for r in rows if r.within_horizon(horizon, min_service)]
        rows.sort(key=lambda r: r.sort_key)
        return rows
