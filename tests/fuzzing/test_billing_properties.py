"""
Property-based tests for the billing and eligibility engines.

Invariants checked over generated members, dates and rates:
- Totals are never negative and always equal subtotal plus tax
- Pricing the same member twice gives the same bill
- The shortfall is the required hours less the completed hours, floored at 0
- Currency is held to cents and hours to tenths
- Proration never charges more than the full year
- An encumbered member is never Life-eligible
- Longevity is monotonic in service years
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from club_engines.billing import compute_billing
from club_engines.eligibility import check_life_eligibility
from club_kernel.domain.member import Member, MemberStatus, Tier
from club_kernel.domain.settings import RateSettings
from club_kernel.domain.values import ZERO, round_currency

CENT = Decimal("0.01")
TENTH = Decimal("0.1")

dates = st.dates(min_value=date(1930, 1, 1), max_value=date(2040, 12, 31))
as_of_dates = st.dates(min_value=date(2000, 1, 1), max_value=date(2040, 12, 31))
rates = st.decimals(min_value=0, max_value=1000, places=2, allow_nan=False, allow_infinity=False)
hours = st.decimals(min_value=0, max_value=40, places=2, allow_nan=False, allow_infinity=False)


@st.composite
def members(draw, tiers=tuple(Tier)):
    return Member(
        member_id=draw(st.text(alphabet="0123456789", min_size=1, max_size=6)),
        tier=draw(st.sampled_from(tiers)),
        status=draw(st.sampled_from(list(MemberStatus))),
        date_of_birth=draw(st.one_of(st.none(), dates)),
        original_join_date=draw(st.one_of(st.none(), dates)),
        assessment_years_completed=draw(st.integers(min_value=0, max_value=5)),
        has_active_encumbrance=draw(st.booleans()),
    )


@st.composite
def rate_settings(draw):
    return RateSettings(
        regular_dues=draw(rates),
        absentee_dues=draw(rates),
        work_hours_required=draw(st.decimals(min_value=0, max_value=40, places=1)),
        buyout_rate=draw(rates),
        assessment_amount=draw(rates),
        cabaret_tax_rate=draw(st.decimals(min_value=0, max_value=1, places=3)),
    )


class TestBillingProperties:

    @given(member=members(), settings_=rate_settings(), completed=hours, as_of=as_of_dates)
    @settings(max_examples=300, suppress_health_check=[HealthCheck.too_slow])
    def test_totals_consistent(self, member, settings_, completed, as_of):
        result = compute_billing(member, settings_, completed, as_of=as_of)

        assert result.total >= 0
        assert result.total == result.subtotal + result.tax
        assert result.subtotal == result.dues + result.assessment + result.buyout
        for amount in (result.dues, result.assessment, result.buyout, result.tax, result.total):
            assert amount == amount.quantize(CENT)
        for hrs in (result.work_hours_required, result.work_hours_short):
            assert hrs == hrs.quantize(TENTH)

    @given(member=members(), settings_=rate_settings(), completed=hours, as_of=as_of_dates)
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_repeat_call_gives_same_bill(self, member, settings_, completed, as_of):
        first = compute_billing(member, settings_, completed, as_of=as_of)
        second = compute_billing(member, settings_, completed, as_of=as_of)

        assert first == second

    @given(member=members(), settings_=rate_settings(), completed=hours, as_of=as_of_dates)
    @settings(max_examples=300, suppress_health_check=[HealthCheck.too_slow])
    def test_shortfall_is_required_minus_completed(self, member, settings_, completed, as_of):
        result = compute_billing(member, settings_, completed, as_of=as_of)

        assert result.work_hours_short == max(
            ZERO, result.work_hours_required - result.work_hours_completed
        )

    @given(member=members(), settings_=rate_settings(), completed=hours, as_of=as_of_dates)
    @settings(max_examples=300, suppress_health_check=[HealthCheck.too_slow])
    def test_total_is_taxed_subtotal_within_a_cent(self, member, settings_, completed, as_of):
        result = compute_billing(member, settings_, completed, as_of=as_of)

        subtotal = round_currency(result.dues + result.assessment + result.buyout)
        expected = round_currency(subtotal * (1 + settings_.cabaret_tax_rate))
        assert abs(result.total - expected) <= CENT

    @given(member=members(tiers=(Tier.REGULAR,)), settings_=rate_settings(), as_of=as_of_dates)
    @settings(max_examples=300, suppress_health_check=[HealthCheck.too_slow])
    def test_proration_never_exceeds_full_year(self, member, settings_, as_of):
        result = compute_billing(member, settings_, as_of=as_of)

        assert result.dues <= settings_.regular_dues.quantize(CENT)
        assert result.work_hours_required <= settings_.work_hours_required

    @given(
        member=members(tiers=(Tier.LIFE, Tier.HONORARY, Tier.WAITLIST)),
        completed=hours,
        as_of=as_of_dates,
    )
    def test_non_billed_tiers_owe_nothing(self, member, completed, as_of):
        assert compute_billing(member, RateSettings(), completed, as_of=as_of).is_zero


class TestEligibilityProperties:

    @given(member=members(), as_of=as_of_dates)
    @settings(max_examples=300)
    def test_encumbered_never_eligible(self, member, as_of):
        assert not check_life_eligibility(member, True, as_of=as_of).eligible

    @given(
        years=st.integers(min_value=30, max_value=70),
        as_of=st.dates(min_value=date(2000, 1, 1), max_value=date(2040, 12, 31)),
        born=st.one_of(st.none(), dates),
    )
    def test_thirty_years_always_eligible(self, years, as_of, born):
        anchor = as_of - timedelta(days=1) if (as_of.month, as_of.day) == (2, 29) else as_of
        joined = anchor.replace(year=anchor.year - years)
        member = Member(
            member_id="P-1",
            tier=Tier.REGULAR,
            date_of_birth=born,
            original_join_date=joined,
        )

        result = check_life_eligibility(member, False, as_of=as_of)

        assert result.eligible
        assert result.consecutive_years >= 30
