import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from tax.SocialSecurityDetails import SocialSecurityDetails
from calc.benefit_calculator import BenefitCurveCalculator
from calc.schedule_projector import ScheduleProjector, PersonTimeline, state_for_year
from model.BenefitProfile import BenefitProfile, NonCoveredPension
from model.BenefitResult import ScheduleState


@pytest.fixture(scope="module")
def projector():
    return ScheduleProjector(BenefitCurveCalculator(SocialSecurityDetails()))


def _timeline(claim_year, death_year, benefit=1000.0):
    return PersonTimeline(label="P", birth_year=1960, claim_year=claim_year, death_year=death_year,
                          life_expectancy=death_year - 1960, benefit=benefit, pension=0.0,
                          pension_survivor_fraction=0.0)


class TestStateForYear:

    def test_transitions(self):
        first = _timeline(claim_year=2025, death_year=2040)
        second = _timeline(claim_year=2030, death_year=2045)
        assert state_for_year(2024, first, second) is ScheduleState.PRE_CLAIM
        assert state_for_year(2025, first, second) is ScheduleState.ONE_RECEIVING
        assert state_for_year(2030, first, second) is ScheduleState.BOTH_RECEIVING
        assert state_for_year(2040, first, second) is ScheduleState.BOTH_RECEIVING
        assert state_for_year(2041, first, second) is ScheduleState.SURVIVOR_ONLY
        assert state_for_year(2045, first, second) is ScheduleState.SURVIVOR_ONLY
        assert state_for_year(2046, first, second) is None


class TestCoupleSchedule:

    def test_survivor_keeps_higher_benefit(self, projector):
        # A (PIA 2,400) dies at 80; B (PIA 1,200) survives
        a = BenefitProfile(birth_year=1960, pia=2400, claiming_age=67, life_expectancy=80)
        b = BenefitProfile(birth_year=1960, pia=1200, claiming_age=67, life_expectancy=90)
        schedule = projector.project(a, 2400, b, 1200)

        assert schedule[0].year == 2027
        assert schedule[-1].year == 2050
        assert [r.year for r in schedule] == list(range(2027, 2051))

        for row in schedule:
            if row.year <= 2040:
                assert row.state is ScheduleState.BOTH_RECEIVING
                assert row.person1_ss == pytest.approx(2400)
                assert row.person2_ss == pytest.approx(1200)
            else:
                assert row.state is ScheduleState.SURVIVOR_ONLY
                assert row.person1_age is None
                assert row.person1_ss == 0.0
                assert row.person2_ss == pytest.approx(2400)
                assert row.total_monthly == pytest.approx(2400)
                assert "Person 1 deceased (age 80)" in row.notes

    def test_one_receiving_before_second_claim(self, projector):
        a = BenefitProfile(birth_year=1960, pia=2000, claiming_age=62, life_expectancy=85)
        b = BenefitProfile(birth_year=1962, pia=1500, claiming_age=67, life_expectancy=85)
        schedule = projector.project(a, 2000, b, 1500)

        first = schedule[0]
        assert first.year == 2022
        assert first.state is ScheduleState.ONE_RECEIVING
        assert first.person1_ss == pytest.approx(1400)
        assert first.person2_ss == 0.0
        assert first.person2_age == 60
        assert first.notes == "Person 1 receiving, Person 2 not yet"
        assert schedule[2029 - 2022].state is ScheduleState.BOTH_RECEIVING

    def test_pension_scaled_after_holder_dies(self, projector):
        a = BenefitProfile(birth_year=1960, pia=2000, claiming_age=67, life_expectancy=90)
        b = BenefitProfile(birth_year=1960, pia=800, claiming_age=67, life_expectancy=75,
                           pension=NonCoveredPension(monthly_amount=900, survivor_percent=50))
        schedule = {row.year: row for row in projector.project(a, 2000, b, 800)}

        assert schedule[2035].person2_pension == pytest.approx(900)
        assert schedule[2035].total_monthly == pytest.approx(2000 + 800 + 900)

        after = schedule[2036]
        assert after.state is ScheduleState.SURVIVOR_ONLY
        assert after.person2_age is None
        assert after.person2_ss == 0.0
        assert after.person2_pension == pytest.approx(450)
        assert after.person1_ss == pytest.approx(2000)
        assert after.total_monthly == pytest.approx(2450)
        assert after.total_annual == pytest.approx(2450 * 12)

    def test_survivor_own_pension_unchanged(self, projector):
        a = BenefitProfile(birth_year=1960, pia=2400, claiming_age=67, life_expectancy=80)
        b = BenefitProfile(birth_year=1960, pia=0, claiming_age=67, life_expectancy=90,
                           pension=NonCoveredPension(monthly_amount=1000, survivor_percent=0))
        schedule = {row.year: row for row in projector.project(a, 2400, b, 0)}
        assert schedule[2045].person2_pension == pytest.approx(1000)
        assert schedule[2045].person1_pension == 0.0

    def test_survivor_benefit_before_survivor_claims(self, projector):
        a = BenefitProfile(birth_year=1955, pia=2000, claiming_age=62, life_expectancy=70)
        b = BenefitProfile(birth_year=1965, pia=1000, claiming_age=70, life_expectancy=90)
        schedule = {row.year: row for row in projector.project(a, 2000, b, 1000)}
        a_benefit = projector.calculator.benefit_at_age(2000, 1955, 62)

        assert schedule[2026].state is ScheduleState.SURVIVOR_ONLY
        assert schedule[2026].person2_ss == pytest.approx(a_benefit)

    def test_schedule_has_no_gaps(self, projector):
        a = BenefitProfile(birth_year=1958, pia=1800, claiming_age=64, life_expectancy=92)
        b = BenefitProfile(birth_year=1963, pia=2200, claiming_age=70, life_expectancy=78)
        schedule = projector.project(a, 1800, b, 2200)
        years = [r.year for r in schedule]
        assert years == list(range(1958 + 64, 1958 + 92 + 1))
        for row in schedule:
            assert row.total_monthly == pytest.approx(
                row.person1_ss + row.person1_pension + row.person2_ss + row.person2_pension)


class TestSingleSchedule:

    def test_claim_through_death_year(self, projector):
        person = BenefitProfile(birth_year=1960, pia=2000, claiming_age=70, life_expectancy=85,
                                pension=NonCoveredPension(monthly_amount=500))
        schedule = projector.project(person, 2000)
        assert [r.year for r in schedule] == list(range(2030, 2046))
        assert all(r.state is ScheduleState.SINGLE for r in schedule)
        assert schedule[0].person1_age == 70
        assert schedule[0].person2_age is None
        assert schedule[0].total_monthly == pytest.approx(2480 + 500)
        assert schedule[0].total_annual == pytest.approx((2480 + 500) * 12)

    def test_empty_when_death_precedes_claim(self, projector):
        person = BenefitProfile(birth_year=1960, pia=2000, claiming_age=67, life_expectancy=64)
        assert projector.project(person, 2000) == ()
