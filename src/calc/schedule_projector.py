"""Year-by-year benefit and pension schedule for one or two people.

Each calendar year is classified into a `ScheduleState` from who is alive
and who has started claiming; the state decides how the row is built.
A person's assumed death year is birth year + life expectancy and they are
counted alive through that year. The schedule runs from the earliest claim
year to the latest death year, so every year has at least one survivor.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from calc.benefit_calculator import BenefitCurveCalculator
from model.BenefitProfile import BenefitProfile
from model.BenefitResult import ScheduleState, YearlyScheduleRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonTimeline:
    label: str
    birth_year: int
    claim_year: int
    death_year: int
    life_expectancy: int
    benefit: float  # Own monthly benefit at the chosen claiming age
    pension: float
    pension_survivor_fraction: float

    def is_alive(self, year: int) -> bool:
        return year <= self.death_year

    def is_claiming(self, year: int) -> bool:
        return year >= self.claim_year

    def own_benefit(self, year: int) -> float:
        return self.benefit if self.is_claiming(year) else 0.0


def state_for_year(year: int, first: PersonTimeline, second: PersonTimeline) -> Optional[ScheduleState]:
    """Transition function: the household state in `year`, or None once both have died."""
    alive1, alive2 = first.is_alive(year), second.is_alive(year)
    if alive1 and alive2:
        claiming1, claiming2 = first.is_claiming(year), second.is_claiming(year)
        if claiming1 and claiming2:
            return ScheduleState.BOTH_RECEIVING
        if claiming1 or claiming2:
            return ScheduleState.ONE_RECEIVING
        return ScheduleState.PRE_CLAIM
    if alive1 or alive2:
        return ScheduleState.SURVIVOR_ONLY
    return None


def _row(year, state, person1_age, person2_age, p1_ss, p1_pension, p2_ss, p2_pension, notes) -> YearlyScheduleRow:
    total_monthly = p1_ss + p1_pension + p2_ss + p2_pension
    return YearlyScheduleRow(
        year=year,
        state=state,
        person1_age=person1_age,
        person2_age=person2_age,
        person1_ss=p1_ss,
        person1_pension=p1_pension,
        person2_ss=p2_ss,
        person2_pension=p2_pension,
        total_monthly=total_monthly,
        total_annual=total_monthly * 12,
        notes=notes,
    )


class ScheduleProjector:

    def __init__(self, calculator: BenefitCurveCalculator):
        self.calculator = calculator

    def timeline(self, label: str, profile: BenefitProfile, pia: float) -> PersonTimeline:
        return PersonTimeline(
            label=label,
            birth_year=profile.birth_year,
            claim_year=profile.claim_year,
            death_year=profile.death_year,
            life_expectancy=profile.life_expectancy,
            benefit=self.calculator.benefit_at_age(pia, profile.birth_year, profile.claiming_age),
            pension=profile.monthly_pension,
            pension_survivor_fraction=profile.pension.survivor_fraction if profile.pension else 0.0,
        )

    def project(self, person1: BenefitProfile, pia1: float,
                person2: Optional[BenefitProfile] = None, pia2: Optional[float] = None) -> Tuple[YearlyScheduleRow, ...]:
        first = self.timeline("Person 1", person1, pia1)
        if person2 is None:
            return self._project_single(first)
        second = self.timeline("Person 2", person2, pia2 or 0.0)
        return self._project_couple(first, second)

    def _project_single(self, person: PersonTimeline) -> Tuple[YearlyScheduleRow, ...]:
        # Empty when the assumed death year precedes the claim year
        return tuple(
            _row(year, ScheduleState.SINGLE, year - person.birth_year, None,
                 person.benefit, person.pension, 0.0, 0.0, 'Receiving benefits')
            for year in range(person.claim_year, person.death_year + 1)
        )

    def _project_couple(self, first: PersonTimeline, second: PersonTimeline) -> Tuple[YearlyScheduleRow, ...]:
        start_year = min(first.claim_year, second.claim_year)
        end_year = max(first.death_year, second.death_year)

        rows = []
        for year in range(start_year, end_year + 1):
            state = state_for_year(year, first, second)
            if state is None:
                break
            if state is ScheduleState.SURVIVOR_ONLY:
                rows.append(self._survivor_row(year, first, second))
            else:
                rows.append(self._joint_row(year, state, first, second))

        logger.debug("Projected %d schedule years (%s-%s)", len(rows), start_year, end_year)
        return tuple(rows)

    @staticmethod
    def _joint_row(year: int, state: ScheduleState, first: PersonTimeline, second: PersonTimeline) -> YearlyScheduleRow:
        if state is ScheduleState.BOTH_RECEIVING:
            notes = 'Both receiving benefits'
        elif state is ScheduleState.ONE_RECEIVING:
            receiving, waiting = (first, second) if first.is_claiming(year) else (second, first)
            notes = f'{receiving.label} receiving, {waiting.label} not yet'
        else:
            notes = 'Pre-retirement'
        return _row(year, state, year - first.birth_year, year - second.birth_year,
                    first.own_benefit(year), first.pension,
                    second.own_benefit(year), second.pension, notes)

    @staticmethod
    def _survivor_row(year: int, first: PersonTimeline, second: PersonTimeline) -> YearlyScheduleRow:
        survivor, deceased = (first, second) if first.is_alive(year) else (second, first)

        # The survivor keeps the larger of the two benefits, never both
        survivor_ss = max(deceased.benefit, survivor.own_benefit(year))
        survivor_pension = survivor.pension
        deceased_pension = deceased.pension * deceased.pension_survivor_fraction
        notes = f'{deceased.label} deceased (age {deceased.life_expectancy}), survivor benefits'

        if survivor is first:
            return _row(year, ScheduleState.SURVIVOR_ONLY, year - first.birth_year, None,
                        survivor_ss, survivor_pension, 0.0, deceased_pension, notes)
        return _row(year, ScheduleState.SURVIVOR_ONLY, None, year - second.birth_year,
                    0.0, deceased_pension, survivor_ss, survivor_pension, notes)
