"""Claiming-age scenarios for one person and strategy menus for couples.

The couple menu is a fixed set of five named strategies. It is a reduced
search over the 9 x 9 grid of claiming-age pairs; `exhaustive=True` adds
the best pair found on the full grid as an extra strategy so the two can
be compared.
"""

import dataclasses
import logging
from typing import List, Sequence, Tuple

from calc.benefit_calculator import BenefitCurveCalculator
from calc.break_even import BreakEvenSolver
from model.BenefitProfile import BenefitProfile, MIN_CLAIMING_AGE, MAX_CLAIMING_AGE
from model.BenefitResult import ClaimingScenario, CoupleStrategy

logger = logging.getLogger(__name__)

CLAIMING_AGES = tuple(range(MIN_CLAIMING_AGE, MAX_CLAIMING_AGE + 1))


class ClaimingStrategyEnumerator:

    def __init__(self, calculator: BenefitCurveCalculator):
        self.calculator = calculator
        self.break_even = BreakEvenSolver(calculator)

    def scenarios(self, pia: float, birth_year: int, life_expectancy: float) -> Tuple[ClaimingScenario, ...]:
        """One scenario per claiming age 62..70."""
        result = []
        for age in CLAIMING_AGES:
            monthly = self.calculator.benefit_at_age(pia, birth_year, age)
            years_receiving = max(0, life_expectancy - age)
            result.append(ClaimingScenario(
                age=age,
                monthly_benefit=monthly,
                annual_benefit=monthly * 12,
                break_even_vs_62=None if age == MIN_CLAIMING_AGE
                else self.break_even.find(pia, birth_year, MIN_CLAIMING_AGE, age),
                cumulative_at_life_expectancy=monthly * 12 * years_receiving,
            ))
        return tuple(result)

    @staticmethod
    def optimal_scenario(scenarios: Sequence[ClaimingScenario]) -> ClaimingScenario:
        """Highest cumulative value at life expectancy; ties go to the earlier age."""
        best = scenarios[0]
        for scenario in scenarios[1:]:
            if scenario.cumulative_at_life_expectancy > best.cumulative_at_life_expectancy:
                best = scenario
        return best

    def _menu(self, person1: BenefitProfile, pia1: float,
              person2: BenefitProfile, pia2: float) -> List[Tuple[str, int, int]]:
        fra1 = self.calculator.full_retirement_age(person1.birth_year).whole_years
        fra2 = self.calculator.full_retirement_age(person2.birth_year).whole_years
        person1_higher = pia1 >= pia2
        return [
            ("Both at 62", 62, 62),
            ("Both at FRA", fra1, fra2),
            ("Both at 70", 70, 70),
            ("Higher earner 70, Lower 62", 70 if person1_higher else 62, 62 if person1_higher else 70),
            ("Higher earner 70, Lower FRA", 70 if person1_higher else fra1, fra2 if person1_higher else 70),
        ]

    def evaluate(self, name: str, person1: BenefitProfile, pia1: float, age1: int,
                 person2: BenefitProfile, pia2: float, age2: int) -> CoupleStrategy:
        """Score one pair of claiming ages by projected lifetime household value."""
        own1 = self.calculator.benefit_at_age(pia1, person1.birth_year, age1)
        own2 = self.calculator.benefit_at_age(pia2, person2.birth_year, age2)
        effective1 = max(own1, self.calculator.spousal_only_benefit(pia2, person1.birth_year, age1))
        effective2 = max(own2, self.calculator.spousal_only_benefit(pia1, person2.birth_year, age2))

        combined = effective1 + effective2
        survivor = max(own1, own2)

        # Both alive until the earlier life expectancy, then the survivor alone
        earlier_le = min(person1.life_expectancy, person2.life_expectancy)
        later_le = max(person1.life_expectancy, person2.life_expectancy)
        start_age = max(age1, age2)
        both_alive_years = max(0, earlier_le - start_age)
        survivor_years = later_le - earlier_le

        return CoupleStrategy(
            name=name,
            person1_age=age1,
            person2_age=age2,
            person1_monthly=effective1,
            person2_monthly=effective2,
            combined_monthly=combined,
            survivor_benefit=survivor,
            lifetime_household=combined * 12 * both_alive_years + survivor * 12 * survivor_years,
        )

    def _best_pair(self, person1: BenefitProfile, pia1: float,
                   person2: BenefitProfile, pia2: float) -> CoupleStrategy:
        best = None
        for age1 in CLAIMING_AGES:
            for age2 in CLAIMING_AGES:
                candidate = self.evaluate(f"Best of all ages {age1}/{age2}",
                                          person1, pia1, age1, person2, pia2, age2)
                if best is None or candidate.lifetime_household > best.lifetime_household:
                    best = candidate
        return best

    def strategies(self, person1: BenefitProfile, pia1: float,
                   person2: BenefitProfile, pia2: float,
                   exhaustive: bool = False) -> Tuple[CoupleStrategy, ...]:
        """Evaluate the strategy menu and flag exactly one as optimal.

        The optimal strategy has the maximum lifetime household value; ties
        resolve to the first one enumerated.
        """
        evaluated = [
            self.evaluate(name, person1, pia1, age1, person2, pia2, age2)
            for name, age1, age2 in self._menu(person1, pia1, person2, pia2)
        ]
        if exhaustive:
            evaluated.append(self._best_pair(person1, pia1, person2, pia2))

        optimal_index = 0
        for i, strategy in enumerate(evaluated):
            if strategy.lifetime_household > evaluated[optimal_index].lifetime_household:
                optimal_index = i
        evaluated[optimal_index] = dataclasses.replace(evaluated[optimal_index], is_optimal=True)

        logger.debug("Optimal couple strategy: %s", evaluated[optimal_index].name)
        return tuple(evaluated)
