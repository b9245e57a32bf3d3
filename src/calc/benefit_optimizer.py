"""Entry point for the claiming analysis of one person or a couple."""

import logging
from typing import Optional

from calc.benefit_calculator import BenefitCurveCalculator
from calc.claiming_strategies import ClaimingStrategyEnumerator
from calc.pension_offset import PensionOffsetComparator
from calc.schedule_projector import ScheduleProjector
from model.BenefitProfile import BenefitProfile
from model.BenefitResult import BenefitOptimization
from tax.SocialSecurityDetails import SocialSecurityDetails

logger = logging.getLogger(__name__)


class BenefitOptimizer:
    """Builds a `BenefitOptimization` from one or two benefit profiles.

    Holds no state between calls; the same profiles always produce the same
    result.
    """

    def __init__(self, calculator: BenefitCurveCalculator):
        self.calculator = calculator
        self.enumerator = ClaimingStrategyEnumerator(calculator)
        self.projector = ScheduleProjector(calculator)
        self.offsets = PensionOffsetComparator(calculator)

    def optimize(self, profile: BenefitProfile, spouse: Optional[BenefitProfile] = None,
                 exhaustive: bool = False) -> BenefitOptimization:
        """Analyze claiming ages for `profile`, and the household when `spouse` is given.

        Args:
            profile: The first (or only) person.
            spouse: The second person of a two-person household.
            exhaustive: Also search every pair of claiming ages for couples.

        Returns:
            BenefitOptimization; the couple-only fields stay None for one person.
        """
        pia = self.calculator.resolve_pia(profile)
        fra = self.calculator.full_retirement_age(profile.birth_year)
        scenarios = self.enumerator.scenarios(pia, profile.birth_year, profile.life_expectancy)
        optimal = self.enumerator.optimal_scenario(scenarios)

        if spouse is None:
            schedule = self.projector.project(profile, pia)
            logger.debug("Optimal claiming age %s for birth year %s", optimal.age, profile.birth_year)
            return BenefitOptimization(
                pia=pia,
                fra=fra,
                scenarios=scenarios,
                optimal_age=optimal.age,
                optimal_monthly=optimal.monthly_benefit,
                optimal_lifetime=optimal.cumulative_at_life_expectancy,
                schedule=schedule,
                lifetime_total_benefits=sum(row.total_annual for row in schedule),
            )

        spouse_pia = self.calculator.resolve_pia(spouse)
        spouse_fra = self.calculator.full_retirement_age(spouse.birth_year)
        strategies = self.enumerator.strategies(profile, pia, spouse, spouse_pia, exhaustive=exhaustive)
        optimal_strategy = next(s for s in strategies if s.is_optimal)
        schedule = self.projector.project(profile, pia, spouse, spouse_pia)

        # Pensions are paid on top of benefits
        own1 = self.calculator.benefit_at_age(pia, profile.birth_year, profile.claiming_age)
        own2 = self.calculator.benefit_at_age(spouse_pia, spouse.birth_year, spouse.claiming_age)
        total_monthly = own1 + own2 + profile.monthly_pension + spouse.monthly_pension

        return BenefitOptimization(
            pia=pia,
            fra=fra,
            scenarios=scenarios,
            optimal_age=optimal.age,
            optimal_monthly=optimal.monthly_benefit,
            optimal_lifetime=optimal.cumulative_at_life_expectancy,
            schedule=schedule,
            lifetime_total_benefits=sum(row.total_annual for row in schedule),
            spouse_pia=spouse_pia,
            spouse_fra=spouse_fra,
            strategies=strategies,
            optimal_strategy=optimal_strategy,
            pension_offset=self.offsets.compare(profile, spouse_pia) if profile.monthly_pension > 0 else None,
            spouse_pension_offset=self.offsets.compare(spouse, pia) if spouse.monthly_pension > 0 else None,
            total_monthly_income=total_monthly,
            total_annual_income=total_monthly * 12,
        )


def optimize_benefit(profile: BenefitProfile, spouse_profile: Optional[BenefitProfile] = None,
                     details: Optional[SocialSecurityDetails] = None,
                     exhaustive: bool = False) -> BenefitOptimization:
    """Optimize against the shipped benefit-law tables, or `details` when given."""
    calculator = BenefitCurveCalculator(details or SocialSecurityDetails())
    return BenefitOptimizer(calculator).optimize(profile, spouse_profile, exhaustive=exhaustive)
