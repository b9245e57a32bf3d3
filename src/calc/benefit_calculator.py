"""Benefit amounts as a function of birth year and claiming age.

Ages are counted in whole months, the way the Social Security
Administration counts them. Claiming before full retirement age (FRA)
permanently reduces the benefit; delaying past FRA earns delayed
retirement credits until the credit cap age (70).
"""

import math

from model.BenefitProfile import BenefitProfile, INPUT_METHOD_PIA
from model.BenefitResult import FullRetirementAge
from tax.SocialSecurityDetails import SocialSecurityDetails


def _months(age: float) -> int:
    return int(round(age * 12))


class BenefitCurveCalculator:
    """Converts a PIA, birth year and claiming age into a monthly benefit."""

    def __init__(self, details: SocialSecurityDetails):
        self.details = details

    def full_retirement_age(self, birth_year: int) -> FullRetirementAge:
        return self.details.full_retirement_age(birth_year)

    def adjustment_factor(self, birth_year: int, claiming_age: float) -> float:
        """Multiplier applied to PIA: below 1 before FRA, above 1 after it."""
        fra_months = self.full_retirement_age(birth_year).total_months
        claiming_months = _months(claiming_age)
        if claiming_months < fra_months:
            return 1 - self.details.early_reduction.reduction(fra_months - claiming_months)
        if claiming_months > fra_months:
            capped = min(claiming_months, self.details.delayed_credit_max_age * 12)
            return 1 + max(0, capped - fra_months) * self.details.delayed_monthly_rate
        return 1.0

    def benefit_at_age(self, pia: float, birth_year: int, claiming_age: float) -> float:
        """Monthly worker benefit when claiming at `claiming_age`.

        EXAMPLE: born 1960 (FRA 67), PIA $2,000, claiming at 62 is 60 months
        early: 36 x 5/9% + 24 x 5/12% = 30% reduction, so $1,400/month.
        """
        return pia * self.adjustment_factor(birth_year, claiming_age)

    def spousal_only_benefit(self, worker_pia: float, spouse_birth_year: int, spouse_claiming_age: float) -> float:
        """Spousal benefit alone: up to 50% of the worker's PIA, reduced for early claiming.

        The spousal reduction uses 25/36 of 1% per month for the first 36
        months early and 5/12 of 1% beyond that. There are no delayed
        credits on spousal benefits.
        """
        max_spousal = worker_pia * self.details.spousal_fraction
        fra_months = self.full_retirement_age(spouse_birth_year).total_months
        months_early = fra_months - _months(spouse_claiming_age)
        return max_spousal * (1 - self.details.spousal_early_reduction.reduction(months_early))

    def spousal_benefit(self, worker_pia: float, spouse_birth_year: int,
                        spouse_claiming_age: float, spouse_own_pia: float) -> float:
        """The greater of the spouse's own benefit or the spousal benefit."""
        own = self.benefit_at_age(spouse_own_pia, spouse_birth_year, spouse_claiming_age)
        return max(own, self.spousal_only_benefit(worker_pia, spouse_birth_year, spouse_claiming_age))

    def survivor_benefit(self, deceased_benefit: float, survivor_birth_year: int, survivor_claiming_age: float) -> float:
        """Benefit a widow(er) receives from the deceased's benefit.

        Full at or after the survivor's FRA; otherwise reduced linearly so
        that claiming at the earliest survivor age (60) costs the maximum
        reduction (28.5%).
        """
        fra = self.full_retirement_age(survivor_birth_year).decimal
        if survivor_claiming_age >= fra:
            return deceased_benefit
        months_before_fra = (fra - survivor_claiming_age) * 12
        max_reduction = self.details.survivor_max_reduction
        reduction_per_month = max_reduction / ((fra - self.details.survivor_earliest_age) * 12)
        reduction = min(months_before_fra * reduction_per_month, max_reduction)
        return deceased_benefit * (1 - reduction)

    def estimate_pia(self, average_annual_earnings: float, rules_year: int) -> float:
        """Estimate PIA from average annual earnings using the year's bend points.

        AIME is approximated as average annual earnings / 12; the result is
        rounded to whole dollars.
        """
        rules = self.details.rules_for(rules_year)
        aime = average_annual_earnings / 12
        first, second = rules.bend_points
        f1, f2, f3 = rules.factors
        if aime <= first:
            pia = aime * f1
        elif aime <= second:
            pia = first * f1 + (aime - first) * f2
        else:
            pia = first * f1 + (second - first) * f2 + (aime - second) * f3
        return float(math.floor(pia + 0.5))

    def resolve_pia(self, profile: BenefitProfile) -> float:
        if profile.input_method == INPUT_METHOD_PIA:
            return profile.pia
        return self.estimate_pia(profile.average_earnings, profile.rules_year)
