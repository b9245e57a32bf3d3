import logging

from calc.benefit_calculator import BenefitCurveCalculator
from model.BenefitProfile import BenefitProfile
from model.BenefitResult import PensionOffsetResult

logger = logging.getLogger(__name__)


class PensionOffsetComparator:
    """Compares a pension holder's spousal benefit with and without the legacy offset.

    Under the repealed Government Pension Offset, two-thirds of a pension
    from non-covered work was subtracted from the spousal benefit. The
    comparison reports how much the holder gains now that it no longer
    applies.
    """

    def __init__(self, calculator: BenefitCurveCalculator):
        self.calculator = calculator

    def compare(self, holder: BenefitProfile, other_pia: float) -> PensionOffsetResult:
        """Compare offsets for `holder`, whose spouse has PIA `other_pia`.

        The spousal benefit is 50% of `other_pia` reduced for the holder's
        own claiming age.
        """
        pension = holder.monthly_pension
        without_offset = self.calculator.spousal_only_benefit(other_pia, holder.birth_year, holder.claiming_age)
        offset = pension * self.calculator.details.legacy_offset_fraction
        with_offset = max(0.0, without_offset - offset)
        savings = without_offset - with_offset

        logger.debug("Pension offset: pension=%.2f spousal=%.2f offset=%.2f", pension, without_offset, offset)
        return PensionOffsetResult(
            pension=pension,
            offset_reduction=offset,
            spousal_benefit_without_offset=without_offset,
            spousal_benefit_with_offset=with_offset,
            monthly_savings=savings,
            annual_savings=savings * 12,
        )
