import logging
from typing import Optional

from calc.benefit_calculator import BenefitCurveCalculator

logger = logging.getLogger(__name__)

MAX_BREAK_EVEN_AGE = 100
# Scan resolution in tenths of a year
STEPS_PER_YEAR = 10


def cumulative_benefit(monthly_benefit: float, start_age: float, age: float) -> float:
    """Total received from `start_age` through `age`."""
    if age < start_age:
        return 0.0
    return monthly_benefit * 12 * (age - start_age)


class BreakEvenSolver:
    """Finds when a later claiming age catches up with an earlier one.

    The earlier strategy starts paying sooner; the later one pays more per
    month. The break-even age is the first scanned age at which the later
    strategy's cumulative total is at least the earlier one's.
    """

    def __init__(self, calculator: BenefitCurveCalculator):
        self.calculator = calculator

    def find(self, pia: float, birth_year: int, early_age: float, later_age: float) -> Optional[float]:
        """Return the break-even age rounded to 0.1, or None if not reached by age 100."""
        if later_age < early_age:
            raise ValueError(f"later_age ({later_age}) must not be earlier than early_age ({early_age})")

        early_benefit = self.calculator.benefit_at_age(pia, birth_year, early_age)
        later_benefit = self.calculator.benefit_at_age(pia, birth_year, later_age)

        step = 0
        age = later_age
        while age <= MAX_BREAK_EVEN_AGE:
            early_total = cumulative_benefit(early_benefit, early_age, age)
            later_total = cumulative_benefit(later_benefit, later_age, age)
            if later_total >= early_total:
                return round(age, 1)
            step += 1
            age = later_age + step / STEPS_PER_YEAR

        logger.debug("No break-even between %s and %s before age %s", early_age, later_age, MAX_BREAK_EVEN_AGE)
        return None
