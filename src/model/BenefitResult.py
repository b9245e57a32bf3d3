"""Result records for the retirement benefit claiming analysis.

All amounts are monthly dollars unless the field name says annual,
cumulative or lifetime. Every record is derived in full on each call and
never updated afterwards.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class FullRetirementAge:
    years: int
    months: int = 0

    @property
    def total_months(self) -> int:
        return self.years * 12 + self.months

    @property
    def decimal(self) -> float:
        return self.years + self.months / 12

    @property
    def whole_years(self) -> int:
        """FRA rounded up to a whole claiming age."""
        return math.ceil(self.decimal)

    def __str__(self) -> str:
        if self.months == 0:
            return f"{self.years}"
        return f"{self.years} and {self.months} months"


@dataclass(frozen=True)
class ClaimingScenario:
    age: int
    monthly_benefit: float
    annual_benefit: float
    break_even_vs_62: Optional[float]  # None for 62 itself or when never reached
    cumulative_at_life_expectancy: float


@dataclass(frozen=True)
class CoupleStrategy:
    name: str
    person1_age: int
    person2_age: int
    person1_monthly: float  # Greater of own or spousal benefit
    person2_monthly: float
    combined_monthly: float
    survivor_benefit: float
    lifetime_household: float
    is_optimal: bool = False


class ScheduleState(Enum):
    PRE_CLAIM = 'pre-claim'
    BOTH_RECEIVING = 'both-receiving'
    ONE_RECEIVING = 'one-pre-claim-one-receiving'
    SURVIVOR_ONLY = 'survivor-only'
    SINGLE = 'single'


@dataclass(frozen=True)
class YearlyScheduleRow:
    year: int
    state: ScheduleState
    person1_age: Optional[int]  # None once deceased
    person2_age: Optional[int]  # None once deceased, or for a single person
    person1_ss: float
    person1_pension: float
    person2_ss: float
    person2_pension: float
    total_monthly: float
    total_annual: float
    notes: str = ''


@dataclass(frozen=True)
class PensionOffsetResult:
    pension: float
    offset_reduction: float  # What the legacy offset would have withheld
    spousal_benefit_without_offset: float
    spousal_benefit_with_offset: float
    monthly_savings: float
    annual_savings: float


@dataclass(frozen=True)
class BenefitOptimization:
    pia: float
    fra: FullRetirementAge
    scenarios: Tuple[ClaimingScenario, ...]
    optimal_age: int
    optimal_monthly: float
    optimal_lifetime: float
    schedule: Tuple[YearlyScheduleRow, ...]
    lifetime_total_benefits: float

    # Two-person households only
    spouse_pia: Optional[float] = None
    spouse_fra: Optional[FullRetirementAge] = None
    strategies: Optional[Tuple[CoupleStrategy, ...]] = None
    optimal_strategy: Optional[CoupleStrategy] = None
    pension_offset: Optional[PensionOffsetResult] = None
    spouse_pension_offset: Optional[PensionOffsetResult] = None
    total_monthly_income: Optional[float] = None
    total_annual_income: Optional[float] = None

    @property
    def is_couple(self) -> bool:
        return self.strategies is not None
