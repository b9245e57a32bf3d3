import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from model.BenefitResult import FullRetirementAge

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = os.path.normpath(
    os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'social-security.json')
)


@dataclass(frozen=True)
class ReductionSchedule:
    """Per-month reduction for claiming before FRA, as fractions of the benefit."""
    first_months: int
    first_monthly_rate: float
    additional_monthly_rate: float

    def reduction(self, months_early: int) -> float:
        if months_early <= 0:
            return 0.0
        first = min(months_early, self.first_months)
        additional = max(0, months_early - self.first_months)
        return first * self.first_monthly_rate + additional * self.additional_monthly_rate


@dataclass(frozen=True)
class BenefitYearRules:
    year: int
    bend_points: Tuple[float, float]
    factors: Tuple[float, float, float]


def _monthly_percent(pair) -> float:
    """[5, 9] -> 5/9 of 1%."""
    numerator, denominator = pair
    return numerator / denominator / 100


class SocialSecurityDetails:
    """Holds Social Security benefit-law constants.

    Loads statutory values from `reference/social-security.json` (or an
    in-memory dict of the same shape). PIA bend points are keyed by
    benefit-law year and are not projected beyond the years supplied.
    """

    def __init__(self, reference_path: Optional[str] = None, data: Optional[dict] = None):
        """Initialize by loading the reference file.

        Args:
            reference_path: Alternate JSON file; defaults to the shipped reference.
            data: Already-parsed reference data; takes precedence over the path.
        """
        if data is None:
            ref_path = reference_path or DEFAULT_REFERENCE_PATH
            with open(ref_path, 'r') as f:
                data = json.load(f)
        self._load(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'SocialSecurityDetails':
        return cls(data=data)

    def _load(self, data: dict):
        fra_table = data.get("fullRetirementAge", [])
        if not fra_table or fra_table[-1].get("maxBirthYear") is not None:
            raise ValueError("social-security.json 'fullRetirementAge' must end with an open-ended entry")
        self.fra_table: List[Tuple[Optional[int], FullRetirementAge]] = [
            (row.get("maxBirthYear"), FullRetirementAge(int(row["years"]), int(row.get("months", 0))))
            for row in fra_table
        ]

        self.early_reduction = self._schedule(data["earlyReduction"])
        self.spousal_early_reduction = self._schedule(data["spousalEarlyReduction"])

        delayed = data["delayedCredit"]
        self.delayed_monthly_rate = _monthly_percent(delayed["monthlyPercent"])
        self.delayed_credit_max_age = int(delayed["maxAge"])

        self.spousal_fraction = float(data["spousalFraction"])
        self.survivor_earliest_age = float(data["survivor"]["earliestAge"])
        self.survivor_max_reduction = float(data["survivor"]["maxReduction"])
        numerator, denominator = data["legacyPensionOffsetFraction"]
        self.legacy_offset_fraction = numerator / denominator

        birth_years = data["supportedBirthYears"]
        self.min_birth_year = int(birth_years["min"])
        self.max_birth_year = int(birth_years["max"])

        self.benefit_years: Dict[int, BenefitYearRules] = {}
        for row in data.get("benefitYears", []):
            first, second = row["bendPoints"]
            if second <= first:
                raise ValueError(f"Bend points for {row['year']} must increase")
            self.benefit_years[int(row["year"])] = BenefitYearRules(
                year=int(row["year"]),
                bend_points=(float(first), float(second)),
                factors=tuple(float(x) for x in row["factors"]),
            )
        if not self.benefit_years:
            raise ValueError("social-security.json must contain a 'benefitYears' array with at least one entry")

        logger.debug("Loaded benefit rules for years %s", sorted(self.benefit_years))

    @staticmethod
    def _schedule(entry: dict) -> ReductionSchedule:
        return ReductionSchedule(
            first_months=int(entry["firstMonths"]),
            first_monthly_rate=_monthly_percent(entry["firstMonthlyPercent"]),
            additional_monthly_rate=_monthly_percent(entry["additionalMonthlyPercent"]),
        )

    def validate_birth_year(self, birth_year: int):
        if not self.min_birth_year <= birth_year <= self.max_birth_year:
            raise ValueError(
                f"Birth year {birth_year} is outside the supported range "
                f"{self.min_birth_year}-{self.max_birth_year}"
            )

    def full_retirement_age(self, birth_year: int) -> FullRetirementAge:
        self.validate_birth_year(birth_year)
        for max_birth_year, fra in self.fra_table:
            if max_birth_year is None or birth_year <= max_birth_year:
                return fra
        # Unreachable: the table always ends open-ended
        raise ValueError(f"No full retirement age for birth year {birth_year}")

    def rules_for(self, year: int) -> BenefitYearRules:
        if year not in self.benefit_years:
            raise ValueError(
                f"No benefit rules available for year {year} (available: {sorted(self.benefit_years)})"
            )
        return self.benefit_years[year]
