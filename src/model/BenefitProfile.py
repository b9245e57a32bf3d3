"""Input records for the retirement benefit claiming analysis."""

from dataclasses import dataclass
from typing import Optional

MIN_CLAIMING_AGE = 62
MAX_CLAIMING_AGE = 70

# Same range as supportedBirthYears in reference/social-security.json
MIN_BIRTH_YEAR = 1943
MAX_BIRTH_YEAR = 2010

INPUT_METHOD_PIA = 'pia'
INPUT_METHOD_EARNINGS = 'earnings'
INPUT_METHODS = (INPUT_METHOD_PIA, INPUT_METHOD_EARNINGS)

DEFAULT_BENEFIT_RULES_YEAR = 2025


@dataclass(frozen=True)
class NonCoveredPension:
    """Pension earned in work not covered by Social Security."""
    monthly_amount: float
    survivor_percent: float = 50.0  # Share of the pension that continues to a surviving spouse

    def __post_init__(self):
        if self.monthly_amount < 0:
            raise ValueError(f"Pension amount must be non-negative, got {self.monthly_amount}")
        if not 0 <= self.survivor_percent <= 100:
            raise ValueError(f"Pension survivor percentage must be between 0 and 100, got {self.survivor_percent}")

    @property
    def survivor_fraction(self) -> float:
        return self.survivor_percent / 100.0


@dataclass(frozen=True)
class BenefitProfile:
    """One person's benefit inputs.

    `pia` is used directly when `input_method` is 'pia'; with 'earnings'
    the PIA is estimated from `average_earnings` using the bend points of
    `rules_year`.
    """
    birth_year: int
    pia: float = 0.0
    claiming_age: int = 67
    life_expectancy: int = 85
    birth_month: int = 1
    input_method: str = INPUT_METHOD_PIA
    average_earnings: float = 0.0
    pension: Optional[NonCoveredPension] = None
    rules_year: int = DEFAULT_BENEFIT_RULES_YEAR

    def __post_init__(self):
        for name in ('birth_year', 'claiming_age', 'life_expectancy', 'birth_month'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or \
                    (isinstance(value, float) and not value.is_integer()):
                raise ValueError(f"{name} must be a whole number, got {value!r}")
        if not MIN_BIRTH_YEAR <= self.birth_year <= MAX_BIRTH_YEAR:
            raise ValueError(
                f"Birth year must be between {MIN_BIRTH_YEAR} and {MAX_BIRTH_YEAR}, got {self.birth_year}"
            )
        if self.input_method not in INPUT_METHODS:
            raise ValueError(f"Unknown input method {self.input_method!r}; expected one of {INPUT_METHODS}")
        if self.pia < 0 or self.average_earnings < 0:
            raise ValueError("PIA and average earnings must be non-negative")
        if not MIN_CLAIMING_AGE <= self.claiming_age <= MAX_CLAIMING_AGE:
            raise ValueError(
                f"Claiming age must be between {MIN_CLAIMING_AGE} and {MAX_CLAIMING_AGE}, got {self.claiming_age}"
            )
        if not 1 <= self.birth_month <= 12:
            raise ValueError(f"Birth month must be between 1 and 12, got {self.birth_month}")
        if self.life_expectancy < MIN_CLAIMING_AGE:
            raise ValueError(f"Life expectancy must be at least {MIN_CLAIMING_AGE}, got {self.life_expectancy}")

    @property
    def claim_year(self) -> int:
        return self.birth_year + self.claiming_age

    @property
    def death_year(self) -> int:
        """Calendar year of the assumed death; the person is alive through this year."""
        return self.birth_year + self.life_expectancy

    @property
    def monthly_pension(self) -> float:
        return self.pension.monthly_amount if self.pension else 0.0

    @classmethod
    def from_dict(cls, data: dict) -> 'BenefitProfile':
        """Build a profile from a camelCase `benefitProfile` block of a spec.json."""
        if 'birthYear' not in data:
            raise ValueError("benefitProfile requires 'birthYear'")
        pension = None
        pension_data = data.get('pension')
        if pension_data:
            pension = NonCoveredPension(
                monthly_amount=pension_data.get('monthlyAmount', 0.0),
                survivor_percent=pension_data.get('survivorPercent', 50.0),
            )
        return cls(
            birth_year=_whole_number(data, 'birthYear'),
            pia=data.get('pia', 0.0),
            claiming_age=_whole_number(data, 'claimingAge', 67),
            life_expectancy=_whole_number(data, 'lifeExpectancy', 85),
            birth_month=_whole_number(data, 'birthMonth', 1),
            input_method=data.get('inputMethod', INPUT_METHOD_PIA),
            average_earnings=data.get('averageEarnings', 0.0),
            pension=pension,
            rules_year=_whole_number(data, 'rulesYear', DEFAULT_BENEFIT_RULES_YEAR),
        )


def _whole_number(data: dict, key: str, default: Optional[int] = None) -> int:
    """Read an integer field, accepting 67, 67.0 or "67" but rejecting 62.9."""
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a whole number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a whole number, got {value!r}") from None
    if not number.is_integer():
        raise ValueError(f"{key} must be a whole number, got {value!r}")
    return int(number)
