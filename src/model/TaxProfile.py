"""Input record for a single-year federal income tax evaluation."""

from dataclasses import dataclass, fields
from enum import Enum


class FilingStatus(Enum):
    SINGLE = 'single'
    MARRIED_FILING_JOINTLY = 'mfj'
    HEAD_OF_HOUSEHOLD = 'hoh'

    @classmethod
    def parse(cls, value) -> 'FilingStatus':
        """Accept an enum member, its short code, or the long hyphenated name."""
        if isinstance(value, cls):
            return value
        aliases = {
            'single': cls.SINGLE,
            'mfj': cls.MARRIED_FILING_JOINTLY,
            'married-filing-jointly': cls.MARRIED_FILING_JOINTLY,
            'hoh': cls.HEAD_OF_HOUSEHOLD,
            'head-of-household': cls.HEAD_OF_HOUSEHOLD,
        }
        key = str(value).strip().lower().replace('_', '-')
        if key not in aliases:
            raise ValueError(f"Unknown filing status: {value!r}")
        return aliases[key]


MONETARY_FIELDS = (
    'ordinary_income',
    'qualified_dividends',
    'short_term_capital_gains',
    'long_term_capital_gains',
    'self_employment_income',
    'social_security_benefits',
    'itemized_deductions',
    'withholding',
    'estimated_payments',
)

# spec.json key -> dataclass field
_JSON_KEYS = {
    'filingStatus': 'filing_status',
    'taxYear': 'tax_year',
    'childrenUnder17': 'children_under_17',
    'age65OrOlder': 'age_65_or_older',
    'spouse65OrOlder': 'spouse_65_or_older',
    'ordinaryIncome': 'ordinary_income',
    'qualifiedDividends': 'qualified_dividends',
    'shortTermCapitalGains': 'short_term_capital_gains',
    'longTermCapitalGains': 'long_term_capital_gains',
    'selfEmploymentIncome': 'self_employment_income',
    'socialSecurityBenefits': 'social_security_benefits',
    'useStandardDeduction': 'use_standard_deduction',
    'itemizedDeductions': 'itemized_deductions',
    'isSSTB': 'is_sstb',
    'withholding': 'withholding',
    'estimatedPayments': 'estimated_payments',
}


@dataclass(frozen=True)
class TaxProfile:
    """Everything needed to compute one year's federal liability.

    Money amounts are annual dollars and must be non-negative. Ordinary
    income is treated as wages for the Additional Medicare Tax.
    """
    filing_status: FilingStatus
    tax_year: int
    children_under_17: int = 0
    age_65_or_older: bool = False
    spouse_65_or_older: bool = False

    # Income
    ordinary_income: float = 0.0
    qualified_dividends: float = 0.0
    short_term_capital_gains: float = 0.0
    long_term_capital_gains: float = 0.0
    self_employment_income: float = 0.0
    social_security_benefits: float = 0.0  # Gross benefit received

    # Deductions
    use_standard_deduction: bool = True
    itemized_deductions: float = 0.0
    is_sstb: bool = False  # Specified service trade or business

    # Payments
    withholding: float = 0.0
    estimated_payments: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'filing_status', FilingStatus.parse(self.filing_status))
        for name in MONETARY_FIELDS:
            value = getattr(self, name)
            if value is None or value < 0:
                raise ValueError(f"{name} must be a non-negative amount, got {value!r}")
        if self.children_under_17 < 0:
            raise ValueError(f"children_under_17 must be non-negative, got {self.children_under_17}")

    @property
    def is_joint(self) -> bool:
        return self.filing_status is FilingStatus.MARRIED_FILING_JOINTLY

    @property
    def preferential_income(self) -> float:
        """Qualified dividends plus long-term gains."""
        return self.qualified_dividends + self.long_term_capital_gains

    @classmethod
    def from_dict(cls, data: dict) -> 'TaxProfile':
        """Build a profile from the camelCase `taxProfile` block of a spec.json."""
        unknown = set(data) - set(_JSON_KEYS)
        if unknown:
            raise ValueError(f"Unknown taxProfile fields: {sorted(unknown)}")
        if 'filingStatus' not in data or 'taxYear' not in data:
            raise ValueError("taxProfile requires 'filingStatus' and 'taxYear'")
        kwargs = {_JSON_KEYS[key]: value for key, value in data.items()}
        kwargs['tax_year'] = int(kwargs['tax_year'])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        result = {}
        reverse = {v: k for k, v in _JSON_KEYS.items()}
        for f in fields(self):
            value = getattr(self, f.name)
            result[reverse[f.name]] = value.value if isinstance(value, FilingStatus) else value
        return result
