from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BracketSlice:
    """Portion of income taxed inside a single bracket."""
    rate: float
    lower: float
    upper: Optional[float]  # None for the unbounded top bracket
    amount: float
    tax: float


@dataclass(frozen=True)
class TaxResult:
    """Outcome of one federal liability evaluation.

    Positive `amount_due_or_refund` is owed; negative is a refund.
    """
    tax_year: int
    filing_status: str

    # Income
    total_ordinary_income: float
    taxable_social_security: float
    total_preferential_income: float
    adjusted_gross_income: float

    # Deductions
    deduction_used: float
    deduction_type: str  # 'standard' or 'itemized'
    qbi_deduction: float
    senior_deduction: float

    # Taxable income
    taxable_income: float
    taxable_ordinary_income: float
    taxable_preferential_income: float

    # Taxes
    ordinary_income_tax: float
    preferential_income_tax: float
    self_employment_tax: float
    self_employment_social_security_tax: float
    self_employment_medicare_tax: float
    net_investment_income_tax: float
    additional_medicare_tax: float
    total_tax_before_credits: float

    # Credits and payments
    child_tax_credit: float
    total_tax: float
    total_payments: float
    amount_due_or_refund: float

    ordinary_breakdown: Tuple[BracketSlice, ...] = ()
    preferential_breakdown: Tuple[BracketSlice, ...] = ()
    marginal_rate: float = 0.0
    effective_rate: float = 0.0

    @property
    def is_refund(self) -> bool:
        return self.amount_due_or_refund < 0
