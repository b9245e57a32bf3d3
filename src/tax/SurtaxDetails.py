from dataclasses import dataclass

from model.TaxProfile import FilingStatus
from tax.FederalDetails import TaxYearRules

# Statutory rates that do not vary by year
SE_NET_EARNINGS_FACTOR = 0.9235
SE_SOCIAL_SECURITY_RATE = 0.124
SE_MEDICARE_RATE = 0.029
NIIT_RATE = 0.038
ADDITIONAL_MEDICARE_RATE = 0.009


@dataclass(frozen=True)
class SelfEmploymentTax:
    net_earnings: float
    social_security_tax: float
    medicare_tax: float

    @property
    def total(self) -> float:
        return self.social_security_tax + self.medicare_tax

    @property
    def deductible_half(self) -> float:
        """Employer-equivalent half, deductible above the line."""
        return self.total * 0.5


class SurtaxCalculator:
    """Computes payroll-style and investment surtaxes for one filer.

    Constructed with the tax year's rules and the filing status; each
    method takes the income amounts it needs.
    """

    def __init__(self, rules: TaxYearRules, filing_status: FilingStatus):
        self.rules = rules
        self.filing_status = filing_status

    def self_employment_tax(self, self_employment_income: float) -> SelfEmploymentTax:
        """Social Security portion capped at the wage base plus uncapped Medicare.

        Args:
            self_employment_income: Net profit from self-employment.
        """
        net_earnings = self_employment_income * SE_NET_EARNINGS_FACTOR
        social_security_tax = min(net_earnings, self.rules.social_security_wage_base) * SE_SOCIAL_SECURITY_RATE
        medicare_tax = net_earnings * SE_MEDICARE_RATE
        return SelfEmploymentTax(
            net_earnings=net_earnings,
            social_security_tax=social_security_tax,
            medicare_tax=medicare_tax,
        )

    def net_investment_income_tax(self, investment_income: float, adjusted_gross_income: float) -> float:
        """3.8% of the lesser of investment income or AGI above the threshold."""
        threshold = self.rules.niit_threshold[self.filing_status]
        base = min(investment_income, max(0.0, adjusted_gross_income - threshold))
        return base * NIIT_RATE

    def additional_medicare_tax(self, wages: float, se_net_earnings: float) -> float:
        """0.9% of combined wages and self-employment earnings above the threshold."""
        threshold = self.rules.additional_medicare_threshold[self.filing_status]
        return max(0.0, wages + se_net_earnings - threshold) * ADDITIONAL_MEDICARE_RATE
