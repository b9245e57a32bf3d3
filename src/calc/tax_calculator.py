import logging
from typing import Optional

from model.TaxProfile import TaxProfile
from model.TaxResult import TaxResult
from tax.FederalDetails import FederalDetails
from tax.ProgressiveBrackets import tax_on_amount, stacked_tax_on_amount
from tax.BenefitTaxation import provisional_income, taxable_benefit
from tax.DeductionDetails import DeductionResolver
from tax.SurtaxDetails import SurtaxCalculator

logger = logging.getLogger(__name__)


class TaxLiabilityEvaluator:
    """Computes a full federal liability from a `TaxProfile`.

    Pass a hydrated `FederalDetails` into the constructor. This keeps file
    I/O in the caller and leaves `evaluate` a pure function of the profile.
    """

    def __init__(self, federal: FederalDetails):
        self.federal = federal

    def evaluate(self, profile: TaxProfile) -> TaxResult:
        rules = self.federal.rules_for(profile.tax_year)
        status = profile.filing_status
        surtaxes = SurtaxCalculator(rules, status)
        deductions = DeductionResolver(rules, profile)

        # Taxable portion of Social Security (up to 85%)
        first, second = rules.benefit_taxability[status]
        provisional = provisional_income(
            profile.ordinary_income,
            profile.qualified_dividends,
            profile.short_term_capital_gains,
            profile.long_term_capital_gains,
            profile.self_employment_income,
            profile.social_security_benefits,
        )
        taxable_ss = taxable_benefit(provisional, profile.social_security_benefits, first, second)

        # Short-term gains are taxed as ordinary income
        total_ordinary_income = profile.ordinary_income + taxable_ss + profile.short_term_capital_gains

        se_tax = surtaxes.self_employment_tax(profile.self_employment_income)

        adjusted_gross_income = (total_ordinary_income + profile.preferential_income
                                 + se_tax.net_earnings - se_tax.deductible_half)

        choice = deductions.choose()
        qbi_income = se_tax.net_earnings - se_tax.deductible_half
        qbi = deductions.qbi_deduction(qbi_income, adjusted_gross_income - choice.amount)
        senior = deductions.senior_deduction(adjusted_gross_income)

        taxable_income = max(0.0, adjusted_gross_income - choice.amount - qbi - senior)

        # Preferential income sits on top of ordinary income
        taxable_ordinary = max(0.0, taxable_income - profile.preferential_income)
        taxable_preferential = min(profile.preferential_income, taxable_income)

        ordinary = tax_on_amount(taxable_ordinary, rules.brackets[status])
        preferential = stacked_tax_on_amount(
            taxable_preferential, taxable_ordinary, rules.preferential_brackets[status]
        )

        investment_income = (profile.qualified_dividends + profile.short_term_capital_gains
                             + profile.long_term_capital_gains)
        niit = surtaxes.net_investment_income_tax(investment_income, adjusted_gross_income)
        additional_medicare = surtaxes.additional_medicare_tax(profile.ordinary_income, se_tax.net_earnings)

        total_before_credits = ordinary.tax + preferential.tax + se_tax.total + niit + additional_medicare

        # Non-refundable: limited to the tax itself
        child_credit = min(profile.children_under_17 * rules.child_tax_credit, total_before_credits)
        total_tax = max(0.0, total_before_credits - child_credit)
        total_payments = profile.withholding + profile.estimated_payments

        result = TaxResult(
            tax_year=profile.tax_year,
            filing_status=status.value,
            total_ordinary_income=total_ordinary_income,
            taxable_social_security=taxable_ss,
            total_preferential_income=profile.preferential_income,
            adjusted_gross_income=adjusted_gross_income,
            deduction_used=choice.amount,
            deduction_type=choice.deduction_type,
            qbi_deduction=qbi,
            senior_deduction=senior,
            taxable_income=taxable_income,
            taxable_ordinary_income=taxable_ordinary,
            taxable_preferential_income=taxable_preferential,
            ordinary_income_tax=ordinary.tax,
            preferential_income_tax=preferential.tax,
            self_employment_tax=se_tax.total,
            self_employment_social_security_tax=se_tax.social_security_tax,
            self_employment_medicare_tax=se_tax.medicare_tax,
            net_investment_income_tax=niit,
            additional_medicare_tax=additional_medicare,
            total_tax_before_credits=total_before_credits,
            child_tax_credit=child_credit,
            total_tax=total_tax,
            total_payments=total_payments,
            amount_due_or_refund=total_tax - total_payments,
            ordinary_breakdown=ordinary.breakdown,
            preferential_breakdown=preferential.breakdown,
            marginal_rate=ordinary.marginal_rate,
            effective_rate=total_tax / adjusted_gross_income if adjusted_gross_income > 0 else 0.0,
        )
        logger.debug("Evaluated %s %s: AGI=%.2f total_tax=%.2f",
                     profile.tax_year, status.value, adjusted_gross_income, total_tax)
        return result


def evaluate_tax(profile: TaxProfile, federal: Optional[FederalDetails] = None) -> TaxResult:
    """Evaluate `profile` against the shipped rule tables, or `federal` when given."""
    return TaxLiabilityEvaluator(federal or FederalDetails()).evaluate(profile)
