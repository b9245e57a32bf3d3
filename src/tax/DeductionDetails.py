from dataclasses import dataclass

from model.TaxProfile import TaxProfile
from tax.FederalDetails import TaxYearRules

QBI_RATE = 0.20

DEDUCTION_STANDARD = 'standard'
DEDUCTION_ITEMIZED = 'itemized'


@dataclass(frozen=True)
class DeductionChoice:
    amount: float
    deduction_type: str


class DeductionResolver:
    """Resolves below-the-line deductions for one profile and year.

    Holds the year's rules and the profile; the AGI-dependent pieces
    (senior deduction, QBI) take the amounts they depend on as arguments.
    """

    def __init__(self, rules: TaxYearRules, profile: TaxProfile):
        self.rules = rules
        self.profile = profile
        self.status = profile.filing_status

    def qualifying_seniors(self) -> int:
        """Persons on the return who are 65 or older (spouse only counts on a joint return)."""
        count = 1 if self.profile.age_65_or_older else 0
        if self.profile.is_joint and self.profile.spouse_65_or_older:
            count += 1
        return count

    def standard_deduction(self) -> float:
        base = self.rules.standard_deduction[self.status]
        return base + self.qualifying_seniors() * self.rules.additional_standard_deduction[self.status]

    def choose(self) -> DeductionChoice:
        """Standard or itemized, as elected on the profile."""
        if self.profile.use_standard_deduction:
            return DeductionChoice(self.standard_deduction(), DEDUCTION_STANDARD)
        return DeductionChoice(self.profile.itemized_deductions, DEDUCTION_ITEMIZED)

    def senior_deduction(self, adjusted_gross_income: float) -> float:
        """Per-person senior deduction, phased out above an AGI threshold.

        Zero for years whose rules do not define it.
        """
        senior = self.rules.senior_deduction
        seniors = self.qualifying_seniors()
        if senior is None or seniors == 0:
            return 0.0
        base = senior.amount_per_person * seniors
        threshold = senior.threshold[self.status]
        if adjusted_gross_income <= threshold:
            return base
        phaseout = (adjusted_gross_income - threshold) * senior.phaseout_rate
        return max(0.0, base - phaseout)

    def qbi_deduction(self, qbi_income: float, taxable_income_before_qbi: float) -> float:
        """Qualified Business Income deduction.

        A specified service business loses the deduction linearly across the
        phase-out band above the threshold. Other businesses keep the full
        20% above the threshold: the wage and capital limitation is not
        modelled, so results above the threshold overstate the deduction for
        businesses with little W-2 payroll.
        """
        if self.profile.self_employment_income <= 0:
            return 0.0

        threshold = self.rules.qbi_threshold[self.status]
        phaseout_range = self.rules.qbi_phaseout_range[self.status]
        full = qbi_income * QBI_RATE

        if not self.profile.is_sstb or taxable_income_before_qbi <= threshold:
            deduction = full
        elif taxable_income_before_qbi < threshold + phaseout_range:
            phaseout_pct = (taxable_income_before_qbi - threshold) / phaseout_range
            deduction = full * (1 - phaseout_pct)
        else:
            deduction = 0.0

        deduction = min(deduction, taxable_income_before_qbi * QBI_RATE)
        return max(deduction, 0.0)
