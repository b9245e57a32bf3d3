import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
from tax.FederalDetails import FederalDetails
from tax.DeductionDetails import DeductionResolver, DEDUCTION_STANDARD, DEDUCTION_ITEMIZED
from model.TaxProfile import TaxProfile


@pytest.fixture(scope="module")
def rules_2025():
    return FederalDetails().rules_for(2025)


@pytest.fixture(scope="module")
def rules_2024():
    return FederalDetails().rules_for(2024)


class TestStandardDeduction:

    def test_single_no_add_on(self, rules_2025):
        profile = TaxProfile('single', 2025)
        choice = DeductionResolver(rules_2025, profile).choose()
        assert choice.amount == 15750
        assert choice.deduction_type == DEDUCTION_STANDARD

    def test_single_over_65(self, rules_2025):
        profile = TaxProfile('single', 2025, age_65_or_older=True)
        assert DeductionResolver(rules_2025, profile).standard_deduction() == 15750 + 2000

    def test_joint_counts_both_spouses(self, rules_2025):
        profile = TaxProfile('mfj', 2025, age_65_or_older=True, spouse_65_or_older=True)
        resolver = DeductionResolver(rules_2025, profile)
        assert resolver.qualifying_seniors() == 2
        assert resolver.standard_deduction() == 31500 + 2 * 1600

    def test_spouse_ignored_unless_joint(self, rules_2025):
        profile = TaxProfile('hoh', 2025, spouse_65_or_older=True)
        assert DeductionResolver(rules_2025, profile).qualifying_seniors() == 0

    def test_itemized_election(self, rules_2025):
        profile = TaxProfile('single', 2025, use_standard_deduction=False, itemized_deductions=9000,
                             age_65_or_older=True)
        choice = DeductionResolver(rules_2025, profile).choose()
        # No age add-on with itemized deductions
        assert choice.amount == 9000
        assert choice.deduction_type == DEDUCTION_ITEMIZED


class TestSeniorDeduction:

    def test_full_below_threshold(self, rules_2025):
        profile = TaxProfile('mfj', 2025, age_65_or_older=True, spouse_65_or_older=True)
        assert DeductionResolver(rules_2025, profile).senior_deduction(120000) == 12000

    def test_phases_out_above_threshold(self, rules_2025):
        profile = TaxProfile('single', 2025, age_65_or_older=True)
        # 6,000 - 6% of 25,000
        assert DeductionResolver(rules_2025, profile).senior_deduction(100000) == pytest.approx(4500)

    def test_floored_at_zero(self, rules_2025):
        profile = TaxProfile('single', 2025, age_65_or_older=True)
        assert DeductionResolver(rules_2025, profile).senior_deduction(500000) == 0.0

    def test_no_seniors(self, rules_2025):
        profile = TaxProfile('single', 2025)
        assert DeductionResolver(rules_2025, profile).senior_deduction(50000) == 0.0

    def test_not_defined_for_2024(self, rules_2024):
        profile = TaxProfile('single', 2024, age_65_or_older=True)
        assert DeductionResolver(rules_2024, profile).senior_deduction(50000) == 0.0


class TestQbiDeduction:

    def test_zero_without_self_employment(self, rules_2025):
        profile = TaxProfile('single', 2025)
        assert DeductionResolver(rules_2025, profile).qbi_deduction(50000, 80000) == 0.0

    def test_twenty_percent_below_threshold(self, rules_2025):
        profile = TaxProfile('single', 2025, self_employment_income=60000)
        assert DeductionResolver(rules_2025, profile).qbi_deduction(50000, 80000) == pytest.approx(10000)

    def test_capped_at_twenty_percent_of_taxable_income(self, rules_2025):
        profile = TaxProfile('single', 2025, self_employment_income=60000)
        assert DeductionResolver(rules_2025, profile).qbi_deduction(50000, 30000) == pytest.approx(6000)

    def test_sstb_phases_out_linearly(self, rules_2025):
        profile = TaxProfile('single', 2025, self_employment_income=300000, is_sstb=True)
        # Halfway through the 50,000 band above 197,300
        deduction = DeductionResolver(rules_2025, profile).qbi_deduction(100000, 222300)
        assert deduction == pytest.approx(10000)

    def test_sstb_above_band_gets_nothing(self, rules_2025):
        profile = TaxProfile('single', 2025, self_employment_income=400000, is_sstb=True)
        assert DeductionResolver(rules_2025, profile).qbi_deduction(100000, 260000) == 0.0

    def test_non_sstb_keeps_full_deduction_above_threshold(self, rules_2025):
        profile = TaxProfile('single', 2025, self_employment_income=400000)
        assert DeductionResolver(rules_2025, profile).qbi_deduction(100000, 260000) == pytest.approx(20000)
