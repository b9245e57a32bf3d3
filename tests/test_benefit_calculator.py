import unittest
import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from tax.SocialSecurityDetails import SocialSecurityDetails
from calc.benefit_calculator import BenefitCurveCalculator
from model.BenefitProfile import BenefitProfile


class TestFullRetirementAge(unittest.TestCase):
    def setUp(self):
        self.details = SocialSecurityDetails()

    def test_step_table(self):
        self.assertEqual(self.details.full_retirement_age(1950).total_months, 66 * 12)
        self.assertEqual(self.details.full_retirement_age(1954).total_months, 66 * 12)
        self.assertEqual(self.details.full_retirement_age(1955).months, 2)
        self.assertEqual(self.details.full_retirement_age(1957).months, 6)
        self.assertEqual(self.details.full_retirement_age(1959).months, 10)
        self.assertEqual(self.details.full_retirement_age(1960).total_months, 67 * 12)
        self.assertEqual(self.details.full_retirement_age(1985).total_months, 67 * 12)

    def test_display_and_whole_years(self):
        fra = self.details.full_retirement_age(1955)
        self.assertEqual(str(fra), "66 and 2 months")
        self.assertEqual(fra.whole_years, 67)
        self.assertEqual(str(self.details.full_retirement_age(1960)), "67")
        self.assertEqual(self.details.full_retirement_age(1960).whole_years, 67)

    def test_birth_year_out_of_range(self):
        with self.assertRaises(ValueError):
            self.details.full_retirement_age(1930)
        with self.assertRaises(ValueError):
            self.details.full_retirement_age(2015)


class TestBenefitCurveCalculator(unittest.TestCase):
    def setUp(self):
        self.calc = BenefitCurveCalculator(SocialSecurityDetails())

    def test_claim_at_62_born_1960(self):
        # 60 months early: 36 x 5/9% + 24 x 5/12% = 30% reduction
        self.assertAlmostEqual(self.calc.benefit_at_age(2000, 1960, 62), 1400.0, places=6)

    def test_claim_at_70_born_1960(self):
        # 36 months delayed at 2/3% = 24% increase
        self.assertAlmostEqual(self.calc.benefit_at_age(2000, 1960, 70), 2480.0, places=6)

    def test_claim_at_fra(self):
        self.assertAlmostEqual(self.calc.benefit_at_age(2000, 1960, 67), 2000.0)
        self.assertAlmostEqual(self.calc.benefit_at_age(2000, 1956, 66 + 4 / 12), 2000.0)

    def test_within_first_36_months(self):
        # 24 months early at 5/9% = 13.33%
        self.assertAlmostEqual(self.calc.benefit_at_age(1800, 1960, 65), 1800 * (1 - 24 * 5 / 9 / 100))

    def test_delayed_credits_stop_at_70(self):
        self.assertAlmostEqual(self.calc.benefit_at_age(2000, 1960, 72), self.calc.benefit_at_age(2000, 1960, 70))

    def test_benefit_ordering_around_fra(self):
        for birth_year in (1954, 1956, 1960):
            fra = self.calc.full_retirement_age(birth_year).decimal
            at_fra = self.calc.benefit_at_age(2000, birth_year, fra)
            for age in range(62, 71):
                benefit = self.calc.benefit_at_age(2000, birth_year, age)
                if age < fra:
                    self.assertLess(benefit, at_fra)
                elif age > fra:
                    self.assertGreater(benefit, at_fra)
                self.assertLessEqual(benefit, self.calc.benefit_at_age(2000, birth_year, 70))

    def test_spousal_only_benefit(self):
        self.assertAlmostEqual(self.calc.spousal_only_benefit(2000, 1960, 67), 1000.0)
        # 36 x 25/36% + 24 x 5/12% = 35% reduction
        self.assertAlmostEqual(self.calc.spousal_only_benefit(2000, 1960, 62), 650.0, places=6)
        # No delayed credits on spousal benefits
        self.assertAlmostEqual(self.calc.spousal_only_benefit(2000, 1960, 70), 1000.0)

    def test_spousal_benefit_takes_greater(self):
        self.assertAlmostEqual(self.calc.spousal_benefit(2000, 1960, 67, 1500), 1500.0)
        self.assertAlmostEqual(self.calc.spousal_benefit(2000, 1960, 67, 600), 1000.0)

    def test_survivor_benefit(self):
        self.assertAlmostEqual(self.calc.survivor_benefit(2400, 1960, 67), 2400.0)
        self.assertAlmostEqual(self.calc.survivor_benefit(2400, 1960, 68), 2400.0)
        self.assertAlmostEqual(self.calc.survivor_benefit(2400, 1960, 60), 2400 * (1 - 0.285))
        # Halfway between 60 and 67
        self.assertAlmostEqual(self.calc.survivor_benefit(2400, 1960, 63.5), 2400 * (1 - 0.1425))

    def test_estimate_pia_from_earnings(self):
        # AIME 3,000: 90% of 1,226 + 32% of 1,774
        self.assertEqual(self.calc.estimate_pia(36000, 2025), 1671.0)
        self.assertEqual(self.calc.estimate_pia(12000, 2025), 900.0)
        self.assertEqual(self.calc.estimate_pia(120000, 2025), 3468.0)
        self.assertEqual(self.calc.estimate_pia(36000, 2024), 1641.0)
        self.assertEqual(self.calc.estimate_pia(0, 2025), 0.0)

    def test_estimate_pia_unknown_rules_year(self):
        with self.assertRaises(ValueError):
            self.calc.estimate_pia(36000, 2019)

    def test_resolve_pia(self):
        direct = BenefitProfile(birth_year=1960, pia=2100)
        estimated = BenefitProfile(birth_year=1960, input_method='earnings', average_earnings=36000)
        self.assertEqual(self.calc.resolve_pia(direct), 2100)
        self.assertEqual(self.calc.resolve_pia(estimated), 1671.0)


if __name__ == '__main__':
    unittest.main()
