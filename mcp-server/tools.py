"""Household Planner Tools for MCP Server.

This module provides the tool implementations that wrap the tax and
benefit calculators and expose their results through MCP.
"""

import os
import sys
import json
import logging
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tax.FederalDetails import FederalDetails
from tax.SocialSecurityDetails import SocialSecurityDetails
from calc.tax_calculator import TaxLiabilityEvaluator
from calc.benefit_calculator import BenefitCurveCalculator
from calc.benefit_optimizer import BenefitOptimizer
from model.TaxProfile import TaxProfile
from model.TaxResult import TaxResult
from model.BenefitProfile import BenefitProfile
from model.BenefitResult import BenefitOptimization

logger = logging.getLogger(__name__)


def to_plain(value: Any) -> Any:
    """Convert result records into JSON-ready values, money rounded to cents."""
    if hasattr(value, '__dataclass_fields__'):
        return to_plain(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float):
        return round(value, 2)
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


class Engines:
    """Rule tables and calculators shared by every program under one base path.

    Tables are read from `<base_path>/reference/` when present there, and
    from the shipped reference files otherwise.
    """

    def __init__(self, base_path: str):
        reference_dir = os.path.join(base_path, 'reference')
        self.federal = FederalDetails(self._reference_file(reference_dir, 'federal-details.json'))
        self.social_security = SocialSecurityDetails(self._reference_file(reference_dir, 'social-security.json'))
        self.tax = TaxLiabilityEvaluator(self.federal)
        self.benefits = BenefitOptimizer(BenefitCurveCalculator(self.social_security))

    @staticmethod
    def _reference_file(reference_dir: str, name: str) -> Optional[str]:
        path = os.path.join(reference_dir, name)
        if os.path.exists(path):
            return path
        logger.debug("No %s under %s, using the shipped table", name, reference_dir)
        return None

    def evaluate_tax(self, tax_profile: dict) -> TaxResult:
        return self.tax.evaluate(TaxProfile.from_dict(tax_profile))

    def optimize_benefit(self, benefit_profile: dict, spouse_profile: Optional[dict] = None,
                         exhaustive: bool = False) -> BenefitOptimization:
        profile = BenefitProfile.from_dict(benefit_profile)
        spouse = BenefitProfile.from_dict(spouse_profile) if spouse_profile else None
        return self.benefits.optimize(profile, spouse, exhaustive=exhaustive)


class PlannerTools:
    """Tools that answer questions about one program's spec.json."""

    def __init__(self, base_path: str, program_name: str, engines: Optional[Engines] = None):
        """Load the program and evaluate every section it contains.

        Args:
            base_path: Path to the planner root directory
            program_name: Name of the program folder in input-parameters
            engines: Shared calculators; built from base_path when omitted
        """
        self.base_path = base_path
        self.program_name = program_name
        self.engines = engines or Engines(base_path)
        self.spec = self._load_spec()
        self._calculate()

    def _load_spec(self) -> dict:
        spec_path = os.path.join(self.base_path, 'input-parameters', self.program_name, 'spec.json')
        with open(spec_path, 'r') as f:
            return json.load(f)

    def _calculate(self):
        self.tax_result: Optional[TaxResult] = None
        self.benefits: Optional[BenefitOptimization] = None
        if 'taxProfile' in self.spec:
            self.tax_result = self.engines.evaluate_tax(self.spec['taxProfile'])
        if 'benefitProfile' in self.spec:
            self.benefits = self.engines.optimize_benefit(
                self.spec['benefitProfile'],
                self.spec.get('spouseBenefitProfile'),
                exhaustive=bool(self.spec.get('exhaustiveSearch', False)),
            )

    def get_program_overview(self) -> dict:
        overview = {
            "program_name": self.program_name,
            "has_tax_profile": self.tax_result is not None,
            "has_benefit_profile": self.benefits is not None,
            "is_couple": self.benefits is not None and self.benefits.is_couple,
        }
        if self.tax_result is not None:
            overview["tax_year"] = self.tax_result.tax_year
            overview["filing_status"] = self.tax_result.filing_status
        if self.benefits is not None:
            overview["birth_year"] = self.spec['benefitProfile'].get('birthYear')
            overview["pia"] = round(self.benefits.pia, 2)
            overview["full_retirement_age"] = str(self.benefits.fra)
            if self.benefits.is_couple:
                overview["spouse_birth_year"] = self.spec['spouseBenefitProfile'].get('birthYear')
                overview["spouse_pia"] = round(self.benefits.spouse_pia, 2)
        return overview

    def get_tax_summary(self) -> dict:
        if self.tax_result is None:
            return {"error": f"Program '{self.program_name}' has no taxProfile"}
        r = self.tax_result
        return {
            "tax_year": r.tax_year,
            "filing_status": r.filing_status,
            "adjusted_gross_income": round(r.adjusted_gross_income, 2),
            "deduction": {"type": r.deduction_type, "amount": round(r.deduction_used, 2)},
            "qbi_deduction": round(r.qbi_deduction, 2),
            "senior_deduction": round(r.senior_deduction, 2),
            "taxable_income": round(r.taxable_income, 2),
            "taxable_social_security": round(r.taxable_social_security, 2),
            "ordinary_income_tax": round(r.ordinary_income_tax, 2),
            "preferential_income_tax": round(r.preferential_income_tax, 2),
            "self_employment_tax": round(r.self_employment_tax, 2),
            "net_investment_income_tax": round(r.net_investment_income_tax, 2),
            "additional_medicare_tax": round(r.additional_medicare_tax, 2),
            "child_tax_credit": round(r.child_tax_credit, 2),
            "total_tax": round(r.total_tax, 2),
            "amount_due_or_refund": round(r.amount_due_or_refund, 2),
            "marginal_rate": f"{r.marginal_rate:.1%}",
            "effective_rate": f"{r.effective_rate:.2%}",
        }

    def get_tax_brackets(self) -> dict:
        if self.tax_result is None:
            return {"error": f"Program '{self.program_name}' has no taxProfile"}
        return {
            "ordinary": to_plain(self.tax_result.ordinary_breakdown),
            "preferential": to_plain(self.tax_result.preferential_breakdown),
        }

    def _require_benefits(self) -> Optional[dict]:
        if self.benefits is None:
            return {"error": f"Program '{self.program_name}' has no benefitProfile"}
        return None

    def get_claiming_scenarios(self) -> dict:
        error = self._require_benefits()
        if error:
            return error
        b = self.benefits
        return {
            "pia": round(b.pia, 2),
            "full_retirement_age": str(b.fra),
            "optimal_age": b.optimal_age,
            "optimal_monthly": round(b.optimal_monthly, 2),
            "optimal_lifetime": round(b.optimal_lifetime, 2),
            "scenarios": to_plain(b.scenarios),
        }

    def get_couple_strategies(self) -> dict:
        error = self._require_benefits()
        if error:
            return error
        b = self.benefits
        if not b.is_couple:
            return {"error": f"Program '{self.program_name}' has no spouseBenefitProfile"}
        return {
            "optimal_strategy": b.optimal_strategy.name,
            "strategies": to_plain(b.strategies),
            "total_monthly_income": round(b.total_monthly_income, 2),
            "total_annual_income": round(b.total_annual_income, 2),
        }

    def get_benefit_schedule(self, start_year: Optional[int] = None, end_year: Optional[int] = None) -> dict:
        error = self._require_benefits()
        if error:
            return error
        rows = [
            row for row in self.benefits.schedule
            if (start_year is None or row.year >= start_year) and (end_year is None or row.year <= end_year)
        ]
        return {
            "rows": to_plain(rows),
            "lifetime_total_benefits": round(self.benefits.lifetime_total_benefits, 2),
        }

    def get_pension_offset(self) -> dict:
        error = self._require_benefits()
        if error:
            return error
        return {
            "person1": to_plain(self.benefits.pension_offset),
            "person2": to_plain(self.benefits.spouse_pension_offset),
        }


class MultiProgramTools:
    """Manager for multiple planning programs.

    Discovers all available programs and caches their results, allowing
    queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the planner root directory
            default_program: Default program to use when none specified
        """
        self.base_path = base_path
        self.engines = Engines(base_path)
        self.programs: Dict[str, PlannerTools] = {}
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = PlannerTools(self.base_path, name, self.engines)
                except (OSError, ValueError, KeyError) as e:
                    # One broken program must not hide the others
                    logger.warning("Failed to load program '%s': %s", name, e)

        if self.default_program is None and self.programs:
            self.default_program = next(iter(self.programs))

    def _get_program(self, program: Optional[str] = None) -> PlannerTools:
        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def list_programs(self) -> dict:
        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": {name: tools.get_program_overview() for name, tools in self.programs.items()},
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache.

        Use this after adding, modifying, or removing program spec.json files
        to pick up changes without restarting the server.
        """
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())
        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(new_programs - old_programs),
                "removed": sorted(old_programs - new_programs),
                "reloaded": sorted(old_programs & new_programs),
            }
        }

    def _with_program(self, program: Optional[str], result: dict) -> dict:
        result["program"] = program or self.default_program
        return result

    def get_program_overview(self, program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_program_overview())

    def get_tax_summary(self, program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_tax_summary())

    def get_tax_brackets(self, program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_tax_brackets())

    def get_claiming_scenarios(self, program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_claiming_scenarios())

    def get_couple_strategies(self, program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_couple_strategies())

    def get_benefit_schedule(self, start_year: Optional[int] = None, end_year: Optional[int] = None,
                             program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_benefit_schedule(start_year, end_year))

    def get_pension_offset(self, program: Optional[str] = None) -> dict:
        return self._with_program(program, self._get_program(program).get_pension_offset())

    def evaluate_tax(self, tax_profile: dict) -> dict:
        """Evaluate an ad-hoc taxProfile without saving it as a program."""
        return to_plain(self.engines.evaluate_tax(tax_profile))

    def optimize_benefit(self, benefit_profile: dict, spouse_profile: Optional[dict] = None,
                         exhaustive: bool = False) -> dict:
        """Optimize an ad-hoc benefitProfile (and spouse) without saving it as a program."""
        result = self.engines.optimize_benefit(benefit_profile, spouse_profile, exhaustive)
        plain = to_plain(result)
        plain["fra"] = str(result.fra)
        if result.spouse_fra is not None:
            plain["spouse_fra"] = str(result.spouse_fra)
        return plain
