import sys
import os
import json
import argparse
import logging
from typing import Optional

from model.TaxProfile import TaxProfile
from model.BenefitProfile import BenefitProfile
from calc.tax_calculator import evaluate_tax
from calc.benefit_optimizer import optimize_benefit
from render.renderers import RENDERER_REGISTRY, SOURCE_TAX

logger = logging.getLogger(__name__)

INPUT_PARAMETERS_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', 'input-parameters'))


def load_spec(program_name: str, base_dir: Optional[str] = None) -> dict:
    """Read input-parameters/<program_name>/spec.json."""
    spec_path = os.path.join(base_dir or INPUT_PARAMETERS_DIR, program_name, 'spec.json')
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")
    with open(spec_path, 'r') as f:
        return json.load(f)


def build_result(spec: dict, source: str):
    """Evaluate the part of `spec` a renderer of the given source consumes."""
    if source == SOURCE_TAX:
        if 'taxProfile' not in spec:
            raise ValueError("spec.json has no 'taxProfile' section")
        return evaluate_tax(TaxProfile.from_dict(spec['taxProfile']))

    if 'benefitProfile' not in spec:
        raise ValueError("spec.json has no 'benefitProfile' section")
    profile = BenefitProfile.from_dict(spec['benefitProfile'])
    spouse_data = spec.get('spouseBenefitProfile')
    spouse = BenefitProfile.from_dict(spouse_data) if spouse_data else None
    return optimize_benefit(profile, spouse, exhaustive=bool(spec.get('exhaustiveSearch', False)))


def run(spec: dict, mode: str) -> None:
    renderer = RENDERER_REGISTRY[mode]()
    renderer.render(build_result(spec, renderer.source))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Federal tax and Social Security claiming calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  TaxDetails         Print the federal tax breakdown for the taxProfile (default)
  ClaimingScenarios  Compare claiming ages 62-70 for the benefitProfile
  CoupleStrategies   Compare household claiming strategies (needs spouseBenefitProfile)
  Schedule           Print the year-by-year benefit and pension schedule
  PensionOffset      Compare spousal benefits with and without the legacy pension offset

Examples:
  python src/Program.py example
  python src/Program.py example --mode ClaimingScenarios
  python src/Program.py couple --mode Schedule
        """
    )
    parser.add_argument('program_name', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='TaxDetails',
                        help='Output mode (default: TaxDetails)')
    parser.add_argument('--log-level',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='WARNING',
                        help='Logging verbosity (default: WARNING)')

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(levelname)s %(name)s: %(message)s')

    try:
        spec = load_spec(args.program_name)
        run(spec, args.mode)
    except (FileNotFoundError, ValueError) as e:
        logger.debug("Run failed", exc_info=True)
        print(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
