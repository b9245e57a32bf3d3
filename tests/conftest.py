"""Pytest configuration for the household-planner test suite."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

# Configure pytest-asyncio so async tests marked with asyncio are run
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


def _per_status(value):
    return {"single": value, "mfj": value, "hoh": value}


def two_tier_table(year: int = 2030, standard_deduction: float = 0) -> dict:
    """A federal rule table with 10% up to $10,000 and 22% above, for every status."""
    brackets = [{"maxIncome": 10000, "rate": 10}, {"maxIncome": None, "rate": 22}]
    preferential = [{"maxIncome": 40000, "rate": 0}, {"maxIncome": None, "rate": 15}]
    return {
        "taxYears": [{
            "year": year,
            "brackets": _per_status(brackets),
            "qualifiedDivLTCGBrackets": _per_status(preferential),
            "standardDeduction": _per_status(standard_deduction),
            "additionalStandardDeduction": _per_status(0),
            "socialSecurityWageBase": 100000,
            "niitThreshold": _per_status(200000),
            "additionalMedicareThreshold": _per_status(200000),
            "qbiThreshold": _per_status(150000),
            "qbiPhaseoutRange": _per_status(50000),
            "socialSecurityTaxability": {
                "single": {"first": 25000, "second": 34000},
                "mfj": {"first": 32000, "second": 44000},
                "hoh": {"first": 25000, "second": 34000},
            },
            "childTaxCredit": 2000,
        }]
    }


@pytest.fixture
def two_tier_data():
    return two_tier_table()


@pytest.fixture
def rule_table_factory():
    return two_tier_table
