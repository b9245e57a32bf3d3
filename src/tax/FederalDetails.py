import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from model.TaxProfile import FilingStatus

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = os.path.normpath(
    os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'federal-details.json')
)


@dataclass(frozen=True)
class Bracket:
    lower: float
    upper: Optional[float]  # None marks the unbounded top bracket
    rate: float


@dataclass(frozen=True)
class SeniorDeductionRules:
    amount_per_person: float
    phaseout_rate: float
    threshold: Dict[FilingStatus, float]


@dataclass(frozen=True)
class TaxYearRules:
    """Constant parameters for one tax year. Pure data."""
    year: int
    brackets: Dict[FilingStatus, Tuple[Bracket, ...]]
    preferential_brackets: Dict[FilingStatus, Tuple[Bracket, ...]]
    standard_deduction: Dict[FilingStatus, float]
    additional_standard_deduction: Dict[FilingStatus, float]
    social_security_wage_base: float
    niit_threshold: Dict[FilingStatus, float]
    additional_medicare_threshold: Dict[FilingStatus, float]
    qbi_threshold: Dict[FilingStatus, float]
    qbi_phaseout_range: Dict[FilingStatus, float]
    benefit_taxability: Dict[FilingStatus, Tuple[float, float]]
    child_tax_credit: float
    senior_deduction: Optional[SeniorDeductionRules] = None


def _rate(value) -> float:
    rate = float(value)
    if rate > 1:
        rate = rate / 100.0
    return rate


def _parse_brackets(entries: List[dict], label: str) -> Tuple[Bracket, ...]:
    """Turn `{maxIncome, rate}` entries into contiguous brackets.

    Each bracket starts where the previous one ends; only the last entry
    may (and must) have a null maxIncome.
    """
    if not entries:
        raise ValueError(f"{label}: bracket list is empty")
    brackets = []
    lower = 0.0
    for i, entry in enumerate(entries):
        upper = entry.get("maxIncome")
        is_last = i == len(entries) - 1
        if upper is None:
            if not is_last:
                raise ValueError(f"{label}: only the top bracket may be unbounded")
        else:
            upper = float(upper)
            if upper <= lower:
                raise ValueError(f"{label}: bracket edges must increase ({upper} after {lower})")
            if is_last:
                raise ValueError(f"{label}: top bracket must be unbounded (maxIncome null)")
        brackets.append(Bracket(lower=lower, upper=upper, rate=_rate(entry["rate"])))
        lower = upper
    return tuple(brackets)


def _per_status(mapping: dict, key: str, year: int) -> Dict[FilingStatus, dict]:
    if not isinstance(mapping, dict):
        raise ValueError(f"{year}: '{key}' must be keyed by filing status")
    missing = [s.value for s in FilingStatus if s.value not in mapping]
    if missing:
        raise ValueError(f"{year}: '{key}' is missing filing status {missing}")
    return {status: mapping[status.value] for status in FilingStatus}


def _amounts(year_data: dict, key: str, year: int) -> Dict[FilingStatus, float]:
    return {s: float(v) for s, v in _per_status(year_data.get(key), key, year).items()}


class FederalDetails:
    """Federal tax parameters keyed by tax year.

    Reads `reference/federal-details.json` by default; pass `data` to use an
    in-memory table instead (same shape as the JSON file). Years are never
    extrapolated: asking for a year that is not in the table is an error.
    """

    def __init__(self, reference_path: Optional[str] = None, data: Optional[dict] = None):
        if data is None:
            ref_path = reference_path or DEFAULT_REFERENCE_PATH
            with open(ref_path, 'r') as f:
                data = json.load(f)
        self.rules_by_year: Dict[int, TaxYearRules] = {}
        self._load_rules(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'FederalDetails':
        return cls(data=data)

    def _load_rules(self, data: dict):
        tax_years = data.get("taxYears", [])
        if not tax_years:
            raise ValueError("federal-details.json must contain a 'taxYears' array with at least one entry")

        for year_data in sorted(tax_years, key=lambda x: x["year"]):
            year = int(year_data["year"])
            if year in self.rules_by_year:
                raise ValueError(f"Tax year {year} is defined more than once")
            self.rules_by_year[year] = self._build_year(year, year_data)

        logger.debug("Loaded federal tax rules for years %s", sorted(self.rules_by_year))

    def _build_year(self, year: int, year_data: dict) -> TaxYearRules:
        brackets = {
            status: _parse_brackets(entries, f"{year} {status.value} brackets")
            for status, entries in _per_status(year_data.get("brackets"), "brackets", year).items()
        }
        preferential = {
            status: _parse_brackets(entries, f"{year} {status.value} qualified dividend/LTCG brackets")
            for status, entries in _per_status(
                year_data.get("qualifiedDivLTCGBrackets"), "qualifiedDivLTCGBrackets", year
            ).items()
        }
        taxability = {}
        for status, t in _per_status(year_data.get("socialSecurityTaxability"), "socialSecurityTaxability", year).items():
            first, second = float(t["first"]), float(t["second"])
            if second < first:
                raise ValueError(f"{year}: benefit taxability thresholds out of order for {status.value}")
            taxability[status] = (first, second)

        senior = None
        senior_data = year_data.get("seniorDeduction")
        if senior_data:
            senior = SeniorDeductionRules(
                amount_per_person=float(senior_data["amountPerPerson"]),
                phaseout_rate=_rate(senior_data["phaseoutRate"]),
                threshold=_amounts(senior_data, "threshold", year),
            )

        return TaxYearRules(
            year=year,
            brackets=brackets,
            preferential_brackets=preferential,
            standard_deduction=_amounts(year_data, "standardDeduction", year),
            additional_standard_deduction=_amounts(year_data, "additionalStandardDeduction", year),
            social_security_wage_base=float(year_data["socialSecurityWageBase"]),
            niit_threshold=_amounts(year_data, "niitThreshold", year),
            additional_medicare_threshold=_amounts(year_data, "additionalMedicareThreshold", year),
            qbi_threshold=_amounts(year_data, "qbiThreshold", year),
            qbi_phaseout_range=_amounts(year_data, "qbiPhaseoutRange", year),
            benefit_taxability=taxability,
            child_tax_credit=float(year_data.get("childTaxCredit", 0)),
            senior_deduction=senior,
        )

    def available_years(self) -> List[int]:
        return sorted(self.rules_by_year)

    def rules_for(self, year: int) -> TaxYearRules:
        """Return the rules for `year`, refusing to guess for unknown years."""
        if year not in self.rules_by_year:
            raise ValueError(
                f"No tax rules available for year {year} (available: {self.available_years()})"
            )
        return self.rules_by_year[year]
