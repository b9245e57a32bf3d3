"""Field metadata for the benefit result records.

This module provides descriptions and short names for the fields of
YearlyScheduleRow, ClaimingScenario and CoupleStrategy. Short names are used
as column headers in tables.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Schedule
    "year": FieldInfo("Year", "Calendar year"),
    "state": FieldInfo("State", "Household state for the year"),
    "person1_age": FieldInfo("P1 Age", "Age of person 1 during the year (blank once deceased)"),
    "person2_age": FieldInfo("P2 Age", "Age of person 2 during the year (blank once deceased)"),
    "person1_ss": FieldInfo("P1 Social Security", "Monthly Social Security paid to person 1"),
    "person1_pension": FieldInfo("P1 Pension", "Monthly pension attributed to person 1"),
    "person2_ss": FieldInfo("P2 Social Security", "Monthly Social Security paid to person 2"),
    "person2_pension": FieldInfo("P2 Pension", "Monthly pension attributed to person 2"),
    "total_monthly": FieldInfo("Monthly Total", "Household monthly income from benefits and pensions"),
    "total_annual": FieldInfo("Annual Total", "Household annual income from benefits and pensions"),
    "notes": FieldInfo("Notes", "What changed in the household this year"),

    # Claiming scenarios
    "age": FieldInfo("Claim Age", "Age at which benefits start"),
    "monthly_benefit": FieldInfo("Monthly Benefit", "Monthly benefit when claiming at this age"),
    "annual_benefit": FieldInfo("Annual Benefit", "Annual benefit when claiming at this age"),
    "break_even_vs_62": FieldInfo("Break-Even vs 62", "Age at which claiming later catches up with claiming at 62"),
    "cumulative_at_life_expectancy": FieldInfo("Lifetime Value", "Total received through life expectancy"),

    # Couple strategies
    "name": FieldInfo("Strategy", "Name of the claiming strategy"),
    "person1_monthly": FieldInfo("P1 Monthly", "Person 1's monthly benefit, own or spousal"),
    "person2_monthly": FieldInfo("P2 Monthly", "Person 2's monthly benefit, own or spousal"),
    "combined_monthly": FieldInfo("Combined Monthly", "Household monthly benefit while both are alive"),
    "survivor_benefit": FieldInfo("Survivor Benefit", "Monthly survivor benefit paid to the surviving spouse"),
    "lifetime_household": FieldInfo("Lifetime Household", "Estimated household benefits over both lifetimes"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into lines no wider than max_width, splitting on spaces."""
    if len(text) <= max_width:
        return [text]

    words = text.split()
    lines = []
    current_line = ""

    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines
