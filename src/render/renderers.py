"""Renderer classes for displaying tax and benefit results.

Each renderer prints one view of a result record as a fixed-width table.
Currency is shown in whole dollars. Renderers declare which result they
consume through `source`: 'tax' renderers take a TaxResult, 'benefit'
renderers take a BenefitOptimization.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from model.BenefitResult import BenefitOptimization, PensionOffsetResult
from model.TaxResult import BracketSlice, TaxResult
from model.field_metadata import get_short_name, wrap_header

SOURCE_TAX = 'tax'
SOURCE_BENEFIT = 'benefit'


def format_currency(amount: float) -> str:
    """Whole-dollar currency: 12345.6 -> '$12,346', -50 -> '-$50'."""
    rounded = round(amount)
    if rounded < 0:
        return f"-${-rounded:,}"
    return f"${rounded:,}"


def format_rate(rate: float) -> str:
    """0.22 -> '22%', 0.035 -> '3.5%'."""
    return f"{rate * 100:g}%"


def format_age(age: Optional[float]) -> str:
    return '-' if age is None else f"{age:g}"


def bracket_label(entry: BracketSlice) -> str:
    if entry.upper is None:
        return f"{format_rate(entry.rate)} over {format_currency(entry.lower)}"
    return f"{format_rate(entry.rate)} on {format_currency(entry.lower)} - {format_currency(entry.upper)}"


def format_multiline_headers(columns: List[tuple], first_label: str = 'Year', first_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        first_label: Label of the leading key column
        first_width: Width of the leading key column

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = [(wrap_header(header, width), width) for header, width in columns]

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at the top so labels sit on the last line
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        label = first_label if line_idx == max_lines - 1 else ''
        header_line = f"  {label:<{first_width}}"
        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * first_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def _line(label: str, amount: float, suffix: str = '') -> None:
    print(f"  {label + ':':<40} {format_currency(amount):>14}{suffix}")


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    source = SOURCE_BENEFIT

    @abstractmethod
    def render(self, data) -> None:
        """Render the data to output."""
        pass


class TaxDetailsRenderer(BaseRenderer):
    """Renderer for a detailed federal tax breakdown."""

    source = SOURCE_TAX

    def render(self, data: TaxResult) -> None:
        print()
        print("=" * 60)
        print(f"{'FEDERAL TAX SUMMARY FOR ' + str(data.tax_year):^60}")
        print(f"{'Filing status: ' + data.filing_status:^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("INCOME")
        print("-" * 60)
        _line('Ordinary Income (incl. taxable SS)', data.total_ordinary_income)
        if data.taxable_social_security > 0:
            _line('  Taxable Social Security', data.taxable_social_security)
        if data.total_preferential_income > 0:
            _line('Qualified Dividends + LTCG', data.total_preferential_income)
        print(f"  {'-' * 40}")
        _line('Adjusted Gross Income', data.adjusted_gross_income)

        print()
        print("-" * 60)
        print("DEDUCTIONS")
        print("-" * 60)
        _line(f'{data.deduction_type.capitalize()} Deduction', data.deduction_used, '  <- used')
        if data.qbi_deduction > 0:
            _line('QBI Deduction', data.qbi_deduction)
        if data.senior_deduction > 0:
            _line('Senior Deduction', data.senior_deduction)
        print(f"  {'-' * 40}")
        _line('Taxable Income', data.taxable_income)

        print()
        print("-" * 60)
        print("ORDINARY INCOME BRACKETS")
        print("-" * 60)
        for entry in data.ordinary_breakdown:
            print(f"  {bracket_label(entry):<40} {format_currency(entry.tax):>14}")
        _line('Ordinary Income Tax', data.ordinary_income_tax)
        if data.preferential_breakdown:
            print()
            print("-" * 60)
            print("QUALIFIED DIVIDEND / LTCG BRACKETS")
            print("-" * 60)
            for entry in data.preferential_breakdown:
                print(f"  {bracket_label(entry):<40} {format_currency(entry.tax):>14}")
            _line('Preferential Income Tax', data.preferential_income_tax)

        print()
        print("-" * 60)
        print("OTHER TAXES AND CREDITS")
        print("-" * 60)
        _line('Self-Employment Tax', data.self_employment_tax)
        _line('Net Investment Income Tax', data.net_investment_income_tax)
        _line('Additional Medicare Tax', data.additional_medicare_tax)
        _line('Child Tax Credit', -data.child_tax_credit)

        print()
        print("=" * 60)
        print("SUMMARY")
        print("=" * 60)
        _line('Total Tax Before Credits', data.total_tax_before_credits)
        _line('TOTAL TAX', data.total_tax)
        _line('Payments', data.total_payments)
        if data.is_refund:
            _line('REFUND', -data.amount_due_or_refund)
        else:
            _line('AMOUNT DUE', data.amount_due_or_refund)
        print(f"  {'Marginal Rate:':<40} {format_rate(data.marginal_rate):>14}")
        print(f"  {'Effective Rate:':<40} {data.effective_rate:>14.2%}")
        print("=" * 60)
        print()


class ClaimingScenariosRenderer(BaseRenderer):
    """Renderer for the single-person claiming-age comparison."""

    def render(self, data: BenefitOptimization) -> None:
        print()
        print("=" * 80)
        print(f"{'CLAIMING AGE SCENARIOS':^80}")
        print("=" * 80)
        print(f"  PIA: {format_currency(data.pia)}    Full retirement age: {data.fra}")
        print()

        columns = [
            (get_short_name("monthly_benefit"), 14),
            (get_short_name("annual_benefit"), 14),
            (get_short_name("break_even_vs_62"), 12),
            (get_short_name("cumulative_at_life_expectancy"), 16),
        ]
        header_lines, sep_line = format_multiline_headers(columns, first_label='Age')
        for line in header_lines:
            print(line)
        print(sep_line)

        for scenario in data.scenarios:
            marker = '  <- optimal' if scenario.age == data.optimal_age else ''
            break_even = format_age(scenario.break_even_vs_62)
            print(f"  {scenario.age:<6} {format_currency(scenario.monthly_benefit):>14}"
                  f" {format_currency(scenario.annual_benefit):>14} {break_even:>12}"
                  f" {format_currency(scenario.cumulative_at_life_expectancy):>16}{marker}")

        print()
        print(f"  Optimal claiming age: {data.optimal_age} "
              f"({format_currency(data.optimal_monthly)}/month, "
              f"{format_currency(data.optimal_lifetime)} through life expectancy)")
        print("=" * 80)
        print()


class CoupleStrategiesRenderer(BaseRenderer):
    """Renderer for the couple claiming-strategy comparison."""

    def render(self, data: BenefitOptimization) -> None:
        if not data.is_couple:
            print("Couple strategies require a spouseBenefitProfile")
            return

        print()
        print("=" * 110)
        print(f"{'COUPLE CLAIMING STRATEGIES':^110}")
        print("=" * 110)
        print(f"  Person 1 PIA: {format_currency(data.pia)} (FRA {data.fra})    "
              f"Person 2 PIA: {format_currency(data.spouse_pia)} (FRA {data.spouse_fra})")
        print()

        columns = [
            ("Ages", 7),
            (get_short_name("person1_monthly"), 11),
            (get_short_name("person2_monthly"), 11),
            (get_short_name("combined_monthly"), 12),
            (get_short_name("survivor_benefit"), 12),
            (get_short_name("lifetime_household"), 14),
        ]
        header_lines, sep_line = format_multiline_headers(columns, first_label='Strategy', first_width=30)
        for line in header_lines:
            print(line)
        print(sep_line)

        for strategy in data.strategies:
            marker = '  <- optimal' if strategy.is_optimal else ''
            ages = f"{strategy.person1_age}/{strategy.person2_age}"
            print(f"  {strategy.name:<30} {ages:>7} {format_currency(strategy.person1_monthly):>11}"
                  f" {format_currency(strategy.person2_monthly):>11} {format_currency(strategy.combined_monthly):>12}"
                  f" {format_currency(strategy.survivor_benefit):>12}"
                  f" {format_currency(strategy.lifetime_household):>14}{marker}")

        print()
        print(f"  Recommended: {data.optimal_strategy.name}")
        print(f"  Income at chosen ages (incl. pensions): {format_currency(data.total_monthly_income)}/month, "
              f"{format_currency(data.total_annual_income)}/year")
        print("=" * 110)
        print()


class ScheduleRenderer(BaseRenderer):
    """Renderer for the year-by-year benefit and pension schedule."""

    def render(self, data: BenefitOptimization) -> None:
        width = 150 if data.is_couple else 80
        print()
        print("=" * width)
        print(f"{'BENEFIT SCHEDULE':^{width}}")
        print("=" * width)
        print()

        if not data.schedule:
            print("  No schedule years: life expectancy ends before benefits start")
            print()
            return

        if data.is_couple:
            columns = [
                (get_short_name("person1_age"), 6),
                (get_short_name("person2_age"), 6),
                (get_short_name("person1_ss"), 11),
                (get_short_name("person1_pension"), 11),
                (get_short_name("person2_ss"), 11),
                (get_short_name("person2_pension"), 11),
                (get_short_name("total_monthly"), 12),
                (get_short_name("total_annual"), 12),
            ]
        else:
            columns = [
                ("Age", 6),
                ("Social Security", 11),
                ("Pension", 11),
                (get_short_name("total_monthly"), 12),
                (get_short_name("total_annual"), 12),
            ]
        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        for row in data.schedule:
            if data.is_couple:
                print(f"  {row.year:<6} {format_age(row.person1_age):>6} {format_age(row.person2_age):>6}"
                      f" {format_currency(row.person1_ss):>11} {format_currency(row.person1_pension):>11}"
                      f" {format_currency(row.person2_ss):>11} {format_currency(row.person2_pension):>11}"
                      f" {format_currency(row.total_monthly):>12} {format_currency(row.total_annual):>12}"
                      f"  {row.notes}")
            else:
                print(f"  {row.year:<6} {format_age(row.person1_age):>6}"
                      f" {format_currency(row.person1_ss):>11} {format_currency(row.person1_pension):>11}"
                      f" {format_currency(row.total_monthly):>12} {format_currency(row.total_annual):>12}")

        print(sep_line)
        print(f"  {'Lifetime total benefits:':<40} {format_currency(data.lifetime_total_benefits):>14}")
        print("=" * width)
        print()


class PensionOffsetRenderer(BaseRenderer):
    """Renderer for the pension offset comparison of each pension holder."""

    def render(self, data: BenefitOptimization) -> None:
        print()
        print("=" * 60)
        print(f"{'PENSION OFFSET COMPARISON':^60}")
        print("=" * 60)

        offsets = [('Person 1', data.pension_offset), ('Person 2', data.spouse_pension_offset)]
        offsets = [(label, result) for label, result in offsets if result is not None]
        if not offsets:
            print("  No spouse holds a non-covered pension in a two-person household")
            print()
            return

        for label, result in offsets:
            self._render_one(label, result)
        print("=" * 60)
        print()

    @staticmethod
    def _render_one(label: str, result: PensionOffsetResult) -> None:
        print()
        print("-" * 60)
        print(f"{label.upper()} (PENSION HOLDER)")
        print("-" * 60)
        _line('Monthly Pension', result.pension)
        _line('Legacy Offset (2/3 of pension)', result.offset_reduction)
        _line('Spousal Benefit Without Offset', result.spousal_benefit_without_offset)
        _line('Spousal Benefit With Offset', result.spousal_benefit_with_offset)
        print(f"  {'-' * 40}")
        _line('Monthly Savings', result.monthly_savings)
        _line('Annual Savings', result.annual_savings)


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'TaxDetails': TaxDetailsRenderer,
    'ClaimingScenarios': ClaimingScenariosRenderer,
    'CoupleStrategies': CoupleStrategiesRenderer,
    'Schedule': ScheduleRenderer,
    'PensionOffset': PensionOffsetRenderer,
}
