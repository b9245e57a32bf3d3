import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from model.TaxResult import BracketSlice
from tax.FederalDetails import Bracket


@dataclass(frozen=True)
class BracketTax:
    tax: float
    breakdown: Tuple[BracketSlice, ...]

    @property
    def taxed_amount(self) -> float:
        return sum(s.amount for s in self.breakdown)

    @property
    def marginal_rate(self) -> float:
        """Rate of the highest bracket that received income (0 when nothing was taxed)."""
        return self.breakdown[-1].rate if self.breakdown else 0.0


def tax_on_amount(amount: float, brackets: Sequence[Bracket]) -> BracketTax:
    """Progressive tax on `amount`, filling brackets from the bottom.

    Only brackets that receive a non-zero slice appear in the breakdown,
    in bracket order.
    """
    tax = 0.0
    breakdown = []
    remaining = amount
    for b in brackets:
        if remaining <= 0:
            break
        width = remaining if b.upper is None else b.upper - b.lower
        taxable_in_bracket = min(remaining, width)
        tax_in_bracket = taxable_in_bracket * b.rate
        tax += tax_in_bracket
        if taxable_in_bracket > 0:
            breakdown.append(BracketSlice(
                rate=b.rate,
                lower=b.lower,
                upper=b.upper,
                amount=taxable_in_bracket,
                tax=tax_in_bracket,
            ))
        remaining -= taxable_in_bracket
    return BracketTax(tax=tax, breakdown=tuple(breakdown))


def stacked_tax_on_amount(amount: float, income_floor: float, brackets: Sequence[Bracket]) -> BracketTax:
    """Tax `amount` as if stacked on top of `income_floor` of already-taxed income.

    This is how qualified dividends and long-term gains are taxed: they
    fill whatever room ordinary income left in each preferential bracket.

    EXAMPLE (2025 MFJ: 0% up to $96,700, 15% up to $600,050, 20% above):
    - Ordinary taxable income: $80,000
    - Long-term gains: $30,000
    - $16,700 ($80,000 -> $96,700) at 0% = $0
    - $13,300 ($96,700 -> $110,000) at 15% = $1,995
    """
    tax = 0.0
    breakdown = []
    floor = max(0.0, income_floor)
    remaining = amount
    for b in brackets:
        if remaining <= 0:
            break
        top = math.inf if b.upper is None else b.upper
        room = max(0.0, top - floor)
        gains_in_bracket = min(remaining, room)
        if gains_in_bracket > 0:
            tax_in_bracket = gains_in_bracket * b.rate
            tax += tax_in_bracket
            breakdown.append(BracketSlice(
                rate=b.rate,
                lower=b.lower,
                upper=b.upper,
                amount=gains_in_bracket,
                tax=tax_in_bracket,
            ))
            remaining -= gains_in_bracket
            floor += gains_in_bracket
        # Ordinary income may end below this bracket's top; the next bracket starts at the top regardless
        if floor < top:
            floor = top
    return BracketTax(tax=tax, breakdown=tuple(breakdown))
