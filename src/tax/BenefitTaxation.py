"""Taxable portion of Social Security benefits.

Provisional income decides how much of the gross benefit is added to
ordinary income: nothing below the first threshold, up to 50% between the
thresholds, up to 85% above the second.
"""

from tax.SurtaxDetails import SE_NET_EARNINGS_FACTOR


def provisional_income(ordinary_income: float, qualified_dividends: float,
                       short_term_capital_gains: float, long_term_capital_gains: float,
                       self_employment_income: float, benefits: float) -> float:
    return (ordinary_income + qualified_dividends + short_term_capital_gains + long_term_capital_gains
            + self_employment_income * SE_NET_EARNINGS_FACTOR * 0.5
            + benefits * 0.5)


def taxable_benefit(provisional: float, benefits: float, first_threshold: float, second_threshold: float) -> float:
    """Return the taxable portion of `benefits` given provisional income.

    Args:
        provisional: Provisional income (see `provisional_income`).
        benefits: Gross benefit received for the year.
        first_threshold: Start of the 50% tier for the filing status.
        second_threshold: Start of the 85% tier for the filing status.
    """
    if provisional > second_threshold:
        first_tier = min((second_threshold - first_threshold) * 0.5, benefits * 0.5)
        return min(benefits * 0.85, (provisional - second_threshold) * 0.85 + first_tier)
    if provisional > first_threshold:
        return min(benefits * 0.5, (provisional - first_threshold) * 0.5)
    return 0.0
