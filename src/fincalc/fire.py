from __future__ import annotations

import logging
from typing import List

from .schemas import FireInputs, FireResult, NetWorthPoint

logger = logging.getLogger(__name__)


def weighted_return(inputs: FireInputs) -> float:
    """Nominal portfolio return in percent."""
    return (
        inputs.stocks_allocation / 100 * inputs.stocks_return
        + inputs.bonds_allocation / 100 * inputs.bonds_return
        + inputs.cash_allocation / 100 * inputs.cash_return
        + inputs.other_allocation / 100 * inputs.other_return
    )


def real_return(inputs: FireInputs) -> float:
    """Inflation-adjusted return in percent."""
    nominal = 1 + weighted_return(inputs) / 100
    return (nominal / (1 + inputs.inflation_rate / 100) - 1) * 100


def fire_number(inputs: FireInputs) -> float:
    return inputs.desired_retirement_spending / (inputs.safe_withdrawal_rate / 100)


def calculate_fire(inputs: FireInputs) -> FireResult:
    """
    Grow net worth one year at a time until it reaches the FIRE number or the
    end age. Savings are what is left of a growing salary after today's
    spending, plus the employer match, never negative.
    """
    if abs(inputs.total_allocation - 100) > 1e-9:
        raise ValueError(
            f"Asset allocations must sum to 100% (got {inputs.total_allocation:g}%)"
        )

    growth_rate = real_return(inputs) / 100
    target = fire_number(inputs)
    income_growth = 1 + inputs.income_growth_rate / 100
    match_rate = inputs.company_401k_match / 100

    age = inputs.current_age
    net_worth = inputs.current_net_worth
    chart: List[NetWorthPoint] = [NetWorthPoint(age=age, net_worth=net_worth)]
    fire_age = None

    while age < inputs.end_age:
        age += 1
        growth = income_growth ** (age - inputs.current_age)
        salary = inputs.post_tax_salary * growth
        match = match_rate * inputs.pre_tax_salary * growth
        savings = max(0.0, salary - inputs.current_annual_spending + match)

        net_worth = net_worth * (1 + growth_rate) + savings
        chart.append(NetWorthPoint(age=age, net_worth=net_worth))
        if net_worth >= target:
            fire_age = age
            break

    logger.debug("FIRE number %.0f reached at age %s", target, fire_age)
    return FireResult(
        fire_number=round(target),
        fire_age=fire_age,
        years_until_fire=fire_age - inputs.current_age if fire_age is not None else None,
        chart_data=chart,
    )
