"""Mortgage-interest and property-tax deduction estimates for homeowners."""

from __future__ import annotations

from typing import Optional

from .formatting import round_cents
from .policy import HOUSING_POLICY_YEAR, TaxPolicy, get_policy
from .schemas import TaxBenefit


def marginal_tax_rate(
    income: float, filing_status: str, policy: Optional[TaxPolicy] = None
) -> float:
    policy = policy or get_policy(HOUSING_POLICY_YEAR)
    brackets = policy.brackets_for(filing_status)
    for bracket in brackets:
        if bracket.contains(income):
            return bracket.rate
    return brackets[-1].rate


def calculate_tax_benefits(
    home_price: float,
    down_payment_percent: float,
    interest_rate: float,
    property_tax_rate: float,
    annual_income: float,
    marital_status: str,
    mortgage_balance: float = 0.0,
    policy: Optional[TaxPolicy] = None,
) -> TaxBenefit:
    """
    Tax saved by itemizing mortgage interest and property tax.

    Only the part of the itemized total above the standard deduction saves
    anything. Interest is approximated as ``balance * rate`` on the balance
    passed in; a zero balance means the opening loan amount.
    """
    policy = policy or get_policy(HOUSING_POLICY_YEAR)
    balance = mortgage_balance or home_price * (1 - down_payment_percent / 100)
    annual_interest = balance * interest_rate / 100
    annual_property_tax = home_price * property_tax_rate / 100

    standard_deduction = policy.standard_deduction_for(marital_status)
    itemized = annual_interest + min(annual_property_tax, policy.salt_cap)
    rate = marginal_tax_rate(annual_income, marital_status, policy)

    savings = 0.0
    if itemized > standard_deduction:
        savings = (itemized - standard_deduction) * rate

    return TaxBenefit(
        annual_tax_savings=round_cents(savings),
        marginal_tax_rate=rate,
        itemized_deductions=round_cents(itemized),
        standard_deduction=standard_deduction,
    )
