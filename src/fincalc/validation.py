"""
Input checks for the rent-vs-buy projection.

Every check runs; violations come back as human-readable strings in check
order and nothing is raised. The projection itself assumes these have
passed.
"""

from __future__ import annotations

from typing import List, Tuple

from .formatting import format_percent
from .locations import DEFAULT_PROPERTY_TAX_RATE
from .mortgage import calculate_monthly_mortgage, calculate_pmi
from .schemas import ProjectionInputs, ValidationResult

MAX_HOUSING_RATIO = 45.0
MAX_RENT_RATIO = 35.0

# (attribute, low, high, message), inclusive bounds
_RANGES: List[Tuple[str, float, float, str]] = [
    ("down_payment_percent", 0, 100, "Down payment must be between 0% and 100%"),
    ("interest_rate", 0, 30, "Interest rate must be between 0% and 30%"),
    ("annual_home_value_increase", -10, 20, "Home value increase must be between -10% and 20%"),
    ("annual_rent_increase", 0, 20, "Rent increase must be between 0% and 20%"),
    ("annual_inflation", 0, 15, "Inflation rate must be between 0% and 15%"),
    ("annual_return_on_savings", 0, 30, "Investment return must be between 0% and 30%"),
    ("time_horizon", 1, 50, "Time horizon must be between 1 and 50 years"),
    ("mortgage_term", 5, 50, "Mortgage term must be between 5 and 50 years"),
]


def validate_inputs(inputs: ProjectionInputs) -> ValidationResult:
    errors: List[str] = []

    if inputs.monthly_rent <= 0:
        errors.append("Monthly rent must be greater than $0")
    if inputs.home_price <= 0:
        errors.append("Home price must be greater than $0")
    if inputs.annual_income <= 0:
        errors.append("Annual income must be greater than $0")

    for attr, low, high, message in _RANGES:
        value = getattr(inputs, attr)
        if value < low or value > high:
            errors.append(message)

    # Ratios need an income to divide by; a missing income is reported above.
    if inputs.annual_income > 0:
        errors.extend(_affordability_errors(inputs))

    return ValidationResult(errors=errors)


def monthly_housing_cost(inputs: ProjectionInputs) -> float:
    """Mortgage, tax, insurance, HOA, extra expenses and PMI for one month."""
    tax_rate = inputs.location.property_tax_rate or DEFAULT_PROPERTY_TAX_RATE
    mortgage = 0.0
    if inputs.mortgage_term > 0:
        mortgage = calculate_monthly_mortgage(
            inputs.home_price,
            inputs.down_payment_percent,
            inputs.interest_rate,
            inputs.mortgage_term,
        )
    return (
        mortgage
        + inputs.home_price * tax_rate / 100 / 12
        + inputs.home_price * inputs.home_insurance_rate / 100 / 12
        + inputs.monthly_hoa_fees
        + inputs.monthly_additional_expenses
        + calculate_pmi(inputs.home_price, inputs.down_payment_percent).monthly_pmi
    )


def _affordability_errors(inputs: ProjectionInputs) -> List[str]:
    errors: List[str] = []
    monthly_income = inputs.annual_income / 12

    housing_ratio = monthly_housing_cost(inputs) / monthly_income * 100
    if housing_ratio > MAX_HOUSING_RATIO:
        errors.append(
            f"Total housing costs ({format_percent(housing_ratio)}) exceed "
            f"recommended {MAX_HOUSING_RATIO:.0f}% of income"
        )

    rent_ratio = inputs.monthly_rent / monthly_income * 100
    if rent_ratio > MAX_RENT_RATIO:
        errors.append(
            f"Monthly rent ({format_percent(rent_ratio)}) exceeds "
            f"recommended {MAX_RENT_RATIO:.0f}% of income"
        )
    return errors
