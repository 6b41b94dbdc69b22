"""
Personal-finance calculation kernel.

Rent-vs-buy projections (amortization, PMI, mortgage tax benefits, yearly
cost and equity), a progressive federal tax engine, and a FIRE projection.
Everything here is pure and synchronous; only ``data_sources`` touches the
network.
"""

from .fire import calculate_fire
from .formatting import format_currency, format_percent
from .locations import get_cost_of_living_adjustment
from .model import calculate_rent_vs_buy
from .mortgage import calculate_monthly_mortgage, calculate_pmi
from .benefits import calculate_tax_benefits
from .schemas import (
    FireInputs,
    FireResult,
    Location,
    ProjectionInputs,
    ProjectionResult,
    ProjectionSummary,
    TaxResult,
    UserState,
    YearResult,
)
from .tax import calculate_tax_results
from .validation import validate_inputs

__all__ = [
    "FireInputs",
    "FireResult",
    "Location",
    "ProjectionInputs",
    "ProjectionResult",
    "ProjectionSummary",
    "TaxResult",
    "UserState",
    "YearResult",
    "calculate_fire",
    "calculate_monthly_mortgage",
    "calculate_pmi",
    "calculate_rent_vs_buy",
    "calculate_tax_benefits",
    "calculate_tax_results",
    "format_currency",
    "format_percent",
    "get_cost_of_living_adjustment",
    "validate_inputs",
]
