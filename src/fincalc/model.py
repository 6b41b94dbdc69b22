from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .benefits import calculate_tax_benefits
from .formatting import round_cents
from .locations import DEFAULT_PROPERTY_TAX_RATE, get_cost_of_living_adjustment
from .mortgage import calculate_monthly_mortgage, calculate_pmi
from .policy import PMI_REMOVAL_LTV, TaxPolicy
from .schemas import (
    PMIInfo,
    ProjectionInputs,
    ProjectionResult,
    ProjectionSummary,
    SimulationState,
    YearResult,
)

logger = logging.getLogger(__name__)

CLOSING_COST_RATE = 0.04
SELLING_COST_RATE = 0.06


@dataclass(frozen=True)
class ProjectionContext:
    """Values fixed for the whole run, derived once from the inputs."""

    inputs: ProjectionInputs
    cost_of_living: float
    annual_mortgage_payment: float
    pmi: PMIInfo
    property_tax_rate: float
    annual_property_tax: float
    annual_home_insurance: float
    annual_hoa: float
    closing_costs: float
    policy: Optional[TaxPolicy] = None

    @classmethod
    def from_inputs(
        cls, inputs: ProjectionInputs, policy: Optional[TaxPolicy] = None
    ) -> "ProjectionContext":
        cost_of_living = get_cost_of_living_adjustment(inputs.location.state)
        property_tax_rate = inputs.location.property_tax_rate or DEFAULT_PROPERTY_TAX_RATE
        monthly = calculate_monthly_mortgage(
            inputs.home_price,
            inputs.down_payment_percent,
            inputs.interest_rate,
            inputs.mortgage_term,
        )
        return cls(
            inputs=inputs,
            cost_of_living=cost_of_living,
            annual_mortgage_payment=monthly * 12,
            pmi=calculate_pmi(inputs.home_price, inputs.down_payment_percent),
            property_tax_rate=property_tax_rate,
            annual_property_tax=inputs.home_price * property_tax_rate / 100,
            # Insurance and HOA stay flat for the whole horizon.
            annual_home_insurance=inputs.home_price * inputs.home_insurance_rate / 100,
            annual_hoa=inputs.monthly_hoa_fees * 12 * cost_of_living,
            closing_costs=inputs.home_price * CLOSING_COST_RATE * cost_of_living,
            policy=policy,
        )


def initial_state(ctx: ProjectionContext) -> SimulationState:
    inputs = ctx.inputs
    return SimulationState(
        mortgage_balance=inputs.loan_amount,
        home_value=inputs.home_price,
        monthly_rent=inputs.monthly_rent,
        # The down payment and closing costs are sunk on day one.
        cumulative_buying_cost=inputs.down_payment_amount + ctx.closing_costs,
    )


def step_year(
    ctx: ProjectionContext, state: SimulationState, year: int
) -> Tuple[SimulationState, YearResult]:
    """Advance the simulation by one year (1-based) and report that year."""
    inputs = ctx.inputs
    inflation = (1 + inputs.annual_inflation / 100) ** (year - 1)

    interest_paid = state.mortgage_balance * inputs.interest_rate / 100
    principal_paid = ctx.annual_mortgage_payment - interest_paid
    balance = max(0.0, state.mortgage_balance - principal_paid)

    home_value = state.home_value * (1 + inputs.annual_home_value_increase / 100)

    # Either threshold is enough, and once removed PMI never comes back.
    pmi_removed = state.pmi_removed or (
        balance <= inputs.home_price * PMI_REMOVAL_LTV
        or balance <= home_value * PMI_REMOVAL_LTV
    )
    if pmi_removed and not state.pmi_removed and ctx.pmi.pmi_required:
        logger.debug("PMI removed in year %s at balance %.2f", year, balance)
    pmi_cost = 0.0 if pmi_removed or not ctx.pmi.pmi_required else ctx.pmi.annual_pmi

    # Maintenance grows with the home value and with inflation.
    maintenance = (
        home_value * inputs.annual_maintenance_percent / 100 * ctx.cost_of_living * inflation
    )
    additional = inputs.monthly_additional_expenses * 12 * ctx.cost_of_living * inflation

    tax_savings = _tax_savings(ctx, balance)

    annual_buying = (
        ctx.annual_mortgage_payment
        + ctx.annual_property_tax
        + ctx.annual_home_insurance
        + pmi_cost
        + ctx.annual_hoa
        + maintenance
        + additional
        - tax_savings
    )
    cumulative_buying = state.cumulative_buying_cost + annual_buying
    equity = home_value - balance
    net_buying = cumulative_buying - equity

    # Renter's insurance is flat: no inflation, no location adjustment.
    annual_renting = state.monthly_rent * 12 + inputs.monthly_renters_insurance * 12
    cumulative_renting = state.cumulative_renting_cost + annual_renting

    investment = state.investment_account
    monthly_difference = (annual_buying - annual_renting) / 12
    if monthly_difference > 0:
        investment += monthly_difference * 12
    if investment > 0:
        investment *= 1 + inputs.annual_return_on_savings / 100

    next_state = replace(
        state,
        mortgage_balance=balance,
        home_value=home_value,
        monthly_rent=state.monthly_rent * (1 + inputs.annual_rent_increase / 100),
        investment_account=investment,
        pmi_removed=pmi_removed,
        cumulative_buying_cost=cumulative_buying,
        cumulative_renting_cost=cumulative_renting,
        total_tax_savings=state.total_tax_savings + tax_savings,
    )
    result = YearResult(
        year=year,
        buying_cost=round_cents(cumulative_buying),
        renting_cost=round_cents(cumulative_renting),
        buying_equity=round_cents(equity),
        buying_net_cost=round_cents(net_buying),
    )
    return next_state, result


def _tax_savings(ctx: ProjectionContext, balance: float) -> float:
    # A paid-off balance of 0 falls back to the opening loan in the estimator.
    inputs = ctx.inputs
    benefit = calculate_tax_benefits(
        inputs.home_price,
        inputs.down_payment_percent,
        inputs.interest_rate,
        ctx.property_tax_rate,
        inputs.annual_income,
        inputs.marital_status,
        mortgage_balance=balance,
        policy=ctx.policy,
    )
    return benefit.annual_tax_savings


def run_projection(
    ctx: ProjectionContext,
) -> Tuple[SimulationState, List[YearResult]]:
    state = initial_state(ctx)
    results: List[YearResult] = []
    for year in range(1, ctx.inputs.time_horizon + 1):
        state, result = step_year(ctx, state, year)
        results.append(result)
    return state, results


def find_break_even_year(results: Sequence[YearResult]) -> Optional[int]:
    """
    First year whose net buying cost is at or below cumulative rent.

    Cost-only: the renter's investment account is deliberately left out.
    """
    for result in results:
        if result.buying_net_cost <= result.renting_cost:
            return result.year
    return None


def summarize(ctx: ProjectionContext, state: SimulationState) -> ProjectionSummary:
    final_home_value = round_cents(state.home_value)
    final_equity = round_cents(final_home_value - state.mortgage_balance)
    selling_costs = final_home_value * SELLING_COST_RATE * ctx.cost_of_living
    return ProjectionSummary(
        total_buying_cost=round_cents(state.cumulative_buying_cost),
        total_renting_cost=round_cents(state.cumulative_renting_cost),
        final_home_value=final_home_value,
        final_equity=final_equity,
        net_buying_cost=round_cents(
            state.cumulative_buying_cost - final_equity + selling_costs
        ),
        savings_after_time_period=round_cents(state.investment_account),
        total_tax_savings=round_cents(state.total_tax_savings),
    )


def calculate_rent_vs_buy(
    inputs: ProjectionInputs, policy: Optional[TaxPolicy] = None
) -> ProjectionResult:
    """
    Project renting against buying over ``inputs.time_horizon`` years.

    Inputs are assumed to have passed ``validate_inputs``.
    """
    ctx = ProjectionContext.from_inputs(inputs, policy)
    logger.debug(
        "Projecting %s years: price=%.2f down=%.1f%% rate=%.3f%% state=%s",
        inputs.time_horizon,
        inputs.home_price,
        inputs.down_payment_percent,
        inputs.interest_rate,
        inputs.location.state,
    )
    final_state, results = run_projection(ctx)
    break_even = find_break_even_year(results)
    logger.debug("Break-even year: %s", break_even)
    return ProjectionResult(
        results=results,
        summary=summarize(ctx, final_state),
        break_even_year=break_even,
    )
