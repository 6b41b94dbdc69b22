from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

import typer

from .data_sources import CensusACSClient, LocationDataAssembler
from .fire import calculate_fire
from .formatting import format_currency, format_percent
from .model import calculate_rent_vs_buy
from .mortgage import (
    calculate_payoff_analysis,
    find_loan_milestones,
    generate_amortization_schedule,
)
from .policy import HOUSING_POLICY_YEAR, TAX_YEAR_ENV, get_policy, load_policy
from .schemas import (
    AccountKind,
    Deduction,
    FilingStatus,
    FireInputs,
    IncomeSource,
    IncomeType,
    Location,
    ProjectionInputs,
    TaxAdvantagedAccount,
    UserState,
    default_accounts,
)
from .tax import calculate_tax_results
from .validation import validate_inputs

app = typer.Typer(help="Personal-finance calculators: rent vs buy, taxes, FIRE.")


class MaritalStatus(str, Enum):
    SINGLE = "single"
    MARRIED = "married"


def _default_census_key() -> Optional[str]:
    return os.environ.get("CENSUS_API_KEY")


def _default_tax_year() -> Optional[int]:
    value = os.environ.get(TAX_YEAR_ENV)
    return int(value) if value else None


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    policy_file: Optional[Path] = typer.Option(
        None, help="JSON tax policy to register before running."
    ),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if policy_file is not None:
        load_policy(policy_file)


@app.command("rent-vs-buy")
def rent_vs_buy(
    home_price: float = typer.Option(..., help="Purchase price in dollars."),
    monthly_rent: float = typer.Option(..., help="Current monthly rent."),
    annual_income: float = typer.Option(..., help="Gross household income."),
    state: str = typer.Option("CA", help="Two-letter state code."),
    property_tax_rate: Optional[float] = typer.Option(
        None, help="Annual property tax percent (defaults to 1.1)."
    ),
    marital_status: MaritalStatus = typer.Option(MaritalStatus.SINGLE),
    down_payment: float = typer.Option(20.0, help="Down payment percent."),
    years: int = typer.Option(10, help="Time horizon in years."),
    mortgage_term: int = typer.Option(30, help="Mortgage term in years."),
    interest_rate: float = typer.Option(6.0, help="Annual mortgage rate percent."),
    home_insurance_rate: float = typer.Option(0.5),
    hoa: float = typer.Option(0.0, help="Monthly HOA fees."),
    maintenance: float = typer.Option(1.0, help="Annual maintenance percent of value."),
    additional_expenses: float = typer.Option(0.0, help="Other monthly ownership costs."),
    appreciation: float = typer.Option(3.0, help="Annual home appreciation percent."),
    rent_increase: float = typer.Option(3.0, help="Annual rent increase percent."),
    renters_insurance: float = typer.Option(0.0, help="Monthly renter's insurance."),
    inflation: float = typer.Option(3.0, help="Annual inflation percent."),
    investment_return: float = typer.Option(6.0, help="Annual return on savings percent."),
    tax_year: Optional[int] = typer.Option(
        None, help=f"Tax law year for deductions (default {HOUSING_POLICY_YEAR})."
    ),
    as_json: bool = typer.Option(False, "--json", help="Dump the full result as JSON."),
) -> None:
    """
    Compare cumulative costs of buying and renting year by year.
    """
    inputs = ProjectionInputs(
        location=Location(state=state.upper(), property_tax_rate=property_tax_rate),
        marital_status=marital_status.value,
        annual_income=annual_income,
        monthly_rent=monthly_rent,
        home_price=home_price,
        down_payment_percent=down_payment,
        time_horizon=years,
        mortgage_term=mortgage_term,
        interest_rate=interest_rate,
        home_insurance_rate=home_insurance_rate,
        monthly_hoa_fees=hoa,
        annual_maintenance_percent=maintenance,
        monthly_additional_expenses=additional_expenses,
        annual_home_value_increase=appreciation,
        annual_rent_increase=rent_increase,
        monthly_renters_insurance=renters_insurance,
        annual_inflation=inflation,
        annual_return_on_savings=investment_return,
    )
    _fail_on_invalid(inputs)
    policy = get_policy(tax_year or HOUSING_POLICY_YEAR)
    result = calculate_rent_vs_buy(inputs, policy)

    if as_json:
        typer.echo(_to_json(result))
        return

    typer.echo(f"{'Year':>4}  {'Buying':>12}  {'Renting':>12}  {'Equity':>12}  {'Net buy':>12}")
    for row in result.results:
        typer.echo(
            f"{row.year:>4}  {format_currency(row.buying_cost):>12}  "
            f"{format_currency(row.renting_cost):>12}  "
            f"{format_currency(row.buying_equity):>12}  "
            f"{format_currency(row.buying_net_cost):>12}"
        )
    summary = result.summary
    typer.echo("")
    typer.echo(f"Final home value: {format_currency(summary.final_home_value)}")
    typer.echo(f"Final equity: {format_currency(summary.final_equity)}")
    typer.echo(f"Net buying cost (after selling): {format_currency(summary.net_buying_cost)}")
    typer.echo(f"Total renting cost: {format_currency(summary.total_renting_cost)}")
    typer.echo(f"Renter investment account: {format_currency(summary.savings_after_time_period)}")
    typer.echo(f"Total tax savings: {format_currency(summary.total_tax_savings)}")
    if result.break_even_year is not None:
        typer.echo(f"Break-even year: {result.break_even_year}")
    else:
        typer.echo("Break-even year: not within horizon")


@app.command()
def tax(
    wages: float = typer.Option(0.0, help="Primary W-2 income."),
    secondary_wages: float = typer.Option(0.0, help="Secondary W-2 income."),
    self_employment: float = typer.Option(0.0, help="Self-employment income."),
    other_income: float = typer.Option(0.0, help="Investment and other income."),
    filing_status: FilingStatus = typer.Option(FilingStatus.SINGLE),
    state: str = typer.Option("CA", help="Two-letter state code."),
    contribution_401k: float = typer.Option(0.0, "--401k", help="Annual 401(k) contribution."),
    contribution_ira: float = typer.Option(0.0, "--ira", help="Traditional IRA contribution."),
    contribution_roth: float = typer.Option(0.0, "--roth", help="Roth IRA contribution."),
    contribution_hsa: float = typer.Option(0.0, "--hsa", help="HSA contribution."),
    itemized: Optional[List[float]] = typer.Option(
        None, help="Itemized deduction amount; repeat to add several."
    ),
    tax_year: Optional[int] = typer.Option(
        default_factory=_default_tax_year, help="Tax law year (env FINCALC_TAX_YEAR)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Dump the full result as JSON."),
) -> None:
    """
    Estimate federal, state, FICA and self-employment tax.
    """
    sources = [
        IncomeSource(type=kind, amount=amount)
        for kind, amount in (
            (IncomeType.PRIMARY, wages),
            (IncomeType.SECONDARY, secondary_wages),
            (IncomeType.SELF_EMPLOYMENT, self_employment),
            (IncomeType.OTHER, other_income),
        )
        if amount
    ]
    accounts = default_accounts()
    for kind, amount in (
        (AccountKind.K401, contribution_401k),
        (AccountKind.IRA_TRADITIONAL, contribution_ira),
        (AccountKind.IRA_ROTH, contribution_roth),
        (AccountKind.HSA, contribution_hsa),
    ):
        accounts[kind] = TaxAdvantagedAccount(
            kind=kind,
            contribution=amount,
            max_contribution=accounts[kind].max_contribution,
        )
    user = UserState(
        filing_status=filing_status,
        state=state.upper(),
        income_sources=sources,
        deductions=[Deduction(type="other", amount=a) for a in itemized or []],
        use_itemized_deductions=bool(itemized),
        tax_advantaged=accounts,
    )
    result = calculate_tax_results(user, get_policy(tax_year))

    if as_json:
        typer.echo(_to_json(result))
        return

    typer.echo(f"Total income: {format_currency(result.total_income)}")
    typer.echo(f"Taxable income: {format_currency(result.taxable_income)}")
    typer.echo(f"Federal tax: {format_currency(result.federal_tax)}")
    for entry in result.tax_by_bracket:
        typer.echo(f"  {entry.bracket:>4}: {format_currency(entry.amount)}")
    typer.echo(f"State tax: {format_currency(result.state_tax)}")
    typer.echo(f"FICA: {format_currency(result.fica_tax)}")
    typer.echo(f"Self-employment tax: {format_currency(result.self_employment_tax)}")
    typer.echo(f"Total tax: {format_currency(result.total_tax)}")
    typer.echo(f"Effective rate: {format_percent(result.effective_tax_rate)}")
    typer.echo(f"After-tax income: {format_currency(result.after_tax_income)}")
    if result.optimization_tips:
        typer.echo("")
        for tip in result.optimization_tips:
            typer.echo(f"- {tip}")


@app.command()
def fire(
    current_age: int = typer.Option(30),
    end_age: int = typer.Option(65),
    net_worth: float = typer.Option(100000, help="Current net worth."),
    pre_tax_salary: float = typer.Option(100000),
    post_tax_salary: float = typer.Option(80000),
    spending: float = typer.Option(40000, help="Current annual spending."),
    retirement_spending: float = typer.Option(40000, help="Desired annual spending in retirement."),
    stocks: float = typer.Option(90, help="Stock allocation percent."),
    bonds: float = typer.Option(5, help="Bond allocation percent."),
    cash: float = typer.Option(1, help="Cash allocation percent."),
    other: float = typer.Option(4, help="Other allocation percent."),
    withdrawal_rate: float = typer.Option(4, help="Safe withdrawal rate percent."),
    inflation: float = typer.Option(3),
    match: float = typer.Option(1, help="401(k) match as percent of pre-tax salary."),
    income_growth: float = typer.Option(2),
    as_json: bool = typer.Option(False, "--json", help="Dump the full result as JSON."),
) -> None:
    """
    Project the age at which net worth covers retirement spending.
    """
    inputs = FireInputs(
        current_age=current_age,
        end_age=end_age,
        current_net_worth=net_worth,
        pre_tax_salary=pre_tax_salary,
        post_tax_salary=post_tax_salary,
        current_annual_spending=spending,
        desired_retirement_spending=retirement_spending,
        stocks_allocation=stocks,
        bonds_allocation=bonds,
        cash_allocation=cash,
        other_allocation=other,
        safe_withdrawal_rate=withdrawal_rate,
        inflation_rate=inflation,
        company_401k_match=match,
        income_growth_rate=income_growth,
    )
    try:
        result = calculate_fire(inputs)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(_to_json(result))
        return
    typer.echo(f"FIRE number: {format_currency(result.fire_number)}")
    if result.fire_age is not None:
        typer.echo(f"FIRE age: {result.fire_age} ({result.years_until_fire} years)")
    else:
        typer.echo(f"FIRE not reached by age {end_age}")


@app.command()
def schedule(
    principal: float = typer.Argument(..., help="Loan amount."),
    interest_rate: float = typer.Option(6.0, help="Annual rate percent."),
    term: int = typer.Option(30, help="Term in years."),
    extra_monthly: float = typer.Option(0.0, help="Extra principal each month."),
    extra_annual: float = typer.Option(0.0, help="Extra principal once a year."),
    as_json: bool = typer.Option(False, "--json", help="Dump the monthly schedule as JSON."),
) -> None:
    """
    Print the yearly amortization of a loan and the effect of extra payments.
    """
    rows = generate_amortization_schedule(
        principal, interest_rate, term, extra_monthly, extra_annual
    )
    if as_json:
        typer.echo(_to_json(rows))
        return

    for row in rows:
        if row.month % 12 == 0 or row is rows[-1]:
            typer.echo(
                f"Year {row.year:>2}: balance {format_currency(row.remaining_balance)}, "
                f"interest to date {format_currency(row.cumulative_interest)}"
            )
    milestones = find_loan_milestones(rows, principal)
    typer.echo(f"78% balance (PMI removal) in month {milestones.pmi_removal_month}")
    if extra_monthly or extra_annual:
        payoff = calculate_payoff_analysis(
            principal, interest_rate, term, extra_monthly, extra_annual
        )
        typer.echo(
            f"Extra payments save {payoff.months_saved} months and "
            f"{format_currency(payoff.interest_saved)} of interest"
        )


@app.command()
def defaults(
    state: str = typer.Argument(..., help="Two-letter state code, e.g., CA."),
    acs_year: int = typer.Option(2023, help="ACS vintage to query."),
    census_api_key: Optional[str] = typer.Option(
        default_factory=_default_census_key,
        help="Census API key (env CENSUS_API_KEY if omitted).",
    ),
) -> None:
    """
    Fetch ACS medians for a state and show the projection they produce.
    """
    assembler = LocationDataAssembler(acs_client=CensusACSClient(api_key=census_api_key))
    inputs = assembler.build_inputs(state, acs_year=acs_year)
    location = inputs.location

    typer.echo(f"State: {location.state}")
    typer.echo(f"Median income: {format_currency(inputs.annual_income)}")
    typer.echo(f"Median rent: {format_currency(inputs.monthly_rent)}")
    typer.echo(f"Median home value: {format_currency(inputs.home_price)}")
    if location.property_tax_rate is not None:
        typer.echo(f"Effective property tax: {format_percent(location.property_tax_rate)}")

    validation = validate_inputs(inputs)
    if not validation.is_valid:
        for error in validation.errors:
            typer.echo(f"! {error}")
        return
    result = calculate_rent_vs_buy(inputs)
    typer.echo(f"Break-even year: {result.break_even_year or 'not within horizon'}")


def _fail_on_invalid(inputs: ProjectionInputs) -> None:
    validation = validate_inputs(inputs)
    if validation.is_valid:
        return
    for error in validation.errors:
        typer.echo(error, err=True)
    raise typer.Exit(code=1)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {_jsonable(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _to_json(value: Any) -> str:
    return json.dumps(_jsonable(value), indent=2)


if __name__ == "__main__":
    app()
