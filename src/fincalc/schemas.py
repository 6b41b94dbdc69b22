from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Location:
    """Where the home is; drives cost-of-living and property-tax defaults."""

    state: str
    property_tax_rate: Optional[float] = None  # annual percentage, e.g., 1.1
    median_home_price: Optional[float] = None
    median_rent: Optional[float] = None
    home_insurance_rate: Optional[float] = None


@dataclass(frozen=True)
class ProjectionInputs:
    """Everything the rent-vs-buy projection needs. Percentages are in percent."""

    location: Location
    annual_income: float
    monthly_rent: float
    home_price: float
    down_payment_percent: float = 20.0
    time_horizon: int = 10  # years
    mortgage_term: int = 30  # years
    interest_rate: float = 6.0
    marital_status: str = "single"  # "single" | "married"
    home_insurance_rate: float = 0.5
    monthly_hoa_fees: float = 0.0
    annual_maintenance_percent: float = 1.0
    monthly_additional_expenses: float = 0.0
    annual_home_value_increase: float = 3.0
    annual_rent_increase: float = 3.0
    monthly_renters_insurance: float = 0.0
    annual_inflation: float = 3.0
    annual_return_on_savings: float = 6.0

    @property
    def loan_amount(self) -> float:
        return self.home_price * (1 - self.down_payment_percent / 100)

    @property
    def down_payment_amount(self) -> float:
        return self.home_price * self.down_payment_percent / 100


@dataclass(frozen=True)
class PMIInfo:
    monthly_pmi: float
    annual_pmi: float
    pmi_required: bool


@dataclass(frozen=True)
class TaxBenefit:
    annual_tax_savings: float
    marginal_tax_rate: float
    itemized_deductions: float
    standard_deduction: float


@dataclass(frozen=True)
class ValidationResult:
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class YearResult:
    year: int
    buying_cost: float  # cumulative
    renting_cost: float  # cumulative
    buying_equity: float
    buying_net_cost: float


@dataclass(frozen=True)
class ProjectionSummary:
    total_buying_cost: float
    total_renting_cost: float
    final_home_value: float
    final_equity: float
    net_buying_cost: float  # includes selling costs
    savings_after_time_period: float
    total_tax_savings: float


@dataclass(frozen=True)
class SimulationState:
    """State threaded from one simulated year to the next."""

    mortgage_balance: float
    home_value: float
    monthly_rent: float
    investment_account: float = 0.0
    pmi_removed: bool = False
    cumulative_buying_cost: float = 0.0
    cumulative_renting_cost: float = 0.0
    total_tax_savings: float = 0.0

    @property
    def equity(self) -> float:
        return self.home_value - self.mortgage_balance


@dataclass
class ProjectionResult:
    results: List[YearResult]
    summary: ProjectionSummary
    break_even_year: Optional[int] = None

    @property
    def better_option(self) -> str:
        if self.summary.net_buying_cost < self.summary.total_renting_cost:
            return "buying"
        if self.summary.total_renting_cost < self.summary.net_buying_cost:
            return "renting"
        return "tie"


@dataclass(frozen=True)
class AmortizationEntry:
    month: int
    year: int
    principal_payment: float
    interest_payment: float
    remaining_balance: float
    cumulative_interest: float
    cumulative_principal: float


@dataclass(frozen=True)
class PayoffAnalysis:
    standard_payoff_months: int
    extra_payment_payoff_months: int
    months_saved: int
    years_saved: int
    interest_saved: float
    total_interest_without_extra: float
    total_interest_with_extra: float


@dataclass(frozen=True)
class LoanMilestones:
    fifty_percent_paid_month: int = 0
    eighty_percent_equity_month: int = 0
    pmi_removal_month: int = 0


# --- Tax calculator ---------------------------------------------------------


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_JOINT = "married-joint"
    MARRIED_SEPARATE = "married-separate"
    HEAD_OF_HOUSEHOLD = "head-of-household"


class IncomeType(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SELF_EMPLOYMENT = "self-employment"
    RENTAL = "rental"
    DIVIDENDS = "dividends"
    CAPITAL_GAINS = "capital-gains"
    INTEREST = "interest"
    CRYPTO = "crypto"
    OTHER = "other"

    @property
    def is_wage(self) -> bool:
        return self in (IncomeType.PRIMARY, IncomeType.SECONDARY)


class AccountKind(str, Enum):
    K401 = "401k"
    IRA_TRADITIONAL = "ira-traditional"
    IRA_ROTH = "ira-roth"
    HSA = "hsa"
    PLAN_529 = "529"
    OTHER = "other"

    @property
    def is_pretax(self) -> bool:
        return self in (AccountKind.K401, AccountKind.IRA_TRADITIONAL, AccountKind.HSA)


@dataclass(frozen=True)
class IncomeSource:
    type: IncomeType
    amount: float
    description: str = ""


@dataclass(frozen=True)
class Deduction:
    type: str
    amount: float
    description: str = ""


@dataclass(frozen=True)
class TaxAdvantagedAccount:
    kind: AccountKind
    contribution: float = 0.0
    max_contribution: float = 0.0

    @property
    def unused_room(self) -> float:
        return max(0.0, self.max_contribution - self.contribution)


# 2023 contribution limits, matching the calculator's starting state.
DEFAULT_CONTRIBUTION_LIMITS: Dict[AccountKind, float] = {
    AccountKind.K401: 22500,
    AccountKind.IRA_TRADITIONAL: 6500,
    AccountKind.IRA_ROTH: 6500,
    AccountKind.HSA: 3850,
    AccountKind.PLAN_529: 16000,
    AccountKind.OTHER: 0,
}


def default_accounts() -> Dict[AccountKind, TaxAdvantagedAccount]:
    return {
        kind: TaxAdvantagedAccount(kind=kind, max_contribution=limit)
        for kind, limit in DEFAULT_CONTRIBUTION_LIMITS.items()
    }


@dataclass
class UserState:
    """Snapshot of a user's tax situation."""

    filing_status: FilingStatus = FilingStatus.SINGLE
    state: str = "CA"
    income_sources: List[IncomeSource] = field(default_factory=list)
    deductions: List[Deduction] = field(default_factory=list)
    use_itemized_deductions: bool = False
    tax_advantaged: Dict[AccountKind, TaxAdvantagedAccount] = field(
        default_factory=default_accounts
    )
    dependents: int = 0
    monthly_expenses: float = 0.0
    emergency_fund: float = 0.0

    def __post_init__(self) -> None:
        self.filing_status = FilingStatus(self.filing_status)
        accounts = default_accounts()
        for kind, account in self.tax_advantaged.items():
            accounts[AccountKind(kind)] = account
        self.tax_advantaged = accounts

    def account(self, kind: AccountKind) -> TaxAdvantagedAccount:
        return self.tax_advantaged[kind]


@dataclass(frozen=True)
class BracketTax:
    bracket: str  # e.g. "22%"
    amount: float


@dataclass(frozen=True)
class ProjectedSavingsPoint:
    year: int
    current_strategy: int
    optimized_strategy: int


@dataclass
class TaxResult:
    total_income: float
    adjusted_gross_income: float
    taxable_income: float
    federal_tax: float
    state_tax: float
    fica_tax: float
    self_employment_tax: float
    total_tax: float
    effective_tax_rate: float
    after_tax_income: float
    savings_rate: float
    total_savings: float
    unused_tax_space: Dict[AccountKind, float]
    tax_by_bracket: List[BracketTax]
    optimization_tips: List[str]
    projected_savings: List[ProjectedSavingsPoint]


# --- FIRE calculator --------------------------------------------------------


@dataclass(frozen=True)
class FireInputs:
    current_age: int = 30
    end_age: int = 65
    current_net_worth: float = 100000
    pre_tax_salary: float = 100000
    post_tax_salary: float = 80000
    current_annual_spending: float = 40000
    desired_retirement_spending: float = 40000
    stocks_allocation: float = 90  # percent of portfolio
    bonds_allocation: float = 5
    cash_allocation: float = 1
    other_allocation: float = 4
    stocks_return: float = 8  # annual percentage
    bonds_return: float = 5
    cash_return: float = 0.5
    other_return: float = 1.5
    safe_withdrawal_rate: float = 4
    inflation_rate: float = 3
    company_401k_match: float = 1  # percent of pre-tax salary
    income_growth_rate: float = 2

    @property
    def total_allocation(self) -> float:
        return (
            self.stocks_allocation
            + self.bonds_allocation
            + self.cash_allocation
            + self.other_allocation
        )


@dataclass(frozen=True)
class NetWorthPoint:
    age: int
    net_worth: float


@dataclass
class FireResult:
    fire_number: int
    fire_age: Optional[int]
    years_until_fire: Optional[int]
    chart_data: List[NetWorthPoint] = field(default_factory=list)

    @property
    def achieved(self) -> bool:
        return self.fire_age is not None
