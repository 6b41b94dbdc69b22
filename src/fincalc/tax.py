from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .policy import TAX_CALCULATOR_POLICY_YEAR, TaxPolicy, get_policy
from .schemas import (
    AccountKind,
    BracketTax,
    IncomeType,
    ProjectedSavingsPoint,
    TaxResult,
    UserState,
)

logger = logging.getLogger(__name__)

PROJECTION_YEARS = 30
PROJECTION_RETURN = 0.07
TRADITIONAL_IRA_AGI_LIMIT = 78000
TARGET_SAVINGS_RATE = 15.0


def calculate_tax_results(
    user: UserState, policy: Optional[TaxPolicy] = None
) -> TaxResult:
    policy = policy or get_policy(default=TAX_CALCULATOR_POLICY_YEAR)
    status = user.filing_status.value

    total_income = sum(source.amount for source in user.income_sources)
    pretax = sum(
        account.contribution
        for kind, account in user.tax_advantaged.items()
        if kind.is_pretax
    )
    agi = total_income - pretax

    if user.use_itemized_deductions:
        deductions = sum(d.amount for d in user.deductions)
    else:
        deductions = policy.standard_deduction_for(status)
    taxable_income = max(0.0, agi - deductions)

    federal_tax, by_bracket = calculate_federal_tax(taxable_income, status, policy)
    state_tax = calculate_state_tax(taxable_income, user.state, policy)
    fica_tax = calculate_fica_tax(user, policy)
    se_tax = calculate_self_employment_tax(user, policy)
    total_tax = federal_tax + state_tax + fica_tax + se_tax

    total_savings = sum(a.contribution for a in user.tax_advantaged.values())
    effective_rate = total_tax / total_income * 100 if total_income else 0.0
    savings_rate = total_savings / total_income * 100 if total_income else 0.0

    unused: Dict[AccountKind, float] = {
        kind: account.unused_room
        for kind, account in user.tax_advantaged.items()
        if account.max_contribution > 0
    }

    logger.debug(
        "Tax for %s filer: income=%.2f taxable=%.2f total=%.2f",
        status,
        total_income,
        taxable_income,
        total_tax,
    )
    return TaxResult(
        total_income=total_income,
        adjusted_gross_income=agi,
        taxable_income=taxable_income,
        federal_tax=federal_tax,
        state_tax=state_tax,
        fica_tax=fica_tax,
        self_employment_tax=se_tax,
        total_tax=total_tax,
        effective_tax_rate=effective_rate,
        after_tax_income=total_income - total_tax,
        savings_rate=savings_rate,
        total_savings=total_savings,
        unused_tax_space=unused,
        tax_by_bracket=by_bracket,
        optimization_tips=generate_optimization_tips(user, agi, unused, savings_rate),
        projected_savings=project_savings(unused, total_savings, total_income),
    )


def calculate_federal_tax(
    taxable_income: float, filing_status: str, policy: TaxPolicy
) -> Tuple[float, List[BracketTax]]:
    """Progressive tax: each bracket taxes only the slice of income inside it."""
    total = 0.0
    by_bracket: List[BracketTax] = []
    for bracket in policy.brackets_for(filing_status):
        if taxable_income <= bracket.min:
            break
        amount = (min(taxable_income, bracket.max) - bracket.min) * bracket.rate
        total += amount
        by_bracket.append(BracketTax(bracket=f"{bracket.rate * 100:.0f}%", amount=amount))
    return total, by_bracket


def calculate_state_tax(taxable_income: float, state: str, policy: TaxPolicy) -> float:
    rate = policy.state_tax_rates.get((state or "").upper())
    if rate is None:
        logger.warning("No state tax rate for '%s'; assuming 0%%", state)
        return 0.0
    return taxable_income * rate / 100


def _income_of(user: UserState, *types: IncomeType) -> float:
    return sum(s.amount for s in user.income_sources if IncomeType(s.type) in types)


def calculate_fica_tax(user: UserState, policy: TaxPolicy) -> float:
    wages = _income_of(user, IncomeType.PRIMARY, IncomeType.SECONDARY)
    social_security = min(wages, policy.social_security_wage_base) * policy.social_security_rate
    medicare = wages * policy.medicare_rate
    return social_security + medicare


def calculate_self_employment_tax(user: UserState, policy: TaxPolicy) -> float:
    income = _income_of(user, IncomeType.SELF_EMPLOYMENT)
    return income * policy.self_employment_rate * policy.self_employment_base_factor


def generate_optimization_tips(
    user: UserState,
    agi: float,
    unused: Dict[AccountKind, float],
    savings_rate: float,
) -> List[str]:
    tips: List[str] = []
    room_401k = unused.get(AccountKind.K401, 0.0)
    room_ira = unused.get(AccountKind.IRA_TRADITIONAL, 0.0)
    room_hsa = unused.get(AccountKind.HSA, 0.0)

    if room_401k > 0:
        tips.append(
            f"Increase your 401(k) contribution by up to {room_401k:,.0f} "
            "to reduce taxable income."
        )
    if room_ira > 0 and agi < TRADITIONAL_IRA_AGI_LIMIT:
        tips.append(
            f"Consider contributing up to {room_ira:,.0f} to a Traditional IRA "
            "for additional tax deductions."
        )
    if room_hsa > 0:
        tips.append(
            f"Maximize your HSA contribution with an additional {room_hsa:,.0f} "
            "for triple tax benefits."
        )
    if savings_rate < TARGET_SAVINGS_RATE:
        tips.append(
            f"Your current savings rate ({savings_rate:.1f}%) is below the "
            "recommended 15-20%. Consider increasing your savings."
        )
    if any(IncomeType(s.type) is IncomeType.SELF_EMPLOYMENT for s in user.income_sources):
        tips.append(
            "As a self-employed individual, consider setting up a SEP IRA or "
            "Solo 401(k) to increase your retirement contribution limits."
        )
    return tips


def project_savings(
    unused: Dict[AccountKind, float], total_savings: float, total_income: float
) -> List[ProjectedSavingsPoint]:
    """
    Current vs optimized contribution strategy compounded at 7% for 30 years.

    The optimized strategy adds the smaller of the unused 401(k) room and 10%
    of income.
    """
    optimized = total_savings + min(unused.get(AccountKind.K401, 0.0), total_income * 0.1)

    current_value = total_savings * 12
    optimized_value = optimized * 12
    points: List[ProjectedSavingsPoint] = []
    for year in range(1, PROJECTION_YEARS + 1):
        current_value = current_value * (1 + PROJECTION_RETURN) + total_savings * 12
        optimized_value = optimized_value * (1 + PROJECTION_RETURN) + optimized * 12
        points.append(
            ProjectedSavingsPoint(
                year=year,
                current_strategy=round(current_value),
                optimized_strategy=round(optimized_value),
            )
        )
    return points
