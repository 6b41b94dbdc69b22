from __future__ import annotations

import math
from typing import List, Sequence

from .formatting import round_cents
from .policy import PMI_FREE_DOWN_PAYMENT, PMI_REMOVAL_LTV, pmi_rate
from .schemas import AmortizationEntry, LoanMilestones, PayoffAnalysis, PMIInfo

MAX_SCHEDULE_MONTHS = 500


def calculate_monthly_mortgage(
    home_price: float,
    down_payment_percent: float,
    interest_rate: float,
    mortgage_term: float,
) -> float:
    """
    Fixed monthly principal-and-interest payment.

    A non-positive term gives 0.0; the caller validates inputs first.
    """
    loan_amount = home_price * (1 - down_payment_percent / 100)
    return monthly_payment(loan_amount, interest_rate, mortgage_term * 12)


def monthly_payment(principal: float, annual_rate_pct: float, term_months: float) -> float:
    if term_months <= 0:
        return 0.0
    monthly_rate = annual_to_monthly_rate(annual_rate_pct)
    if monthly_rate == 0:
        return principal / term_months
    growth = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * growth / (growth - 1)


def annual_to_monthly_rate(annual_rate_pct: float) -> float:
    return annual_rate_pct / 100.0 / 12.0


def calculate_pmi(home_price: float, down_payment_percent: float) -> PMIInfo:
    if down_payment_percent >= PMI_FREE_DOWN_PAYMENT:
        return PMIInfo(monthly_pmi=0.0, annual_pmi=0.0, pmi_required=False)

    loan_amount = home_price * (1 - down_payment_percent / 100)
    annual_pmi = loan_amount * pmi_rate(down_payment_percent)
    # Monthly comes from the unrounded annual figure.
    return PMIInfo(
        monthly_pmi=round_cents(annual_pmi / 12),
        annual_pmi=round_cents(annual_pmi),
        pmi_required=True,
    )


def generate_amortization_schedule(
    principal: float,
    annual_rate_pct: float,
    term_years: float,
    extra_monthly_payment: float = 0.0,
    extra_annual_payment: float = 0.0,
) -> List[AmortizationEntry]:
    """
    Month-by-month schedule. Extra annual payments land in the first month of
    each year after the first.
    """
    if principal <= 0 or annual_rate_pct < 0 or term_years <= 0:
        return []
    payment = round_cents(monthly_payment(principal, annual_rate_pct, term_years * 12))
    monthly_rate = annual_to_monthly_rate(annual_rate_pct)

    schedule: List[AmortizationEntry] = []
    balance = principal
    cumulative_interest = 0.0
    cumulative_principal = 0.0
    month = 0
    while balance > 0.01 and month < MAX_SCHEDULE_MONTHS:
        month += 1
        interest = balance * monthly_rate
        principal_paid = payment - interest + extra_monthly_payment
        if month % 12 == 1 and month > 1:
            principal_paid += extra_annual_payment
        principal_paid = min(principal_paid, balance)

        balance -= principal_paid
        cumulative_interest += interest
        cumulative_principal += principal_paid
        schedule.append(
            AmortizationEntry(
                month=month,
                year=math.ceil(month / 12),
                principal_payment=round_cents(principal_paid),
                interest_payment=round_cents(interest),
                remaining_balance=round_cents(balance),
                cumulative_interest=round_cents(cumulative_interest),
                cumulative_principal=round_cents(cumulative_principal),
            )
        )
    return schedule


def calculate_payoff_analysis(
    principal: float,
    annual_rate_pct: float,
    term_years: float,
    extra_monthly_payment: float = 0.0,
    extra_annual_payment: float = 0.0,
) -> PayoffAnalysis:
    standard = generate_amortization_schedule(principal, annual_rate_pct, term_years)
    accelerated = generate_amortization_schedule(
        principal,
        annual_rate_pct,
        term_years,
        extra_monthly_payment,
        extra_annual_payment,
    )
    interest_without = standard[-1].cumulative_interest if standard else 0.0
    interest_with = accelerated[-1].cumulative_interest if accelerated else 0.0
    months_saved = len(standard) - len(accelerated)
    return PayoffAnalysis(
        standard_payoff_months=len(standard),
        extra_payment_payoff_months=len(accelerated),
        months_saved=months_saved,
        years_saved=months_saved // 12,
        interest_saved=round_cents(interest_without - interest_with),
        total_interest_without_extra=interest_without,
        total_interest_with_extra=interest_with,
    )


def find_loan_milestones(
    schedule: Sequence[AmortizationEntry], original_principal: float
) -> LoanMilestones:
    """First month hitting 50% repaid, 80% equity and the 78% PMI threshold; 0 if never."""
    fifty = eighty = pmi = 0
    for entry in schedule:
        balance = entry.remaining_balance
        if not fifty and balance <= original_principal * 0.5:
            fifty = entry.month
        if not eighty and balance <= original_principal * 0.2:
            eighty = entry.month
        if not pmi and balance <= original_principal * PMI_REMOVAL_LTV:
            pmi = entry.month
    return LoanMilestones(
        fifty_percent_paid_month=fifty,
        eighty_percent_equity_month=eighty,
        pmi_removal_month=pmi,
    )
