from __future__ import annotations

import pytest

from fincalc.policy import get_policy
from fincalc.schemas import (
    AccountKind,
    Deduction,
    FilingStatus,
    IncomeSource,
    IncomeType,
    TaxAdvantagedAccount,
    UserState,
)
from fincalc.tax import calculate_federal_tax, calculate_tax_results


def _user(**kwargs) -> UserState:
    values = dict(
        filing_status=FilingStatus.SINGLE,
        state="CA",
        income_sources=[IncomeSource(type=IncomeType.PRIMARY, amount=80_000)],
        tax_advantaged={
            AccountKind.K401: TaxAdvantagedAccount(
                kind=AccountKind.K401, contribution=6_000, max_contribution=22_500
            )
        },
    )
    values.update(kwargs)
    return UserState(**values)


def test_default_single_filer() -> None:
    result = calculate_tax_results(_user())

    assert result.total_income == 80_000
    assert result.adjusted_gross_income == 74_000
    assert result.taxable_income == 74_000 - 13_850
    assert result.federal_tax == pytest.approx(1_100 + 4_047 + 3_393.5)
    assert [b.bracket for b in result.tax_by_bracket] == ["10%", "12%", "22%"]
    assert result.state_tax == pytest.approx(60_150 * 0.093)
    assert result.fica_tax == pytest.approx(80_000 * 0.062 + 80_000 * 0.0145)
    assert result.self_employment_tax == 0
    assert result.total_tax == pytest.approx(
        result.federal_tax + result.state_tax + result.fica_tax
    )
    assert result.after_tax_income == pytest.approx(80_000 - result.total_tax)
    assert result.effective_tax_rate == pytest.approx(result.total_tax / 800)


def test_bracket_amounts_sum_to_federal_tax() -> None:
    result = calculate_tax_results(
        _user(income_sources=[IncomeSource(type=IncomeType.PRIMARY, amount=900_000)])
    )
    assert len(result.tax_by_bracket) == 7
    assert sum(b.amount for b in result.tax_by_bracket) == pytest.approx(result.federal_tax)


def test_federal_tax_on_zero_income() -> None:
    tax, brackets = calculate_federal_tax(0, "single", get_policy(2023))
    assert tax == 0
    assert brackets == []


def test_social_security_is_capped_at_wage_base() -> None:
    user = _user(
        income_sources=[
            IncomeSource(type=IncomeType.PRIMARY, amount=150_000),
            IncomeSource(type=IncomeType.SECONDARY, amount=50_000),
            IncomeSource(type=IncomeType.DIVIDENDS, amount=40_000),
        ]
    )
    result = calculate_tax_results(user)
    assert result.fica_tax == pytest.approx(160_200 * 0.062 + 200_000 * 0.0145)


def test_self_employment_tax() -> None:
    user = _user(income_sources=[IncomeSource(type=IncomeType.SELF_EMPLOYMENT, amount=50_000)])
    result = calculate_tax_results(user)
    assert result.self_employment_tax == pytest.approx(50_000 * 0.153 * 0.9235)
    assert result.fica_tax == 0
    assert any("SEP IRA" in tip for tip in result.optimization_tips)


def test_itemized_deductions_replace_standard() -> None:
    user = _user(
        use_itemized_deductions=True,
        deductions=[
            Deduction(type="mortgage-interest", amount=20_000),
            Deduction(type="charity", amount=5_000),
        ],
    )
    assert calculate_tax_results(user).taxable_income == 74_000 - 25_000

    empty = _user(use_itemized_deductions=True)
    assert calculate_tax_results(empty).taxable_income == 74_000


def test_filing_status_selects_brackets_and_deduction() -> None:
    result = calculate_tax_results(_user(filing_status="head-of-household"))
    assert result.taxable_income == 74_000 - 20_800
    assert result.tax_by_bracket[1].amount == pytest.approx((53_200 - 15_700) * 0.12)


def test_unused_room_only_for_capped_accounts() -> None:
    unused = calculate_tax_results(_user()).unused_tax_space
    assert unused[AccountKind.K401] == 16_500
    assert unused[AccountKind.HSA] == 3_850
    assert AccountKind.OTHER not in unused


def test_optimization_tips() -> None:
    tips = calculate_tax_results(_user()).optimization_tips
    assert tips[0] == (
        "Increase your 401(k) contribution by up to 16,500 to reduce taxable income."
    )
    assert any("Traditional IRA" in tip for tip in tips)
    assert any("HSA" in tip for tip in tips)
    assert any("(7.5%)" in tip for tip in tips)
    assert not any("SEP IRA" in tip for tip in tips)


def test_ira_tip_needs_low_agi() -> None:
    user = _user(income_sources=[IncomeSource(type=IncomeType.PRIMARY, amount=150_000)])
    tips = calculate_tax_results(user).optimization_tips
    assert not any("Traditional IRA" in tip for tip in tips)


def test_projected_savings_series() -> None:
    projected = calculate_tax_results(_user()).projected_savings
    assert [p.year for p in projected] == list(range(1, 31))
    assert projected[0].current_strategy == 149_040
    # 6,000 + min(16,500 unused, 8,000)
    assert projected[0].optimized_strategy == 347_760
    assert all(p.optimized_strategy >= p.current_strategy for p in projected)
    assert projected[-1].current_strategy > projected[0].current_strategy


def test_zero_income_does_not_divide_by_zero() -> None:
    result = calculate_tax_results(_user(income_sources=[]))
    assert result.effective_tax_rate == 0
    assert result.savings_rate == 0
    assert result.taxable_income == 0


def test_unknown_state_has_no_state_tax() -> None:
    assert calculate_tax_results(_user(state="ZZ")).state_tax == 0


def test_no_state_income_tax_state() -> None:
    assert calculate_tax_results(_user(state="TX")).state_tax == 0
