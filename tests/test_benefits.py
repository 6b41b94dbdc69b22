from __future__ import annotations

import math

import pytest

from fincalc.benefits import calculate_tax_benefits, marginal_tax_rate
from fincalc.policy import TaxBracket, TaxPolicy


def test_no_savings_below_standard_deduction() -> None:
    # 9,600 interest + 2,000 property tax is under the 15,000 standard deduction.
    benefit = calculate_tax_benefits(200_000, 20, 6, 1.0, 100_000, "single")
    assert benefit.itemized_deductions == pytest.approx(11_600)
    assert benefit.standard_deduction == 15_000
    assert benefit.annual_tax_savings == 0


def test_property_tax_is_capped_at_salt_limit() -> None:
    benefit = calculate_tax_benefits(2_000_000, 20, 5, 1.5, 300_000, "single")
    # 80,000 interest + min(30,000, 10,000) property tax
    assert benefit.itemized_deductions == pytest.approx(90_000)
    assert benefit.marginal_tax_rate == 0.35
    assert benefit.annual_tax_savings == pytest.approx((90_000 - 15_000) * 0.35)


def test_only_the_excess_over_standard_deduction_saves_tax() -> None:
    benefit = calculate_tax_benefits(500_000, 20, 6, 1.1, 150_000, "single")
    # 400,000 * 6% + 5,500
    assert benefit.itemized_deductions == pytest.approx(29_500)
    assert benefit.marginal_tax_rate == 0.24
    assert benefit.annual_tax_savings == pytest.approx(14_500 * 0.24)


def test_married_filers_use_larger_deduction() -> None:
    single = calculate_tax_benefits(500_000, 20, 6, 1.1, 150_000, "single")
    married = calculate_tax_benefits(500_000, 20, 6, 1.1, 150_000, "married")
    assert married.standard_deduction == 30_000
    assert married.marginal_tax_rate == 0.22
    assert married.annual_tax_savings < single.annual_tax_savings


def test_explicit_balance_drives_interest() -> None:
    benefit = calculate_tax_benefits(500_000, 20, 6, 1.1, 150_000, "single", 100_000)
    assert benefit.itemized_deductions == pytest.approx(6_000 + 5_500)
    assert benefit.annual_tax_savings == 0


def test_bracket_lookup_is_lower_inclusive() -> None:
    assert marginal_tax_rate(0, "single") == 0.10
    assert marginal_tax_rate(48_474.99, "single") == 0.12
    assert marginal_tax_rate(48_475, "single") == 0.22
    assert marginal_tax_rate(5_000_000, "married") == 0.37


def test_custom_policy_table() -> None:
    policy = TaxPolicy(
        year=2099,
        brackets={"single": (TaxBracket(rate=0.5, min=0, max=math.inf),)},
        standard_deduction={"single": 1_000},
        salt_cap=40_000,
    )
    benefit = calculate_tax_benefits(
        1_000_000, 50, 0, 2.0, 50_000, "single", policy=policy
    )
    assert benefit.itemized_deductions == pytest.approx(20_000)
    assert benefit.annual_tax_savings == pytest.approx(9_500)


def test_unknown_filing_status_raises() -> None:
    with pytest.raises(KeyError):
        calculate_tax_benefits(500_000, 20, 6, 1.1, 150_000, "widowed")
