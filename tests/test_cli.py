from __future__ import annotations

import json

from typer.testing import CliRunner

from fincalc.cli import app

runner = CliRunner()

SCENARIO_ARGS = [
    "rent-vs-buy",
    "--home-price", "500000",
    "--monthly-rent", "2000",
    "--annual-income", "150000",
    "--property-tax-rate", "1.1",
    "--renters-insurance", "30",
]


def test_rent_vs_buy_table() -> None:
    result = runner.invoke(app, SCENARIO_ARGS)
    assert result.exit_code == 0, result.output
    assert "Final home value: $671,958" in result.output
    assert "Break-even year:" in result.output


def test_rent_vs_buy_json() -> None:
    result = runner.invoke(app, SCENARIO_ARGS + ["--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert len(payload["results"]) == 10
    assert payload["results"][0]["year"] == 1
    assert "break_even_year" in payload


def test_rent_vs_buy_rejects_invalid_inputs() -> None:
    args = [
        "rent-vs-buy",
        "--home-price", "0",
        "--monthly-rent", "0",
        "--annual-income", "100000",
        "--interest-rate", "50",
    ]
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "Home price must be greater than $0" in result.output
    assert "Interest rate must be between 0% and 30%" in result.output


def test_tax_json() -> None:
    result = runner.invoke(app, ["tax", "--wages", "80000", "--401k", "6000", "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["adjusted_gross_income"] == 74000
    assert payload["unused_tax_space"]["401k"] == 16500
    assert len(payload["projected_savings"]) == 30


def test_tax_summary() -> None:
    result = runner.invoke(app, ["tax", "--wages", "80000", "--filing-status", "married-joint"])
    assert result.exit_code == 0, result.output
    assert "Taxable income: $52,300" in result.output


def test_fire_summary() -> None:
    result = runner.invoke(app, ["fire"])
    assert result.exit_code == 0, result.output
    assert "FIRE number: $1,000,000" in result.output
    assert "FIRE age:" in result.output


def test_fire_bad_allocation() -> None:
    result = runner.invoke(app, ["fire", "--stocks", "50"])
    assert result.exit_code == 1


def test_schedule_with_extra_payments() -> None:
    result = runner.invoke(app, ["schedule", "200000", "--extra-monthly", "100"])
    assert result.exit_code == 0, result.output
    assert "Year  1:" in result.output
    assert "Extra payments save" in result.output


def test_rent_vs_buy_married_under_2023_tables() -> None:
    args = SCENARIO_ARGS + ["--marital-status", "married", "--tax-year", "2023", "--json"]
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.stdout)["results"]) == 10


def test_tax_married_joint_under_2025_tables_from_environment() -> None:
    result = runner.invoke(
        app,
        ["tax", "--wages", "80000", "--filing-status", "married-joint"],
        env={"FINCALC_TAX_YEAR": "2025"},
    )
    assert result.exit_code == 0, result.output
    assert "Taxable income: $50,000" in result.output
