"""
Tax-year policy tables.

Bracket boundaries, standard deductions and payroll-tax limits change every
year, so they live here as data keyed by tax year instead of inside the
engines. Extra years can be registered at runtime from a JSON file with
``load_policy``.
"""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

TAX_YEAR_ENV = "FINCALC_TAX_YEAR"


@dataclass(frozen=True)
class TaxBracket:
    rate: float
    min: float
    max: float = math.inf  # open-ended top bracket

    def contains(self, income: float) -> bool:
        return self.min <= income < self.max


@dataclass(frozen=True)
class TaxPolicy:
    year: int
    brackets: Dict[str, Tuple[TaxBracket, ...]]
    standard_deduction: Dict[str, float]
    state_tax_rates: Dict[str, float] = field(default_factory=dict)  # percent
    salt_cap: float = 10000.0
    social_security_wage_base: float = 160200.0
    social_security_rate: float = 0.062
    medicare_rate: float = 0.0145
    self_employment_rate: float = 0.153
    self_employment_base_factor: float = 0.9235

    def brackets_for(self, filing_status: str) -> Tuple[TaxBracket, ...]:
        try:
            return self.brackets[filing_status]
        except KeyError:
            raise KeyError(
                f"No {self.year} brackets for filing status '{filing_status}'"
            ) from None

    def standard_deduction_for(self, filing_status: str) -> float:
        try:
            return self.standard_deduction[filing_status]
        except KeyError:
            raise KeyError(
                f"No {self.year} standard deduction for filing status '{filing_status}'"
            ) from None


def _brackets(rows: Sequence[Tuple[float, float, Optional[float]]]) -> Tuple[TaxBracket, ...]:
    return tuple(
        TaxBracket(rate=rate, min=lo, max=math.inf if hi is None else hi)
        for rate, lo, hi in rows
    )


STATE_TAX_RATES_2023: Dict[str, float] = {
    "AL": 5.0, "AK": 0.0, "AZ": 4.5, "AR": 6.0, "CA": 9.3, "CO": 4.55,
    "CT": 6.99, "DE": 6.6, "FL": 0.0, "GA": 5.75, "HI": 11.0, "ID": 6.5,
    "IL": 4.95, "IN": 3.23, "IA": 6.0, "KS": 5.7, "KY": 5.0, "LA": 6.0,
    "ME": 7.15, "MD": 5.75, "MA": 5.0, "MI": 4.25, "MN": 9.85, "MS": 5.0,
    "MO": 5.4, "MT": 6.75, "NE": 6.84, "NV": 0.0, "NH": 5.0, "NJ": 10.75,
    "NM": 5.9, "NY": 10.9, "NC": 5.25, "ND": 2.9, "OH": 3.99, "OK": 5.0,
    "OR": 9.9, "PA": 3.07, "RI": 5.99, "SC": 7.0, "SD": 0.0, "TN": 0.0,
    "TX": 0.0, "UT": 4.95, "VT": 8.75, "VA": 5.75, "WA": 0.0, "WV": 6.5,
    "WI": 7.65, "WY": 0.0, "DC": 8.95,
}

# The rent-vs-buy calculator's "married" status files jointly, so every year
# carries it next to the four tax-calculator statuses.
_JOINT_2023 = _brackets([
    (0.10, 0, 22000), (0.12, 22000, 89450), (0.22, 89450, 190750),
    (0.24, 190750, 364200), (0.32, 364200, 462500),
    (0.35, 462500, 693750), (0.37, 693750, None),
])

POLICY_2023 = TaxPolicy(
    year=2023,
    brackets={
        "single": _brackets([
            (0.10, 0, 11000), (0.12, 11000, 44725), (0.22, 44725, 95375),
            (0.24, 95375, 182100), (0.32, 182100, 231250),
            (0.35, 231250, 578125), (0.37, 578125, None),
        ]),
        "married": _JOINT_2023,
        "married-joint": _JOINT_2023,
        "married-separate": _brackets([
            (0.10, 0, 11000), (0.12, 11000, 44725), (0.22, 44725, 95375),
            (0.24, 95375, 182100), (0.32, 182100, 231250),
            (0.35, 231250, 346875), (0.37, 346875, None),
        ]),
        "head-of-household": _brackets([
            (0.10, 0, 15700), (0.12, 15700, 59850), (0.22, 59850, 95350),
            (0.24, 95350, 182100), (0.32, 182100, 231250),
            (0.35, 231250, 578100), (0.37, 578100, None),
        ]),
    },
    standard_deduction={
        "single": 13850,
        "married": 27700,
        "married-joint": 27700,
        "married-separate": 13850,
        "head-of-household": 20800,
    },
    state_tax_rates=STATE_TAX_RATES_2023,
    social_security_wage_base=160200,
)

_JOINT_2025 = _brackets([
    (0.10, 0, 23850), (0.12, 23850, 96950), (0.22, 96950, 206700),
    (0.24, 206700, 394600), (0.32, 394600, 501050),
    (0.35, 501050, 751600), (0.37, 751600, None),
])

POLICY_2025 = TaxPolicy(
    year=2025,
    brackets={
        "single": _brackets([
            (0.10, 0, 11925), (0.12, 11925, 48475), (0.22, 48475, 103350),
            (0.24, 103350, 197300), (0.32, 197300, 250525),
            (0.35, 250525, 626350), (0.37, 626350, None),
        ]),
        "married": _JOINT_2025,
        "married-joint": _JOINT_2025,
        "married-separate": _brackets([
            (0.10, 0, 11925), (0.12, 11925, 48475), (0.22, 48475, 103350),
            (0.24, 103350, 197300), (0.32, 197300, 250525),
            (0.35, 250525, 375800), (0.37, 375800, None),
        ]),
        "head-of-household": _brackets([
            (0.10, 0, 17000), (0.12, 17000, 64850), (0.22, 64850, 103350),
            (0.24, 103350, 197300), (0.32, 197300, 250500),
            (0.35, 250500, 626350), (0.37, 626350, None),
        ]),
    },
    standard_deduction={
        "single": 15000,
        "married": 30000,
        "married-joint": 30000,
        "married-separate": 15000,
        "head-of-household": 22500,
    },
    state_tax_rates=STATE_TAX_RATES_2023,
    social_security_wage_base=176100,
)

POLICIES: Dict[int, TaxPolicy] = {
    POLICY_2023.year: POLICY_2023,
    POLICY_2025.year: POLICY_2025,
}

# Defaults per engine: the homeowner benefit estimator uses the 2025 law,
# the tax calculator the 2023 tables it was published with.
HOUSING_POLICY_YEAR = 2025
TAX_CALCULATOR_POLICY_YEAR = 2023

# (upper bound on down payment percent, annual PMI rate on the loan amount)
PMI_TIERS: Tuple[Tuple[float, float], ...] = (
    (5.0, 0.0115),
    (10.0, 0.0095),
    (15.0, 0.007),
    (20.0, 0.004),
)
PMI_FREE_DOWN_PAYMENT = 20.0
PMI_REMOVAL_LTV = 0.78


def pmi_rate(down_payment_percent: float) -> float:
    for upper, rate in PMI_TIERS:
        if down_payment_percent < upper:
            return rate
    return 0.0


def get_policy(year: Optional[int] = None, *, default: int = TAX_CALCULATOR_POLICY_YEAR) -> TaxPolicy:
    """
    Resolve the policy for ``year``, falling back to ``$FINCALC_TAX_YEAR`` and
    then to ``default``.
    """
    if year is None:
        env_year = os.environ.get(TAX_YEAR_ENV)
        year = int(env_year) if env_year else default
    try:
        return POLICIES[year]
    except KeyError:
        known = ", ".join(str(y) for y in sorted(POLICIES))
        raise KeyError(f"No tax policy registered for {year} (known: {known})") from None


def load_policy(path: Union[str, Path], *, register: bool = True) -> TaxPolicy:
    """
    Read a policy from JSON.

    Expected shape::

        {"year": 2026,
         "brackets": {"single": [{"rate": 0.1, "min": 0, "max": 12000}, ...]},
         "standard_deduction": {"single": 16000},
         "state_tax_rates": {"CA": 9.3},
         "salt_cap": 40000}

    A ``null`` or missing ``max`` marks the open-ended top bracket.
    """
    raw = json.loads(Path(path).read_text())
    try:
        brackets = {
            status: _brackets(
                [(row["rate"], row["min"], row.get("max")) for row in rows]
            )
            for status, rows in raw["brackets"].items()
        }
        policy = TaxPolicy(
            year=int(raw["year"]),
            brackets=brackets,
            standard_deduction={k: float(v) for k, v in raw["standard_deduction"].items()},
            state_tax_rates={
                k: float(v)
                for k, v in raw.get("state_tax_rates", STATE_TAX_RATES_2023).items()
            },
            **{
                key: float(raw[key])
                for key in _SCALAR_FIELDS
                if key in raw
            },
        )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed tax policy file {path}: {exc}") from exc

    _check_brackets(policy)
    if register:
        POLICIES[policy.year] = policy
        logger.info("Registered %s tax policy from %s", policy.year, path)
    return policy


_SCALAR_FIELDS: List[str] = [
    "salt_cap",
    "social_security_wage_base",
    "social_security_rate",
    "medicare_rate",
    "self_employment_rate",
    "self_employment_base_factor",
]


def _check_brackets(policy: TaxPolicy) -> None:
    for status, brackets in policy.brackets.items():
        if not brackets:
            raise ValueError(f"{policy.year} policy has no brackets for '{status}'")
        if brackets[0].min != 0:
            raise ValueError(f"{policy.year} '{status}' brackets must start at 0")
        for lower, upper in zip(brackets, brackets[1:]):
            if lower.max != upper.min:
                raise ValueError(
                    f"{policy.year} '{status}' brackets are not contiguous at {lower.max}"
                )
        if brackets[-1].max != math.inf:
            raise ValueError(f"{policy.year} '{status}' top bracket must be open-ended")
