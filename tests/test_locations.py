from __future__ import annotations

import pytest

from fincalc.formatting import format_currency, format_percent
from fincalc.locations import (
    STATES,
    get_cost_of_living_adjustment,
    get_home_insurance_rate,
    get_property_tax_rate,
    state_name,
)


def test_cost_of_living_adjustment() -> None:
    assert get_cost_of_living_adjustment("CA") == pytest.approx(1.422)
    assert get_cost_of_living_adjustment("ms") == pytest.approx(0.848)


def test_unknown_state_defaults() -> None:
    assert get_cost_of_living_adjustment("ZZ") == 1.0
    assert get_cost_of_living_adjustment("") == 1.0
    assert get_property_tax_rate("ZZ") == 1.1
    assert get_home_insurance_rate("ZZ") == 0.5
    assert state_name("ZZ") == "ZZ"


def test_state_table() -> None:
    assert len(STATES) == 51
    assert state_name("DC") == "District of Columbia"
    assert get_property_tax_rate("NJ") == 2.49
    assert len({s.fips for s in STATES.values()}) == 51


@pytest.mark.parametrize(
    "value, expected",
    [(1234.56, "$1,235"), (0, "$0"), (-98765.4, "-$98,765"), (1_000_000, "$1,000,000")],
)
def test_format_currency(value: float, expected: str) -> None:
    assert format_currency(value) == expected


def test_format_percent() -> None:
    assert format_percent(12.5) == "12.50%"
    assert format_percent(48) == "48.00%"
