from __future__ import annotations

import pytest

from fincalc.schemas import Location, ProjectionInputs


@pytest.fixture
def scenario() -> ProjectionInputs:
    """A ten-year California purchase with typical assumptions."""
    return ProjectionInputs(
        location=Location(state="CA", property_tax_rate=1.1),
        marital_status="single",
        annual_income=150_000,
        monthly_rent=2_000,
        home_price=500_000,
        down_payment_percent=20,
        time_horizon=10,
        mortgage_term=30,
        interest_rate=6,
        home_insurance_rate=0.5,
        monthly_hoa_fees=0,
        annual_maintenance_percent=1,
        monthly_additional_expenses=0,
        annual_home_value_increase=3,
        annual_rent_increase=3,
        monthly_renters_insurance=30,
        annual_inflation=3,
        annual_return_on_savings=6,
    )
