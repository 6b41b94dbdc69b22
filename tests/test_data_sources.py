from __future__ import annotations

import pytest
import requests

from fincalc.data_sources import CensusACSClient, LocationDataAssembler


class FakeResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response


CA_ROWS = [
    ["NAME", "B19013_001E", "B25064_001E", "B25077_001E", "B25103_001E", "state"],
    ["California", "96334", "1942", "715900", "5400", "06"],
]


def test_fetch_state_metrics_queries_by_fips() -> None:
    session = FakeSession(FakeResponse(CA_ROWS))
    client = CensusACSClient(api_key="secret", session=session)

    metrics = client.fetch_state_metrics("ca", year=2022)

    url, params, timeout = session.calls[0]
    assert url == "https://api.census.gov/data/2022/acs/acs5"
    assert params["for"] == "state:06"
    assert params["key"] == "secret"
    assert params["get"].startswith("NAME,")
    assert timeout == 30
    assert metrics == {
        "name": "California",
        "median_income": 96334.0,
        "median_rent": 1942.0,
        "median_home_value": 715900.0,
        "real_estate_taxes": 5400.0,
    }


def test_suppressed_values_become_zero() -> None:
    rows = [CA_ROWS[0], ["California", "-666666666", "", "715900", "null", "06"]]
    client = CensusACSClient(api_key=None, session=FakeSession(FakeResponse(rows)))
    metrics = client.fetch_state_metrics("CA")
    assert metrics["median_income"] == 0.0
    assert metrics["median_rent"] == 0.0
    assert metrics["real_estate_taxes"] == 0.0


def test_empty_response_raises() -> None:
    client = CensusACSClient(api_key=None, session=FakeSession(FakeResponse([CA_ROWS[0]])))
    with pytest.raises(RuntimeError, match="no rows"):
        client.fetch_state_metrics("CA")


def test_http_errors_propagate() -> None:
    client = CensusACSClient(api_key=None, session=FakeSession(FakeResponse([], 503)))
    with pytest.raises(requests.HTTPError):
        client.fetch_state_metrics("CA")


def test_unknown_state_rejected() -> None:
    client = CensusACSClient(api_key=None, session=FakeSession(FakeResponse(CA_ROWS)))
    with pytest.raises(ValueError):
        client.fetch_state_metrics("ZZ")


def test_build_inputs_from_medians() -> None:
    client = CensusACSClient(api_key=None, session=FakeSession(FakeResponse(CA_ROWS)))
    inputs = LocationDataAssembler(acs_client=client).build_inputs("ca", time_horizon=15)

    assert inputs.location.state == "CA"
    assert inputs.location.property_tax_rate == round(5400 / 715900 * 100, 2)
    assert inputs.location.home_insurance_rate == 0.35
    assert inputs.home_price == 715900
    assert inputs.monthly_rent == 1942
    assert inputs.annual_income == 96334
    assert inputs.home_insurance_rate == 0.35
    assert inputs.time_horizon == 15


def test_build_location() -> None:
    client = CensusACSClient(api_key=None, session=FakeSession(FakeResponse(CA_ROWS)))
    location = LocationDataAssembler(acs_client=client).build_location("CA")
    assert location.median_home_price == 715900
    assert location.median_rent == 1942
