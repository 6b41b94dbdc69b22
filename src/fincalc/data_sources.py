from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .locations import get_home_insurance_rate, get_state
from .schemas import Location, ProjectionInputs

logger = logging.getLogger(__name__)


class CensusACSClient:
    """Thin wrapper around the Census API for state-level ACS pulls."""

    BASE_URL = "https://api.census.gov/data"
    GEO_KEY = "state"

    # ACS column per metric; all values are dollars as published.
    ACS_METRICS: Dict[str, str] = {
        "median_income": "B19013_001E",  # annual household income
        "median_rent": "B25064_001E",  # monthly gross rent
        "median_home_value": "B25077_001E",
        "real_estate_taxes": "B25103_001E",  # annual, owner-occupied units
    }

    def __init__(
        self,
        api_key: Optional[str],
        dataset: str = "acs/acs5",
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        self.api_key = api_key
        self.dataset = dataset
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch_state_metrics(self, state: str, *, year: int = 2023) -> Dict[str, Any]:
        profile = get_state(state)
        if profile is None:
            raise ValueError(f"Unknown state code '{state}'")

        columns = ["NAME"] + sorted(self.ACS_METRICS.values())
        params = {
            "get": ",".join(columns),
            "for": f"{self.GEO_KEY}:{profile.fips}",
        }
        if self.api_key:
            params["key"] = self.api_key

        url = f"{self.BASE_URL}/{year}/{self.dataset}"
        logger.info("Fetching ACS %s metrics for %s", year, profile.code)
        response = self.session.get(url, params=params, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if len(data) < 2:
            raise RuntimeError(f"ACS query returned no rows for state {profile.code}")

        row = dict(zip(data[0], data[1]))
        metrics: Dict[str, Any] = {"name": row.get("NAME", profile.name)}
        for key, column in self.ACS_METRICS.items():
            value = _to_float(row.get(column))
            metrics[key] = value if value is not None else 0.0
        return metrics


@dataclass
class LocationDataAssembler:
    """Turn ACS medians into a ready-to-run projection for a state."""

    acs_client: CensusACSClient

    def build_location(self, state: str, *, acs_year: int = 2023) -> Location:
        metrics = self.acs_client.fetch_state_metrics(state, year=acs_year)
        return self._location_from(state, metrics)

    def build_inputs(
        self, state: str, *, acs_year: int = 2023, **overrides: Any
    ) -> ProjectionInputs:
        metrics = self.acs_client.fetch_state_metrics(state, year=acs_year)
        location = self._location_from(state, metrics)
        values: Dict[str, Any] = {
            "location": location,
            "annual_income": metrics["median_income"],
            "monthly_rent": metrics["median_rent"],
            "home_price": metrics["median_home_value"],
            "home_insurance_rate": location.home_insurance_rate,
        }
        values.update(overrides)
        return ProjectionInputs(**values)

    def _location_from(self, state: str, metrics: Dict[str, Any]) -> Location:
        home_value = metrics["median_home_value"]
        taxes = metrics["real_estate_taxes"]
        return Location(
            state=state.upper(),
            property_tax_rate=round(taxes / home_value * 100, 2) if home_value > 0 else None,
            median_home_price=home_value or None,
            median_rent=metrics["median_rent"] or None,
            home_insurance_rate=get_home_insurance_rate(state),
        )


def _to_float(value: Optional[str]) -> Optional[float]:
    if value in (None, "", "null"):
        return None
    try:
        number = float(value)
    except ValueError as exc:
        raise ValueError(f"Could not convert ACS value '{value}' to float") from exc
    # The ACS encodes suppressed estimates as large negative sentinels.
    return number if number >= 0 else None
