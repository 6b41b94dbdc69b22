"""State-level lookup data: cost of living, property tax, home insurance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_PROPERTY_TAX_RATE = 1.1  # percent, used when a location has none
DEFAULT_HOME_INSURANCE_RATE = 0.5


@dataclass(frozen=True)
class StateProfile:
    code: str
    name: str
    fips: str
    cost_of_living_index: float  # 100 = national average
    property_tax_rate: float  # effective annual percent
    home_insurance_rate: float  # annual percent of home value


_ROWS = [
    ("AL", "Alabama", "01", 87.9, 0.41, 0.83),
    ("AK", "Alaska", "02", 125.8, 1.19, 0.47),
    ("AZ", "Arizona", "04", 102.2, 0.62, 0.42),
    ("AR", "Arkansas", "05", 86.9, 0.62, 0.74),
    ("CA", "California", "06", 142.2, 0.76, 0.35),
    ("CO", "Colorado", "08", 105.6, 0.51, 0.55),
    ("CT", "Connecticut", "09", 119.1, 2.14, 0.47),
    ("DE", "Delaware", "10", 102.6, 0.57, 0.32),
    ("FL", "Florida", "12", 97.9, 0.89, 0.97),
    ("GA", "Georgia", "13", 89.2, 0.92, 0.58),
    ("HI", "Hawaii", "15", 170.0, 0.28, 0.28),
    ("ID", "Idaho", "16", 94.0, 0.69, 0.35),
    ("IL", "Illinois", "17", 94.3, 2.27, 0.52),
    ("IN", "Indiana", "18", 90.4, 0.85, 0.55),
    ("IA", "Iowa", "19", 89.9, 1.53, 0.58),
    ("KS", "Kansas", "20", 86.5, 1.41, 0.91),
    ("KY", "Kentucky", "21", 90.8, 0.86, 0.58),
    ("LA", "Louisiana", "22", 93.9, 0.55, 1.10),
    ("ME", "Maine", "23", 117.5, 1.30, 0.36),
    ("MD", "Maryland", "24", 124.0, 1.09, 0.38),
    ("MA", "Massachusetts", "25", 131.6, 1.23, 0.41),
    ("MI", "Michigan", "26", 90.9, 1.54, 0.46),
    ("MN", "Minnesota", "27", 97.2, 1.15, 0.54),
    ("MS", "Mississippi", "28", 84.8, 0.65, 0.95),
    ("MO", "Missouri", "29", 89.8, 0.97, 0.65),
    ("MT", "Montana", "30", 94.0, 0.84, 0.56),
    ("NE", "Nebraska", "31", 90.8, 1.73, 0.82),
    ("NV", "Nevada", "32", 108.5, 0.53, 0.39),
    ("NH", "New Hampshire", "33", 109.7, 2.18, 0.35),
    ("NJ", "New Jersey", "34", 125.1, 2.49, 0.42),
    ("NM", "New Mexico", "35", 87.5, 0.80, 0.56),
    ("NY", "New York", "36", 139.1, 1.72, 0.53),
    ("NC", "North Carolina", "37", 94.9, 0.84, 0.51),
    ("ND", "North Dakota", "38", 98.8, 0.98, 0.83),
    ("OH", "Ohio", "39", 90.8, 1.62, 0.40),
    ("OK", "Oklahoma", "40", 86.1, 0.90, 1.10),
    ("OR", "Oregon", "41", 113.1, 0.97, 0.34),
    ("PA", "Pennsylvania", "42", 101.7, 1.58, 0.39),
    ("RI", "Rhode Island", "44", 119.4, 1.63, 0.44),
    ("SC", "South Carolina", "45", 95.9, 0.57, 0.53),
    ("SD", "South Dakota", "46", 99.8, 1.32, 0.79),
    ("TN", "Tennessee", "47", 89.8, 0.71, 0.58),
    ("TX", "Texas", "48", 91.5, 1.80, 0.89),
    ("UT", "Utah", "49", 98.4, 0.66, 0.33),
    ("VT", "Vermont", "50", 117.0, 1.90, 0.33),
    ("VA", "Virginia", "51", 100.7, 0.80, 0.41),
    ("WA", "Washington", "53", 110.7, 0.98, 0.42),
    ("WV", "West Virginia", "54", 91.1, 0.58, 0.45),
    ("WI", "Wisconsin", "55", 94.9, 1.76, 0.38),
    ("WY", "Wyoming", "56", 89.3, 0.61, 0.53),
    ("DC", "District of Columbia", "11", 152.1, 0.56, 0.45),
]

STATES: Dict[str, StateProfile] = {row[0]: StateProfile(*row) for row in _ROWS}


def get_state(state: str) -> Optional[StateProfile]:
    return STATES.get((state or "").upper())


def get_cost_of_living_adjustment(state: str) -> float:
    """Cost-of-living multiplier for ``state``; 1.0 when the state is unknown."""
    profile = get_state(state)
    if profile is None:
        if state:
            logger.warning("Unknown state '%s'; using national cost of living", state)
        return 1.0
    return profile.cost_of_living_index / 100


def get_property_tax_rate(state: str) -> float:
    profile = get_state(state)
    return profile.property_tax_rate if profile else DEFAULT_PROPERTY_TAX_RATE


def get_home_insurance_rate(state: str) -> float:
    profile = get_state(state)
    return profile.home_insurance_rate if profile else DEFAULT_HOME_INSURANCE_RATE


def state_name(state: str) -> str:
    profile = get_state(state)
    return profile.name if profile else state
