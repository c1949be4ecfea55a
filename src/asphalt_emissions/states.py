"""State name to FIPS code lookup for the 50 states plus the District of Columbia."""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

import pandas as pd

STATE_FIPS: Dict[str, str] = {
    "Alabama": "01",
    "Alaska": "02",
    "Arizona": "04",
    "Arkansas": "05",
    "California": "06",
    "Colorado": "08",
    "Connecticut": "09",
    "Delaware": "10",
    "District of Columbia": "11",
    "Florida": "12",
    "Georgia": "13",
    "Hawaii": "15",
    "Idaho": "16",
    "Illinois": "17",
    "Indiana": "18",
    "Iowa": "19",
    "Kansas": "20",
    "Kentucky": "21",
    "Louisiana": "22",
    "Maine": "23",
    "Maryland": "24",
    "Massachusetts": "25",
    "Michigan": "26",
    "Minnesota": "27",
    "Mississippi": "28",
    "Missouri": "29",
    "Montana": "30",
    "Nebraska": "31",
    "Nevada": "32",
    "New Hampshire": "33",
    "New Jersey": "34",
    "New Mexico": "35",
    "New York": "36",
    "North Carolina": "37",
    "North Dakota": "38",
    "Ohio": "39",
    "Oklahoma": "40",
    "Oregon": "41",
    "Pennsylvania": "42",
    "Rhode Island": "44",
    "South Carolina": "45",
    "South Dakota": "46",
    "Tennessee": "47",
    "Texas": "48",
    "Utah": "49",
    "Vermont": "50",
    "Virginia": "51",
    "Washington": "53",
    "West Virginia": "54",
    "Wisconsin": "55",
    "Wyoming": "56",
}

ALASKA_FIPS = "02"
HAWAII_FIPS = "15"

# Other spellings of D.C. seen in federal spreadsheets
_ALIASES = {
    "washington dc": "District of Columbia",
    "washington d.c.": "District of Columbia",
    "washington, dc": "District of Columbia",
    "washington, d.c.": "District of Columbia",
    "dc": "District of Columbia",
    "d.c.": "District of Columbia",
}

_WS = re.compile(r"\s+")


def normalize_state_name(value: Any) -> Optional[str]:
    """Canonical comparable form of a state name: trimmed, single-spaced, casefolded."""
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    text = _WS.sub(" ", str(value)).strip().casefold()
    return text or None


_BY_KEY: Dict[str, str] = {normalize_state_name(name): name for name in STATE_FIPS}
_BY_KEY.update(_ALIASES)


def canonical_state_name(value: Any) -> Optional[str]:
    key = normalize_state_name(value)
    if key is None:
        return None
    return _BY_KEY.get(key)


def lookup_statefp(value: Any) -> Optional[str]:
    """Two-digit FIPS code for a state name, or None if it is not one of the 51 regions."""
    name = canonical_state_name(value)
    return STATE_FIPS[name] if name else None


FIPS_NAMES: Dict[str, str] = {fips: name for name, fips in STATE_FIPS.items()}
