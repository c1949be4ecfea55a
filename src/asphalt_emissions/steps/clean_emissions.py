"""
Turn the raw inventory sheet into typed per-state emission rows.

Only the state-name and per-capita value columns are kept. Rows whose state
is not one of the 50 states + D.C., or whose value is not a finite number,
are dropped. If a state appears more than once the first row wins.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional

import pandas as pd

from asphalt_emissions.errors import InventoryReadError
from asphalt_emissions.states import FIPS_NAMES, lookup_statefp

logger = logging.getLogger(__name__)

DEFAULT_STATE_COLUMN = "State"
DEFAULT_VALUE_COLUMN = "Total kg/person"


@dataclass(frozen=True)
class EmissionsRow:
    statefp: str
    state_name: str
    emissions: float


def parse_emissions(value: Any) -> Optional[float]:
    """Numeric value of a cell, or None when it is blank, text, NaN or infinite."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip().replace(",", "")
    number = pd.to_numeric(pd.Series([value], dtype=object), errors="coerce").iloc[0]
    if pd.isna(number):
        return None
    number = float(number)
    return number if math.isfinite(number) else None


def clean_emissions(
    df: pd.DataFrame,
    *,
    state_column: str = DEFAULT_STATE_COLUMN,
    value_column: str = DEFAULT_VALUE_COLUMN,
) -> List[EmissionsRow]:
    missing = [c for c in (state_column, value_column) if c not in df.columns]
    if missing:
        raise InventoryReadError(
            f"Expected column(s) {missing} not found; sheet has: {list(df.columns)}"
        )

    rows: List[EmissionsRow] = []
    seen: set[str] = set()
    dropped = 0
    duplicates = 0

    for state, value in df[[state_column, value_column]].itertuples(index=False, name=None):
        statefp = lookup_statefp(state)
        emissions = parse_emissions(value)
        if statefp is None or emissions is None:
            dropped += 1
            continue
        if statefp in seen:
            duplicates += 1
            continue
        seen.add(statefp)
        rows.append(EmissionsRow(statefp=statefp, state_name=FIPS_NAMES[statefp], emissions=emissions))

    logger.debug("Dropped %s unusable rows and %s duplicate states", dropped, duplicates)
    if duplicates:
        logger.warning("%s duplicate state rows ignored (first row kept)", duplicates)
    logger.info("Cleaned emissions rows: %s of %s", len(rows), len(df))
    return rows


def rows_to_frame(rows: List[EmissionsRow]) -> pd.DataFrame:
    """Join-ready frame with one row per statefp."""
    return pd.DataFrame(
        {
            "statefp": pd.Series([r.statefp for r in rows], dtype="object"),
            "emissions": pd.Series([r.emissions for r in rows], dtype="float64"),
        }
    )
