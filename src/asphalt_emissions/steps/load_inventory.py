"""
Read one sheet of the EPA state/county inventory workbook into a DataFrame.

The header row is taken from the first row of the sheet. Blank and duplicated
header cells are renamed to unique positional names instead of failing.
"""

from __future__ import annotations

import logging
import re
import zipfile
from collections import Counter
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from asphalt_emissions.errors import InventoryReadError, SheetNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SHEET = "Output - State"

_POSITION_SUFFIX = re.compile(r"\.\.\.\d+$")


def _header_text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return _POSITION_SUFFIX.sub("", str(value).strip())


def repair_column_names(headers: Sequence[Any]) -> List[str]:
    """
    Make header names unique.

    Blank cells become `...<pos>`; every copy of a duplicated name becomes
    `<name>...<pos>` (1-based column position). Unique names pass through.
    """
    names = [_header_text(h) for h in headers]
    counts = Counter(n for n in names if n)

    repaired: List[str] = []
    for pos, name in enumerate(names, start=1):
        if not name:
            repaired.append(f"...{pos}")
        elif counts[name] > 1:
            repaired.append(f"{name}...{pos}")
        else:
            repaired.append(name)
    return repaired


def load_sheet(path: Path, sheet: str = DEFAULT_SHEET) -> pd.DataFrame:
    """Parse `sheet` of the workbook at `path`; cells are kept as raw objects, with no NA-string conversion."""
    if not path.exists():
        raise InventoryReadError(f"Spreadsheet not found: {path}")

    try:
        with pd.ExcelFile(path, engine="openpyxl") as xls:
            available = [str(s) for s in xls.sheet_names]
            if sheet not in available:
                raise SheetNotFoundError(sheet, available)
            raw = xls.parse(sheet, header=None, dtype=object, keep_default_na=False, na_values=[])
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise InventoryReadError(f"Could not read {path} as an Excel workbook: {exc}") from exc

    if raw.empty:
        logger.warning("Sheet '%s' in %s is empty.", sheet, path.name)
        return pd.DataFrame()

    columns = repair_column_names(raw.iloc[0].tolist())
    df = raw.iloc[1:].reset_index(drop=True)
    df.columns = columns
    logger.info("Loaded sheet '%s': %s rows x %s columns", sheet, len(df), len(columns))
    return df
