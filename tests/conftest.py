from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Sequence

import matplotlib

matplotlib.use("Agg")

import geopandas as gpd
import pytest
from openpyxl import Workbook
from shapely.geometry import box

from asphalt_emissions.states import FIPS_NAMES, STATE_FIPS


@pytest.fixture
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    def _make(
        rows: Iterable[Sequence[Any]],
        *,
        sheet: str = "Output - State",
        header: Sequence[Any] = ("State", "Total kg/person"),
        name: str = "inventory.xlsx",
    ) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = sheet
        ws.append(list(header))
        for row in rows:
            ws.append(list(row))
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(path)
        return path

    return _make


@pytest.fixture
def state_geometry() -> gpd.GeoDataFrame:
    """51 unit squares laid out in a row, already in display coordinates."""
    fips = sorted(FIPS_NAMES)
    return gpd.GeoDataFrame(
        {
            "statefp": fips,
            "state_name": [FIPS_NAMES[f] for f in fips],
        },
        geometry=[box(i * 10.0, 0.0, i * 10.0 + 9.0, 9.0) for i in range(len(fips))],
        crs="EPSG:5070",
    )


@pytest.fixture
def all_state_rows() -> list[tuple[str, float]]:
    return [(name, float(i + 1)) for i, name in enumerate(sorted(STATE_FIPS))]


@pytest.fixture
def cfg(tmp_path: Path) -> Dict[str, Any]:
    return {
        "_repo_root": str(tmp_path),
        "_config_path": None,
        "map": {"dpi": 20, "width_in": 4, "height_in": 3},
    }
