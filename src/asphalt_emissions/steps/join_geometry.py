from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import geopandas as gpd

from asphalt_emissions.steps.clean_emissions import EmissionsRow, rows_to_frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinCoverage:
    matched: int
    total: int
    cleaned: int

    @property
    def unmatched(self) -> int:
        return self.total - self.matched

    @property
    def complete(self) -> bool:
        return self.matched == self.total


def join_emissions(
    geometry: gpd.GeoDataFrame,
    rows: List[EmissionsRow],
) -> Tuple[gpd.GeoDataFrame, JoinCoverage]:
    """
    Left-join emissions onto every state geometry by statefp.

    Every geometry is kept; states without data get NaN emissions and are drawn
    as "no data". Coverage is advisory only.
    """
    # Avoid clobbering an existing emissions column from the boundary layer
    geometry = geometry.drop(columns=["emissions"], errors="ignore")

    joined = geometry.merge(rows_to_frame(rows), on="statefp", how="left", validate="one_to_one")
    joined = gpd.GeoDataFrame(joined, geometry="geometry", crs=geometry.crs)

    coverage = JoinCoverage(
        matched=int(joined["emissions"].notna().sum()),
        total=len(joined),
        cleaned=len(rows),
    )
    if coverage.complete:
        logger.info("Join coverage: %s/%s regions", coverage.matched, coverage.total)
    else:
        missing = joined.loc[joined["emissions"].isna(), "state_name"].tolist()
        logger.warning(
            "Join coverage: %s/%s regions; no data for %s",
            coverage.matched,
            coverage.total,
            missing,
        )
    return joined, coverage
