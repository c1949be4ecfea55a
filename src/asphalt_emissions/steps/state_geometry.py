"""
State boundaries for the map, from the Census cartographic boundary shapefile.

Output is one row per region (50 states + D.C.) with columns
statefp / state_name / geometry, already laid out for display:
- contiguous states in CONUS Albers (EPSG:5070)
- Alaska and Hawaii drawn in their own Albers projections, shrunk/moved
  into insets below the south-west corner of the contiguous states
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple

import geopandas as gpd
from pyproj import CRS

from asphalt_emissions.errors import GeographyError
from asphalt_emissions.states import ALASKA_FIPS, FIPS_NAMES, HAWAII_FIPS

logger = logging.getLogger(__name__)

CENSUS_STATES_URL = "https://www2.census.gov/geo/tiger/GENZ2018/shp/cb_2018_us_state_20m.zip"
CONUS_CRS = CRS.from_epsg(5070)
NAD83 = CRS.from_epsg(4269)


@dataclass(frozen=True)
class Inset:
    crs: CRS
    scale: float
    anchor: Tuple[float, float]  # lower-left corner in CONUS_CRS metres


INSETS: Dict[str, Inset] = {
    ALASKA_FIPS: Inset(crs=CRS.from_epsg(3338), scale=0.35, anchor=(-2_300_000.0, -150_000.0)),
    HAWAII_FIPS: Inset(crs=CRS.from_user_input("ESRI:102007"), scale=1.0, anchor=(-950_000.0, -50_000.0)),
}


def read_state_boundaries(zip_path: Path) -> gpd.GeoDataFrame:
    """Read the zipped shapefile and keep only the 51 mapped regions."""
    if not zip_path.exists():
        raise GeographyError(f"State boundary file not found: {zip_path}")
    try:
        raw = gpd.read_file(f"zip://{zip_path}")
    except Exception as exc:
        raise GeographyError(f"Could not read state boundaries from {zip_path}: {exc}") from exc

    raw = raw.rename(columns=str.lower)
    if "statefp" not in raw.columns:
        raise GeographyError(f"No STATEFP field in {zip_path.name}; columns: {list(raw.columns)}")

    return to_state_frame(raw)


def to_state_frame(raw: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Normalize a boundary layer to statefp / state_name / geometry for the 51 regions."""
    gdf = raw.copy()
    gdf["statefp"] = gdf["statefp"].astype(str).str.strip().str.zfill(2)
    gdf = gdf[gdf["statefp"].isin(list(FIPS_NAMES))].copy()
    gdf = gdf.drop_duplicates(subset="statefp", keep="first")
    gdf["state_name"] = gdf["statefp"].map(FIPS_NAMES)
    gdf = gdf[["statefp", "state_name", "geometry"]].sort_values("statefp").reset_index(drop=True)

    missing = sorted(set(FIPS_NAMES) - set(gdf["statefp"]))
    if missing:
        logger.warning("Boundary layer is missing %s regions: %s", len(missing), [FIPS_NAMES[m] for m in missing])
    return gpd.GeoDataFrame(gdf, geometry="geometry")


def _relocate(geoms: gpd.GeoSeries, inset: Inset) -> gpd.GeoSeries:
    projected = geoms.to_crs(inset.crs)
    minx, miny, _, _ = projected.total_bounds
    scaled = projected.scale(xfact=inset.scale, yfact=inset.scale, origin=(minx, miny))
    moved = scaled.translate(xoff=inset.anchor[0] - minx, yoff=inset.anchor[1] - miny)
    return moved.set_crs(CONUS_CRS, allow_override=True)


def project_for_display(states: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Project to CONUS Albers and move Alaska/Hawaii into insets."""
    if states.crs is None:
        states = states.set_crs(NAD83)

    out = states.to_crs(CONUS_CRS)
    for statefp, inset in INSETS.items():
        mask = states["statefp"] == statefp
        if mask.any():
            out.loc[mask, "geometry"] = _relocate(states.loc[mask, "geometry"], inset)
    return out


def load_state_geometry(zip_path: Path) -> gpd.GeoDataFrame:
    states = project_for_display(read_state_boundaries(zip_path))
    logger.info("Loaded %s state geometries from %s", len(states), zip_path.name)
    return states

