"""
Render the state choropleth PNG.

Fill colour runs through three stops: low at the minimum, mid at the median,
high at the maximum, linear in RGB between them. Values outside the recorded
range are clamped. States without data are filled with a neutral colour and
listed in the legend as "No data".

Output: plots/asphalt_emissions_2018.png (14 x 8 in at 300 dpi by default)
"""

from __future__ import annotations

import contextlib
import logging
import math
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import geopandas as gpd
import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
from matplotlib.cm import ScalarMappable
from matplotlib.colors import LinearSegmentedColormap, ListedColormap, Normalize, to_hex, to_rgb
from matplotlib.patches import Patch

from asphalt_emissions.errors import RenderError
from asphalt_emissions.paths import resolve_path, section
from asphalt_emissions.steps.summarize import ColorScale

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]

DEFAULT_OUTPUT_NAME = "asphalt_emissions_2018.png"
DEFAULT_YEAR = 2018


# =============================================================================
# Styles
# =============================================================================
@dataclass(frozen=True)
class MapColors:
    low: str = "#1b7837"      # dark green
    mid: str = "#ffffbf"      # pale yellow
    high: str = "#d73027"     # red
    no_data: str = "#ffffff"
    border: str = "#7f7f7f"   # grey50


@dataclass(frozen=True)
class MapStyle:
    title: str = f"U.S. Asphalt-Related Emissions by State ({DEFAULT_YEAR})"
    subtitle: str = "Total kg per capita from the EPA Air Pollutant Emissions Inventory"
    caption: str = f"Data Source: EPA Air Pollutant Emissions Inventory ({DEFAULT_YEAR})"
    legend_title: str = "Total Emissions\n(kg/person)"
    no_data_label: str = "No data"
    colors: MapColors = field(default_factory=MapColors)
    background: str = "#ffffff"
    border_width: float = 0.5
    width_in: float = 14.0
    height_in: float = 8.0
    dpi: int = 300


def style_from_config(cfg: Dict[str, Any]) -> MapStyle:
    map_cfg = section(cfg, "map")
    year = int(map_cfg.get("year", DEFAULT_YEAR))
    base = MapStyle()

    colors = replace(base.colors, **{k: str(v) for k, v in (map_cfg.get("colors", {}) or {}).items()})
    if to_rgb(colors.no_data) == to_rgb(colors.low):
        raise ValueError("map.colors.no_data must differ from map.colors.low")

    return replace(
        base,
        title=str(map_cfg.get("title", f"U.S. Asphalt-Related Emissions by State ({year})")),
        subtitle=str(map_cfg.get("subtitle", base.subtitle)),
        caption=str(map_cfg.get("caption", f"Data Source: EPA Air Pollutant Emissions Inventory ({year})")),
        legend_title=str(map_cfg.get("legend_title", base.legend_title)),
        colors=colors,
        border_width=float(map_cfg.get("border_width", base.border_width)),
        width_in=float(map_cfg.get("width_in", base.width_in)),
        height_in=float(map_cfg.get("height_in", base.height_in)),
        dpi=int(map_cfg.get("dpi", base.dpi)),
    )


def output_path(cfg: Dict[str, Any], plots_dir: Path) -> Path:
    """`map.output` if configured, else the default file name inside plots_dir."""
    if section(cfg, "map").get("output"):
        return resolve_path(cfg, "map.output")
    return plots_dir / DEFAULT_OUTPUT_NAME


# =============================================================================
# Colour scale
# =============================================================================
def _lerp(a: RGB, b: RGB, t: float) -> RGB:
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t, a[2] + (b[2] - a[2]) * t)


def interpolate_color(value: float, scale: ColorScale, *, low: str, mid: str, high: str) -> RGB:
    """RGB fill for `value`: min->low, median->mid, max->high, clamped at both ends."""
    lo, mi, hi = to_rgb(low), to_rgb(mid), to_rgb(high)
    v = min(max(float(value), scale.vmin), scale.vmax)

    if v <= scale.median:
        span = scale.median - scale.vmin
        if span <= 0:
            return mi
        return _lerp(lo, mi, (v - scale.vmin) / span)

    span = scale.vmax - scale.median
    if span <= 0:
        return mi
    return _lerp(mi, hi, (v - scale.median) / span)


def fill_colors(values: Sequence[float], scale: ColorScale, colors: MapColors) -> List[str]:
    out: List[str] = []
    for v in values:
        if v is None or (isinstance(v, float) and math.isnan(v)):
            out.append(to_hex(colors.no_data))
        else:
            out.append(to_hex(interpolate_color(v, scale, low=colors.low, mid=colors.mid, high=colors.high)))
    return out


def legend_colormap(scale: ColorScale, colors: MapColors) -> Tuple[Any, Normalize]:
    """Colormap + norm for the colourbar, matching `interpolate_color`."""
    if scale.is_degenerate:
        return ListedColormap([colors.mid], name="emissions_flat"), Normalize(scale.vmin - 0.5, scale.vmax + 0.5)

    midpoint = (scale.median - scale.vmin) / (scale.vmax - scale.vmin)
    cmap = LinearSegmentedColormap.from_list(
        "emissions",
        [(0.0, colors.low), (midpoint, colors.mid), (1.0, colors.high)],
        N=256,
    )
    return cmap, Normalize(vmin=scale.vmin, vmax=scale.vmax)


# =============================================================================
# Plotting
# =============================================================================
def _save_figure(fig: Any, out_path: Path, *, dpi: int, background: str) -> None:
    fmt = out_path.suffix.lstrip(".").lower() or "png"
    part = out_path.with_name(out_path.name + ".part")
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(part, format=fmt, dpi=dpi, facecolor=background, transparent=False)
        part.replace(out_path)
    except (OSError, ValueError) as exc:
        with contextlib.suppress(OSError):
            part.unlink()
        raise RenderError(f"Failed to save map to {out_path}: {exc}") from exc


def render_map(
    joined: gpd.GeoDataFrame,
    scale: ColorScale,
    out_path: Path,
    *,
    style: MapStyle = MapStyle(),
) -> Path:
    """Draw one polygon per geometry, coloured by `emissions`, and write the image."""
    colors = style.colors
    fills = fill_colors(joined["emissions"].tolist(), scale, colors)

    fig, ax = plt.subplots(figsize=(style.width_in, style.height_in))
    try:
        fig.patch.set_facecolor(style.background)
        fig.patch.set_alpha(1.0)
        ax.set_facecolor(style.background)
        fig.subplots_adjust(left=0.02, right=0.95, top=0.88, bottom=0.06)

        joined.plot(ax=ax, color=fills, edgecolor=colors.border, linewidth=style.border_width)
        ax.set_aspect("equal")
        ax.set_axis_off()

        fig.suptitle(style.title, fontsize=14, fontweight="bold", x=0.5, y=0.97, ha="center")
        fig.text(0.5, 0.915, style.subtitle, fontsize=11, ha="center", va="center")
        fig.text(0.02, 0.02, style.caption, fontsize=9, ha="left", va="bottom")

        cmap, norm = legend_colormap(scale, colors)
        mappable = ScalarMappable(norm=norm, cmap=cmap)
        mappable.set_array([])
        cbar = fig.colorbar(mappable, ax=ax, shrink=0.55, pad=0.02, aspect=18)
        cbar.ax.set_title(style.legend_title, fontsize=10, loc="left", pad=10)
        cbar.outline.set_edgecolor(colors.border)
        if scale.is_degenerate:
            cbar.set_ticks([scale.vmin])

        if joined["emissions"].isna().any():
            swatch = Patch(facecolor=colors.no_data, edgecolor=colors.border, label=style.no_data_label)
            ax.legend(handles=[swatch], loc="lower right", frameon=False, fontsize=9)

        _save_figure(fig, out_path, dpi=style.dpi, background=style.background)
    finally:
        plt.close(fig)

    logger.info("Wrote map: %s", out_path)
    return out_path
