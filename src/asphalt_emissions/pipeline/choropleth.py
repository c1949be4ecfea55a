from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from asphalt_emissions.errors import ConfigError, PipelineError
from asphalt_emissions.paths import get_repo_paths, load_config, resolve_path, section
from asphalt_emissions.pipeline.preflight import init_directories
from asphalt_emissions.reporter import Reporter
from asphalt_emissions.steps.clean_emissions import DEFAULT_STATE_COLUMN, DEFAULT_VALUE_COLUMN, clean_emissions
from asphalt_emissions.steps.download import download_file, request_options
from asphalt_emissions.steps.join_geometry import join_emissions
from asphalt_emissions.steps.load_inventory import DEFAULT_SHEET, load_sheet
from asphalt_emissions.steps.render_map import output_path, render_map, style_from_config
from asphalt_emissions.steps.state_geometry import CENSUS_STATES_URL, load_state_geometry
from asphalt_emissions.steps.summarize import compute_color_scale


logger = logging.getLogger(__name__)

INVENTORY_URL = "https://pasteur.epa.gov/uploads/10.23719/1531683/AP_2018_State_County_Inventory.xlsx"


def _local_file(cfg: Dict[str, Any], name: str, url: str, data_dir: Path) -> Path:
    """`<name>.file` from config, else the URL's file name inside data_dir."""
    if section(cfg, name).get("file"):
        return resolve_path(cfg, f"{name}.file")
    return data_dir / (Path(urlparse(url).path).name or f"{name}.download")


def _fetch(url: str, dest: Path, label: str, opts: Dict[str, Any], reporter: Reporter) -> None:
    if dest.exists():
        reporter.ok(f"{label} already exists locally")
    else:
        reporter.info(f"Downloading {label}...")
    if download_file(url, dest, timeout_s=opts["timeout_s"], verify_ssl=opts["verify_ssl"]):
        reporter.ok(f"Successfully downloaded {label} to '{dest}'")


def run(cfg: Dict[str, Any], reporter: Optional[Reporter] = None) -> Dict[str, Any]:
    """
    Choropleth pipeline:
      1) download the EPA inventory workbook (skipped if present)
      2) load the state sheet
      3) clean to per-state emission rows
      4) load state geometry (boundary file skipped if present)
      5) join + coverage
      6) colour scale
      7) render PNG
    """
    reporter = reporter or Reporter()
    results: Dict[str, Any] = {}

    try:
        style = style_from_config(cfg)
        opts = request_options(cfg)
        repo_paths = get_repo_paths(cfg)

        inv_cfg = section(cfg, "inventory")
        url = str(inv_cfg.get("url", INVENTORY_URL))
        sheet = str(inv_cfg.get("sheet", DEFAULT_SHEET))
        state_column = str(inv_cfg.get("state_column", DEFAULT_STATE_COLUMN))
        value_column = str(inv_cfg.get("value_column", DEFAULT_VALUE_COLUMN))
        workbook = _local_file(cfg, "inventory", url, repo_paths.data_dir)

        geo_url = str(section(cfg, "geography").get("url", CENSUS_STATES_URL))
        boundaries = _local_file(cfg, "geography", geo_url, repo_paths.data_dir)
        out_path = output_path(cfg, repo_paths.plots_dir)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    init_directories(cfg, reporter)

    logger.info("STEP 1/7: download inventory")
    _fetch(url, workbook, "EPA emissions data file", opts, reporter)
    results["workbook"] = workbook

    logger.info("STEP 2/7: load sheet '%s'", sheet)
    reporter.info("Reading emissions data from Excel file...")
    raw = load_sheet(workbook, sheet)
    reporter.ok("Successfully loaded emissions data")

    logger.info("STEP 3/7: clean emissions")
    reporter.info("Processing emissions data...")
    rows = clean_emissions(raw, state_column=state_column, value_column=value_column)
    reporter.ok(f"Extracted emissions data for {len(rows)} states")
    results["rows"] = rows

    logger.info("STEP 4/7: state geometry")
    _fetch(geo_url, boundaries, "State boundary file", opts, reporter)
    geometry = load_state_geometry(boundaries)
    reporter.ok(f"Loaded {len(geometry)} state boundaries")

    logger.info("STEP 5/7: join")
    joined, coverage = join_emissions(geometry, rows)
    reporter.coverage(coverage.matched, coverage.total)
    results["coverage"] = coverage

    logger.info("STEP 6/7: colour scale")
    reporter.info("Preparing map visualization...")
    scale = compute_color_scale(joined["emissions"].dropna())
    reporter.color_scale(scale.vmin, scale.vmax, scale.median)
    results["scale"] = scale

    logger.info("STEP 7/7: render")
    reporter.info("Creating choropleth map...")
    out = render_map(joined, scale, out_path, style=style)
    reporter.ok(f"Map saved to '{out}'")
    results["output"] = out

    reporter.summary(states_with_data=coverage.matched, vmin=scale.vmin, vmax=scale.vmax, output=out)
    logger.info("Pipeline complete.")
    return results


def apply_overrides(
    cfg: Dict[str, Any],
    *,
    url: Optional[str] = None,
    sheet: Optional[str] = None,
    output: Optional[str] = None,
) -> Dict[str, Any]:
    """Command-line values win over the config file; unset ones leave it untouched."""
    if url:
        cfg["inventory"] = dict(cfg.get("inventory") or {}, url=url)
    if sheet:
        cfg["inventory"] = dict(cfg.get("inventory") or {}, sheet=sheet)
    if output:
        cfg["map"] = dict(cfg.get("map") or {}, output=output)
    return cfg


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="asphalt-emissions-map",
        description="Render a U.S. state choropleth of EPA asphalt-related emissions per capita.",
    )
    parser.add_argument("--config", help="YAML settings file (default: config/settings.yaml if present)")
    parser.add_argument("--url", help="Inventory workbook URL")
    parser.add_argument("--sheet", help="Sheet to read from the workbook")
    parser.add_argument("--output", help="Output image path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    reporter = Reporter()

    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        reporter.failed(str(exc))
        return 1
    apply_overrides(cfg, url=args.url, sheet=args.sheet, output=args.output)

    try:
        run(cfg, reporter)
    except PipelineError as exc:
        logger.error("Pipeline aborted: %s", exc)
        reporter.failed(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
