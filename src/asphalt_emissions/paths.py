from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_ENV_VAR = "ASPHALT_EMISSIONS_CONFIG"
DEFAULT_CONFIG = Path("config") / "settings.yaml"

DEFAULT_DATA_DIR = "data"
DEFAULT_PLOTS_DIR = "plots"


def find_repo_root(start: Optional[Path] = None) -> Path:
    """
    Walk upward from `start` (or the current directory) to find the repository root.
    Repo root is identified by presence of config/settings.yaml OR pyproject.toml.
    Falls back to `start` itself so an installed copy still runs from any directory.
    """
    if start is None:
        start = Path.cwd().resolve()

    for p in [start, *start.parents]:
        if (p / DEFAULT_CONFIG).exists() or (p / "pyproject.toml").exists():
            return p
    return start


def load_config(config_path: Optional[str | Path] = None, *, start: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the YAML settings.

    An explicitly requested config (argument or ASPHALT_EMISSIONS_CONFIG) must exist.
    The default config/settings.yaml is optional; without it every step uses its
    built-in defaults.
    """
    repo_root = find_repo_root(start)
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR, "").strip() or None

    explicit = config_path is not None
    cfg_path = Path(config_path) if explicit else (repo_root / DEFAULT_CONFIG)
    cfg_path = cfg_path if cfg_path.is_absolute() else (repo_root / cfg_path)

    if not cfg_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {"_config_path": None, "_repo_root": str(repo_root)}

    with cfg_path.open("r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    if not isinstance(cfg, dict):
        raise ValueError(f"Invalid config format in {cfg_path}; expected a YAML mapping/object.")
    cfg["_config_path"] = str(cfg_path)
    cfg["_repo_root"] = str(repo_root)
    return cfg


def resolve_path(cfg: Dict[str, Any], key: str, default: Optional[str] = None) -> Path:
    """
    Resolve a path from config using dotted keys, e.g.:
      resolve_path(cfg, "paths.data_dir", "data")
      resolve_path(cfg, "map.output", "plots/asphalt_emissions_2018.png")
    """
    repo_root = Path(cfg.get("_repo_root") or Path.cwd())
    cur: Any = cfg
    for part in key.split("."):
        if not isinstance(cur, dict) or cur.get(part) is None:
            if default is None:
                raise KeyError(f"Missing config key: {key}")
            cur = default
            break
        cur = cur[part]

    if not isinstance(cur, (str, Path)):
        raise TypeError(f"Config key {key} must be a string path.")

    p = Path(cur)
    return p if p.is_absolute() else (repo_root / p)


def section(cfg: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a config section as a dict, treating a missing or null section as empty."""
    value = cfg.get(name, {}) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping.")
    return value


@dataclass(frozen=True)
class RepoPaths:
    repo_root: Path
    config_path: Optional[Path]

    data_dir: Path
    plots_dir: Path


def get_repo_paths(cfg: Dict[str, Any]) -> RepoPaths:
    repo_root = Path(cfg.get("_repo_root") or Path.cwd())
    config_path = Path(cfg["_config_path"]) if cfg.get("_config_path") else None

    data_dir = resolve_path(cfg, "paths.data_dir", DEFAULT_DATA_DIR)
    plots_dir = resolve_path(cfg, "paths.plots_dir", DEFAULT_PLOTS_DIR)

    return RepoPaths(
        repo_root=repo_root,
        config_path=config_path,
        data_dir=data_dir,
        plots_dir=plots_dir,
    )
