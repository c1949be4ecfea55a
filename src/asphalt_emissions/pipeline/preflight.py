from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from asphalt_emissions.errors import OutputDirectoryError
from asphalt_emissions.paths import RepoPaths, get_repo_paths
from asphalt_emissions.reporter import Reporter


@dataclass(frozen=True)
class DirItem:
    label: str
    path: Path


def _can_create_dir(p: Path) -> Optional[str]:
    try:
        p.mkdir(parents=True, exist_ok=True)
        test_file = p / ".write_test"
        test_file.write_text("ok", encoding="utf-8")
        test_file.unlink(missing_ok=True)
        return None
    except OSError as exc:
        return str(exc)


def init_directories(cfg: Dict[str, Any], reporter: Optional[Reporter] = None) -> RepoPaths:
    """
    Make sure the raw-data and plots directories exist and are writable.

    Directories are created when missing and never removed. Any directory that
    cannot be created or written aborts the run before the download starts.
    """
    paths = get_repo_paths(cfg)
    items: List[DirItem] = [
        DirItem("data", paths.data_dir),
        DirItem("plots", paths.plots_dir),
    ]

    problems: List[str] = []
    for item in items:
        existed = item.path.is_dir()
        err = _can_create_dir(item.path)
        if err:
            problems.append(f"- {item.label}: cannot create/write {item.path} ({err})")
        elif not existed and reporter is not None:
            reporter.ok(f"Created '{item.label}' directory")

    if problems:
        raise OutputDirectoryError(
            "Directory setup failed. Fix the following before running:\n" + "\n".join(problems)
        )
    return paths
