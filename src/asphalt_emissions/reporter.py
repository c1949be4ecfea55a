from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, TextIO

RULE = "═" * 80


class Reporter:
    """
    Console status lines for the person running the script.

    Separate from logging: these go to stdout and are the only output most users read.
    Nothing downstream depends on them.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def _emit(self, text: str) -> None:
        print(text, file=self.stream, flush=True)

    def info(self, message: str) -> None:
        self._emit(message)

    def ok(self, message: str) -> None:
        self._emit(f"✓ {message}")

    def failed(self, message: str) -> None:
        self._emit(f"✗ {message}")

    def coverage(self, matched: int, total: int) -> None:
        if matched < total:
            self._emit(f"! Matched emissions data for {matched}/{total} regions; {total - matched} shown as no data")
        else:
            self._emit(f"✓ Matched emissions data for {matched}/{total} regions")

    def color_scale(self, vmin: float, vmax: float, median: float) -> None:
        self._emit(f"Emissions range: {vmin:.2f} - {vmax:.2f} kg/person (median: {median:.2f})")

    def summary(self, *, states_with_data: int, vmin: float, vmax: float, output: Path) -> None:
        self._emit("")
        self._emit(RULE)
        self._emit("✓ CHOROPLETH MAP CREATION COMPLETE")
        self._emit(RULE)
        self._emit(f"Data Points: {states_with_data} states")
        self._emit(f"Emissions Range: {vmin:.2f} - {vmax:.2f} kg/person")
        self._emit(f"Output File: {output}")
        self._emit(RULE)
        self._emit("")
