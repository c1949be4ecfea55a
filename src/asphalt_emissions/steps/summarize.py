from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from asphalt_emissions.errors import EmptyDatasetError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorScale:
    """Fixed min/median/max anchors of the fill gradient. Median is the midpoint."""

    vmin: float
    median: float
    vmax: float

    @property
    def is_degenerate(self) -> bool:
        return self.vmin == self.vmax


def compute_color_scale(values: Iterable[float]) -> ColorScale:
    arr = np.asarray(list(values), dtype=float)
    arr = arr[np.isfinite(arr)]
    if arr.size == 0:
        raise EmptyDatasetError("No emissions values matched any state; nothing to map.")

    scale = ColorScale(
        vmin=float(np.min(arr)),
        median=float(np.median(arr)),
        vmax=float(np.max(arr)),
    )
    logger.info("Color scale: min=%.4f median=%.4f max=%.4f", scale.vmin, scale.median, scale.vmax)
    return scale
