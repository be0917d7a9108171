"""Nearest-point hit testing under the current zoom/pan transform.

The hit tester answers "which data point is closest to this tap?" for one
viewport. Candidate filtering happens in data space (series filter, then a
buffered visible window) and the distance comparison happens in screen space,
because the x and y axes generally have unequal scales and comparing raw data
units would bias selection toward the axis with the larger numeric range.

Ties resolve to the first point in dataset order. An empty candidate set or
degenerate geometry is a normal "no selection" outcome (``None``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

from .chart_config import InteractionConfig
from .chart_transform import CoordinateTransform, DataLocation, ScreenSize

if TYPE_CHECKING:
    from .chart_data import DataPoint, Dataset
    from .chart_viewport import Viewport

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class HitResult:
    """Outcome of a successful hit test."""

    index: int
    point: "DataPoint"
    distance_px: float


class HitTester:
    """Select the nearest in-range data point to a tap location."""

    def __init__(self, interaction: Optional[InteractionConfig] = None) -> None:
        self._interaction = interaction if interaction is not None else InteractionConfig()

    @property
    def buffer_ratio(self) -> float:
        return self._interaction.hit_buffer_ratio

    def candidate_mask(
        self, dataset: "Dataset", series_filter: Optional[str], viewport: "Viewport"
    ) -> np.ndarray:
        """Return a boolean mask of points eligible for selection."""
        if len(dataset) == 0:
            return np.zeros(0, dtype=bool)
        if series_filter is None:
            mask = np.ones(len(dataset), dtype=bool)
        else:
            mask = dataset.series == series_filter
        buffer = viewport.visible_domain * self.buffer_ratio
        xs = dataset.xs
        mask &= (xs >= viewport.domain_start - buffer) & (xs <= viewport.domain_end + buffer)
        return mask

    def nearest(
        self,
        tap: DataLocation,
        dataset: "Dataset",
        series_filter: Optional[str],
        viewport: "Viewport",
        screen: ScreenSize,
    ) -> Optional[HitResult]:
        """Return the nearest eligible point to ``tap`` (data space) or ``None``.

        Parameters
        ----------
        tap : DataLocation
            Tap position already converted to data space.
        dataset : Dataset
            Full dataset; filtering happens here.
        series_filter : str or None
            Active series filter; ``None`` keeps every series.
        viewport : Viewport
            Viewport whose window bounds the candidates.
        screen : ScreenSize
            Screen rectangle used for the screen-space distance.
        """
        transform = CoordinateTransform.from_viewport(viewport, screen)
        if transform is None:
            logger.debug("hit test skipped: degenerate geometry screen=%r", screen)
            return None

        mask = self.candidate_mask(dataset, series_filter, viewport)
        indices = np.flatnonzero(mask)
        if indices.size == 0:
            logger.debug("hit test: no candidates (filter=%r)", series_filter)
            return None

        tap_sx, tap_sy = transform.data_to_screen(tap.x, tap.y)
        sx, sy = transform.data_to_screen_arrays(dataset.xs[indices], dataset.ys[indices])
        dist_sq = (sx - tap_sx) ** 2 + (sy - tap_sy) ** 2
        # argmin returns the first minimum, which keeps dataset order on ties.
        best = int(np.argmin(dist_sq))
        index = int(indices[best])
        return HitResult(index=index, point=dataset[index], distance_px=float(np.sqrt(dist_sq[best])))


__all__ = ["HitResult", "HitTester"]
