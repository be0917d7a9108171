"""Bidirectional data/screen coordinate transform.

Purpose
-------
Maps data-space points to screen-space points and back, given the current
viewport window and the size of the chart's screen rectangle. The transform
is pure: it is rebuilt from ``(viewport, screen)`` on demand and never caches
viewport state across mutations.

Conventions
-----------
- Screen origin is the top-left corner; screen y grows downward while data y
  grows upward, so the y mapping is inverted.
- The x mapping follows the zoomed/panned window; the y mapping always spans
  the fixed ``y_range``.

Degenerate geometry (non-positive or non-finite screen size, non-positive
window width) yields ``None`` instead of raising. Callers treat ``None`` as
"skip this interaction".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, NamedTuple, Optional

import numpy as np

if TYPE_CHECKING:
    from .chart_data import DataPoint
    from .chart_viewport import Viewport


class ScreenSize(NamedTuple):
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        """Return ``True`` when the rectangle has no drawable area."""
        try:
            return not (
                math.isfinite(self.width)
                and math.isfinite(self.height)
                and self.width > 0
                and self.height > 0
            )
        except TypeError:
            return True

    @property
    def center(self) -> "ScreenPoint":
        return ScreenPoint(self.width / 2.0, self.height / 2.0)


class ScreenPoint(NamedTuple):
    x: float
    y: float


class DataLocation(NamedTuple):
    """A data-space position that is not tied to any series (e.g. a tap)."""

    x: float
    y: float


@dataclass(frozen=True)
class CoordinateTransform:
    """Affine data/screen mapping for one viewport window and one screen size.

    Build instances with :meth:`from_viewport`, which returns ``None`` for
    degenerate geometry.
    """

    domain_start: float
    visible_domain: float
    y_low: float
    y_high: float
    width: float
    height: float

    @classmethod
    def from_viewport(cls, viewport: "Viewport", screen: ScreenSize) -> Optional["CoordinateTransform"]:
        screen = ScreenSize(*screen)
        if screen.is_degenerate:
            return None
        visible = viewport.visible_domain
        if not (math.isfinite(visible) and visible > 0):
            return None
        cfg = viewport.config
        return cls(
            domain_start=viewport.domain_start,
            visible_domain=visible,
            y_low=cfg.y_low,
            y_high=cfg.y_high,
            width=float(screen.width),
            height=float(screen.height),
        )

    def data_to_screen(self, x: float, y: float) -> ScreenPoint:
        rel_x = (x - self.domain_start) / self.visible_domain
        rel_y = (y - self.y_low) / (self.y_high - self.y_low)
        return ScreenPoint(rel_x * self.width, (1.0 - rel_y) * self.height)

    def screen_to_data(self, sx: float, sy: float) -> DataLocation:
        rel_x = sx / self.width
        rel_y = 1.0 - sy / self.height
        return DataLocation(
            self.domain_start + rel_x * self.visible_domain,
            self.y_low + rel_y * (self.y_high - self.y_low),
        )

    def data_to_screen_arrays(self, xs: np.ndarray, ys: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Vectorized :meth:`data_to_screen` over column arrays."""
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        sx = (xs - self.domain_start) / self.visible_domain * self.width
        sy = (1.0 - (ys - self.y_low) / (self.y_high - self.y_low)) * self.height
        return sx, sy


def data_to_screen(point: "DataPoint | DataLocation", viewport: "Viewport", screen: ScreenSize) -> Optional[ScreenPoint]:
    """Map a data point to screen space, or ``None`` for degenerate geometry."""
    transform = CoordinateTransform.from_viewport(viewport, screen)
    if transform is None:
        return None
    return transform.data_to_screen(point.x, point.y)


def screen_to_data(screen_point: ScreenPoint, viewport: "Viewport", screen: ScreenSize) -> Optional[DataLocation]:
    """Map a screen point to data space, or ``None`` for degenerate geometry."""
    transform = CoordinateTransform.from_viewport(viewport, screen)
    if transform is None:
        return None
    sx, sy = screen_point
    return transform.screen_to_data(sx, sy)


__all__ = [
    "CoordinateTransform",
    "DataLocation",
    "ScreenPoint",
    "ScreenSize",
    "data_to_screen",
    "screen_to_data",
]
