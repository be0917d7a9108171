"""Immutable configuration objects for chart viewports.

Purpose
-------
This module defines the two configuration records every other component
consumes:

- ``DomainConfig``: the data-domain constants (x/y extents and the bounds on
  the visible window width). Never mutated after construction.
- ``InteractionConfig``: interaction tuning (tap slop, hit-test buffer, zoom
  anchor policy, dimmed opacity).

Both validate eagerly and raise ``ValueError`` on construction so that the
interaction layer itself never has to deal with inconsistent constants.

Examples
--------
>>> from zoomchart.chart_config import DomainConfig
>>> cfg = DomainConfig(min_domain=10, max_domain=100, x_range=(0, 100), y_range=(-12, 12))
>>> cfg.x_width
100.0
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple, Union

if TYPE_CHECKING:
    from .chart_data import Dataset

NumberLike = Union[int, float]
RangeLike = Tuple[NumberLike, NumberLike]

ZOOM_ANCHOR_MODES = ("location", "center")


def _as_range(value: RangeLike, name: str) -> tuple[float, float]:
    """Normalize a ``(low, high)`` pair to floats and validate it."""
    try:
        low, high = value
        low, high = float(low), float(high)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a (low, high) pair of numbers, got {value!r}") from e
    if not (math.isfinite(low) and math.isfinite(high)):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if not low < high:
        raise ValueError(f"{name} must satisfy low < high, got {value!r}")
    return low, high


@dataclass(frozen=True)
class DomainConfig:
    """Data-domain constants shared by a viewport and its collaborators.

    Parameters
    ----------
    min_domain : float
        Smallest allowed visible window width (maximum zoom-in).
    max_domain : float
        Largest allowed visible window width (fully zoomed out). Must not
        exceed the x-range width.
    x_range : tuple[float, float]
        Total addressable x extent.
    y_range : tuple[float, float]
        Fixed y extent; never zoomed.

    Raises
    ------
    ValueError
        If the ranges are empty or non-finite, or the domain bounds are
        inconsistent with each other or with ``x_range``.
    """

    min_domain: float = 10.0
    max_domain: float = 100.0
    x_range: tuple[float, float] = (0.0, 100.0)
    y_range: tuple[float, float] = (-12.0, 12.0)

    def __post_init__(self) -> None:
        x_range = _as_range(self.x_range, "x_range")
        y_range = _as_range(self.y_range, "y_range")
        min_domain = float(self.min_domain)
        max_domain = float(self.max_domain)
        if not (math.isfinite(min_domain) and math.isfinite(max_domain)):
            raise ValueError("min_domain and max_domain must be finite")
        if not 0.0 < min_domain <= max_domain:
            raise ValueError(
                f"Expected 0 < min_domain <= max_domain, got min_domain={min_domain}, max_domain={max_domain}"
            )
        width = x_range[1] - x_range[0]
        if max_domain > width * (1.0 + 1e-12):
            raise ValueError(f"max_domain={max_domain} exceeds the x_range width {width}")

        # Frozen dataclass: normalized values are written through object.__setattr__.
        object.__setattr__(self, "x_range", x_range)
        object.__setattr__(self, "y_range", y_range)
        object.__setattr__(self, "min_domain", min_domain)
        object.__setattr__(self, "max_domain", min(max_domain, width))

    @property
    def x_low(self) -> float:
        return self.x_range[0]

    @property
    def x_high(self) -> float:
        return self.x_range[1]

    @property
    def y_low(self) -> float:
        return self.y_range[0]

    @property
    def y_high(self) -> float:
        return self.y_range[1]

    @property
    def x_width(self) -> float:
        """Return the width of the addressable x extent."""
        return self.x_range[1] - self.x_range[0]

    @property
    def y_height(self) -> float:
        """Return the height of the fixed y extent."""
        return self.y_range[1] - self.y_range[0]

    @classmethod
    def for_dataset(
        cls,
        dataset: "Dataset",
        *,
        min_domain: NumberLike | None = None,
        y_padding: float = 0.1,
    ) -> "DomainConfig":
        """Derive a fully-zoomed-out configuration from the extent of ``dataset``.

        ``y_padding`` is a fraction of the y span added above and below.
        ``min_domain`` defaults to a tenth of the x span.
        """
        if len(dataset) == 0:
            return cls()
        xs, ys = dataset.xs, dataset.ys
        x_low, x_high = float(xs.min()), float(xs.max())
        y_low, y_high = float(ys.min()), float(ys.max())
        if x_high <= x_low:
            x_low, x_high = x_low - 0.5, x_high + 0.5
        if y_high <= y_low:
            y_low, y_high = y_low - 0.5, y_high + 0.5
        pad = (y_high - y_low) * float(y_padding)
        width = x_high - x_low
        return cls(
            min_domain=float(min_domain) if min_domain is not None else width / 10.0,
            max_domain=width,
            x_range=(x_low, x_high),
            y_range=(y_low - pad, y_high + pad),
        )


@dataclass(frozen=True)
class InteractionConfig:
    """Gesture and hit-test tuning.

    Parameters
    ----------
    tap_slop_px : float
        Largest total pointer translation (in device-independent pixels) for a
        press/release to count as a tap. ``0`` requires exactly zero movement.
    hit_buffer_ratio : float
        Fraction of the visible width added on each side of the window when
        collecting hit-test candidates.
    zoom_anchor : str
        ``"location"`` anchors pinch zoom at the gesture's live location;
        ``"center"`` is the legacy fixed chart-center anchor.
    dimmed_opacity : float
        Opacity used by the renderer for series hidden by the series filter.
    palette : tuple[str, ...]
        Per-series line colors in series order. Empty uses Plotly's default
        qualitative palette.
    """

    tap_slop_px: float = 4.0
    hit_buffer_ratio: float = 0.1
    zoom_anchor: str = "location"
    dimmed_opacity: float = 0.2
    palette: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not (math.isfinite(self.tap_slop_px) and self.tap_slop_px >= 0):
            raise ValueError(f"tap_slop_px must be >= 0, got {self.tap_slop_px!r}")
        if not (math.isfinite(self.hit_buffer_ratio) and self.hit_buffer_ratio >= 0):
            raise ValueError(f"hit_buffer_ratio must be >= 0, got {self.hit_buffer_ratio!r}")
        if self.zoom_anchor not in ZOOM_ANCHOR_MODES:
            raise ValueError(f"zoom_anchor must be one of {ZOOM_ANCHOR_MODES}, got {self.zoom_anchor!r}")
        if not 0.0 <= self.dimmed_opacity <= 1.0:
            raise ValueError(f"dimmed_opacity must be within [0, 1], got {self.dimmed_opacity!r}")
        object.__setattr__(self, "palette", tuple(str(c) for c in self.palette))


__all__ = ["DomainConfig", "InteractionConfig", "ZOOM_ANCHOR_MODES"]
