"""Viewport state machine for one chart widget.

Purpose
-------
``Viewport`` owns the mutable interaction state of one chart: the center of
the visible x-window (``scroll_position``), its width (``visible_domain``) and
the currently selected dataset index. It exposes zoom, pan, reset and
selection operations and applies all clamping.

Invariants
----------
- ``min_domain <= visible_domain <= max_domain`` after every mutation.
- The visible window ``[scroll - d/2, scroll + d/2]`` stays inside
  ``x_range``: ``scroll`` is clamped to ``[x_low + d/2, x_high - d/2]``.
- Invalid numeric input (non-positive or non-finite scale, zero-width screen,
  non-finite drag ratio) is a no-op; nothing here raises.

Selection is stored as an index into the dataset, never as a copied
``DataPoint``; resolve it with :meth:`Viewport.selected_point`.

Examples
--------
>>> from zoomchart.chart_config import DomainConfig
>>> from zoomchart.chart_viewport import Viewport
>>> vp = Viewport(DomainConfig())
>>> vp.zoom(2.0, anchor_screen_x=200, screen_width=400)
True
>>> vp.window
(25.0, 75.0)
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Optional

from .chart_config import DomainConfig
from .ViewportSnapshot import ViewportSnapshot

if TYPE_CHECKING:
    from .chart_data import DataPoint, Dataset

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _finite(*values: float) -> bool:
    try:
        return all(math.isfinite(v) for v in values)
    except TypeError:
        return False


class Viewport:
    """Mutable visible-window state with zoom/pan/reset/selection operations."""

    __slots__ = ("_config", "_scroll_position", "_visible_domain", "_selected_index")

    def __init__(self, config: Optional[DomainConfig] = None) -> None:
        self._config = config if config is not None else DomainConfig()
        self._scroll_position = 0.0
        self._visible_domain = 0.0
        self._selected_index: Optional[int] = None
        self.reset()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def config(self) -> DomainConfig:
        return self._config

    @property
    def scroll_position(self) -> float:
        """Return the x-coordinate of the center of the visible window."""
        return self._scroll_position

    @property
    def visible_domain(self) -> float:
        """Return the width of the visible window."""
        return self._visible_domain

    @property
    def selected_index(self) -> Optional[int]:
        """Return the dataset index of the selected point, or ``None``."""
        return self._selected_index

    @property
    def domain_start(self) -> float:
        return self._scroll_position - self._visible_domain / 2.0

    @property
    def domain_end(self) -> float:
        return self._scroll_position + self._visible_domain / 2.0

    @property
    def window(self) -> tuple[float, float]:
        """Return the visible ``(start, end)`` window."""
        return self.domain_start, self.domain_end

    def bounds(self, visible_domain: Optional[float] = None) -> tuple[float, float]:
        """Return the allowed ``scroll_position`` interval for a window width.

        The window may touch but never cross either edge of ``x_range``.
        """
        d = self._visible_domain if visible_domain is None else visible_domain
        low = self._config.x_low + d / 2.0
        high = self._config.x_high - d / 2.0
        if high < low:
            mid = (self._config.x_low + self._config.x_high) / 2.0
            return mid, mid
        return low, high

    def snapshot(self) -> ViewportSnapshot:
        """Return an immutable snapshot of the current state."""
        return ViewportSnapshot(
            scroll_position=self._scroll_position,
            visible_domain=self._visible_domain,
            selected_index=self._selected_index,
        )

    def restore(self, snapshot: ViewportSnapshot) -> None:
        """Restore state from ``snapshot``, re-applying the clamps."""
        domain = _clamp(snapshot.visible_domain, self._config.min_domain, self._config.max_domain)
        low, high = self.bounds(domain)
        self._visible_domain = domain
        self._scroll_position = _clamp(snapshot.scroll_position, low, high)
        self._selected_index = snapshot.selected_index

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def zoom(self, scale_factor: float, anchor_screen_x: float, screen_width: float) -> bool:
        """Zoom by ``scale_factor`` keeping the data under ``anchor_screen_x`` fixed.

        Parameters
        ----------
        scale_factor : float
            ``> 1`` zooms in (narrower window), ``< 1`` zooms out.
        anchor_screen_x : float
            Horizontal screen position that stays over the same data x.
        screen_width : float
            Width of the chart's screen rectangle in pixels.

        Returns
        -------
        bool
            ``True`` when the state changed. Invalid input returns ``False``.
        """
        if not _finite(scale_factor, anchor_screen_x, screen_width):
            logger.debug("zoom ignored: non-finite input (%r, %r, %r)", scale_factor, anchor_screen_x, screen_width)
            return False
        if scale_factor <= 0 or screen_width <= 0:
            logger.debug("zoom ignored: scale_factor=%r screen_width=%r", scale_factor, screen_width)
            return False

        relative_x = _clamp(anchor_screen_x / screen_width, 0.0, 1.0)
        anchor_data = self.domain_start + self._visible_domain * relative_x
        new_domain = _clamp(
            self._visible_domain / scale_factor, self._config.min_domain, self._config.max_domain
        )
        new_start = anchor_data - new_domain * relative_x
        low, high = self.bounds(new_domain)
        new_scroll = _clamp(new_start + new_domain / 2.0, low, high)
        return self._apply(new_scroll, new_domain, reason="zoom")

    def pan(self, drag_ratio: float) -> bool:
        """Pan by a signed fraction of the screen width.

        A positive ratio (finger moving right) reveals data to the left. Panning
        saturates at either edge of ``x_range``.
        """
        if not _finite(drag_ratio):
            logger.debug("pan ignored: non-finite drag_ratio %r", drag_ratio)
            return False
        data_move = drag_ratio * self._visible_domain
        low, high = self.bounds()
        new_scroll = _clamp(self._scroll_position - data_move, low, high)
        return self._apply(new_scroll, self._visible_domain, reason="pan")

    def set_window(self, start: float, end: float) -> bool:
        """Move to the requested ``(start, end)`` window, clamped to the domain."""
        if not _finite(start, end) or end <= start:
            logger.debug("set_window ignored: (%r, %r)", start, end)
            return False
        domain = _clamp(end - start, self._config.min_domain, self._config.max_domain)
        low, high = self.bounds(domain)
        center = _clamp((start + end) / 2.0, low, high)
        return self._apply(center, domain, reason="set_window")

    def reset(self) -> None:
        """Return to the fully zoomed-out, centered state and clear the selection."""
        self._visible_domain = self._config.max_domain
        self._scroll_position = self._config.x_low + self._config.max_domain / 2.0
        self._selected_index = None

    def select(self, index: Optional[int]) -> None:
        """Set the selected dataset index (``None`` clears)."""
        self._selected_index = None if index is None else int(index)

    def clear_selection(self) -> None:
        self._selected_index = None

    def selected_point(self, dataset: "Dataset") -> Optional["DataPoint"]:
        """Resolve the selection against ``dataset``; stale indices resolve to ``None``."""
        return dataset.get(self._selected_index)

    def _apply(self, scroll: float, domain: float, *, reason: str) -> bool:
        changed = scroll != self._scroll_position or domain != self._visible_domain
        self._scroll_position = scroll
        self._visible_domain = domain
        if changed:
            logger.debug("%s -> window=(%g, %g)", reason, self.domain_start, self.domain_end)
        return changed

    def __repr__(self) -> str:
        return (
            f"Viewport(scroll_position={self._scroll_position:g}, "
            f"visible_domain={self._visible_domain:g}, selected_index={self._selected_index!r})"
        )


__all__ = ["Viewport"]
