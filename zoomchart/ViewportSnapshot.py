"""Immutable snapshot of a single Viewport's interaction state.

A ``ViewportSnapshot`` captures everything needed to restore or compare a
viewport: the window center and width plus the selected dataset index. The
window edges are included for renderers and for debugging output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ViewportSnapshot:
    """Immutable record of one viewport's state.

    Parameters
    ----------
    scroll_position : float
        X-coordinate of the center of the visible window.
    visible_domain : float
        Width of the visible window.
    selected_index : int or None
        Dataset index of the selected point, or ``None``.
    """

    scroll_position: float
    visible_domain: float
    selected_index: Optional[int] = None

    @property
    def domain_start(self) -> float:
        return self.scroll_position - self.visible_domain / 2.0

    @property
    def domain_end(self) -> float:
        return self.scroll_position + self.visible_domain / 2.0

    @property
    def window(self) -> tuple[float, float]:
        """Return the visible ``(start, end)`` window."""
        return self.domain_start, self.domain_end

    def __repr__(self) -> str:
        return (
            f"ViewportSnapshot(window=({self.domain_start:g}, {self.domain_end:g}), "
            f"selected_index={self.selected_index!r})"
        )
