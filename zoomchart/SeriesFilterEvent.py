"""Standardized series-filter change payloads.

This module defines ``SeriesFilterEvent``, the immutable structure emitted by
``SeriesFilter.subscribe`` and consumed by chart views and legends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .series_filter import SeriesFilter


@dataclass(frozen=True)
class SeriesFilterEvent:
    """Normalized change event emitted by :class:`SeriesFilter` observers.

    Parameters
    ----------
    old : str or None
        The previously active series, ``None`` when no filter was set.
    new : str or None
        The newly active series, ``None`` when the filter was cleared.
    source : SeriesFilter
        The shared filter that changed.
    raw : Any, optional
        Raw traitlets change payload (or ``None`` when synthesized).

    Notes
    -----
    Consumers should prefer ``new`` for stable semantics and use ``raw`` only
    for debugging.

    Examples
    --------
    >>> from zoomchart.SeriesFilterEvent import SeriesFilterEvent
    >>> SeriesFilterEvent(old=None, new="Sine Wave", source=None).cleared
    False
    """

    old: Optional[str]
    new: Optional[str]
    source: "SeriesFilter"
    raw: Any = None

    @property
    def cleared(self) -> bool:
        """Return ``True`` when the event removed the filter."""
        return self.new is None
