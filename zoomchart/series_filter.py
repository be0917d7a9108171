"""Shared, observable series filter.

Purpose
-------
Several chart widgets bound to the same dataset share one optional series
selection. ``SeriesFilter`` is that single owned value: the legend writes it,
and every bound chart (renderer opacity, hit-test candidate filtering) reads
it. Charts hold a reference to the shared instance and never copy the value.

Architecture notes
------------------
The value is a ``traitlets`` trait so that it composes with ipywidgets
(``traitlets.link`` to a widget works out of the box). ``subscribe`` wraps the
raw traitlets change into a :class:`SeriesFilterEvent`.

Examples
--------
>>> from zoomchart.series_filter import SeriesFilter
>>> shared = SeriesFilter()
>>> shared.toggle("Sine Wave")
>>> shared.series
'Sine Wave'
>>> shared.toggle("Sine Wave")
>>> shared.series is None
True
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import traitlets

from .SeriesFilterEvent import SeriesFilterEvent

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class SeriesFilter(traitlets.HasTraits):
    """Single observable "active series" value shared by several charts."""

    series = traitlets.Unicode(None, allow_none=True)

    def __init__(self, series: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(series=series, **kwargs)

    def toggle(self, name: str) -> None:
        """Activate ``name``, or clear the filter when ``name`` is already active."""
        name = str(name)
        self.series = None if self.series == name else name

    def clear(self) -> None:
        self.series = None

    def is_active(self, name: str) -> bool:
        """Return ``True`` when ``name`` passes the filter (always, when unset)."""
        return self.series is None or self.series == name

    def subscribe(
        self, callback: Callable[[SeriesFilterEvent], None], *, fire: bool = False
    ) -> Callable[[], None]:
        """Call ``callback`` with a :class:`SeriesFilterEvent` on every change.

        Parameters
        ----------
        callback:
            Receives one event per change.
        fire:
            If ``True``, invoke ``callback`` once immediately with the current
            value as both ``old`` and ``new``.

        Returns
        -------
        Callable[[], None]
            Function that removes the subscription.
        """

        def _handler(change: Any) -> None:
            event = SeriesFilterEvent(
                old=change.get("old"),
                new=change.get("new"),
                source=self,
                raw=change,
            )
            callback(event)

        self.observe(_handler, names="series")

        if fire:
            callback(SeriesFilterEvent(old=self.series, new=self.series, source=self, raw=None))

        def _unsubscribe() -> None:
            try:
                self.unobserve(_handler, names="series")
            except ValueError:
                logger.debug("subscription already removed")

        return _unsubscribe

    def __repr__(self) -> str:
        return f"SeriesFilter(series={self.series!r})"


__all__ = ["SeriesFilter"]
