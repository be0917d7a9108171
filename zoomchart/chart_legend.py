"""Series legend bound to the shared series filter.

Purpose
-------
This module defines :class:`SeriesLegend`, a widget-oriented controller that
renders one row per series into an ipywidgets box. Each row exposes:

- a color swatch (``HTML``),
- a toggle button labelled with the series name.

Clicking a series activates it as the shared filter; clicking the active
series again clears the filter. Rows mirror filter changes made elsewhere (for
example by a legend of another chart bound to the same filter).

Architecture notes
------------------
- The legend never owns the filter value; it writes to and observes the shared
  :class:`~zoomchart.series_filter.SeriesFilter`.
- ``refresh()`` updates widgets incrementally and only reassigns the box
  children when the set of series changes.
- Programmatic toggle updates are suspended per series so that mirroring an
  external change does not write back to the filter.

Examples
--------
>>> import ipywidgets as widgets  # doctest: +SKIP
>>> from zoomchart.series_filter import SeriesFilter  # doctest: +SKIP
>>> box = widgets.HBox()  # doctest: +SKIP
>>> legend = SeriesLegend(box, SeriesFilter())  # doctest: +SKIP
>>> legend.set_series(["Sine Wave", "Cosine Wave"], {"Sine Wave": "blue", "Cosine Wave": "purple"})  # doctest: +SKIP
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence

import ipywidgets as widgets

from .series_filter import SeriesFilter
from .SeriesFilterEvent import SeriesFilterEvent


@dataclass
class LegendRowModel:
    """Widget and state bundle for one legend row bound to a series name."""

    series: str
    container: widgets.HBox
    toggle: widgets.ToggleButton
    swatch: widgets.HTML
    is_dimmed: bool = False


def _swatch_html(color: str, *, dimmed: bool) -> str:
    opacity = 0.5 if dimmed else 1.0
    return (
        f'<span style="display:inline-block;width:8px;height:8px;border-radius:50%;'
        f'background:{color};opacity:{opacity}"></span>'
    )


class SeriesLegend:
    """Manage legend rows and synchronize them with a shared series filter."""

    def __init__(self, layout_box: widgets.Box, series_filter: SeriesFilter) -> None:
        """Initialize a legend bound to ``layout_box`` and ``series_filter``."""
        self._layout_box = layout_box
        self._filter = series_filter
        self._rows: Dict[str, LegendRowModel] = {}
        self._ordered_series: list[str] = []
        self._colors: Dict[str, str] = {}
        self._suspended: set[str] = set()
        self._unsubscribe = series_filter.subscribe(self._on_filter_changed)

    @property
    def has_legend(self) -> bool:
        return bool(self._ordered_series)

    @property
    def rows(self) -> Dict[str, LegendRowModel]:
        return self._rows

    def set_series(self, names: Sequence[str], colors: Optional[Mapping[str, str]] = None) -> None:
        """Replace the legend rows with ``names`` (in order)."""
        self._colors = dict(colors or {})
        self._ordered_series = [str(n) for n in dict.fromkeys(names)]
        for name in list(self._rows):
            if name not in self._ordered_series:
                self._rows.pop(name).toggle.unobserve(self._on_toggle_changed, names="value")
        for name in self._ordered_series:
            if name not in self._rows:
                self._rows[name] = self._create_row(name)
        self.refresh()

    def refresh(self) -> None:
        """Synchronize row widgets with the filter and the series order."""
        for name in self._ordered_series:
            self._sync_row_widgets(self._rows[name])
        desired_children = tuple(self._rows[name].container for name in self._ordered_series)
        if self._layout_box.children != desired_children:
            self._layout_box.children = desired_children

    def close(self) -> None:
        """Detach from the shared filter."""
        self._unsubscribe()
        for row in self._rows.values():
            row.toggle.unobserve(self._on_toggle_changed, names="value")

    def _create_row(self, name: str) -> LegendRowModel:
        toggle = widgets.ToggleButton(
            value=False,
            description=name,
            tooltip=f"Show only {name}",
            layout=widgets.Layout(width="auto", margin="0"),
        )
        swatch = widgets.HTML(value="", layout=widgets.Layout(margin="0"))
        container = widgets.HBox(
            [swatch, toggle],
            layout=widgets.Layout(align_items="center", margin="0"),
        )
        toggle.observe(self._on_toggle_changed, names="value")
        return LegendRowModel(series=name, container=container, toggle=toggle, swatch=swatch)

    def _sync_row_widgets(self, row: LegendRowModel) -> None:
        row.is_dimmed = not self._filter.is_active(row.series)
        swatch = _swatch_html(self._colors.get(row.series, "#888"), dimmed=row.is_dimmed)
        if row.swatch.value != swatch:
            row.swatch.value = swatch

        target_value = self._filter.series == row.series
        if row.toggle.value != target_value:
            self._suspended.add(row.series)
            try:
                row.toggle.value = target_value
            finally:
                self._suspended.discard(row.series)

    def _on_toggle_changed(self, change: Dict[str, Any]) -> None:
        """Propagate user clicks to the shared filter."""
        if change.get("name") != "value":
            return
        name = getattr(change.get("owner"), "description", None)
        if name not in self._rows:
            return
        if name in self._suspended:
            return
        if bool(change.get("new")):
            self._filter.series = name
        elif self._filter.series == name:
            self._filter.clear()

    def _on_filter_changed(self, _event: SeriesFilterEvent) -> None:
        self.refresh()


__all__ = ["LegendRowModel", "SeriesLegend"]
