"""Plotly renderer for one chart view.

Purpose
-------
Defines ``RenderState`` (everything a redraw needs) and ``ChartRenderer``,
which turns a ``RenderState`` into Plotly traces: one line per series, reduced
opacity for series outside the active series filter, and a vertical rule plus
marker at the selected point.

Architecture notes
------------------
- Traces are created once per dataset and updated in place on every render;
  consumers should not assume a new trace object per render.
- The x-axis range always mirrors the viewport window; the y-axis range is the
  fixed domain y-range.
- Plotly's own legend is hidden; series toggling lives in
  :mod:`zoomchart.chart_legend`.

Important gotchas
-----------------
``ChartRenderer`` defaults to a ``go.FigureWidget`` for notebooks. Tests and
static exports can pass a plain ``go.Figure``; window-change callbacks are
only available on widgets. Series traces use ``hoverinfo="none"`` rather than
``"skip"`` because skipped traces emit no click events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

import numpy as np
import plotly.graph_objects as go
from plotly.colors import qualitative

from .chart_config import InteractionConfig
from .chart_data import DataPoint, Dataset
from .chart_transform import DataLocation, ScreenSize

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

SELECTION_TRACE_NAME = "__selection__"
RULE_COLOR = "rgba(128,128,128,0.3)"
# Plotly's own defaults when the layout leaves width/height unset.
DEFAULT_WIDTH_PX = 700
DEFAULT_HEIGHT_PX = 450


@dataclass(frozen=True)
class RenderState:
    """Inputs of one redraw.

    Parameters
    ----------
    dataset : Dataset
        Full dataset; every series is drawn.
    series_filter : str or None
        Active series filter; other series are dimmed.
    window : tuple[float, float]
        Visible ``(domain_start, domain_end)``.
    y_range : tuple[float, float]
        Fixed y-axis range.
    selected : DataPoint or None
        Selected point, drawn as rule + marker.
    """

    dataset: Dataset
    series_filter: Optional[str]
    window: tuple[float, float]
    y_range: tuple[float, float]
    selected: Optional[DataPoint] = None


def series_colors(names: Sequence[str], palette: Sequence[str] = ()) -> Dict[str, str]:
    """Assign one color per series name, cycling through ``palette``."""
    colors = tuple(palette) or tuple(qualitative.Plotly)
    return {name: colors[i % len(colors)] for i, name in enumerate(names)}


class ChartRenderer:
    """Own a Plotly figure and synchronize it with successive ``RenderState`` values."""

    def __init__(
        self,
        figure: Optional[go.Figure] = None,
        *,
        interaction: Optional[InteractionConfig] = None,
        height: int = 200,
    ) -> None:
        self._interaction = interaction if interaction is not None else InteractionConfig()
        self._figure = figure if figure is not None else go.FigureWidget()
        self._figure.update_layout(**self._default_layout(height))
        self._dataset: Optional[Dataset] = None
        self._colors: Dict[str, str] = {}
        self._series_traces: Dict[str, Any] = {}
        self._selection_trace: Any = None
        self._click_callbacks: list[Callable[[DataLocation], None]] = []
        self.render_count = 0

    @property
    def figure(self) -> go.Figure:
        return self._figure

    @property
    def colors(self) -> Dict[str, str]:
        """Return the series-to-color mapping of the current dataset."""
        return dict(self._colors)

    @staticmethod
    def _default_layout(height: int) -> dict[str, Any]:
        return dict(
            height=height,
            autosize=True,
            template="plotly_white",
            showlegend=False,
            hovermode="closest",
            margin=dict(l=40, r=12, t=8, b=28),
            xaxis=dict(showgrid=True, zeroline=False, fixedrange=False),
            yaxis=dict(showgrid=True, zeroline=True, fixedrange=True),
        )

    def render(self, state: RenderState) -> None:
        """Apply ``state`` to the figure."""
        if state.dataset is not self._dataset:
            self._rebuild_traces(state.dataset)

        dimmed = self._interaction.dimmed_opacity
        selected = state.selected
        with self._figure.batch_update():
            for name, trace in self._series_traces.items():
                active = state.series_filter is None or state.series_filter == name
                trace.opacity = 1.0 if active else dimmed

            marker = self._selection_trace
            if selected is None:
                marker.visible = False
                marker.x, marker.y = (), ()
                self._figure.layout.shapes = ()
            else:
                marker.visible = True
                marker.x, marker.y = (selected.x,), (selected.y,)
                marker.marker.color = self._colors.get(selected.series, "#444")
                self._figure.layout.shapes = (
                    dict(
                        type="line",
                        xref="x",
                        yref="paper",
                        x0=selected.x,
                        x1=selected.x,
                        y0=0,
                        y1=1,
                        line=dict(color=RULE_COLOR, width=2),
                    ),
                )

            self._figure.layout.xaxis.range = tuple(state.window)
            self._figure.layout.yaxis.range = tuple(state.y_range)
        self.render_count += 1

    def _rebuild_traces(self, dataset: Dataset) -> None:
        """Create one line trace per series plus the selection marker trace."""
        self._dataset = dataset
        self._colors = series_colors(dataset.series_names, self._interaction.palette)
        self._figure.data = ()
        self._series_traces = {}
        for name in dataset.series_names:
            points = dataset.series_points(name)
            self._figure.add_scatter(
                x=np.fromiter((p.x for p in points), dtype=float, count=len(points)),
                y=np.fromiter((p.y for p in points), dtype=float, count=len(points)),
                mode="lines",
                name=name,
                line=dict(color=self._colors[name], width=2),
                hoverinfo="none",
            )
            trace = self._figure.data[-1]
            trace.on_click(self._handle_click)
            self._series_traces[name] = trace
        self._figure.add_scatter(
            x=(),
            y=(),
            mode="markers",
            name=SELECTION_TRACE_NAME,
            marker=dict(size=10, color="#444"),
            visible=False,
            hoverinfo="skip",
        )
        self._selection_trace = self._figure.data[-1]
        logger.debug("rebuilt %d series traces", len(self._series_traces))

    def on_window_change(self, callback: Callable[[tuple[float, float]], None]) -> bool:
        """Call ``callback((start, end))`` when the widget's x-range changes.

        Returns ``False`` (and registers nothing) for non-widget figures.
        """
        if not isinstance(self._figure, go.FigureWidget):
            return False

        def _handler(_layout: Any, x_range: Any) -> None:
            if x_range is None:
                return
            try:
                start, end = float(x_range[0]), float(x_range[1])
            except (TypeError, ValueError, IndexError):
                logger.debug("ignoring unparseable x-range %r", x_range)
                return
            callback((start, end))

        self._figure.layout.on_change(_handler, "xaxis.range")
        return True

    def on_point_click(self, callback: Callable[[DataLocation], None]) -> None:
        """Call ``callback(DataLocation)`` with the data position of each series click."""
        self._click_callbacks.append(callback)

    def _handle_click(self, _trace: Any, points: Any, _state: Any) -> None:
        xs = list(getattr(points, "xs", None) or ())
        ys = list(getattr(points, "ys", None) or ())
        if not xs or not ys:
            return
        location = DataLocation(float(xs[0]), float(ys[0]))
        for callback in list(self._click_callbacks):
            callback(location)

    def screen_size(self) -> ScreenSize:
        """Return the plot-area size in pixels (figure size minus margins)."""
        layout = self._figure.layout
        margin = layout.margin
        width = float(layout.width or DEFAULT_WIDTH_PX) - float(margin.l or 0) - float(margin.r or 0)
        height = float(layout.height or DEFAULT_HEIGHT_PX) - float(margin.t or 0) - float(margin.b or 0)
        return ScreenSize(width, height)


__all__ = ["ChartRenderer", "RenderState", "SELECTION_TRACE_NAME", "series_colors"]
