"""Interactive chart view orchestration.

Purpose
-------
This module provides ``ChartView``, the per-widget coordinator that ties the
interaction core to its presentation collaborators:

- ``Viewport`` owns zoom/pan/selection state,
- ``GestureRouter`` classifies gestures and mutates the viewport,
- ``HitTester`` resolves taps to dataset indices,
- ``ChartRenderer`` draws the dataset into a Plotly figure,
- ``SeriesLegend`` writes the shared ``SeriesFilter``.

Architecture notes
------------------
``ChartView`` holds a reference to a shared ``SeriesFilter`` and never copies
its value. Every view bound to the same filter observes it and redraws when it
changes. Redraws go through a ``RenderThrottle`` (pass ``throttle_ms=None`` to
render synchronously, which is what tests do).

Important gotchas
-----------------
- Replacing the dataset clears the selection: selections are dataset indices.
- When the renderer is a ``go.FigureWidget``, x-range changes made in the
  Plotly UI are fed back through ``Viewport.set_window`` and re-clamped. The
  figure is redrawn whenever the clamped window differs from the one shown.
- Clicks on a series trace select through ``ChartView.click`` using the
  clicked data position, honoring the shared series filter.

Examples
--------
>>> from zoomchart import ChartView, DataPoint, Dataset  # doctest: +SKIP
>>> view = ChartView(Dataset([DataPoint(0, 0, "a"), DataPoint(1, 1, "a")]))  # doctest: +SKIP
>>> view  # doctest: +SKIP
"""

from __future__ import annotations

import html
import logging
import time
from typing import Any, Optional

import ipywidgets as widgets
import numpy as np
import plotly.graph_objects as go
from IPython.display import display

from .chart_config import DomainConfig, InteractionConfig
from .chart_data import DataPoint, Dataset
from .chart_gestures import GestureEvent, GestureOutcome, GestureRouter
from .chart_hit_test import HitTester
from .chart_legend import SeriesLegend
from .chart_render import ChartRenderer, RenderState, series_colors
from .chart_transform import CoordinateTransform, DataLocation, ScreenSize
from .chart_viewport import Viewport
from .render_throttle import RenderThrottle
from .series_filter import SeriesFilter
from .SeriesFilterEvent import SeriesFilterEvent

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def format_selection(point: Optional[DataPoint]) -> str:
    """Return the caption shown under a chart for the selected point."""
    if point is None:
        return ""
    return f"X: {point.x:.0f}  Y: {point.y:.2f}  {point.series}"


class ChartView:
    """One zoomable, pannable, tap-selectable multi-series line chart.

    Parameters
    ----------
    dataset : Dataset
        Data shown by the chart.
    config : DomainConfig, optional
        Domain constants. Defaults to :meth:`DomainConfig.for_dataset`.
    interaction : InteractionConfig, optional
        Gesture/hit-test tuning.
    series_filter : SeriesFilter, optional
        Shared filter. Pass the same instance to every chart bound to the same
        dataset; a private one is created otherwise.
    title : str
        Heading shown above the chart.
    figure : go.Figure, optional
        Figure to draw into (defaults to a new ``go.FigureWidget``).
    height : int
        Plot height in pixels.
    width : str, optional
        CSS width of the chart widget (e.g. ``"75%"``).
    throttle_ms : int or None
        Render cadence; ``None`` renders synchronously on every change.
    """

    def __init__(
        self,
        dataset: Dataset,
        *,
        config: Optional[DomainConfig] = None,
        interaction: Optional[InteractionConfig] = None,
        series_filter: Optional[SeriesFilter] = None,
        title: str = "",
        figure: Optional[go.Figure] = None,
        height: int = 200,
        width: Optional[str] = None,
        throttle_ms: Optional[int] = 30,
    ) -> None:
        self._dataset = dataset
        self._config = config if config is not None else DomainConfig.for_dataset(dataset)
        self._interaction = interaction if interaction is not None else InteractionConfig()
        self._series_filter = series_filter if series_filter is not None else SeriesFilter()
        self._title = str(title)

        self._viewport = Viewport(self._config)
        self._hit_tester = HitTester(self._interaction)
        self._router = GestureRouter(
            self._viewport,
            dataset_source=lambda: self._dataset,
            series_filter=self._series_filter,
            hit_tester=self._hit_tester,
            interaction=self._interaction,
        )
        self._renderer = ChartRenderer(figure, interaction=self._interaction, height=height)
        self._throttle = RenderThrottle(self.render, execute_every_ms=throttle_ms) if throttle_ms else None
        self._render_info_last_log_t = 0.0

        self._title_widget = widgets.HTML(value=f"<b>{html.escape(self._title)}</b>" if self._title else "")
        self._readout = widgets.HTML(value="")
        self._legend_box = widgets.HBox(layout=widgets.Layout(flex_flow="row wrap", margin="4px 0 0 0"))
        self._legend = SeriesLegend(self._legend_box, self._series_filter)
        self._legend.set_series(dataset.series_names, self._series_colors())

        children: list[widgets.Widget] = [self._title_widget]
        if isinstance(self._renderer.figure, widgets.DOMWidget):
            children.append(self._renderer.figure)
        children.extend([self._readout, self._legend_box])
        self._widget = widgets.VBox(
            children,
            layout=widgets.Layout(width=width or "100%", padding="8px", border="1px solid rgba(15,23,42,0.08)"),
        )

        self._unsubscribe = self._series_filter.subscribe(self._on_series_filter_changed)
        self._renderer.on_window_change(self._on_window_change)
        self._renderer.on_point_click(self.click)
        self.render(reason="init")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def config(self) -> DomainConfig:
        return self._config

    @property
    def series_filter(self) -> SeriesFilter:
        """Return the shared series filter this view is bound to."""
        return self._series_filter

    @property
    def renderer(self) -> ChartRenderer:
        return self._renderer

    @property
    def legend(self) -> SeriesLegend:
        return self._legend

    @property
    def router(self) -> GestureRouter:
        return self._router

    @property
    def title(self) -> str:
        return self._title

    @property
    def widget(self) -> widgets.VBox:
        """Return the widget tree to embed in notebook layouts."""
        return self._widget

    @property
    def selected_point(self) -> Optional[DataPoint]:
        """Return the selected point resolved against the current dataset."""
        return self._viewport.selected_point(self._dataset)

    def transform(self, screen: ScreenSize) -> Optional[CoordinateTransform]:
        """Return the coordinate transform for ``screen`` (``None`` if degenerate)."""
        return CoordinateTransform.from_viewport(self._viewport, ScreenSize(*screen))

    def selection_text(self) -> str:
        return format_selection(self.selected_point)

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    def handle(self, event: GestureEvent) -> GestureOutcome:
        """Route one gesture event and schedule a redraw when state changed."""
        return self._apply_outcome(self._router.dispatch(event))

    def click(self, location: DataLocation) -> GestureOutcome:
        """Select the point nearest to a clicked data-space ``location``."""
        return self._apply_outcome(self._router.select_at(location, self._renderer.screen_size()))

    def _apply_outcome(self, outcome: GestureOutcome) -> GestureOutcome:
        if outcome.changed or outcome.selection_cleared:
            self._update_readout()
            self.request_render(outcome.action)
        return outcome

    def zoom(self, scale_factor: float, anchor_screen_x: float, screen_width: float) -> bool:
        changed = self._viewport.zoom(scale_factor, anchor_screen_x, screen_width)
        if changed:
            self.request_render("zoom")
        return changed

    def pan(self, drag_ratio: float) -> bool:
        changed = self._viewport.pan(drag_ratio)
        if changed:
            self.request_render("pan")
        return changed

    def reset(self) -> None:
        """Return to the fully zoomed-out view and clear the selection."""
        self._router.cancel()
        self._viewport.reset()
        self._update_readout()
        self.request_render("reset")

    def set_dataset(self, dataset: Dataset) -> None:
        """Replace the dataset; the selection is cleared since it indexes the old one."""
        self._dataset = dataset
        self._viewport.clear_selection()
        self._legend.set_series(dataset.series_names, self._series_colors())
        self._update_readout()
        self.request_render("dataset")

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_state(self) -> RenderState:
        return RenderState(
            dataset=self._dataset,
            series_filter=self._series_filter.series,
            window=self._viewport.window,
            y_range=self._config.y_range,
            selected=self.selected_point,
        )

    def request_render(self, reason: str = "") -> None:
        """Schedule a redraw (immediate when throttling is disabled)."""
        if self._throttle is None:
            self.render(reason=reason)
        else:
            self._throttle(reason)

    def flush(self) -> bool:
        """Run a pending throttled redraw now."""
        return self._throttle.flush() if self._throttle is not None else False

    def render(self, reason: str = "manual") -> None:
        """Redraw the chart from the current state.

        Parameters
        ----------
        reason : str
            Render reason string for logging/debugging.
        """
        self._renderer.render(self.render_state())
        self._update_readout()

        # Simple rate-limited logging implementation
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info("render(reason=%s) title=%r window=%s", reason, self._title, self._viewport.window)

    def _update_readout(self) -> None:
        text = html.escape(self.selection_text())
        value = f'<span style="font-size:smaller;color:#64748b">{text}</span>' if text else ""
        if self._readout.value != value:
            self._readout.value = value

    def _series_colors(self) -> dict[str, str]:
        return series_colors(self._dataset.series_names, self._interaction.palette)

    def _on_series_filter_changed(self, event: SeriesFilterEvent) -> None:
        logger.debug("series filter %r -> %r", event.old, event.new)
        self.request_render("series_filter")

    def _on_window_change(self, window: tuple[float, float]) -> None:
        changed = self._viewport.set_window(*window)
        # A clamped or rejected window must be redrawn even when the state is unchanged.
        if changed or not np.allclose(self._viewport.window, window):
            self.request_render("relayout")

    def close(self) -> None:
        """Detach from the shared filter and close owned widgets."""
        self._unsubscribe()
        self._legend.close()
        self._widget.close()

    def _ipython_display_(self, **kwargs: Any) -> None:
        """Display the chart widget when the view is the value of a notebook cell."""
        display(self._widget)

    def __repr__(self) -> str:
        return f"ChartView(title={self._title!r}, dataset={self._dataset!r}, viewport={self._viewport!r})"


__all__ = ["ChartView", "format_selection"]
