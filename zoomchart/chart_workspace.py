"""Several chart views over one dataset and one shared series filter.

A ``ChartWorkspace`` is the notebook-level container: it owns the single
``SeriesFilter`` that every chart in it observes, so toggling a series in any
chart's legend dims that series in all of them. Each chart keeps its own
viewport (zoom, pan and selection are per chart).
"""

from __future__ import annotations

import html
from typing import Any, Dict, Iterator, Optional

import ipywidgets as widgets
import plotly.graph_objects as go
from IPython.display import display

from .chart_config import DomainConfig, InteractionConfig
from .chart_data import Dataset
from .chart_view import ChartView
from .series_filter import SeriesFilter


class ChartWorkspace:
    """Stack of chart views sharing a dataset and a series filter."""

    def __init__(
        self,
        dataset: Dataset,
        *,
        title: str = "",
        config: Optional[DomainConfig] = None,
        interaction: Optional[InteractionConfig] = None,
        throttle_ms: Optional[int] = 30,
    ) -> None:
        self._dataset = dataset
        self._config = config if config is not None else DomainConfig.for_dataset(dataset)
        self._interaction = interaction if interaction is not None else InteractionConfig()
        self._throttle_ms = throttle_ms
        self._series_filter = SeriesFilter()
        self._charts: Dict[str, ChartView] = {}
        self._title_widget = widgets.HTML(value=f"<h3>{html.escape(title)}</h3>" if title else "")
        self._box = widgets.VBox([self._title_widget], layout=widgets.Layout(width="100%"))

    @property
    def series_filter(self) -> SeriesFilter:
        return self._series_filter

    @property
    def dataset(self) -> Dataset:
        return self._dataset

    @property
    def charts(self) -> Dict[str, ChartView]:
        return dict(self._charts)

    @property
    def widget(self) -> widgets.VBox:
        return self._box

    def __iter__(self) -> Iterator[ChartView]:
        return iter(self._charts.values())

    def __len__(self) -> int:
        return len(self._charts)

    def add_chart(
        self,
        id: str,
        *,
        title: Optional[str] = None,
        width: Optional[str] = None,
        height: int = 200,
        figure: Optional[go.Figure] = None,
    ) -> ChartView:
        """Create a chart bound to the shared dataset and filter."""
        key = str(id)
        if key in self._charts:
            raise ValueError(f"Chart '{key}' already exists")
        view = ChartView(
            self._dataset,
            config=self._config,
            interaction=self._interaction,
            series_filter=self._series_filter,
            title=title if title is not None else key,
            figure=figure,
            height=height,
            width=width,
            throttle_ms=self._throttle_ms,
        )
        self._charts[key] = view
        self._box.children = (*self._box.children, view.widget)
        return view

    def remove_chart(self, id: str) -> None:
        """Detach and drop a chart if present."""
        view = self._charts.pop(str(id), None)
        if view is None:
            return
        self._box.children = tuple(c for c in self._box.children if c is not view.widget)
        view.close()

    def set_dataset(self, dataset: Dataset) -> None:
        """Replace the dataset of every chart (selections are cleared)."""
        self._dataset = dataset
        for view in self._charts.values():
            view.set_dataset(dataset)

    def reset(self) -> None:
        for view in self._charts.values():
            view.reset()

    def _ipython_display_(self, **kwargs: Any) -> None:
        display(self._box)


__all__ = ["ChartWorkspace"]
