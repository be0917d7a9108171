"""Top-level public API for the ``zoomchart`` package.

This module re-exports the interaction core and the notebook-facing chart
widgets so users can import from a single namespace, for example:

>>> from zoomchart import ChartWorkspace, Dataset, DataPoint  # doctest: +SKIP

The core (``Viewport``, ``CoordinateTransform``, ``HitTester``,
``GestureRouter``) modules import no widget libraries and can drive any
renderer; ``ChartView`` and ``ChartWorkspace`` wire it to Plotly and
ipywidgets.
"""

from .chart_config import DomainConfig, InteractionConfig
from .chart_data import DataPoint, Dataset
from .chart_gestures import (
    DragGesture,
    GestureOutcome,
    GestureRouter,
    PinchGesture,
    PointerDown,
    PointerMove,
    PointerUp,
    TapGesture,
)
from .chart_hit_test import HitResult, HitTester
from .chart_legend import SeriesLegend
from .chart_render import ChartRenderer, RenderState
from .chart_transform import (
    CoordinateTransform,
    DataLocation,
    ScreenPoint,
    ScreenSize,
    data_to_screen,
    screen_to_data,
)
from .chart_view import ChartView, format_selection
from .chart_viewport import Viewport
from .chart_workspace import ChartWorkspace
from .render_throttle import RenderThrottle
from .series_filter import SeriesFilter
from .SeriesFilterEvent import SeriesFilterEvent
from .ViewportSnapshot import ViewportSnapshot

__all__ = [
    "ChartRenderer",
    "ChartView",
    "ChartWorkspace",
    "CoordinateTransform",
    "DataLocation",
    "DataPoint",
    "Dataset",
    "DomainConfig",
    "DragGesture",
    "GestureOutcome",
    "GestureRouter",
    "HitResult",
    "HitTester",
    "InteractionConfig",
    "PinchGesture",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "RenderState",
    "RenderThrottle",
    "ScreenPoint",
    "ScreenSize",
    "SeriesFilter",
    "SeriesFilterEvent",
    "SeriesLegend",
    "TapGesture",
    "Viewport",
    "ViewportSnapshot",
    "data_to_screen",
    "format_selection",
    "screen_to_data",
]
