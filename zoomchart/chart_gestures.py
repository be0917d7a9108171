"""Gesture classification and routing to viewport mutations.

Purpose
-------
``GestureRouter`` receives raw gesture events for one chart and turns them
into exactly one of:

- pinch  -> :meth:`Viewport.zoom` (incremental scale, anchored at the live
  gesture location, or the chart center under the legacy ``"center"`` mode),
- drag   -> :meth:`Viewport.pan` (incremental x translation / screen width),
- tap    -> hit test -> ``Viewport.select``.

Concepts and structure
----------------------
Gesture sources differ in granularity, so two event families are accepted:

- high-level events (``PinchGesture``, ``DragGesture``, ``TapGesture``) with
  cumulative scale/translation per gesture, as delivered by touch toolkits;
- low-level pointer events (``PointerDown``, ``PointerMove``, ``PointerUp``),
  which the router folds into drag/tap events itself.

Tap-vs-drag policy: a press/release is a tap iff its total translation never
exceeded ``InteractionConfig.tap_slop_px``. A slop of ``0`` gives exact
zero-translation detection. Once a drag passes the slop it pans and can no
longer become a tap.

Important gotchas
-----------------
- Any drag or pinch *ending* clears the selection unconditionally so that a
  selection never outlives the tap that created it. An ``"ended"`` event always
  drops the gesture's tracker, even when its values are invalid.
- A ``"began"`` event discards any tracker left over from a gesture whose end
  was never delivered.
- Clicks that already carry data coordinates (a Plotly click) go through
  :meth:`GestureRouter.select_at`, skipping the screen-to-data step.
- The series filter and dataset are read at tap time, so legend changes are
  honored on the very next interaction.
- Invalid input never raises: the outcome is ``"ignored"`` and state is kept.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .chart_config import InteractionConfig
from .chart_hit_test import HitResult, HitTester
from .chart_transform import DataLocation, ScreenPoint, ScreenSize, screen_to_data

if TYPE_CHECKING:
    from .chart_data import Dataset
    from .chart_viewport import Viewport
    from .series_filter import SeriesFilter

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

GESTURE_PHASES = ("began", "changed", "ended")


# SECTION: gesture events
# =============================================================================


@dataclass(frozen=True)
class PinchGesture:
    """Pinch update; ``scale`` is cumulative since the gesture began."""

    scale: float
    location: ScreenPoint
    screen: ScreenSize
    phase: str = "changed"


@dataclass(frozen=True)
class DragGesture:
    """Drag update; ``translation`` is cumulative since the gesture began."""

    translation: ScreenPoint
    location: ScreenPoint
    screen: ScreenSize
    phase: str = "changed"


@dataclass(frozen=True)
class TapGesture:
    """Already-classified tap at ``location``."""

    location: ScreenPoint
    screen: ScreenSize


@dataclass(frozen=True)
class PointerDown:
    location: ScreenPoint
    screen: ScreenSize


@dataclass(frozen=True)
class PointerMove:
    location: ScreenPoint


@dataclass(frozen=True)
class PointerUp:
    location: ScreenPoint


GestureEvent = Union[PinchGesture, DragGesture, TapGesture, PointerDown, PointerMove, PointerUp]


@dataclass(frozen=True)
class GestureOutcome:
    """What the router did with one event.

    ``action`` is one of ``"zoom"``, ``"pan"``, ``"select"``, ``"deselect"``,
    ``"pending"`` (drag still within tap slop) or ``"ignored"``.
    """

    action: str
    changed: bool = False
    selection_cleared: bool = False
    hit: Optional[HitResult] = None


_IGNORED = GestureOutcome(action="ignored")


@dataclass
class _DragTrack:
    """Per-drag bookkeeping for cumulative-translation sources."""

    applied_dx: float = 0.0
    panning: bool = False


@dataclass
class _PointerTrack:
    start: ScreenPoint
    screen: ScreenSize


# SECTION: GestureRouter
# =============================================================================


class GestureRouter:
    """Route gesture events for one chart to its viewport and hit tester.

    Parameters
    ----------
    viewport:
        Viewport mutated by zoom/pan/select.
    dataset_source:
        Zero-argument callable returning the current dataset.
    series_filter:
        Shared series filter; read at tap time.
    hit_tester:
        Hit tester used for taps.
    interaction:
        Tap slop and zoom-anchor policy.
    """

    def __init__(
        self,
        viewport: "Viewport",
        *,
        dataset_source: Callable[[], "Dataset"],
        series_filter: "SeriesFilter",
        hit_tester: Optional[HitTester] = None,
        interaction: Optional[InteractionConfig] = None,
    ) -> None:
        self._viewport = viewport
        self._dataset_source = dataset_source
        self._series_filter = series_filter
        self._interaction = interaction if interaction is not None else InteractionConfig()
        self._hit_tester = hit_tester if hit_tester is not None else HitTester(self._interaction)
        self._pinch_scale: Optional[float] = None
        self._drag: Optional[_DragTrack] = None
        self._pointer: Optional[_PointerTrack] = None

    @property
    def is_tracking(self) -> bool:
        """Return ``True`` while a pinch, drag or pointer sequence is in progress."""
        return self._pinch_scale is not None or self._drag is not None or self._pointer is not None

    def dispatch(self, event: GestureEvent) -> GestureOutcome:
        """Classify ``event`` and apply the resulting viewport mutation."""
        if isinstance(event, PinchGesture):
            return self._on_pinch(event)
        if isinstance(event, DragGesture):
            return self._on_drag(event)
        if isinstance(event, TapGesture):
            return self.tap(event.location, event.screen)
        if isinstance(event, PointerDown):
            return self._on_pointer_down(event)
        if isinstance(event, PointerMove):
            return self._on_pointer_move(event)
        if isinstance(event, PointerUp):
            return self._on_pointer_up(event)
        logger.debug("ignoring unknown gesture event %r", event)
        return _IGNORED

    def cancel(self) -> None:
        """Forget any in-progress gesture without touching the viewport."""
        self._pinch_scale = None
        self._drag = None
        self._pointer = None

    # ------------------------------------------------------------------
    # Tap
    # ------------------------------------------------------------------
    def tap(self, location: ScreenPoint, screen: ScreenSize) -> GestureOutcome:
        """Select the nearest eligible point to a tap at ``location``."""
        screen = ScreenSize(*screen)
        tap_data = screen_to_data(ScreenPoint(*location), self._viewport, screen)
        if tap_data is None:
            logger.debug("tap ignored: degenerate geometry %r", screen)
            return _IGNORED
        return self.select_at(tap_data, screen)

    def select_at(self, location: DataLocation, screen: ScreenSize) -> GestureOutcome:
        """Select the nearest eligible point to a data-space ``location``.

        ``screen`` only scales the distance comparison; it must be non-degenerate.
        """
        screen = ScreenSize(*screen)
        x, y = location
        if screen.is_degenerate or not _is_finite(x, y):
            logger.debug("selection ignored: location=%r screen=%r", location, screen)
            return _IGNORED
        tap_data = DataLocation(float(x), float(y))
        hit = self._hit_tester.nearest(
            tap_data,
            self._dataset_source(),
            self._series_filter.series,
            self._viewport,
            screen,
        )
        if hit is None:
            had_selection = self._viewport.selected_index is not None
            self._viewport.clear_selection()
            return GestureOutcome(action="deselect", changed=had_selection, selection_cleared=True)
        self._viewport.select(hit.index)
        logger.debug("tap selected index=%d (%.1f px)", hit.index, hit.distance_px)
        return GestureOutcome(action="select", changed=True, hit=hit)

    # ------------------------------------------------------------------
    # Pinch
    # ------------------------------------------------------------------
    def _on_pinch(self, event: PinchGesture) -> GestureOutcome:
        if event.phase not in GESTURE_PHASES:
            logger.debug("ignoring pinch with unknown phase %r", event.phase)
            return _IGNORED
        if event.phase == "began":
            self._pinch_scale = None
        changed = self._apply_pinch_scale(event)
        if event.phase == "ended":
            self._pinch_scale = None
            self._viewport.clear_selection()
            return GestureOutcome(action="zoom", changed=changed, selection_cleared=True)
        return GestureOutcome(action="zoom", changed=changed)

    def _apply_pinch_scale(self, event: PinchGesture) -> bool:
        scale = event.scale
        if not (_is_finite(scale) and scale > 0):
            return False
        previous = self._pinch_scale if self._pinch_scale is not None else 1.0
        self._pinch_scale = scale
        screen = ScreenSize(*event.screen)
        if self._interaction.zoom_anchor == "center":
            anchor_x = screen.width / 2.0
        else:
            anchor_x = event.location[0]
        return self._viewport.zoom(scale / previous, anchor_x, screen.width)

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------
    def _on_drag(self, event: DragGesture) -> GestureOutcome:
        if event.phase not in GESTURE_PHASES:
            logger.debug("ignoring drag with unknown phase %r", event.phase)
            return _IGNORED
        if event.phase == "began":
            self._drag = None
        dx, dy = event.translation
        if not _is_finite(dx, dy):
            if event.phase != "ended":
                return _IGNORED
            logger.debug("drag ended with non-finite translation %r", event.translation)
            self._drag = None
            self._viewport.clear_selection()
            return GestureOutcome(action="pan", selection_cleared=True)
        track = self._drag if self._drag is not None else _DragTrack()
        self._drag = track
        if not track.panning and math.hypot(dx, dy) > self._interaction.tap_slop_px:
            track.panning = True

        if event.phase == "ended":
            self._drag = None
            if not track.panning:
                # Press/release within the slop: this was a tap.
                return self.tap(event.location, event.screen)
            changed = self._pan_to(track, dx, event.screen)
            self._viewport.clear_selection()
            return GestureOutcome(action="pan", changed=changed, selection_cleared=True)

        if not track.panning:
            return GestureOutcome(action="pending")
        return GestureOutcome(action="pan", changed=self._pan_to(track, dx, event.screen))

    def _pan_to(self, track: _DragTrack, dx: float, screen: Any) -> bool:
        width = ScreenSize(*screen).width
        if not (_is_finite(width) and width > 0):
            return False
        delta = dx - track.applied_dx
        track.applied_dx = dx
        return self._viewport.pan(delta / width)

    # ------------------------------------------------------------------
    # Pointer sequences
    # ------------------------------------------------------------------
    def _on_pointer_down(self, event: PointerDown) -> GestureOutcome:
        self._pointer = _PointerTrack(start=ScreenPoint(*event.location), screen=ScreenSize(*event.screen))
        self._drag = _DragTrack()
        return GestureOutcome(action="pending")

    def _on_pointer_move(self, event: PointerMove) -> GestureOutcome:
        if self._pointer is None:
            return _IGNORED
        return self._on_drag(_pointer_drag(self._pointer, event.location, phase="changed"))

    def _on_pointer_up(self, event: PointerUp) -> GestureOutcome:
        pointer = self._pointer
        if pointer is None:
            return _IGNORED
        self._pointer = None
        return self._on_drag(_pointer_drag(pointer, event.location, phase="ended"))


def _pointer_drag(pointer: _PointerTrack, location: ScreenPoint, *, phase: str) -> DragGesture:
    """Express a pointer position as a cumulative drag from its press point."""
    x, y = location
    start = pointer.start
    return DragGesture(
        translation=ScreenPoint(x - start.x, y - start.y),
        location=ScreenPoint(x, y),
        screen=pointer.screen,
        phase=phase,
    )


def _is_finite(*values: Any) -> bool:
    try:
        return all(math.isfinite(v) for v in values)
    except TypeError:
        return False


__all__ = [
    "DragGesture",
    "GestureEvent",
    "GestureOutcome",
    "GestureRouter",
    "PinchGesture",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "TapGesture",
]
