"""Coalescing redraw scheduler for chart views."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class RenderThrottle:
    """Collect redraw requests and run one render per tick.

    Every request carries a reason string. Requests that arrive before the
    next tick are merged into a single callback invocation whose reason joins
    the distinct reasons in arrival order (``"pan+series_filter"``).

    Parameters
    ----------
    callback:
        Called as ``callback(reason)`` once per tick with pending requests.
    execute_every_ms:
        Tick cadence in milliseconds.

    Notes
    -----
    Inside a running asyncio loop (a notebook kernel) ticks are scheduled with
    ``loop.call_later`` and therefore run on the loop thread; otherwise a daemon
    ``threading.Timer`` is used. Callback failures are logged and do not stop
    later ticks.
    """

    def __init__(self, callback: Callable[[str], Any], *, execute_every_ms: int = 30) -> None:
        if execute_every_ms <= 0:
            raise ValueError("execute_every_ms must be > 0")
        self._callback = callback
        self._execute_every_s = execute_every_ms / 1000.0
        self._reasons: list[str] = []
        self._lock = threading.Lock()
        self._timer: Optional[Any] = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return bool(self._reasons)

    def __call__(self, reason: str = "") -> None:
        with self._lock:
            if reason not in self._reasons:
                self._reasons.append(reason)
            if self._timer is None:
                self._schedule_next_locked()

    def flush(self) -> bool:
        """Run pending work now. Returns ``True`` when a render was executed."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            reason = self._take_reason_locked()
        if reason is None:
            return False
        self._run(reason)
        return True

    def _schedule_next_locked(self) -> None:
        delay_s = self._execute_every_s
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            timer = threading.Timer(delay_s, self._on_tick)
            timer.daemon = True
            self._timer = timer
            timer.start()
            return

        self._timer = loop.call_later(delay_s, self._on_tick)

    def _take_reason_locked(self) -> Optional[str]:
        if not self._reasons:
            return None
        reason = "+".join(r for r in self._reasons if r) or "throttled"
        self._reasons.clear()
        return reason

    def _on_tick(self) -> None:
        with self._lock:
            self._timer = None
            reason = self._take_reason_locked()
        if reason is not None:
            self._run(reason)

    def _run(self, reason: str) -> None:
        try:
            self._callback(reason)
        except Exception:
            logger.exception("RenderThrottle callback failed (reason=%s)", reason)


__all__ = ["RenderThrottle"]
