from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from zoomchart.render_throttle import RenderThrottle


class _FakeThreadTimer:
    created: list["_FakeThreadTimer"] = []

    def __init__(self, delay: float, callback):
        self.delay = delay
        self.callback = callback
        self.daemon = False
        self.started = False
        self.cancelled = False
        _FakeThreadTimer.created.append(self)

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True


class _FakeLoopHandle:
    def __init__(self, callback):
        self._callback = callback

    def fire(self) -> None:
        self._callback()

    def cancel(self) -> None:
        pass


class _FakeAsyncLoop:
    def __init__(self) -> None:
        self.handles: list[_FakeLoopHandle] = []

    def call_later(self, _delay: float, callback):
        handle = _FakeLoopHandle(callback)
        self.handles.append(handle)
        return handle


def test_requests_within_a_tick_are_coalesced() -> None:
    reasons: list[str] = []
    _FakeThreadTimer.created.clear()

    with patch("zoomchart.render_throttle.threading.Timer", _FakeThreadTimer):
        throttle = RenderThrottle(reasons.append, execute_every_ms=10)
        throttle("pan")
        throttle("zoom")
        throttle("pan")
        assert len(_FakeThreadTimer.created) == 1
        assert _FakeThreadTimer.created[0].daemon is True
        assert throttle.pending

        _FakeThreadTimer.created[0].callback()

    assert reasons == ["pan+zoom"]
    assert not throttle.pending


def test_flush_runs_pending_work_and_cancels_timer() -> None:
    reasons: list[str] = []
    _FakeThreadTimer.created.clear()

    with patch("zoomchart.render_throttle.threading.Timer", _FakeThreadTimer):
        throttle = RenderThrottle(reasons.append, execute_every_ms=10)
        assert throttle.flush() is False
        throttle("series_filter")
        assert throttle.flush() is True
        assert _FakeThreadTimer.created[0].cancelled is True

        # A late tick from the cancelled timer finds nothing to do.
        _FakeThreadTimer.created[0].callback()

    assert reasons == ["series_filter"]


def test_empty_reason_falls_back_to_generic_label() -> None:
    reasons: list[str] = []
    _FakeThreadTimer.created.clear()
    with patch("zoomchart.render_throttle.threading.Timer", _FakeThreadTimer):
        throttle = RenderThrottle(reasons.append)
        throttle()
        throttle.flush()
    assert reasons == ["throttled"]


def test_throttle_logs_and_keeps_processing_after_callback_error_threading(caplog) -> None:
    state = {"n": 0}

    def _callback(_reason):
        state["n"] += 1
        if state["n"] == 1:
            raise RuntimeError("boom")

    _FakeThreadTimer.created.clear()

    with patch("zoomchart.render_throttle.threading.Timer", _FakeThreadTimer):
        throttle = RenderThrottle(_callback, execute_every_ms=1)
        with caplog.at_level(logging.ERROR, logger="zoomchart.render_throttle"):
            throttle("first")
            _FakeThreadTimer.created[0].callback()
            throttle("second")
            assert len(_FakeThreadTimer.created) == 2
            _FakeThreadTimer.created[1].callback()

    assert state["n"] == 2
    assert "RenderThrottle callback failed" in caplog.text


def test_throttle_uses_running_loop_when_available(caplog) -> None:
    reasons: list[str] = []
    fake_loop = _FakeAsyncLoop()

    with patch("zoomchart.render_throttle.asyncio.get_running_loop", return_value=fake_loop):
        throttle = RenderThrottle(reasons.append, execute_every_ms=1)
        throttle("pan")
        throttle("pan")
        assert len(fake_loop.handles) == 1
        fake_loop.handles[0].fire()

    assert reasons == ["pan"]


def test_non_positive_cadence_is_rejected() -> None:
    with pytest.raises(ValueError, match="execute_every_ms"):
        RenderThrottle(lambda _reason: None, execute_every_ms=0)
