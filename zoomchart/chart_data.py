"""Chart data primitives.

This module defines ``DataPoint`` (one immutable sample of one series) and
``Dataset``, the immutable ordered collection every chart reads from.

``Dataset`` iteration order is significant: it is the tie-break order of the
hit tester, and selections are stored as indices into it. Column arrays are
built once with NumPy and cached for vectorized hit testing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional, Sequence, overload

import numpy as np


@dataclass(frozen=True)
class DataPoint:
    """One sample of one series.

    Parameters
    ----------
    x : float
        Domain position.
    y : float
        Value.
    series : str
        Category label of the series the sample belongs to.
    """

    x: float
    y: float
    series: str


class Dataset(Sequence[DataPoint]):
    """Immutable, ordered sequence of :class:`DataPoint` values.

    Examples
    --------
    >>> from zoomchart.chart_data import DataPoint, Dataset
    >>> ds = Dataset([DataPoint(0, 1, "a"), DataPoint(1, 2, "b")])
    >>> ds.series_names
    ('a', 'b')
    """

    __slots__ = ("_points", "_xs", "_ys", "_series", "_series_names")

    def __init__(self, points: Iterable[DataPoint] = ()) -> None:
        self._points: tuple[DataPoint, ...] = tuple(points)
        for p in self._points:
            if not isinstance(p, DataPoint):
                raise TypeError(f"Dataset entries must be DataPoint, got {type(p).__name__}")
        self._xs: Optional[np.ndarray] = None
        self._ys: Optional[np.ndarray] = None
        self._series: Optional[np.ndarray] = None
        self._series_names: tuple[str, ...] = tuple(dict.fromkeys(p.series for p in self._points))

    @classmethod
    def from_columns(
        cls, xs: Sequence[float], ys: Sequence[float], series: str | Sequence[str]
    ) -> "Dataset":
        """Build a dataset from parallel x/y columns and one or many series labels."""
        if len(xs) != len(ys):
            raise ValueError(f"xs and ys must have equal length, got {len(xs)} and {len(ys)}")
        labels = [series] * len(xs) if isinstance(series, str) else list(series)
        if len(labels) != len(xs):
            raise ValueError("series labels must match the column length")
        return cls(DataPoint(float(x), float(y), str(s)) for x, y, s in zip(xs, ys, labels))

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[DataPoint]:
        return iter(self._points)

    @overload
    def __getitem__(self, index: int) -> DataPoint: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[DataPoint, ...]: ...

    def __getitem__(self, index):
        return self._points[index]

    def __add__(self, other: "Dataset") -> "Dataset":
        if not isinstance(other, Dataset):
            return NotImplemented
        return Dataset(self._points + other._points)

    def __repr__(self) -> str:
        return f"Dataset(n={len(self)}, series={self._series_names!r})"

    @property
    def points(self) -> tuple[DataPoint, ...]:
        return self._points

    @property
    def series_names(self) -> tuple[str, ...]:
        """Return series labels in order of first appearance."""
        return self._series_names

    @property
    def xs(self) -> np.ndarray:
        """Return the cached x column as a float array."""
        if self._xs is None:
            self._xs = np.fromiter((p.x for p in self._points), dtype=float, count=len(self._points))
        return self._xs

    @property
    def ys(self) -> np.ndarray:
        """Return the cached y column as a float array."""
        if self._ys is None:
            self._ys = np.fromiter((p.y for p in self._points), dtype=float, count=len(self._points))
        return self._ys

    @property
    def series(self) -> np.ndarray:
        """Return the cached series-label column as an object array."""
        if self._series is None:
            self._series = np.array([p.series for p in self._points], dtype=object)
        return self._series

    def index_of(self, point: DataPoint) -> Optional[int]:
        """Return the first index holding a point equal to ``point``, or ``None``."""
        for i, p in enumerate(self._points):
            if p == point:
                return i
        return None

    def get(self, index: Optional[int]) -> Optional[DataPoint]:
        """Return the point at ``index``, or ``None`` when it is absent or out of range."""
        if index is None or not 0 <= index < len(self._points):
            return None
        return self._points[index]

    def series_points(self, name: str) -> tuple[DataPoint, ...]:
        """Return the points of one series in dataset order."""
        return tuple(p for p in self._points if p.series == name)


__all__ = ["DataPoint", "Dataset"]
