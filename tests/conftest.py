from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from zoomchart.chart_config import DomainConfig  # noqa: E402
from zoomchart.chart_data import DataPoint, Dataset  # noqa: E402
from zoomchart.chart_transform import ScreenSize  # noqa: E402


@pytest.fixture
def domain_config() -> DomainConfig:
    return DomainConfig(min_domain=10.0, max_domain=100.0, x_range=(0.0, 100.0), y_range=(-12.0, 12.0))


@pytest.fixture
def screen() -> ScreenSize:
    # 4 px per x unit when fully zoomed out, 10 px per y unit.
    return ScreenSize(400.0, 240.0)


@pytest.fixture
def wave_dataset() -> Dataset:
    sine = [DataPoint(float(i), math.sin(i * 0.1) * 10, "Sine Wave") for i in range(100)]
    cosine = [DataPoint(float(i), math.cos(i * 0.1) * 10, "Cosine Wave") for i in range(100)]
    return Dataset(sine + cosine)


@pytest.fixture
def twin_dataset() -> Dataset:
    return Dataset(
        [
            DataPoint(50.0, 0.0, "A"),
            DataPoint(50.0, 0.0, "B"),
            DataPoint(20.0, 5.0, "B"),
        ]
    )
