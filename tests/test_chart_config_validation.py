from __future__ import annotations

import math

import pytest

from zoomchart.chart_config import DomainConfig, InteractionConfig
from zoomchart.chart_data import DataPoint, Dataset


def test_defaults_follow_original_chart_extent() -> None:
    cfg = DomainConfig()
    assert cfg.x_range == (0.0, 100.0)
    assert cfg.y_range == (-12.0, 12.0)
    assert cfg.max_domain == 100.0
    assert cfg.min_domain == 10.0
    assert cfg.x_width == 100.0
    assert cfg.y_height == 24.0


def test_ranges_are_normalized_to_float_tuples() -> None:
    cfg = DomainConfig(min_domain=1, max_domain=4, x_range=[2, 6], y_range=[0, 1])
    assert cfg.x_range == (2.0, 6.0)
    assert isinstance(cfg.x_range, tuple)
    assert cfg.x_low == 2.0 and cfg.x_high == 6.0


@pytest.mark.parametrize(
    "kwargs, match",
    [
        (dict(min_domain=0.0), "min_domain"),
        (dict(min_domain=50.0, max_domain=20.0), "min_domain"),
        (dict(max_domain=150.0), "exceeds"),
        (dict(x_range=(10.0, 0.0)), "low < high"),
        (dict(y_range=(0.0, math.nan)), "finite"),
        (dict(x_range=(0.0,)), "pair"),
    ],
)
def test_invalid_domain_config_raises(kwargs, match) -> None:
    with pytest.raises(ValueError, match=match):
        DomainConfig(**kwargs)


def test_config_is_frozen() -> None:
    cfg = DomainConfig()
    with pytest.raises(Exception):
        cfg.max_domain = 5.0  # type: ignore[misc]


def test_for_dataset_derives_extent_with_y_padding() -> None:
    ds = Dataset([DataPoint(0, -1, "a"), DataPoint(20, 1, "a"), DataPoint(10, 0, "b")])
    cfg = DomainConfig.for_dataset(ds, y_padding=0.5)
    assert cfg.x_range == (0.0, 20.0)
    assert cfg.max_domain == 20.0
    assert cfg.min_domain == pytest.approx(2.0)
    assert cfg.y_range == pytest.approx((-2.0, 2.0))


def test_for_dataset_handles_empty_and_single_point() -> None:
    assert DomainConfig.for_dataset(Dataset()) == DomainConfig()
    single = DomainConfig.for_dataset(Dataset([DataPoint(3, 3, "a")]), y_padding=0.0)
    assert single.x_range == (2.5, 3.5)
    assert single.y_range == (2.5, 3.5)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(tap_slop_px=-1.0),
        dict(hit_buffer_ratio=-0.1),
        dict(zoom_anchor="corner"),
        dict(dimmed_opacity=1.5),
    ],
)
def test_invalid_interaction_config_raises(kwargs) -> None:
    with pytest.raises(ValueError):
        InteractionConfig(**kwargs)


def test_interaction_defaults() -> None:
    cfg = InteractionConfig()
    assert cfg.tap_slop_px == 4.0
    assert cfg.hit_buffer_ratio == 0.1
    assert cfg.zoom_anchor == "location"
    assert cfg.dimmed_opacity == 0.2
    assert cfg.palette == ()
