"""Tests for scale normalisation of assets in unknown units."""

from __future__ import annotations

import logging

import pytest

from aquarium.assets.types import BoundingBox
from aquarium.entities.normalization import normalize

from .creature_helpers import box_scene


def test_largest_dimension_maps_to_height_share():
    scene = box_scene(length=84.0, height=32.0)
    bounds = BoundingBox((-42.0, -16.0, -6.0), (42.0, 16.0, 6.0))
    result = normalize(scene, bounds, viewport_height=10.0, height_ratio=0.22)
    assert result.max_dim == 84.0
    assert result.base_scale * 84.0 == pytest.approx(2.2)
    assert result.half_width_world == pytest.approx(1.1)


def test_size_multiplier_scales_result():
    scene = box_scene()
    bounds = BoundingBox((-1.0, -0.5, 0.0), (1.0, 0.5, 0.0))
    plain = normalize(scene, bounds, viewport_height=10.0, height_ratio=0.2)
    doubled = normalize(scene, bounds, viewport_height=10.0, height_ratio=0.2, size_multiplier=2.0)
    assert doubled.base_scale == pytest.approx(plain.base_scale * 2.0)


def test_origin_offset_recentres_on_bounding_box():
    scene = box_scene()
    bounds = BoundingBox((2.0, 0.0, -1.0), (6.0, 2.0, 1.0))
    normalize(scene, bounds, viewport_height=10.0, height_ratio=0.2)
    assert tuple(scene.origin_offset) == (-4.0, -1.0, 0.0)


@pytest.mark.parametrize(
    "bounds",
    [
        None,
        BoundingBox((0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        BoundingBox((1.0, 1.0, 1.0), (0.0, 0.0, 0.0)),
    ],
)
def test_degenerate_geometry_falls_back_to_unit_divisor(bounds):
    result = normalize(box_scene(), bounds, viewport_height=10.0, height_ratio=0.22)
    assert result.max_dim == 1.0
    assert result.base_scale == pytest.approx(2.2)


def test_too_wide_creature_is_shrunk_with_warning(caplog):
    scene = box_scene(length=10.0)
    bounds = BoundingBox((-5.0, -0.5, 0.0), (5.0, 0.5, 0.0))
    with caplog.at_level(logging.WARNING, logger="aquarium.simulation"):
        result = normalize(scene, bounds, viewport_height=10.0, height_ratio=1.0, max_half_width=2.0)
    assert result.half_width_world < 2.0
    assert result.base_scale * 10.0 / 2.0 == pytest.approx(result.half_width_world)
    assert "shrinking" in caplog.text
