"""Tests for scalar and angular helpers."""

from __future__ import annotations

import math

import pytest

from aquarium.utils.math_utils import (
    approach_angle,
    clamp,
    clamp01,
    damping_factor,
    lerp,
    shortest_angle_delta,
    wrap_angle,
)


def test_lerp_and_clamp_basics():
    assert lerp(2.0, 4.0, 0.5) == 3.0
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0


def test_clamp01_maps_nan_to_zero():
    assert clamp01(float("nan")) == 0.0
    assert clamp01(0.4) == 0.4
    assert clamp01(7.0) == 1.0


def test_damping_factor_is_zero_for_zero_delta():
    assert damping_factor(0.0) == 0.0
    assert damping_factor(1.0) == pytest.approx(0.999)


def test_damping_is_frame_rate_independent():
    gap_single = 1.0 - damping_factor(1.0)
    gap_split = 1.0
    for _ in range(60):
        gap_split *= 1.0 - damping_factor(1.0 / 60.0)
    assert gap_split == pytest.approx(gap_single, rel=1e-9)


def test_wrap_angle_range():
    for angle in (-10.0, -math.pi, 0.0, math.pi, 3 * math.pi, 12.5):
        wrapped = wrap_angle(angle)
        assert -math.pi <= wrapped < math.pi
        assert math.isclose(math.cos(wrapped), math.cos(angle), abs_tol=1e-9)


def test_shortest_delta_crosses_the_back_when_shorter():
    current = math.radians(170.0)
    target = math.radians(-170.0)
    delta = shortest_angle_delta(current, target)
    assert delta == pytest.approx(math.radians(20.0))


def test_shortest_delta_never_exceeds_half_turn():
    for start in range(-180, 181, 15):
        for end in range(-180, 181, 15):
            delta = shortest_angle_delta(math.radians(start), math.radians(end))
            assert abs(delta) <= math.pi + 1e-12


def test_approach_angle_moves_along_shorter_arc():
    current = math.radians(170.0)
    target = math.radians(-170.0)
    halfway = approach_angle(current, target, 0.5)
    # 170 -> 180 wraps to -180 and stays on the back side
    assert abs(abs(math.degrees(halfway)) - 180.0) < 1e-6
