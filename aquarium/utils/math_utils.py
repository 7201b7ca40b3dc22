"""Scalar and angular helpers shared by the motion and animation code.

Everything here is total: helpers never divide by zero and never return NaN
for finite input, so per-tick code can call them without guarding.
"""

from __future__ import annotations

import math

from ..config.constants import DAMPING_BASE


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor (typically 0-1)

    Returns:
        Interpolated value: a + (b - a) * t
    """
    return a + (b - a) * t


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def clamp01(value: float) -> float:
    """Clamp value to the unit interval; NaN collapses to 0."""
    if value != value:
        return 0.0
    return clamp(value, 0.0, 1.0)


def damping_factor(delta: float) -> float:
    """Blend factor for frame-rate independent exponential smoothing.

    ``lerp(current, target, damping_factor(dt))`` closes the same share of the
    gap per second regardless of how the second is split into frames, and is
    exactly zero for ``dt == 0``.

    Args:
        delta: Elapsed seconds, expected to be >= 0

    Returns:
        ``1 - 0.001 ** delta`` in [0, 1)
    """
    if delta <= 0.0:
        return 0.0
    return 1.0 - DAMPING_BASE ** delta


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into [-pi, pi)."""
    return (angle + math.pi) % math.tau - math.pi


def shortest_angle_delta(current: float, target: float) -> float:
    """Signed rotation from ``current`` to ``target`` along the shorter arc.

    The magnitude never exceeds pi. An exact half turn resolves to -pi.
    """
    return wrap_angle(target - current)


def approach_angle(current: float, target: float, t: float) -> float:
    """Move ``current`` toward ``target`` by fraction ``t`` of the shorter arc."""
    return wrap_angle(current + shortest_angle_delta(current, target) * t)


__all__ = [
    "approach_angle",
    "clamp",
    "clamp01",
    "damping_factor",
    "lerp",
    "shortest_angle_delta",
    "wrap_angle",
]
