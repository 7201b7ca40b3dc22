"""Scale normalisation for assets authored in unknown units."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from pygame.math import Vector3

from ..assets.types import BoundingBox, SceneGraph

logger = logging.getLogger("aquarium.simulation")

_FIT_SHRINK = 0.95


@dataclass(frozen=True)
class Normalization:
    base_scale: float
    half_width_world: float
    center: Tuple[float, float, float]
    max_dim: float


def _finite_size(bounds: Optional[BoundingBox]) -> Tuple[float, float, float]:
    if bounds is None:
        return (0.0, 0.0, 0.0)
    return tuple(size if math.isfinite(size) else 0.0 for size in bounds.size)  # type: ignore[return-value]


def normalize(
    scene: SceneGraph,
    bounds: Optional[BoundingBox],
    *,
    viewport_height: float,
    height_ratio: float,
    size_multiplier: float = 1.0,
    max_half_width: Optional[float] = None,
) -> Normalization:
    """Re-centre ``scene`` on its bounding box and size it for the viewport.

    The largest box dimension maps to ``viewport_height * height_ratio *
    size_multiplier`` world units. A missing or zero-volume box falls back to
    a divisor of 1 instead of failing. When ``max_half_width`` is given and
    the creature would be too wide to ever reach a wall, the scale shrinks so
    the half width lands just inside the limit.
    """

    size_x, size_y, size_z = _finite_size(bounds)
    if bounds is not None and all(math.isfinite(value) for value in bounds.center):
        center = bounds.center
    else:
        center = (0.0, 0.0, 0.0)
    scene.origin_offset = -Vector3(center)

    max_dim = max(size_x, size_y, size_z)
    if max_dim <= 0.0:
        max_dim = 1.0

    scale = (viewport_height * height_ratio * size_multiplier) / max_dim
    half_width = (size_x * scale) / 2.0

    if max_half_width is not None and half_width >= max_half_width and size_x > 0.0:
        fitted = max(0.0, max_half_width) * _FIT_SHRINK
        logger.warning(
            "Asset %s is %.2f units wide but only %.2f fit; shrinking",
            scene.name,
            half_width * 2.0,
            fitted * 2.0,
        )
        scale = (fitted * 2.0) / size_x
        half_width = fitted

    return Normalization(base_scale=scale, half_width_world=half_width, center=center, max_dim=max_dim)
