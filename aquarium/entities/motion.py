"""Per-creature placement and locomotion.

Creatures swim along a horizontal lane, slow down as their leading edge
approaches a side wall, turn around at the wall and bob on a slowly drifting
vertical wave. Every step is driven by an elapsed-time delta and uses
frame-rate independent smoothing, so the same wall-clock time produces the
same motion regardless of how it is split into frames.
"""

from __future__ import annotations

import logging
import math
from typing import Tuple

from ..config.constants import EASE_FLOOR, EASE_RANGE, PLACEMENT_INSET
from ..utils.math_utils import approach_angle, clamp, clamp01, damping_factor, lerp
from ..world.viewport import Viewport
from .creature import Creature, Placement
from .lanes import lane_height

logger = logging.getLogger("aquarium.motion")


def bounds(creature: Creature, viewport: Viewport) -> Tuple[float, float]:
    """Horizontal range the creature's centre may occupy."""

    margin = creature.params.margin
    half_width = creature.normalization.half_width_world if creature.normalization else 0.0
    left = -viewport.half_width + margin + half_width
    right = viewport.half_width - margin - half_width
    return left, right


def lane_y(creature: Creature, viewport: Viewport) -> float:
    return lane_height(viewport.height, creature.params.vertical_fraction)


def edge_distance(x: float, direction: int, left: float, right: float) -> float:
    """Signed distance from the leading edge to the wall being approached."""

    if direction > 0:
        return right - x
    return x - left


def ease_factor(distance: float, turn_zone: float) -> float:
    if turn_zone <= 0.0:
        return 1.0 if distance > 0.0 else 0.0
    return clamp01(distance / turn_zone)


def effective_speed(base_speed: float, leading: float, turn_zone: float, trailing: float | None = None) -> float:
    """Speed after wall easing.

    ``leading`` is the distance still to travel before the wall ahead. The
    optional ``trailing`` distance from the wall just left (``ease_departure``)
    lets speed ramp back up after a turn instead of jumping to full speed. At
    or past a wall the multiplier bottoms out at the floor.
    """

    distance = leading if trailing is None else min(leading, trailing)
    ease = ease_factor(distance, turn_zone)
    return base_speed * (EASE_FLOOR + EASE_RANGE * ease)


def facing_yaw(initial_yaw_deg: float, direction: int) -> float:
    return math.radians(initial_yaw_deg if direction > 0 else -initial_yaw_deg)


def place(creature: Creature, viewport: Viewport) -> None:
    """UNPLACED -> PLACED, using the lane and start side."""

    params = creature.params
    left, right = bounds(creature, viewport)
    if params.start_side == "left":
        x, direction = left + PLACEMENT_INSET, 1
    elif params.start_side == "right":
        x, direction = right - PLACEMENT_INSET, -1
    else:
        x, direction = lerp(left, right, clamp01(params.spawn_fraction)), 1

    creature.direction = direction
    creature.position.x = x
    creature.position.y = lane_y(creature, viewport)
    creature.position.z = params.depth_layer
    creature.yaw = facing_yaw(params.initial_yaw_deg, direction)
    creature.target_yaw = creature.yaw

    base_scale = creature.normalization.base_scale if creature.normalization else 1.0
    creature.scale.update(base_scale, base_scale, base_scale)
    if params.flip_on_turn:
        creature.scale.x = direction * base_scale
    creature.placement = Placement.PLACED
    logger.debug(
        "Placed %s at x=%.3f facing %+d (lane y=%.3f, depth %.2f)",
        creature.creature_id,
        x,
        direction,
        creature.position.y,
        params.depth_layer,
    )


def update_drift(creature: Creature, delta: float) -> None:
    """Retarget the wave on a random interval and ease toward the targets."""

    wave = creature.wave
    rng = creature.rng
    wave.change_timer += delta
    if wave.change_timer > wave.next_change_in:
        wave.change_timer = 0.0
        wave.next_change_in = rng.uniform(*wave.interval_range)
        wave.target_amplitude = rng.uniform(*wave.amplitude_range)
        wave.target_frequency = rng.uniform(*wave.frequency_range)

    blend = damping_factor(delta)
    wave.current_amplitude = lerp(wave.current_amplitude, wave.target_amplitude, blend)
    wave.current_frequency = lerp(wave.current_frequency, wave.target_frequency, blend)


def _turn(creature: Creature) -> None:
    creature.direction = -creature.direction
    if creature.params.flip_on_turn:
        creature.scale.x = math.copysign(abs(creature.scale.x), creature.direction)
    else:
        creature.target_yaw = facing_yaw(creature.params.initial_yaw_deg, creature.direction)


def step(creature: Creature, viewport: Viewport, delta: float) -> bool:
    """Advance one creature by ``delta`` seconds.

    Returns ``True`` when the creature is placed and produced a transform.
    Creatures whose asset has not arrived are left untouched. The tick that
    places a creature only places it; motion starts on the next tick.
    """

    if delta < 0:
        raise ValueError(f"delta must be >= 0, got {delta}")
    if creature.released or not creature.populated:
        return False
    if creature.placement is Placement.UNPLACED:
        place(creature, viewport)
        return True

    params = creature.params
    creature.elapsed += delta

    update_drift(creature, delta)

    left, right = bounds(creature, viewport)
    x = creature.position.x
    leading = edge_distance(x, creature.direction, left, right)
    trailing = edge_distance(x, -creature.direction, left, right) if params.ease_departure else None
    speed = effective_speed(params.speed, leading, params.turn_zone, trailing)
    creature.effective_speed = speed

    x += creature.direction * speed * delta
    if params.boundary_mode == "clamp":
        x = clamp(x, left, right) if left <= right else (left + right) / 2.0
    creature.position.x = x

    if edge_distance(x, creature.direction, left, right) <= 0.0:
        _turn(creature)

    if not params.flip_on_turn:
        creature.yaw = approach_angle(creature.yaw, creature.target_yaw, damping_factor(delta))

    base_y = lane_y(creature, viewport)
    if params.bob_amplitude > 0.0:
        wave = creature.wave
        angle = math.tau * wave.current_frequency * creature.elapsed + wave.phase
        creature.position.y = base_y + math.sin(angle) * wave.current_amplitude
    else:
        creature.position.y = base_y

    creature.position.z = params.depth_layer
    return True
