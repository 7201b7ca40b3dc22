"""pygame drawing of creature render frames."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

import pygame
from pygame.math import Vector3

from ..config import settings
from ..entities.creature import RenderFrame
from ..world.viewport import ViewportModel

# Heading of the model's forward axis, measured like creature yaw.
_MODEL_FACING = {"zy": 0.0, "xy": math.pi / 2.0}
_DEPTH_SHADE = 0.18
_MIN_SHADE = 0.45


def bend_outline(frame: RenderFrame) -> List[Tuple[float, float]]:
    """Apply the skeletal pose to the outline in (forward, up) space.

    Every point behind a joint pivot rotates about that pivot by the joint
    angle, so a tail joint swings everything aft of it.
    """

    points = list(frame.scene.outline)
    pose = frame.pose or {}
    for joint, pivot in sorted(frame.scene.joints.items(), key=lambda item: -item[1]):
        angle = pose.get(joint, 0.0)
        if angle == 0.0:
            continue
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        bent = []
        for forward, up in points:
            if forward >= pivot:
                bent.append((forward, up))
                continue
            dx = forward - pivot
            bent.append((pivot + dx * cos_a - up * sin_a, dx * sin_a + up * cos_a))
        points = bent
    return points


def project_frame(frame: RenderFrame, viewport: ViewportModel) -> List[Tuple[int, int]]:
    """Screen-space polygon for one creature."""

    scene = frame.scene
    heading = frame.yaw - _MODEL_FACING.get(scene.profile_plane, 0.0)
    cos_h, sin_h = math.cos(heading), math.sin(heading)
    polygon = []
    for forward, up in bend_outline(frame):
        if scene.profile_plane == "zy":
            local = Vector3(0.0, up, forward)
        else:
            local = Vector3(forward, up, 0.0)
        local = (local + scene.origin_offset).elementwise() * frame.scale
        world_x = frame.position.x + local.x * cos_h + local.z * sin_h
        world_y = frame.position.y + local.y
        polygon.append(viewport.world_to_screen((world_x, world_y)))
    return polygon


def depth_shade(color: Sequence[int], depth: float) -> Tuple[int, int, int]:
    factor = max(_MIN_SHADE, min(1.0, 1.0 + depth * _DEPTH_SHADE))
    return tuple(int(channel * factor) for channel in color)  # type: ignore[return-value]


class Renderer:
    def __init__(self, viewport: ViewportModel) -> None:
        self.viewport = viewport

    def draw(self, surface: pygame.Surface, frames: Iterable[RenderFrame]) -> None:
        self._draw_water(surface)
        for frame in sorted(frames, key=lambda item: item.position.z):
            polygon = project_frame(frame, self.viewport)
            if len(polygon) < 3:
                continue
            color = depth_shade(frame.scene.color, frame.position.z)
            pygame.draw.polygon(surface, color, polygon)
            pygame.draw.polygon(surface, depth_shade(settings.WHITE, frame.position.z), polygon, 1)

    def _draw_water(self, surface: pygame.Surface) -> None:
        rect = surface.get_rect()
        height = rect.height
        top, bottom = settings.WATER, settings.WATER_DEEP
        for row in range(height):
            ratio = row / max(1, height - 1)
            color = tuple(int(top[idx] + (bottom[idx] - top[idx]) * ratio) for idx in range(3))
            pygame.draw.line(surface, color, (rect.left, rect.top + row), (rect.right, rect.top + row))
