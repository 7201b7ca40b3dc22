"""Tests for outline projection and drawing."""

from __future__ import annotations

import math

import pytest

pygame = pytest.importorskip("pygame")
from pygame.math import Vector3  # noqa: E402

from aquarium.assets.types import SceneGraph  # noqa: E402
from aquarium.entities.creature import RenderFrame  # noqa: E402
from aquarium.rendering.renderer import Renderer, bend_outline, depth_shade, project_frame  # noqa: E402
from aquarium.world.viewport import ViewportModel  # noqa: E402


def _frame(plane="xy", yaw=math.pi / 2, scale_x=1.0, pose=None, z=0.0):
    scene = SceneGraph(name="t", outline=[(1.0, 0.0), (0.0, 0.5), (-1.0, 0.0)], joints={"tail": -0.5}, profile_plane=plane)
    return RenderFrame(
        creature_id="0:0",
        position=Vector3(0.0, 0.0, z),
        yaw=yaw,
        scale=Vector3(scale_x, 1.0, 1.0),
        pose=pose,
        scene=scene,
    )


def test_facing_right_puts_nose_on_the_right():
    viewport = ViewportModel(1000, 1000, world_height=10.0)
    for plane in ("xy", "zy"):
        nose, _, tail = project_frame(_frame(plane), viewport)
        assert nose[0] > tail[0]


def test_facing_left_mirrors_the_outline():
    viewport = ViewportModel(1000, 1000, world_height=10.0)
    nose, _, tail = project_frame(_frame(yaw=-math.pi / 2), viewport)
    assert nose[0] < tail[0]
    flipped_nose, _, flipped_tail = project_frame(_frame(scale_x=-1.0), viewport)
    assert flipped_nose[0] < flipped_tail[0]


def test_pose_bends_points_behind_the_pivot():
    straight = bend_outline(_frame())
    bent = bend_outline(_frame(pose={"tail": math.pi / 2}))
    assert bent[0] == straight[0]
    assert bent[2][1] == pytest.approx(-0.5)


def test_depth_shade_darkens_far_layers():
    assert depth_shade((200, 100, 50), 0.0) == (200, 100, 50)
    assert depth_shade((200, 100, 50), -2.0)[0] < 200


def test_draw_sorts_and_paints():
    viewport = ViewportModel(200, 100, world_height=10.0)
    surface = pygame.Surface((200, 100))
    Renderer(viewport).draw(surface, [_frame(z=-1.0), _frame(z=0.0)])
    assert surface.get_at((100, 50))[:3] != (0, 0, 0)
