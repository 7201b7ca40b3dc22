"""Data produced by asset loaders and consumed by the creature pipeline."""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from pygame.math import Vector3

Color = Tuple[int, int, int]
Keyframe = Tuple[float, float]

PROFILE_PLANES = ("xy", "zy")


class LoadError(Exception):
    """Raised when an asset reference cannot be fetched or decoded."""

    def __init__(self, ref: object, reason: str) -> None:
        super().__init__(f"Unable to load asset {ref!r}: {reason}")
        self.ref = ref
        self.reason = reason


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned extents of an asset in its own (unknown) units."""

    min: Tuple[float, float, float]
    max: Tuple[float, float, float]

    @property
    def size(self) -> Tuple[float, float, float]:
        return tuple(max(0.0, hi - lo) for lo, hi in zip(self.min, self.max))  # type: ignore[return-value]

    @property
    def center(self) -> Tuple[float, float, float]:
        return tuple((lo + hi) / 2.0 for lo, hi in zip(self.min, self.max))  # type: ignore[return-value]

    @classmethod
    def from_points(cls, points: Sequence[Sequence[float]]) -> "BoundingBox":
        if not points:
            return cls((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))
        xs, ys, zs = zip(*((float(p[0]), float(p[1]), float(p[2])) for p in points))
        return cls((min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs)))


@dataclass
class SceneGraph:
    """Drawable side profile of a creature plus its joint pivots.

    ``outline`` holds (forward, up) pairs lying in ``profile_plane`` of the
    model: ``"xy"`` for creatures modelled facing +x, ``"zy"`` for creatures
    modelled facing +z. ``joints`` maps a joint name to the forward coordinate
    behind which the outline bends with that joint.
    """

    name: str
    outline: List[Tuple[float, float]] = field(default_factory=list)
    joints: Dict[str, float] = field(default_factory=dict)
    color: Color = (255, 160, 60)
    profile_plane: str = "xy"
    origin_offset: Vector3 = field(default_factory=Vector3)

    def model_points(self) -> List[Vector3]:
        """Outline as 3D model-space points, re-centred by ``origin_offset``."""

        points = []
        for forward, up in self.outline:
            if self.profile_plane == "zy":
                point = Vector3(0.0, up, forward)
            else:
                point = Vector3(forward, up, 0.0)
            points.append(point + self.origin_offset)
        return points

    def clone(self) -> "SceneGraph":
        return SceneGraph(
            name=self.name,
            outline=list(self.outline),
            joints=dict(self.joints),
            color=self.color,
            profile_plane=self.profile_plane,
            origin_offset=Vector3(self.origin_offset),
        )


@dataclass(frozen=True)
class AnimationClip:
    """Looping keyframe clip driving joint angles (degrees in, radians out)."""

    name: str
    duration: float
    tracks: Mapping[str, Tuple[Keyframe, ...]] = field(default_factory=dict)

    def sample(self, time: float) -> Dict[str, float]:
        if self.duration > 0.0:
            local = time % self.duration
        else:
            local = 0.0
        return {joint: math.radians(_sample_track(keys, local)) for joint, keys in self.tracks.items()}


def _sample_track(keys: Sequence[Keyframe], time: float) -> float:
    if not keys:
        return 0.0
    times = [key[0] for key in keys]
    index = bisect.bisect_right(times, time)
    if index <= 0:
        return keys[0][1]
    if index >= len(keys):
        return keys[-1][1]
    (t0, v0), (t1, v1) = keys[index - 1], keys[index]
    span = t1 - t0
    if span <= 0.0:
        return v1
    return v0 + (v1 - v0) * (time - t0) / span


@dataclass
class LoadedAsset:
    """Result of a successful load: scene graph, extents and clips."""

    scene: SceneGraph
    bounds: Optional[BoundingBox]
    clips: List[AnimationClip] = field(default_factory=list)

    def clone(self) -> "LoadedAsset":
        return LoadedAsset(scene=self.scene.clone(), bounds=self.bounds, clips=list(self.clips))
