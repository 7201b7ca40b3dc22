"""Shared builders for creature and arena tests."""

from __future__ import annotations

import random
from concurrent.futures import Future
from typing import Callable, Dict, List, Optional, Sequence

from aquarium.assets.types import AnimationClip, BoundingBox, LoadedAsset, LoadError, SceneGraph
from aquarium.config.settings import AquariumSettings
from aquarium.entities.animation import AnimationBlender
from aquarium.entities.creature import Creature, CreatureConfig, resolve_params
from aquarium.entities.lanes import LanePreset
from aquarium.entities.normalization import Normalization, normalize
from aquarium.world.viewport import Viewport

SETTINGS = AquariumSettings(FLIP_ON_TURN=False, BOUNDARY_MODE="overshoot")


def box_scene(name: str = "box", length: float = 2.0, height: float = 1.0) -> SceneGraph:
    half_l, half_h = length / 2.0, height / 2.0
    return SceneGraph(
        name=name,
        outline=[(half_l, 0.0), (0.0, half_h), (-half_l, 0.0), (0.0, -half_h)],
        joints={"tail": -half_l / 2.0},
    )


def box_bounds(length: float = 2.0, height: float = 1.0, depth: float = 0.5) -> BoundingBox:
    return BoundingBox((-length / 2, -height / 2, -depth / 2), (length / 2, height / 2, depth / 2))


def wiggle_clip(name: str = "Swim_Loop", duration: float = 1.0) -> AnimationClip:
    return AnimationClip(name=name, duration=duration, tracks={"tail": ((0.0, -10.0), (duration / 2, 10.0), (duration, -10.0))})


def make_asset(clips: Sequence[AnimationClip] = ()) -> LoadedAsset:
    return LoadedAsset(scene=box_scene(), bounds=box_bounds(), clips=list(clips))


def make_creature(
    config: Optional[CreatureConfig] = None,
    *,
    lane: Optional[LanePreset] = None,
    clips: Sequence[AnimationClip] = (),
    normalization: Optional[Normalization] = None,
    viewport: Viewport = Viewport(16.0, 9.0),
    seed: int = 7,
    settings_override: AquariumSettings = SETTINGS,
) -> Creature:
    """Populated but unplaced creature, ready for ``motion.step``."""

    config = config or CreatureConfig(source="box")
    params = resolve_params(config, lane, settings_override)
    creature = Creature.create(0, 0, config, params, random.Random(seed))
    asset = make_asset(clips)
    if normalization is None:
        normalization = normalize(
            asset.scene,
            asset.bounds,
            viewport_height=viewport.height,
            height_ratio=params.height_ratio,
            size_multiplier=params.size_multiplier,
        )
    blender = AnimationBlender(asset.clips, name=params.animation_name, rate=params.animation_speed, fade_seconds=params.fade_seconds)
    creature.populate(asset.scene, asset.bounds, normalization, blender)
    return creature


class FakeLoader:
    """Loader returning canned assets; unknown refs raise ``LoadError``."""

    def __init__(self, assets: Optional[Dict[str, LoadedAsset]] = None) -> None:
        self.assets = assets or {}
        self.calls: List[object] = []

    def load(self, ref: object) -> LoadedAsset:
        self.calls.append(ref)
        asset = self.assets.get(str(ref))
        if asset is None:
            raise LoadError(ref, "unknown test asset")
        return asset.clone()


class ImmediateExecutor:
    """Runs submitted work synchronously on the calling thread."""

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as error:  # noqa: BLE001 - mirrors executor semantics
            future.set_exception(error)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        return None


class DeferredExecutor:
    """Holds submitted work until the test releases it."""

    def __init__(self) -> None:
        self.jobs: List[tuple[Future, Callable, tuple]] = []

    def submit(self, fn: Callable, *args, **kwargs) -> Future:
        future: Future = Future()
        self.jobs.append((future, fn, args))
        return future

    def run(self, index: int) -> None:
        future, fn, args = self.jobs[index]
        try:
            future.set_result(fn(*args))
        except Exception as error:  # noqa: BLE001 - mirrors executor semantics
            future.set_exception(error)

    def run_all(self) -> None:
        for index in range(len(self.jobs)):
            if not self.jobs[index][0].done():
                self.run(index)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        return None
