"""Slot + generation arena owning every creature in the tank.

Each asset load is tagged with the generation of the slot that requested it.
Reconfiguring or removing a creature bumps the generation, so a load that
finishes afterwards no longer matches and is dropped on arrival. This is the
only cancellation mechanism; in-flight loads are never interrupted.
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from ..assets.scheduler import LoadOutcome, LoadScheduler
from ..assets.types import LoadedAsset
from ..config import settings
from ..entities import motion
from ..entities.animation import AnimationBlender
from ..entities.creature import Creature, CreatureConfig, Placement, RenderFrame, resolve_params
from ..entities.lanes import LaneAllocator
from ..entities.normalization import normalize
from ..systems import telemetry
from ..utils.math_utils import clamp
from ..world.viewport import Viewport, ViewportModel

logger = logging.getLogger("aquarium.simulation")

RngFactory = Callable[[int, int], random.Random]


@dataclass(frozen=True)
class CreatureHandle:
    slot: int
    generation: int


@dataclass
class _Slot:
    generation: int = 0
    creature: Optional[Creature] = None


def seeded_rng_factory(seed: int) -> RngFactory:
    """Random sources keyed by creature identity, stable across runs."""

    def factory(slot: int, generation: int) -> random.Random:
        return random.Random(f"{seed}:{slot}:{generation}")

    return factory


class CreatureArena:
    def __init__(
        self,
        viewport: ViewportModel,
        loads: LoadScheduler,
        *,
        lanes: Optional[LaneAllocator] = None,
        defaults: Optional[settings.AquariumSettings] = None,
        rng_factory: Optional[RngFactory] = None,
    ) -> None:
        self.viewport = viewport
        self.loads = loads
        self.lanes = lanes or LaneAllocator()
        self.defaults = defaults or settings.current_settings()
        self.rng_factory = rng_factory or seeded_rng_factory(self.defaults.SEED)
        self._slots: List[_Slot] = []
        self._free: List[int] = []
        viewport.add_listener(self.on_resize)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def spawn(self, config: CreatureConfig) -> CreatureHandle:
        if self._free:
            index = self._free.pop(0)
        else:
            index = len(self._slots)
            self._slots.append(_Slot())
        slot = self._slots[index]
        slot.creature = self._create(index, slot.generation, config)
        handle = CreatureHandle(index, slot.generation)
        logger.info("Spawned creature %d:%d from %r", index, slot.generation, config.source)
        telemetry.log_event("spawn", f"{index}:{slot.generation}", {"source": str(config.source)})
        self._request_load(handle, config)
        return handle

    def reconfigure(self, handle: CreatureHandle, config: CreatureConfig) -> CreatureHandle:
        """Replace a creature's configuration and restart its load cycle."""

        slot = self._live_slot(handle)
        slot.creature.teardown()
        telemetry.forget_creature(f"{handle.slot}:{handle.generation}")
        slot.generation += 1
        slot.creature = self._create(handle.slot, slot.generation, config)
        new_handle = CreatureHandle(handle.slot, slot.generation)
        logger.info("Reconfigured creature %d -> generation %d (%r)", handle.slot, slot.generation, config.source)
        telemetry.log_event("reconfigure", f"{handle.slot}:{slot.generation}", {"source": str(config.source)})
        self._request_load(new_handle, config)
        return new_handle

    def remove(self, handle: CreatureHandle) -> None:
        slot = self._live_slot(handle)
        slot.creature.teardown()
        slot.creature = None
        telemetry.forget_creature(f"{handle.slot}:{handle.generation}")
        slot.generation += 1
        self._free.append(handle.slot)
        logger.info("Removed creature %d:%d", handle.slot, handle.generation)
        telemetry.log_event("remove", f"{handle.slot}:{handle.generation}")

    def clear(self) -> None:
        for handle in self.handles():
            self.remove(handle)

    def get(self, handle: CreatureHandle) -> Optional[Creature]:
        if not 0 <= handle.slot < len(self._slots):
            return None
        slot = self._slots[handle.slot]
        if slot.generation != handle.generation:
            return None
        return slot.creature

    def handles(self) -> List[CreatureHandle]:
        return [
            CreatureHandle(index, slot.generation)
            for index, slot in enumerate(self._slots)
            if slot.creature is not None
        ]

    def creatures(self) -> Iterator[Creature]:
        for slot in self._slots:
            if slot.creature is not None:
                yield slot.creature

    def __len__(self) -> int:
        return sum(1 for _ in self.creatures())

    def _live_slot(self, handle: CreatureHandle) -> _Slot:
        if self.get(handle) is None:
            raise KeyError(f"Stale or unknown creature handle {handle}")
        return self._slots[handle.slot]

    def _create(self, index: int, generation: int, config: CreatureConfig) -> Creature:
        lane = self.lanes.assign(index, len(self._slots))
        params = resolve_params(config, lane, self.defaults)
        return Creature.create(index, generation, config, params, self.rng_factory(index, generation))

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _request_load(self, handle: CreatureHandle, config: CreatureConfig) -> None:
        if config.source is None:
            logger.warning("Creature %d:%d has no source; it will stay unplaced", handle.slot, handle.generation)
            return
        self.loads.submit(config.source, lambda outcome: self._on_loaded(handle, outcome))

    def _on_loaded(self, handle: CreatureHandle, outcome: LoadOutcome) -> None:
        creature = self.get(handle)
        if creature is None:
            logger.debug("Discarding stale load of %r for creature %d:%d", outcome.ref, handle.slot, handle.generation)
            return
        if not outcome.ok:
            logger.info("Creature %s stays unplaced after failed load: %s", creature.creature_id, outcome.error)
            telemetry.log_event("load_failed", creature.creature_id, {"error": str(outcome.error)})
            return
        self._populate(creature, outcome.asset)

    def _populate(self, creature: Creature, asset: LoadedAsset) -> None:
        params = creature.params
        viewport = self.viewport.current
        normalization = normalize(
            asset.scene,
            asset.bounds,
            viewport_height=viewport.height,
            height_ratio=params.height_ratio,
            size_multiplier=params.size_multiplier,
            max_half_width=viewport.half_width - params.margin,
        )
        blender = AnimationBlender(
            asset.clips,
            name=params.animation_name,
            rate=params.animation_speed,
            fade_seconds=params.fade_seconds,
        )
        creature.populate(asset.scene, asset.bounds, normalization, blender)
        logger.info(
            "Creature %s populated: scale %.3f, half width %.3f, clip %s",
            creature.creature_id,
            normalization.base_scale,
            normalization.half_width_world,
            blender.clip_name or "none (motion only)",
        )
        telemetry.log_event(
            "populated",
            creature.creature_id,
            {"scale": normalization.base_scale, "clip": blender.clip_name},
        )

    # ------------------------------------------------------------------
    # Per frame
    # ------------------------------------------------------------------
    def tick(self, delta: float) -> List[RenderFrame]:
        """Step every creature once and collect the render frames."""

        viewport = self.viewport.current
        frames: List[RenderFrame] = []
        for creature in self.creatures():
            if not motion.step(creature, viewport, delta):
                continue
            if creature.animation is not None:
                creature.animation.advance(delta)
            frame = creature.render_frame()
            if frame is not None:
                frames.append(frame)
        return frames

    def on_resize(self, viewport: Viewport) -> None:
        """Re-fit populated creatures to a new viewport size."""

        for creature in self.creatures():
            if not creature.populated:
                continue
            params = creature.params
            creature.normalization = normalize(
                creature.scene,
                creature.bounds,
                viewport_height=viewport.height,
                height_ratio=params.height_ratio,
                size_multiplier=params.size_multiplier,
                max_half_width=viewport.half_width - params.margin,
            )
            if creature.placement is not Placement.PLACED:
                continue
            base_scale = creature.normalization.base_scale
            sign = math.copysign(1.0, creature.scale.x) if params.flip_on_turn else 1.0
            creature.scale.update(sign * base_scale, base_scale, base_scale)
            left, right = motion.bounds(creature, viewport)
            creature.position.x = clamp(creature.position.x, left, right)
        logger.debug("Viewport resized to %.2f x %.2f world units", viewport.width, viewport.height)
