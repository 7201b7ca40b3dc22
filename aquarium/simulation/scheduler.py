"""Single per-frame entry point driving loads, motion and animation."""

from __future__ import annotations

import logging
from typing import List, Optional

from ..assets.scheduler import LoadScheduler
from ..entities.creature import RenderFrame
from ..systems import telemetry
from .arena import CreatureArena

logger = logging.getLogger("aquarium.simulation")


class FrameScheduler:
    """Deliver finished loads, then tick every creature, once per frame.

    Creatures may come and go between frames; the arena is iterated fresh on
    every call so no creature is stepped twice in one frame.
    """

    def __init__(
        self,
        arena: CreatureArena,
        loads: LoadScheduler,
        *,
        max_delta: Optional[float] = None,
    ) -> None:
        self.arena = arena
        self.loads = loads
        self.max_delta = max_delta if max_delta and max_delta > 0 else None
        self.frame_count = 0

    def frame(self, delta: float) -> List[RenderFrame]:
        if delta < 0:
            raise ValueError(f"delta must be >= 0, got {delta}")
        if self.max_delta is not None and delta > self.max_delta:
            logger.debug("Clamping frame delta %.4f to %.4f", delta, self.max_delta)
            delta = self.max_delta

        delivered = self.loads.pump()
        if delivered:
            logger.debug("Delivered %d asset load(s) on frame %d", delivered, self.frame_count)

        frames = self.arena.tick(delta)
        self.frame_count += 1
        for creature in self.arena.creatures():
            if creature.populated:
                telemetry.motion_sample(tick=self.frame_count, creature=creature)
        return frames
