"""Orthographic viewport bookkeeping in world units."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple

from ..config.constants import DEFAULTS


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    @property
    def half_width(self) -> float:
        return self.width / 2.0

    @property
    def half_height(self) -> float:
        return self.height / 2.0


ResizeListener = Callable[[Viewport], None]


class ViewportModel:
    """Keeps a fixed world height and derives the width from the aspect ratio."""

    def __init__(
        self,
        pixel_width: int,
        pixel_height: int,
        world_height: float = DEFAULTS["WORLD_HEIGHT"],
    ) -> None:
        if world_height <= 0:
            raise ValueError(f"world_height must be positive, got {world_height}")
        self.world_height = float(world_height)
        self.pixel_width = 1
        self.pixel_height = 1
        self._listeners: List[ResizeListener] = []
        self._current = Viewport(self.world_height, self.world_height)
        self._apply_size(pixel_width, pixel_height)

    @property
    def current(self) -> Viewport:
        return self._current

    @property
    def pixels_per_unit(self) -> float:
        return self.pixel_height / self.world_height

    def add_listener(self, listener: ResizeListener) -> None:
        self._listeners.append(listener)

    def resize(self, pixel_width: int, pixel_height: int) -> Viewport:
        if (max(1, pixel_width), max(1, pixel_height)) == (self.pixel_width, self.pixel_height):
            return self._current
        self._apply_size(pixel_width, pixel_height)
        for listener in list(self._listeners):
            listener(self._current)
        return self._current

    def _apply_size(self, pixel_width: int, pixel_height: int) -> None:
        self.pixel_width = max(1, int(pixel_width))
        self.pixel_height = max(1, int(pixel_height))
        aspect = self.pixel_width / self.pixel_height
        self._current = Viewport(width=self.world_height * aspect, height=self.world_height)

    # ------------------------------------------------------------------
    # Coordinate transforms
    # ------------------------------------------------------------------
    def world_to_screen(self, position: Tuple[float, float]) -> Tuple[int, int]:
        scale = self.pixels_per_unit
        screen_x = int(round(self.pixel_width / 2 + position[0] * scale))
        screen_y = int(round(self.pixel_height / 2 - position[1] * scale))
        return screen_x, screen_y

