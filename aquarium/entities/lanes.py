"""Lane presets that spread simultaneous creatures over the tank."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple

from ..config.constants import START_SIDES


@dataclass(frozen=True)
class LanePreset:
    """Vertical band, depth layer and motion defaults for one creature slot."""

    vertical_fraction: float
    depth_layer: float
    speed: float
    start_side: str
    spawn_fraction: float
    size: float = 1.0

    def __post_init__(self) -> None:
        if not -1.0 <= self.vertical_fraction <= 1.0:
            raise ValueError(f"vertical_fraction must be within [-1, 1], got {self.vertical_fraction}")
        if self.start_side not in START_SIDES:
            raise ValueError(f"start_side must be one of {list(START_SIDES)}, got {self.start_side}")
        if self.speed < 0:
            raise ValueError(f"speed must be non-negative, got {self.speed}")
        if self.size <= 0:
            raise ValueError(f"size must be positive, got {self.size}")


def lane_height(viewport_height: float, vertical_fraction: float) -> float:
    """World y of a lane centre; fractions are of the half height."""

    return (viewport_height / 2.0) * vertical_fraction


DEFAULT_LANES: Tuple[LanePreset, ...] = (
    LanePreset(vertical_fraction=0.35, depth_layer=0.0, speed=1.6, start_side="left", spawn_fraction=0.0, size=1.0),
    LanePreset(vertical_fraction=-0.3, depth_layer=-0.5, speed=1.2, start_side="right", spawn_fraction=1.0, size=0.85),
    LanePreset(vertical_fraction=0.0, depth_layer=-1.0, speed=1.0, start_side="middle", spawn_fraction=0.5, size=0.7),
    LanePreset(vertical_fraction=-0.65, depth_layer=-1.5, speed=1.4, start_side="middle", spawn_fraction=0.25, size=0.75),
    LanePreset(vertical_fraction=0.7, depth_layer=-2.0, speed=0.9, start_side="middle", spawn_fraction=0.8, size=0.6),
)


class LaneAllocator:
    """Assign presets round-robin by creature index.

    Assignment is a pure function of the index; creatures beyond the preset
    count reuse lanes and may overlap.
    """

    def __init__(self, presets: Sequence[LanePreset] = DEFAULT_LANES) -> None:
        if not presets:
            raise ValueError("LaneAllocator needs at least one lane preset")
        self.presets: Tuple[LanePreset, ...] = tuple(presets)

    def assign(self, index: int, total: int | None = None) -> LanePreset:
        # ``total`` is accepted for callers that know the population size; the
        # assignment itself only depends on the index.
        return self.presets[index % len(self.presets)]

    def __len__(self) -> int:
        return len(self.presets)


def _preset_from_mapping(entry: Mapping[str, Any]) -> LanePreset:
    return LanePreset(
        vertical_fraction=float(entry.get("vertical_fraction", 0.0)),
        depth_layer=float(entry.get("depth_layer", 0.0)),
        speed=float(entry.get("speed", 1.0)),
        start_side=str(entry.get("start_side", "middle")).lower(),
        spawn_fraction=float(entry.get("spawn_fraction", 0.5)),
        size=float(entry.get("size", 1.0)),
    )


def parse_lane_presets(data: Any) -> List[LanePreset]:
    """Build presets from a decoded YAML list of mappings."""

    if not isinstance(data, list) or not all(isinstance(entry, Mapping) for entry in data):
        raise ValueError("lanes must be a list of mappings")
    if not data:
        raise ValueError("lanes must not be empty")
    return [_preset_from_mapping(entry) for entry in data]
