"""Tank layouts: which creatures to spawn and on which lanes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List, Mapping, Tuple

import yaml

from ..entities.creature import CreatureConfig
from ..entities.lanes import DEFAULT_LANES, LanePreset, parse_lane_presets

logger = logging.getLogger("aquarium.simulation")


@dataclass(frozen=True)
class TankLayout:
    creatures: List[CreatureConfig] = field(default_factory=list)
    lanes: Tuple[LanePreset, ...] = DEFAULT_LANES


def _merge(base: CreatureConfig, overrides: CreatureConfig) -> CreatureConfig:
    changed = {f.name: getattr(overrides, f.name) for f in fields(overrides) if getattr(overrides, f.name) is not None}
    return base.with_updates(**changed)


def parse_tank(data: Any) -> TankLayout:
    """Build a layout from a decoded YAML document.

    ``defaults`` (optional) applies to every creature; each entry in
    ``creatures`` overrides it field by field.
    """

    if data is None:
        return TankLayout()
    if not isinstance(data, Mapping):
        raise ValueError("Tank file must define a mapping")
    unknown = set(data) - {"defaults", "creatures", "lanes"}
    if unknown:
        raise ValueError(f"Unknown tank field(s): {', '.join(sorted(unknown))}")

    base = CreatureConfig.from_mapping(data.get("defaults") or {})
    raw_creatures = data.get("creatures") or []
    if not isinstance(raw_creatures, list):
        raise ValueError("creatures must be a list")
    creatures = []
    for entry in raw_creatures:
        if isinstance(entry, str):
            entry = {"source": entry}
        if not isinstance(entry, Mapping):
            raise ValueError("creature entries must be mappings or source strings")
        creatures.append(_merge(base, CreatureConfig.from_mapping(entry)))

    lanes: Tuple[LanePreset, ...] = DEFAULT_LANES
    if data.get("lanes") is not None:
        lanes = tuple(parse_lane_presets(data["lanes"]))
    return TankLayout(creatures=creatures, lanes=lanes)


def load_tank(path: Path | str) -> TankLayout:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Tank file not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    layout = parse_tank(data)
    logger.info("Loaded tank %s with %d creature(s) on %d lane(s)", path, len(layout.creatures), len(layout.lanes))
    return layout

