"""Creature records: configuration, resolved parameters and live state."""

from __future__ import annotations

import enum
import math
import random
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from pygame.math import Vector3

from ..assets.types import BoundingBox, SceneGraph
from ..config import settings
from ..config.constants import BOUNDARY_MODES, START_SIDES
from ..utils.math_utils import clamp
from .animation import AnimationBlender, Pose
from .lanes import LanePreset
from .normalization import Normalization

Range = Tuple[float, float]

_CAMEL_PATTERN = re.compile(r"(?<!^)(?=[A-Z])")
_RANGE_FIELDS = {"wave_amplitude_range", "wave_frequency_range", "retarget_interval_range"}
_BOOL_FIELDS = {"flip_on_turn", "ease_departure"}
_STRING_FIELDS = {"start_side", "animation_name", "boundary_mode"}
_NON_NEGATIVE_FIELDS = {
    "speed",
    "margin",
    "turn_zone",
    "bob_amplitude",
    "bob_frequency",
    "animation_speed",
    "fade_seconds",
}
_POSITIVE_FIELDS = {"height_ratio", "size_multiplier"}


class Placement(enum.Enum):
    UNPLACED = "unplaced"
    PLACED = "placed"


@dataclass(frozen=True)
class CreatureConfig:
    """Per-creature overrides; ``None`` means lane preset, then global default."""

    source: Any = None
    height_ratio: Optional[float] = None
    size_multiplier: Optional[float] = None
    speed: Optional[float] = None
    margin: Optional[float] = None
    turn_zone: Optional[float] = None
    flip_on_turn: Optional[bool] = None
    ease_departure: Optional[bool] = None
    start_side: Optional[str] = None
    initial_yaw_deg: Optional[float] = None
    vertical_fraction: Optional[float] = None
    depth_layer: Optional[float] = None
    spawn_fraction: Optional[float] = None
    bob_amplitude: Optional[float] = None
    bob_frequency: Optional[float] = None
    animation_name: Optional[str] = None
    animation_speed: Optional[float] = None
    fade_seconds: Optional[float] = None
    wave_amplitude_range: Optional[Range] = None
    wave_frequency_range: Optional[Range] = None
    retarget_interval_range: Optional[Range] = None
    boundary_mode: Optional[str] = None

    def __post_init__(self) -> None:
        _validate_config(self)

    def with_updates(self, **overrides: Any) -> "CreatureConfig":
        return replace(self, **overrides)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CreatureConfig":
        """Build a config from YAML-style keys (``turnZone`` or ``turn_zone``)."""

        valid = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = _CAMEL_PATTERN.sub("_", str(raw_key)).lower()
            if key not in valid:
                raise ValueError(f"Unknown creature config field: {raw_key}")
            values[key] = _normalize_value(key, value)
        return cls(**values)


def _normalize_value(key: str, value: Any) -> Any:
    if value is None or key == "source":
        return value
    if key in _RANGE_FIELDS:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ValueError(f"{key} must be a [low, high] pair")
        return (float(value[0]), float(value[1]))
    if key in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value in {"1", "true", "True", "TRUE"}
        raise ValueError(f"{key} must be a boolean")
    if key in _STRING_FIELDS:
        return str(value)
    if isinstance(value, bool):
        raise ValueError(f"{key} must be numeric")
    return float(value)


def _validate_config(config: CreatureConfig) -> None:
    for name in _NON_NEGATIVE_FIELDS:
        value = getattr(config, name)
        if value is not None and not (math.isfinite(value) and value >= 0):
            raise ValueError(f"{name} must be a finite non-negative number, got {value}")
    for name in _POSITIVE_FIELDS:
        value = getattr(config, name)
        if value is not None and not (math.isfinite(value) and value > 0):
            raise ValueError(f"{name} must be positive, got {value}")
    for name in _RANGE_FIELDS:
        value = getattr(config, name)
        if value is None:
            continue
        low, high = value
        if low < 0 or high < low:
            raise ValueError(f"{name} must satisfy 0 <= low <= high, got {value}")
    if config.start_side is not None and config.start_side not in START_SIDES:
        raise ValueError(f"start_side must be one of {list(START_SIDES)}, got {config.start_side}")
    if config.boundary_mode is not None and config.boundary_mode not in BOUNDARY_MODES:
        raise ValueError(f"boundary_mode must be one of {list(BOUNDARY_MODES)}, got {config.boundary_mode}")
    if config.vertical_fraction is not None and not -1.0 <= config.vertical_fraction <= 1.0:
        raise ValueError(f"vertical_fraction must be within [-1, 1], got {config.vertical_fraction}")


@dataclass(frozen=True)
class MotionParams:
    """Fully resolved parameters; nothing here is optional."""

    height_ratio: float
    size_multiplier: float
    speed: float
    margin: float
    turn_zone: float
    flip_on_turn: bool
    ease_departure: bool
    start_side: str
    initial_yaw_deg: float
    vertical_fraction: float
    depth_layer: float
    spawn_fraction: float
    bob_amplitude: float
    bob_frequency: float
    animation_name: Optional[str]
    animation_speed: float
    fade_seconds: float
    wave_amplitude_range: Range
    wave_frequency_range: Range
    retarget_interval_range: Range
    boundary_mode: str


def _pick(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def resolve_params(
    config: CreatureConfig,
    lane: Optional[LanePreset] = None,
    defaults: Optional[settings.AquariumSettings] = None,
) -> MotionParams:
    """Layer config over lane preset over global settings."""

    base = defaults or settings.current_settings()
    bob_amplitude = _pick(config.bob_amplitude, base.BOB_AMPLITUDE)
    bob_frequency = _pick(config.bob_frequency, base.BOB_FREQUENCY)
    return MotionParams(
        height_ratio=_pick(config.height_ratio, base.HEIGHT_RATIO),
        size_multiplier=_pick(config.size_multiplier, lane.size if lane else None, 1.0),
        speed=_pick(config.speed, lane.speed if lane else None, 1.0),
        margin=_pick(config.margin, base.MARGIN),
        turn_zone=_pick(config.turn_zone, base.TURN_ZONE),
        flip_on_turn=_pick(config.flip_on_turn, base.FLIP_ON_TURN),
        ease_departure=_pick(config.ease_departure, base.EASE_DEPARTURE),
        start_side=_pick(config.start_side, lane.start_side if lane else None, "left"),
        initial_yaw_deg=_pick(config.initial_yaw_deg, base.INITIAL_YAW_DEG),
        vertical_fraction=_pick(config.vertical_fraction, lane.vertical_fraction if lane else None, 0.0),
        depth_layer=_pick(config.depth_layer, lane.depth_layer if lane else None, 0.0),
        spawn_fraction=_pick(config.spawn_fraction, lane.spawn_fraction if lane else None, 0.5),
        bob_amplitude=bob_amplitude,
        bob_frequency=bob_frequency,
        animation_name=config.animation_name,
        animation_speed=_pick(config.animation_speed, base.ANIMATION_SPEED),
        fade_seconds=_pick(config.fade_seconds, base.FADE_SECONDS),
        wave_amplitude_range=_pick(config.wave_amplitude_range, (bob_amplitude * 0.6, bob_amplitude * 1.4)),
        wave_frequency_range=_pick(config.wave_frequency_range, (bob_frequency * 0.7, bob_frequency * 1.3)),
        retarget_interval_range=_pick(
            config.retarget_interval_range,
            (base.MIN_RETARGET_SECONDS, base.MAX_RETARGET_SECONDS),
        ),
        boundary_mode=_pick(config.boundary_mode, base.BOUNDARY_MODE),
    )


@dataclass
class SecondaryMotion:
    """Vertical wave parameters drifting slowly between random targets."""

    amplitude_range: Range
    frequency_range: Range
    interval_range: Range
    current_amplitude: float
    current_frequency: float
    target_amplitude: float
    target_frequency: float
    phase: float
    next_change_in: float
    change_timer: float = 0.0

    @classmethod
    def create(cls, params: MotionParams, rng: random.Random) -> "SecondaryMotion":
        amplitude = clamp(params.bob_amplitude, *params.wave_amplitude_range)
        frequency = clamp(params.bob_frequency, *params.wave_frequency_range)
        return cls(
            amplitude_range=params.wave_amplitude_range,
            frequency_range=params.wave_frequency_range,
            interval_range=params.retarget_interval_range,
            current_amplitude=amplitude,
            current_frequency=frequency,
            target_amplitude=amplitude,
            target_frequency=frequency,
            phase=rng.uniform(0.0, math.tau),
            next_change_in=rng.uniform(*params.retarget_interval_range),
        )


@dataclass(frozen=True)
class RenderFrame:
    """Per-tick output consumed by the renderer."""

    creature_id: str
    position: Vector3
    yaw: float
    scale: Vector3
    pose: Optional[Pose]
    scene: SceneGraph


@dataclass
class Creature:
    slot: int
    generation: int
    config: CreatureConfig
    params: MotionParams
    rng: random.Random
    wave: SecondaryMotion
    placement: Placement = Placement.UNPLACED
    scene: Optional[SceneGraph] = None
    bounds: Optional[BoundingBox] = None
    normalization: Optional[Normalization] = None
    animation: Optional[AnimationBlender] = None
    position: Vector3 = field(default_factory=Vector3)
    scale: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    yaw: float = 0.0
    target_yaw: float = 0.0
    direction: int = 1
    elapsed: float = 0.0
    effective_speed: float = 0.0
    released: bool = False

    @classmethod
    def create(
        cls,
        slot: int,
        generation: int,
        config: CreatureConfig,
        params: MotionParams,
        rng: random.Random,
    ) -> "Creature":
        return cls(
            slot=slot,
            generation=generation,
            config=config,
            params=params,
            rng=rng,
            wave=SecondaryMotion.create(params, rng),
        )

    @property
    def creature_id(self) -> str:
        return f"{self.slot}:{self.generation}"

    @property
    def populated(self) -> bool:
        return self.normalization is not None and self.scene is not None

    @property
    def has_active_clip(self) -> bool:
        return self.animation is not None and self.animation.has_active_clip

    def populate(
        self,
        scene: SceneGraph,
        bounds: Optional[BoundingBox],
        normalization: Normalization,
        animation: AnimationBlender,
    ) -> None:
        self.scene = scene
        self.bounds = bounds
        self.normalization = normalization
        self.animation = animation

    def render_frame(self) -> Optional[RenderFrame]:
        if self.placement is not Placement.PLACED or self.scene is None or self.released:
            return None
        pose = self.animation.pose() if self.animation is not None else None
        return RenderFrame(
            creature_id=self.creature_id,
            position=Vector3(self.position),
            yaw=self.yaw,
            scale=Vector3(self.scale),
            pose=pose,
            scene=self.scene,
        )

    def teardown(self) -> None:
        """Stop animation and drop asset references before removal."""

        if self.animation is not None:
            self.animation.stop()
        self.animation = None
        self.scene = None
        self.normalization = None
        self.released = True
