"""Configuration constants for the aquarium."""

from __future__ import annotations

import argparse
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import yaml

from .constants import BOUNDARY_MODES, DEFAULTS

_PATH_FIELDS = {"LOG_DIRECTORY", "ASSET_ROOT", "CATALOG_FILE"}
_STRING_FIELDS = {"DEBUG_LOG_FILE", "DEBUG_LOG_LEVEL", "BOUNDARY_MODE", "TANK_FILE", "SELECTED"}
_BOOL_FIELDS = {"TELEMETRY_ENABLED", "FLIP_ON_TURN", "EASE_DEPARTURE"}
_FLOAT_FIELDS = {
    "WORLD_HEIGHT",
    "HEIGHT_RATIO",
    "MARGIN",
    "TURN_ZONE",
    "INITIAL_YAW_DEG",
    "BOB_AMPLITUDE",
    "BOB_FREQUENCY",
    "FADE_SECONDS",
    "ANIMATION_SPEED",
    "MIN_RETARGET_SECONDS",
    "MAX_RETARGET_SECONDS",
    "MAX_DELTA",
}

WINDOW_WIDTH = DEFAULTS["WINDOW_WIDTH"]
WINDOW_HEIGHT = DEFAULTS["WINDOW_HEIGHT"]
WORLD_HEIGHT = DEFAULTS["WORLD_HEIGHT"]

WATER = (6, 18, 30)
WATER_DEEP = (3, 10, 20)
WHITE = (255, 255, 255)

FPS = 60

HEIGHT_RATIO = 0.22
MARGIN = 0.5
TURN_ZONE = 1.5
FLIP_ON_TURN = os.getenv("AQUARIUM_FLIP_ON_TURN", "0") in {"1", "true", "True"}
# Also ease by the distance from the wall just left, so speed ramps up after a turn.
EASE_DEPARTURE = os.getenv("AQUARIUM_EASE_DEPARTURE", "0") in {"1", "true", "True"}
INITIAL_YAW_DEG = 90.0
BOB_AMPLITUDE = 0.15
BOB_FREQUENCY = 0.35
FADE_SECONDS = 0.3
ANIMATION_SPEED = 1.0
MIN_RETARGET_SECONDS = 2.5
MAX_RETARGET_SECONDS = 6.0
BOUNDARY_MODE = os.getenv("AQUARIUM_BOUNDARY_MODE", "overshoot")
# 0 disables delta clamping in the frame scheduler.
MAX_DELTA = 0.0
SEED = 1337
LOADER_WORKERS = 2

CONFIG_ENV_VAR = "AQUARIUM_CONFIG_FILE"
DEFAULT_CONFIG_FILE = Path("configs/default.yaml")
ASSET_ROOT = Path(os.getenv("AQUARIUM_ASSET_ROOT", "assets"))
CATALOG_FILE = Path(os.getenv("AQUARIUM_CATALOG_FILE", "assets/catalog.yaml"))
TANK_FILE = os.getenv("AQUARIUM_TANK_FILE", "")
SELECTED = os.getenv("AQUARIUM_SELECTED", "")
LOG_DIRECTORY = Path(os.getenv("AQUARIUM_LOG_DIR", "logs"))
DEBUG_LOG_FILE = os.getenv("AQUARIUM_DEBUG_LOG", "aquarium_debug.log")
DEBUG_LOG_LEVEL = os.getenv("AQUARIUM_DEBUG_LOG_LEVEL", "INFO")
TELEMETRY_ENABLED = os.getenv("AQUARIUM_TELEMETRY", "0") in {"1", "true", "True"}


@dataclass(frozen=True)
class AquariumSettings:
    WINDOW_WIDTH: int = WINDOW_WIDTH
    WINDOW_HEIGHT: int = WINDOW_HEIGHT
    FPS: int = FPS
    WORLD_HEIGHT: float = WORLD_HEIGHT
    HEIGHT_RATIO: float = HEIGHT_RATIO
    MARGIN: float = MARGIN
    TURN_ZONE: float = TURN_ZONE
    FLIP_ON_TURN: bool = FLIP_ON_TURN
    EASE_DEPARTURE: bool = EASE_DEPARTURE
    INITIAL_YAW_DEG: float = INITIAL_YAW_DEG
    BOB_AMPLITUDE: float = BOB_AMPLITUDE
    BOB_FREQUENCY: float = BOB_FREQUENCY
    FADE_SECONDS: float = FADE_SECONDS
    ANIMATION_SPEED: float = ANIMATION_SPEED
    MIN_RETARGET_SECONDS: float = MIN_RETARGET_SECONDS
    MAX_RETARGET_SECONDS: float = MAX_RETARGET_SECONDS
    BOUNDARY_MODE: str = BOUNDARY_MODE
    MAX_DELTA: float = MAX_DELTA
    SEED: int = SEED
    LOADER_WORKERS: int = LOADER_WORKERS
    ASSET_ROOT: Path = ASSET_ROOT
    CATALOG_FILE: Path = CATALOG_FILE
    TANK_FILE: str = TANK_FILE
    SELECTED: str = SELECTED
    LOG_DIRECTORY: Path = LOG_DIRECTORY
    DEBUG_LOG_FILE: str = DEBUG_LOG_FILE
    DEBUG_LOG_LEVEL: str = DEBUG_LOG_LEVEL
    TELEMETRY_ENABLED: bool = TELEMETRY_ENABLED

    def with_updates(self, overrides: Dict[str, Any]) -> "AquariumSettings":
        merged = asdict(self)
        merged.update(overrides)
        _validate_settings_dict(merged)
        return AquariumSettings(**merged)

    @property
    def selected_ids(self) -> tuple[str, ...]:
        return tuple(part.strip() for part in self.SELECTED.split(",") if part.strip())


_ACTIVE_SETTINGS = AquariumSettings()
_ENV_VARS: Dict[str, str] = {
    "WINDOW_WIDTH": "AQUARIUM_WINDOW_WIDTH",
    "WINDOW_HEIGHT": "AQUARIUM_WINDOW_HEIGHT",
    "FPS": "AQUARIUM_FPS",
    "WORLD_HEIGHT": "AQUARIUM_WORLD_HEIGHT",
    "HEIGHT_RATIO": "AQUARIUM_HEIGHT_RATIO",
    "MARGIN": "AQUARIUM_MARGIN",
    "TURN_ZONE": "AQUARIUM_TURN_ZONE",
    "FLIP_ON_TURN": "AQUARIUM_FLIP_ON_TURN",
    "EASE_DEPARTURE": "AQUARIUM_EASE_DEPARTURE",
    "BOUNDARY_MODE": "AQUARIUM_BOUNDARY_MODE",
    "MAX_DELTA": "AQUARIUM_MAX_DELTA",
    "SEED": "AQUARIUM_SEED",
    "LOADER_WORKERS": "AQUARIUM_LOADER_WORKERS",
    "ASSET_ROOT": "AQUARIUM_ASSET_ROOT",
    "CATALOG_FILE": "AQUARIUM_CATALOG_FILE",
    "TANK_FILE": "AQUARIUM_TANK_FILE",
    "SELECTED": "AQUARIUM_SELECTED",
    "TELEMETRY_ENABLED": "AQUARIUM_TELEMETRY",
}


def _coerce(value: str, field: str) -> Any:
    if field in _PATH_FIELDS:
        return Path(value)
    if field in _STRING_FIELDS:
        return value
    if field in _BOOL_FIELDS:
        return value in {"1", "true", "True"}
    if field in _FLOAT_FIELDS:
        return float(value)
    return int(value)


def _collect_env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for field, env_name in _ENV_VARS.items():
        raw = env.get(env_name)
        if raw is not None:
            overrides[field] = _coerce(raw, field)
    return overrides


def _normalize_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value in {"1", "true", "True", "TRUE"}
    if isinstance(value, (int, float)):
        return bool(value)
    raise ValueError("Invalid boolean value in config")


def _normalize_numeric(value: Any, caster: type[float | int]) -> float | int:
    if isinstance(value, bool):
        raise ValueError("Invalid numeric value in config")
    if isinstance(value, (int, float)):
        return caster(value)
    if isinstance(value, str):
        return caster(float(value) if caster is float else int(float(value)))
    raise ValueError("Invalid numeric value in config")


def _normalize_config_value(field: str, value: Any) -> Any:
    if field in _PATH_FIELDS:
        if isinstance(value, Path):
            return value
        if isinstance(value, str):
            return Path(value)
        raise ValueError(f"Field {field} must be a path or string")
    if field in _STRING_FIELDS:
        if field == "SELECTED" and isinstance(value, (list, tuple)):
            return ",".join(str(item) for item in value)
        if isinstance(value, str):
            return value
        raise ValueError(f"Field {field} must be a string")
    if field in _BOOL_FIELDS:
        return _normalize_bool(value)
    if field in _FLOAT_FIELDS:
        return float(_normalize_numeric(value, float))
    return int(_normalize_numeric(value, int))


_NUMERIC_BOUNDS: Dict[str, tuple[float, float]] = {
    "WINDOW_WIDTH": (200, 7680),
    "WINDOW_HEIGHT": (200, 4320),
    "FPS": (1, 360),
    "WORLD_HEIGHT": (1.0, 1000.0),
    "HEIGHT_RATIO": (0.01, 1.0),
    "MARGIN": (0.0, 100.0),
    "TURN_ZONE": (0.0, 100.0),
    "INITIAL_YAW_DEG": (-180.0, 180.0),
    "BOB_AMPLITUDE": (0.0, 10.0),
    "BOB_FREQUENCY": (0.0, 10.0),
    "FADE_SECONDS": (0.0, 10.0),
    "ANIMATION_SPEED": (0.0, 10.0),
    "MIN_RETARGET_SECONDS": (0.1, 600.0),
    "MAX_RETARGET_SECONDS": (0.1, 600.0),
    "MAX_DELTA": (0.0, 10.0),
    "LOADER_WORKERS": (1, 16),
}

_CHOICE_FIELDS: Dict[str, set[str]] = {
    "DEBUG_LOG_LEVEL": {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
}


def _validate_settings_dict(values: Dict[str, Any]) -> None:
    for field, (lower, upper) in _NUMERIC_BOUNDS.items():
        current = values.get(field)
        if current is None:
            continue
        if not (lower <= current <= upper):
            raise ValueError(f"{field} must be between {lower} and {upper}, got {current}")
    for field, choices in _CHOICE_FIELDS.items():
        current = values.get(field)
        if current is None:
            continue
        if isinstance(current, str) and current.upper() in choices:
            values[field] = current.upper()
            continue
        raise ValueError(f"{field} must be one of {sorted(choices)} (got {current})")
    mode = values.get("BOUNDARY_MODE")
    if mode is not None:
        if not isinstance(mode, str) or mode.lower() not in BOUNDARY_MODES:
            raise ValueError(f"BOUNDARY_MODE must be one of {list(BOUNDARY_MODES)} (got {mode})")
        values["BOUNDARY_MODE"] = mode.lower()
    _validate_relationships(values)


def _validate_relationships(values: Mapping[str, Any]) -> None:
    min_retarget = values.get("MIN_RETARGET_SECONDS")
    max_retarget = values.get("MAX_RETARGET_SECONDS")
    if min_retarget and max_retarget and min_retarget > max_retarget:
        raise ValueError("MIN_RETARGET_SECONDS cannot exceed MAX_RETARGET_SECONDS")
    world_height = values.get("WORLD_HEIGHT")
    margin = values.get("MARGIN")
    if world_height and margin is not None and margin * 2 >= world_height:
        raise ValueError("MARGIN must leave room to swim inside WORLD_HEIGHT")


def _load_config_overrides(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as error:
            raise ValueError(f"Invalid YAML in config file {path}") from error
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must define a mapping")
    valid_fields = set(AquariumSettings.__dataclass_fields__.keys())
    overrides: Dict[str, Any] = {}
    for raw_key, value in data.items():
        key = str(raw_key).upper()
        if key not in valid_fields:
            raise ValueError(f"Unknown config field: {raw_key}")
        overrides[key] = _normalize_config_value(key, value)
    return overrides


def _resolve_config_path(cli_value: str | None, env: Mapping[str, str]) -> Path | None:
    candidate_strings = [cli_value, env.get(CONFIG_ENV_VAR)]
    for candidate in candidate_strings:
        if not candidate:
            continue
        path = Path(candidate).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        return path
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the aquarium with runtime overrides")
    parser.add_argument("--config", type=str, help="Path to a YAML config file with runtime settings")
    parser.add_argument("--window-width", type=int, help="Window width in pixels")
    parser.add_argument("--window-height", type=int, help="Window height in pixels")
    parser.add_argument("--fps", type=int, help="Target frames per second")
    parser.add_argument("--world-height", type=float, help="Visible world height in world units")
    parser.add_argument("--height-ratio", type=float, help="Fraction of the viewport height a creature occupies")
    parser.add_argument("--margin", type=float, help="Distance kept between creatures and the side walls")
    parser.add_argument("--turn-zone", type=float, help="Distance over which creatures slow down before a wall")
    parser.add_argument("--boundary-mode", choices=BOUNDARY_MODES, help="How wall overshoot is handled")
    parser.add_argument("--max-delta", type=float, help="Clamp frame deltas to this many seconds (0 disables)")
    parser.add_argument("--seed", type=int, help="Base seed for per-creature random sources")
    parser.add_argument("--loader-workers", type=int, help="Worker threads used for asset loading")
    parser.add_argument("--asset-root", type=str, help="Directory holding creature asset descriptors")
    parser.add_argument("--catalog-file", type=str, help="YAML catalogue of selectable creatures")
    parser.add_argument("--tank", dest="tank_file", type=str, help="YAML tank file listing creature configs")
    parser.add_argument(
        "--select",
        action="append",
        default=None,
        help="Catalogue id to put in the tank (repeatable)",
    )
    parser.add_argument("--telemetry-enabled", type=int, help="Enable telemetry (1 or 0)")
    parser.add_argument(
        "--flip-on-turn",
        dest="flip_on_turn",
        action="store_true",
        help="Mirror the horizontal scale instead of turning to face the new direction",
    )
    parser.add_argument(
        "--face-turn",
        dest="flip_on_turn",
        action="store_false",
        help="Rotate creatures around the vertical axis when they turn",
    )
    parser.add_argument(
        "--ease-departure",
        dest="ease_departure",
        action="store_true",
        help="Ramp speed up from the wall just left instead of resuming full speed after a turn",
    )
    parser.add_argument(
        "--no-ease-departure",
        dest="ease_departure",
        action="store_false",
        help="Ease by the distance to the wall ahead only",
    )
    parser.set_defaults(flip_on_turn=None, ease_departure=None)
    return parser


def load_runtime_settings(args: Sequence[str] | None = None, env: Mapping[str, str] | None = None) -> AquariumSettings:
    env_mapping = env or os.environ
    parser = _build_arg_parser()
    parsed = parser.parse_args(args=args)
    overrides: Dict[str, Any] = {}
    config_path = _resolve_config_path(parsed.config, env_mapping)
    if config_path is not None:
        overrides.update(_load_config_overrides(config_path))
    overrides.update(_collect_env_overrides(env_mapping))
    cli_mapping = {
        "WINDOW_WIDTH": parsed.window_width,
        "WINDOW_HEIGHT": parsed.window_height,
        "FPS": parsed.fps,
        "WORLD_HEIGHT": parsed.world_height,
        "HEIGHT_RATIO": parsed.height_ratio,
        "MARGIN": parsed.margin,
        "TURN_ZONE": parsed.turn_zone,
        "FLIP_ON_TURN": parsed.flip_on_turn,
        "EASE_DEPARTURE": parsed.ease_departure,
        "BOUNDARY_MODE": parsed.boundary_mode,
        "MAX_DELTA": parsed.max_delta,
        "SEED": parsed.seed,
        "LOADER_WORKERS": parsed.loader_workers,
        "ASSET_ROOT": None if parsed.asset_root is None else Path(parsed.asset_root),
        "CATALOG_FILE": None if parsed.catalog_file is None else Path(parsed.catalog_file),
        "TANK_FILE": parsed.tank_file,
        "SELECTED": None if parsed.select is None else ",".join(parsed.select),
        "TELEMETRY_ENABLED": None if parsed.telemetry_enabled is None else bool(parsed.telemetry_enabled),
    }
    overrides.update({k: v for k, v in cli_mapping.items() if v is not None})
    return _ACTIVE_SETTINGS.with_updates(overrides)


def apply_runtime_settings(new_settings: AquariumSettings) -> AquariumSettings:
    global _ACTIVE_SETTINGS
    global WINDOW_WIDTH, WINDOW_HEIGHT, FPS, WORLD_HEIGHT
    global HEIGHT_RATIO, MARGIN, TURN_ZONE, FLIP_ON_TURN, EASE_DEPARTURE, INITIAL_YAW_DEG
    global BOB_AMPLITUDE, BOB_FREQUENCY, FADE_SECONDS, ANIMATION_SPEED
    global MIN_RETARGET_SECONDS, MAX_RETARGET_SECONDS, BOUNDARY_MODE, MAX_DELTA
    global SEED, LOADER_WORKERS, ASSET_ROOT, CATALOG_FILE, TANK_FILE, SELECTED
    global LOG_DIRECTORY, DEBUG_LOG_FILE, DEBUG_LOG_LEVEL, TELEMETRY_ENABLED

    _ACTIVE_SETTINGS = new_settings
    WINDOW_WIDTH = new_settings.WINDOW_WIDTH
    WINDOW_HEIGHT = new_settings.WINDOW_HEIGHT
    FPS = new_settings.FPS
    WORLD_HEIGHT = new_settings.WORLD_HEIGHT
    HEIGHT_RATIO = new_settings.HEIGHT_RATIO
    MARGIN = new_settings.MARGIN
    TURN_ZONE = new_settings.TURN_ZONE
    FLIP_ON_TURN = new_settings.FLIP_ON_TURN
    EASE_DEPARTURE = new_settings.EASE_DEPARTURE
    INITIAL_YAW_DEG = new_settings.INITIAL_YAW_DEG
    BOB_AMPLITUDE = new_settings.BOB_AMPLITUDE
    BOB_FREQUENCY = new_settings.BOB_FREQUENCY
    FADE_SECONDS = new_settings.FADE_SECONDS
    ANIMATION_SPEED = new_settings.ANIMATION_SPEED
    MIN_RETARGET_SECONDS = new_settings.MIN_RETARGET_SECONDS
    MAX_RETARGET_SECONDS = new_settings.MAX_RETARGET_SECONDS
    BOUNDARY_MODE = new_settings.BOUNDARY_MODE
    MAX_DELTA = new_settings.MAX_DELTA
    SEED = new_settings.SEED
    LOADER_WORKERS = new_settings.LOADER_WORKERS
    ASSET_ROOT = new_settings.ASSET_ROOT
    CATALOG_FILE = new_settings.CATALOG_FILE
    TANK_FILE = new_settings.TANK_FILE
    SELECTED = new_settings.SELECTED
    LOG_DIRECTORY = new_settings.LOG_DIRECTORY
    DEBUG_LOG_FILE = new_settings.DEBUG_LOG_FILE
    DEBUG_LOG_LEVEL = new_settings.DEBUG_LOG_LEVEL
    TELEMETRY_ENABLED = new_settings.TELEMETRY_ENABLED
    return _ACTIVE_SETTINGS


def current_settings() -> AquariumSettings:
    return _ACTIVE_SETTINGS
