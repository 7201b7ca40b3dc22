"""Asset loaders turning opaque references into scene graphs and clips."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

import yaml

from .types import PROFILE_PLANES, AnimationClip, BoundingBox, LoadedAsset, LoadError, SceneGraph

logger = logging.getLogger("aquarium.assets")


class AssetLoader(Protocol):
    """Anything that can resolve a reference into a :class:`LoadedAsset`."""

    def load(self, ref: object) -> LoadedAsset:
        """Return the decoded asset or raise :class:`LoadError`."""


def _parse_vector(value: Any, length: int, label: str) -> Tuple[float, ...]:
    if not isinstance(value, (list, tuple)) or len(value) != length:
        raise ValueError(f"{label} must be a list of {length} numbers")
    return tuple(float(component) for component in value)


def _parse_bounds(data: Mapping[str, Any]) -> Optional[BoundingBox]:
    raw = data.get("bounds")
    if raw is None:
        return None
    if not isinstance(raw, Mapping):
        raise ValueError("bounds must be a mapping with min and max")
    lower = _parse_vector(raw.get("min"), 3, "bounds.min")
    upper = _parse_vector(raw.get("max"), 3, "bounds.max")
    return BoundingBox(lower, upper)  # type: ignore[arg-type]


def _parse_clip(entry: Mapping[str, Any]) -> AnimationClip:
    name = str(entry.get("name", "")).strip()
    if not name:
        raise ValueError("animation entries need a name")
    duration = float(entry.get("duration", 0.0))
    if duration < 0.0:
        raise ValueError(f"animation {name} has a negative duration")
    tracks: Dict[str, Tuple[Tuple[float, float], ...]] = {}
    for joint, keys in (entry.get("tracks") or {}).items():
        parsed = sorted(_parse_vector(key, 2, f"{name}.{joint} keyframe") for key in keys)
        tracks[str(joint)] = tuple((time, angle) for time, angle in parsed)
    return AnimationClip(name=name, duration=duration, tracks=tracks)


def parse_descriptor(data: Any, *, name: str) -> LoadedAsset:
    """Build a :class:`LoadedAsset` from a decoded YAML descriptor."""

    if not isinstance(data, Mapping):
        raise ValueError("descriptor must define a mapping")
    plane = str(data.get("profile_plane", "xy")).lower()
    if plane not in PROFILE_PLANES:
        raise ValueError(f"profile_plane must be one of {list(PROFILE_PLANES)}")
    outline = [_parse_vector(point, 2, "outline point") for point in data.get("outline") or []]
    joints = {str(joint): float(spec.get("pivot", 0.0)) for joint, spec in (data.get("joints") or {}).items()}
    color = tuple(int(channel) for channel in data.get("color", (255, 160, 60)))
    if len(color) != 3:
        raise ValueError("color must have three channels")
    scene = SceneGraph(
        name=str(data.get("name", name)),
        outline=[(forward, up) for forward, up in outline],
        joints=joints,
        color=color,  # type: ignore[arg-type]
        profile_plane=plane,
    )
    clips: List[AnimationClip] = [_parse_clip(entry) for entry in data.get("animations") or []]
    bounds = _parse_bounds(data)
    if bounds is None and scene.outline:
        bounds = BoundingBox.from_points([(point.x, point.y, point.z) for point in scene.model_points()])
    return LoadedAsset(scene=scene, bounds=bounds, clips=clips)


class DescriptorAssetLoader:
    """Load YAML creature descriptors from ``root``.

    Parsed descriptors are cached per resolved path; every call hands out a
    fresh scene graph clone so creatures never share mutable state.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self._cache: Dict[Path, LoadedAsset] = {}
        self._lock = threading.Lock()

    def resolve(self, ref: object) -> Path:
        candidate = Path(str(ref)).expanduser()
        if not candidate.is_absolute():
            candidate = self.root / candidate
        if candidate.suffix == "":
            candidate = candidate.with_suffix(".yaml")
        return candidate

    def load(self, ref: object) -> LoadedAsset:
        if ref is None or str(ref).strip() == "":
            logger.error("Refusing to load an empty asset reference")
            raise LoadError(ref, "empty reference")
        path = self.resolve(ref)
        with self._lock:
            cached = self._cache.get(path)
        if cached is not None:
            return cached.clone()

        try:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle)
            asset = parse_descriptor(data, name=path.stem)
        except FileNotFoundError as error:
            logger.error("Asset %s not found at %s", ref, path)
            raise LoadError(ref, f"missing file {path}") from error
        except yaml.YAMLError as error:
            logger.error("Asset %s is not valid YAML: %s", ref, error)
            raise LoadError(ref, "invalid YAML") from error
        except (AttributeError, TypeError, ValueError) as error:
            logger.error("Asset %s has an invalid descriptor: %s", ref, error)
            raise LoadError(ref, str(error)) from error

        with self._lock:
            self._cache.setdefault(path, asset)
        logger.info("Loaded asset %s (%d clips)", path.name, len(asset.clips))
        return asset.clone()

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
