"""Runtime telemetry helpers for locomotion diagnostics."""

from __future__ import annotations

import json
import os
import threading
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from ..config import settings


@dataclass(slots=True)
class MotionSample:
    tick: int
    creature_id: str
    position: tuple[float, float, float]
    yaw: float
    scale_x: float
    direction: int
    effective_speed: float
    amplitude: float
    frequency: float
    clip: Optional[str]


@dataclass(slots=True)
class LifecycleSample:
    tick: int
    creature_id: str
    event_type: str
    details: dict


class TelemetrySink:
    """Buffered JSONL telemetry writer."""

    def __init__(self, kind: str, *, directory: Optional[Path] = None, flush_interval: int = 64) -> None:
        base = directory or Path(settings.LOG_DIRECTORY) / "telemetry"
        base.mkdir(parents=True, exist_ok=True)
        timestamp = int(time.time())
        self.path = base / f"{kind}_{timestamp}.jsonl"
        self._buffer: list[dict] = []
        self._lock = threading.Lock()
        self._flush_interval = max(1, flush_interval)
        self._counter = 0

    def write(self, payload: MotionSample | LifecycleSample) -> None:
        with self._lock:
            self._buffer.append(asdict(payload))
            self._counter += 1
            if self._counter >= self._flush_interval:
                self._flush_locked()

    def flush(self) -> None:
        with self._lock:
            self._flush_locked()

    def _flush_locked(self) -> None:
        if not self._buffer:
            self._counter = 0
            return
        with self.path.open("a", encoding="utf-8") as handle:
            for row in self._buffer:
                handle.write(json.dumps(row, ensure_ascii=False) + os.linesep)
        self._buffer.clear()
        self._counter = 0


_motion_sink: Optional[TelemetrySink] = None
_lifecycle_sink: Optional[TelemetrySink] = None
_last_motion_log: dict[str, int] = {}

# Ticks between motion samples of the same creature (about once a second at 60 FPS).
MOTION_SAMPLE_INTERVAL = 60


def enable_telemetry(kind: str = "all", *, directory: Optional[Path] = None) -> None:
    global _motion_sink, _lifecycle_sink
    if kind in ("motion", "all") and _motion_sink is None:
        _motion_sink = TelemetrySink("motion", directory=directory)
    if kind in ("lifecycle", "all") and _lifecycle_sink is None:
        _lifecycle_sink = TelemetrySink("lifecycle", directory=directory)


def disable_telemetry() -> None:
    global _motion_sink, _lifecycle_sink
    flush_all()
    _motion_sink = None
    _lifecycle_sink = None
    _last_motion_log.clear()


def forget_creature(creature_id: str) -> None:
    """Drop the sampling throttle for a creature that left the tank."""

    _last_motion_log.pop(creature_id, None)


def motion_sample(*, tick: int, creature) -> None:
    if _motion_sink is None:
        return
    last_tick = _last_motion_log.get(creature.creature_id, -MOTION_SAMPLE_INTERVAL)
    if tick - last_tick < MOTION_SAMPLE_INTERVAL:
        return
    _last_motion_log[creature.creature_id] = tick

    animation = creature.animation
    sample = MotionSample(
        tick=tick,
        creature_id=creature.creature_id,
        position=(creature.position.x, creature.position.y, creature.position.z),
        yaw=creature.yaw,
        scale_x=creature.scale.x,
        direction=creature.direction,
        effective_speed=creature.effective_speed,
        amplitude=creature.wave.current_amplitude,
        frequency=creature.wave.current_frequency,
        clip=animation.clip_name if animation is not None else None,
    )
    _motion_sink.write(sample)


def log_event(event_type: str, creature_id: str, details: Optional[dict] = None, tick: int = 0) -> None:
    if _lifecycle_sink is None:
        return
    _lifecycle_sink.write(
        LifecycleSample(tick=tick, creature_id=creature_id, event_type=event_type, details=details or {})
    )


def flush_all() -> None:
    if _motion_sink:
        _motion_sink.flush()
    if _lifecycle_sink:
        _lifecycle_sink.flush()
