"""Tests for JSONL telemetry sinks."""

from __future__ import annotations

import json

import pytest

from aquarium.assets import LoadedAsset, LoadScheduler
from aquarium.entities import motion
from aquarium.entities.creature import CreatureConfig
from aquarium.simulation.arena import CreatureArena
from aquarium.simulation.scheduler import FrameScheduler
from aquarium.systems import telemetry
from aquarium.world.viewport import Viewport, ViewportModel

from .creature_helpers import SETTINGS, FakeLoader, ImmediateExecutor, box_bounds, box_scene, make_creature


@pytest.fixture()
def telemetry_dir(tmp_path):
    telemetry.enable_telemetry("all", directory=tmp_path)
    yield tmp_path
    telemetry.disable_telemetry()


def _rows(directory, kind):
    rows = []
    for path in directory.glob(f"{kind}_*.jsonl"):
        rows.extend(json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line)
    return rows


def test_motion_samples_are_throttled_per_creature(telemetry_dir):
    viewport = Viewport(16.0, 9.0)
    creature = make_creature(CreatureConfig(source="box"), viewport=viewport)
    motion.step(creature, viewport, 0.0)
    for tick in range(1, 181):
        motion.step(creature, viewport, 1.0 / 60.0)
        telemetry.motion_sample(tick=tick, creature=creature)
    telemetry.flush_all()
    rows = _rows(telemetry_dir, "motion")
    assert [row["tick"] for row in rows] == [1, 61, 121]
    assert rows[0]["creature_id"] == "0:0"
    assert rows[0]["clip"] is None


def test_lifecycle_events_are_written(telemetry_dir):
    telemetry.log_event("spawn", "3:1", {"source": "fish"})
    telemetry.flush_all()
    rows = _rows(telemetry_dir, "lifecycle")
    assert rows == [{"tick": 0, "creature_id": "3:1", "event_type": "spawn", "details": {"source": "fish"}}]


def test_disabled_telemetry_writes_nothing(tmp_path):
    telemetry.disable_telemetry()
    telemetry.log_event("spawn", "0:0")
    telemetry.flush_all()
    assert list(tmp_path.iterdir()) == []


def test_sampling_state_is_dropped_when_creatures_leave(telemetry_dir):
    asset = LoadedAsset(scene=box_scene("fish"), bounds=box_bounds(), clips=[])
    loads = LoadScheduler(FakeLoader({"fish": asset}), executor=ImmediateExecutor())
    arena = CreatureArena(ViewportModel(1600, 900), loads, defaults=SETTINGS)
    frames = FrameScheduler(arena, loads)
    kept = arena.spawn(CreatureConfig(source="fish"))
    dropped = arena.spawn(CreatureConfig(source="fish"))
    for _ in range(3):
        frames.frame(1.0 / 60.0)
    assert set(telemetry._last_motion_log) == {"0:0", "1:0"}

    replaced = arena.reconfigure(kept, CreatureConfig(source="fish", speed=2.0))
    arena.remove(dropped)
    assert telemetry._last_motion_log == {}

    frames.frame(1.0 / 60.0)
    frames.frame(1.0 / 60.0)
    assert set(telemetry._last_motion_log) == {f"{replaced.slot}:{replaced.generation}"}
