"""Tests for tank layout files."""

from __future__ import annotations

from pathlib import Path

import pytest

from aquarium.entities.lanes import DEFAULT_LANES
from aquarium.simulation.tank import load_tank, parse_tank

EXAMPLE = Path(__file__).resolve().parent.parent / "configs" / "tank.example.yaml"


def test_example_tank_loads():
    layout = load_tank(EXAMPLE)
    assert [config.source for config in layout.creatures] == [
        "creatures/fish_2crown_downsize",
        "creatures/action_finish_fish1_pink",
        "creatures/fish78",
    ]
    assert layout.creatures[1].flip_on_turn is True
    assert layout.creatures[2].boundary_mode == "clamp"
    assert len(layout.lanes) == 3


def test_defaults_apply_under_per_creature_values():
    layout = parse_tank({"defaults": {"speed": 2.0, "turnZone": 1.0}, "creatures": ["a", {"source": "b", "speed": 0.5}]})
    assert layout.creatures[0].source == "a"
    assert layout.creatures[0].speed == 2.0
    assert layout.creatures[1].speed == 0.5
    assert layout.creatures[1].turn_zone == 1.0
    assert layout.lanes == DEFAULT_LANES


def test_empty_document_is_an_empty_tank():
    assert parse_tank(None).creatures == []


def test_invalid_tanks_rejected(tmp_path):
    with pytest.raises(ValueError, match="Unknown tank field"):
        parse_tank({"fish": []})
    with pytest.raises(ValueError):
        parse_tank({"creatures": {"a": 1}})
    with pytest.raises(FileNotFoundError):
        load_tank(tmp_path / "nope.yaml")
