"""Tests for syncing the catalogue selection into the arena."""

from __future__ import annotations

from aquarium.assets import LoadScheduler
from aquarium.catalog import CatalogEntry
from aquarium.entities.creature import CreatureConfig
from aquarium.simulation.arena import CreatureArena
from aquarium.simulation.state import AquariumState
from aquarium.world.viewport import ViewportModel

from .creature_helpers import SETTINGS, DeferredExecutor, FakeLoader

CATALOG = [
    CatalogEntry(id="a", name="A", model="fish/a", unlocked=True),
    CatalogEntry(id="b", name="B", model="fish/b", unlocked=True),
    CatalogEntry(id="locked", name="?", model=None, unlocked=False),
]


def _state():
    loads = LoadScheduler(FakeLoader(), executor=DeferredExecutor())
    arena = CreatureArena(ViewportModel(1280, 720), loads, defaults=SETTINGS)
    return AquariumState(arena=arena, catalog=list(CATALOG), default_source="fish/default")


def _sources(state):
    return [state.arena.get(handle).config.source for handle in state.handles]


def test_empty_selection_shows_default():
    state = _state()
    state.sync_selection()
    assert _sources(state) == ["fish/default"]


def test_toggling_reconfigures_and_spawns():
    state = _state()
    state.sync_selection()
    first = state.handles[0]

    assert state.toggle_index(1)
    assert _sources(state) == ["fish/b"]
    assert state.handles[0].generation == first.generation + 1

    assert state.toggle_index(0)
    assert _sources(state) == ["fish/a", "fish/b"]


def test_unchanged_creatures_keep_their_handles():
    state = _state()
    state.populate([CreatureConfig(source="x"), CreatureConfig(source="y")])
    before = list(state.handles)
    state.populate([CreatureConfig(source="x")])
    assert state.handles == before[:1]
    assert len(state.arena) == 1


def test_locked_and_out_of_range_entries_are_ignored():
    state = _state()
    state.sync_selection()
    assert state.toggle_index(2) is False
    assert state.toggle_index(10) is False
    assert _sources(state) == ["fish/default"]
