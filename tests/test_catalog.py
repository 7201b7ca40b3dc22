"""Tests for the creature catalogue and selection."""

from __future__ import annotations

from pathlib import Path

import pytest

from aquarium.catalog import CatalogEntry, Selection, load_catalog, resolve_sources, selected_models

CATALOG_PATH = Path(__file__).resolve().parent.parent / "assets" / "catalog.yaml"


@pytest.fixture()
def catalog():
    return load_catalog(CATALOG_PATH)


def test_shipped_catalog_has_three_unlocked_entries(catalog):
    assert len(catalog) == 6
    assert [entry.id for entry in catalog if entry.unlocked] == ["anchovy-1", "anchovy-2", "anchovy-3"]


def test_toggle_adds_and_removes(catalog):
    selection = Selection().toggle(catalog[0])
    assert "anchovy-1" in selection
    assert "anchovy-1" not in selection.toggle(catalog[0])


def test_locked_entries_cannot_be_selected(catalog):
    locked = catalog[3]
    assert not locked.unlocked
    assert len(Selection().toggle(locked)) == 0


def test_selected_models_keep_catalog_order(catalog):
    selection = Selection().toggle(catalog[2]).toggle(catalog[0])
    assert selected_models(catalog, selection) == [catalog[0].model, catalog[2].model]


def test_resolve_sources_falls_back_to_default(catalog):
    assert resolve_sources(catalog, Selection(), "creatures/default") == ["creatures/default"]


def test_selection_from_ids_rejects_unknown(catalog):
    assert len(Selection.from_ids(catalog, ["anchovy-2", "anchovy-2"])) == 1
    with pytest.raises(ValueError, match="Unknown catalog id"):
        Selection.from_ids(catalog, ["nope"])


def test_catalog_validation(tmp_path):
    dup = tmp_path / "dup.yaml"
    dup.write_text("entries:\n  - {id: a}\n  - {id: a}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="duplicate"):
        load_catalog(dup)
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "missing.yaml")
    with pytest.raises(ValueError):
        CatalogEntry.from_dict({"name": "no id"})
