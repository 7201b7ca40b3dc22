"""Creature catalogue and the player's selection of creatures to display."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, FrozenSet, List, Mapping, Optional, Sequence

import yaml

DEFAULT_ACCENT = "#94a3b8"


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    name: str
    model: Optional[str]
    unlocked: bool
    accent: str = DEFAULT_ACCENT

    @property
    def selectable(self) -> bool:
        return self.unlocked and self.model is not None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogEntry":
        entry_id = str(data.get("id", "")).strip()
        if not entry_id:
            raise ValueError("Catalog entries need an id")
        model = data.get("model")
        return cls(
            id=entry_id,
            name=str(data.get("name", entry_id)),
            model=None if model is None else str(model),
            unlocked=bool(data.get("unlocked", False)),
            accent=str(data.get("accent", DEFAULT_ACCENT)),
        )


def load_catalog(path: Path | str) -> List[CatalogEntry]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    raw_entries = data.get("entries") if isinstance(data, Mapping) else data
    if not isinstance(raw_entries, list):
        raise ValueError(f"Catalog {path} must contain a list of entries")
    entries = [CatalogEntry.from_dict(entry) for entry in raw_entries]
    ids = [entry.id for entry in entries]
    if len(ids) != len(set(ids)):
        raise ValueError(f"Catalog {path} contains duplicate ids")
    return entries


@dataclass(frozen=True)
class Selection:
    """Immutable set of selected catalogue ids."""

    ids: FrozenSet[str] = frozenset()

    def toggle(self, entry: CatalogEntry) -> "Selection":
        if not entry.selectable:
            return self
        if entry.id in self.ids:
            return Selection(self.ids - {entry.id})
        return Selection(self.ids | {entry.id})

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    @classmethod
    def from_ids(cls, catalog: Sequence[CatalogEntry], ids: Sequence[str]) -> "Selection":
        selection = cls()
        by_id = {entry.id: entry for entry in catalog}
        for entry_id in ids:
            entry = by_id.get(entry_id)
            if entry is None:
                raise ValueError(f"Unknown catalog id: {entry_id}")
            if entry_id not in selection:
                selection = selection.toggle(entry)
        return selection


def selected_models(catalog: Sequence[CatalogEntry], selection: Selection) -> List[str]:
    """Models of selected, unlocked entries in catalogue order."""

    return [entry.model for entry in catalog if entry.selectable and entry.id in selection]  # type: ignore[misc]


def resolve_sources(catalog: Sequence[CatalogEntry], selection: Selection, default: str) -> List[str]:
    models = selected_models(catalog, selection)
    return models or [default]
