"""Shared state connecting the catalogue selection to the live arena."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..catalog import CatalogEntry, Selection, resolve_sources
from ..entities.creature import CreatureConfig
from .arena import CreatureArena, CreatureHandle

logger = logging.getLogger("aquarium.simulation")


@dataclass
class AquariumState:
    arena: CreatureArena
    catalog: List[CatalogEntry] = field(default_factory=list)
    selection: Selection = field(default_factory=Selection)
    default_source: Optional[str] = None
    template: CreatureConfig = field(default_factory=CreatureConfig)
    handles: List[CreatureHandle] = field(default_factory=list)

    def populate(self, configs: Sequence[CreatureConfig]) -> None:
        """Make the arena hold exactly ``configs``, index for index.

        Slots whose source is unchanged keep swimming; changed slots are
        reconfigured, surplus ones removed and missing ones spawned.
        """

        kept: List[CreatureHandle] = []
        for index, config in enumerate(configs):
            if index < len(self.handles):
                handle = self.handles[index]
                creature = self.arena.get(handle)
                if creature is not None and creature.config == config:
                    kept.append(handle)
                    continue
                if creature is not None:
                    kept.append(self.arena.reconfigure(handle, config))
                    continue
            kept.append(self.arena.spawn(config))
        for handle in self.handles[len(configs):]:
            if self.arena.get(handle) is not None:
                self.arena.remove(handle)
        self.handles = kept

    def toggle(self, entry: CatalogEntry) -> bool:
        """Toggle a catalogue entry and rebuild the tank; ``False`` if locked."""

        if not entry.selectable:
            logger.info("Catalog entry %s is locked", entry.id)
            return False
        self.selection = self.selection.toggle(entry)
        self.sync_selection()
        return True

    def toggle_index(self, index: int) -> bool:
        if not 0 <= index < len(self.catalog):
            return False
        return self.toggle(self.catalog[index])

    def sync_selection(self) -> None:
        if self.default_source is None:
            raise ValueError("A default source is required to display a selection")
        sources = resolve_sources(self.catalog, self.selection, self.default_source)
        logger.info("Displaying %d creature(s): %s", len(sources), ", ".join(sources))
        self.populate([self.template.with_updates(source=source) for source in sources])
