"""Creature catalogue and selection state."""

from .catalog import CatalogEntry, Selection, load_catalog, resolve_sources, selected_models

__all__ = ["CatalogEntry", "Selection", "load_catalog", "resolve_sources", "selected_models"]
