"""Creature state, locomotion and animation."""

from __future__ import annotations

__all__ = [
    "animation",
    "creature",
    "lanes",
    "motion",
    "normalization",
]
