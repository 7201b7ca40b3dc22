"""Simulation package containing the arena, frame scheduler and main loop."""

from __future__ import annotations

__all__ = [
    "arena",
    "loop",
    "scheduler",
    "state",
    "tank",
]
