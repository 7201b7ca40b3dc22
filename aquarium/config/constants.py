"""Constant values for the aquarium."""

from __future__ import annotations

DEFAULTS = {
    "WINDOW_WIDTH": 1280,
    "WINDOW_HEIGHT": 720,
    "WORLD_HEIGHT": 10.0,
}

# Speed multiplier floor reached at the wall; the remaining share scales with ease.
EASE_FLOOR = 0.35
EASE_RANGE = 1.0 - EASE_FLOOR

# Fraction of the gap left after one second of exponential damping.
DAMPING_BASE = 0.001

PLACEMENT_INSET = 0.01

# Clip names tried after the configured animation name, before the first clip.
SWIM_CLIP_NAMES = ("Swim_Loop", "ArmatureAction.001")

START_SIDES = ("left", "right", "middle")
BOUNDARY_MODES = ("overshoot", "clamp")

# Shown when the catalogue selection is empty.
DEFAULT_SOURCE = "creatures/fish_2crown_downsize"
