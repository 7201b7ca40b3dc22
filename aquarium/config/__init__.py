"""Runtime configuration for the aquarium."""

from __future__ import annotations
