"""Rendering helpers for the aquarium."""
