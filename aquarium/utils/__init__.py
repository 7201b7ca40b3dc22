"""Utility helpers for the aquarium."""
