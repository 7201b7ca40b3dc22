"""Procedural aquarium: creatures swimming in lanes across a resizable tank."""
