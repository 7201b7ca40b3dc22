"""Cross-cutting systems (telemetry) for the aquarium."""
