"""Tests for creature configuration layering."""

from __future__ import annotations

import pytest

from aquarium.entities.creature import CreatureConfig, resolve_params
from aquarium.entities.lanes import LanePreset

from .creature_helpers import SETTINGS

LANE = LanePreset(vertical_fraction=-0.3, depth_layer=-0.5, speed=1.2, start_side="right", spawn_fraction=1.0, size=0.85)


def test_config_overrides_lane_which_overrides_settings():
    params = resolve_params(CreatureConfig(source="a", speed=3.0), LANE, SETTINGS)
    assert params.speed == 3.0
    assert params.start_side == "right"
    assert params.size_multiplier == 0.85
    assert params.turn_zone == SETTINGS.TURN_ZONE
    assert params.boundary_mode == "overshoot"
    assert params.ease_departure is False
    assert resolve_params(CreatureConfig(ease_departure=True), LANE, SETTINGS).ease_departure is True


def test_default_wave_ranges_bracket_the_bob():
    params = resolve_params(CreatureConfig(bob_amplitude=0.2, bob_frequency=1.0), None, SETTINGS)
    assert params.wave_amplitude_range == pytest.approx((0.12, 0.28))
    assert params.wave_frequency_range == pytest.approx((0.7, 1.3))
    assert params.retarget_interval_range == (SETTINGS.MIN_RETARGET_SECONDS, SETTINGS.MAX_RETARGET_SECONDS)


def test_from_mapping_accepts_camel_and_snake_case():
    config = CreatureConfig.from_mapping(
        {
            "source": "fish",
            "turnZone": 2,
            "flip_on_turn": "true",
            "easeDeparture": True,
            "waveAmplitudeRange": [0.1, 0.2],
        }
    )
    assert config.turn_zone == 2.0
    assert config.flip_on_turn is True
    assert config.ease_departure is True
    assert config.wave_amplitude_range == (0.1, 0.2)


def test_from_mapping_rejects_unknown_fields():
    with pytest.raises(ValueError, match="Unknown creature config field"):
        CreatureConfig.from_mapping({"wingspan": 3})


@pytest.mark.parametrize(
    "kwargs",
    [
        {"speed": -1.0},
        {"height_ratio": 0.0},
        {"start_side": "top"},
        {"boundary_mode": "wrap"},
        {"wave_frequency_range": (2.0, 1.0)},
        {"vertical_fraction": 2.0},
    ],
)
def test_invalid_values_rejected(kwargs):
    with pytest.raises(ValueError):
        CreatureConfig(**kwargs)


def test_with_updates_revalidates():
    config = CreatureConfig(source="fish")
    assert config.with_updates(speed=2.0).speed == 2.0
    with pytest.raises(ValueError):
        config.with_updates(speed=-2.0)
