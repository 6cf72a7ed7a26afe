"""Tests for SoundConfig validation and presets."""

import pytest

from pygbaudio.core import (
    InvalidValueError,
    SoundConfig,
    create_debug_config,
    create_default_config,
    create_high_quality_config,
    create_mono_config,
)


def test_defaults():
    config = create_default_config()
    assert config.clock_frequency == 4194304
    assert config.sample_rate == 44100
    assert config.channels == 2
    assert config.output_shift == 10
    assert config.frame_sequencer_cycles == 8192
    assert config.cycles_per_sample == pytest.approx(95.1089, abs=1e-4)


def test_presets():
    assert create_mono_config().channels == 1
    assert create_high_quality_config().sample_rate == 48000
    assert create_debug_config().enable_debug is True


@pytest.mark.parametrize("overrides", [
    {'clock_frequency': 4194305},
    {'clock_frequency': 0},
    {'sample_rate': 0},
    {'channels': 3},
    {'sample_width': 1},
    {'buffer_size': 0},
    {'output_shift': 12},
    {'square1_duty': 4},
    {'square1_initial_volume': 16},
    {'square1_envelope_period': 8},
    {'square1_envelope_direction': 2},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(InvalidValueError):
        SoundConfig(**overrides)


def test_copy_is_independent():
    config = create_default_config()
    clone = config.copy()
    clone.sample_rate = 22050
    assert config.sample_rate == 44100
