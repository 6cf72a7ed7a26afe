"""Tests for the master clock to sample rate conversion."""

import numpy as np
import pytest

from pygbaudio.audio import (
    DEFAULT_NOTE_SEQUENCE,
    SampleGenerator,
    SampleGeneratorError,
    render_note_sequence,
)
from pygbaudio.core import SoundConfig, create_sound_controller


def test_cycles_per_sample(generator):
    assert generator.cycles_per_sample == pytest.approx(4194304 / 44100)
    assert generator.sample_rate == 44100
    assert generator.output_channels == 2


def test_one_second_consumes_one_second_of_cycles(generator):
    generator.generate_samples(44100)

    assert 4194304 - 1 <= generator.cycles_executed <= 4194304
    assert generator.get_controller().master_clock_counter == generator.cycles_executed


def test_drift_stays_below_one_cycle(generator):
    for _ in range(50):
        generator.generate_samples(997)
        assert abs(generator.get_drift()) < 1.0


def test_each_sample_advances_floor_or_ceil(generator):
    controller = generator.get_controller()
    previous = controller.master_clock_counter
    for _ in range(500):
        generator.generate_samples(1)
        delta = controller.master_clock_counter - previous
        assert delta in (95, 96)
        previous = controller.master_clock_counter


def test_silent_before_trigger(generator):
    frames = generator.generate_samples(64)
    assert frames.shape == (64, 2)
    assert frames.dtype == np.int16
    assert not frames.any()


def test_stereo_channels_identical(generator):
    generator.get_controller().trigger_square1(0x783)
    frames = generator.generate_samples(2000)

    assert np.array_equal(frames[:, 0], frames[:, 1])
    assert frames.max() == 15 << 10
    assert frames.min() == 0


def test_mono_shape(mono_generator):
    mono_generator.get_controller().trigger_square1(0x7C1)
    frames = mono_generator.generate_samples(100)
    assert frames.shape == (100,)


def test_scale_sample_clips_to_int16(generator):
    assert generator.scale_sample(0) == 0
    assert generator.scale_sample(15) == 15360
    assert generator.scale_sample(100) == 32767


def test_render_cycles_consumes_requested_cycles(generator):
    frames = generator.render_cycles(100000)

    assert generator.cycles_executed >= 100000
    assert generator.cycles_executed < 100000 + 97
    assert len(frames) == generator.samples_generated


def test_default_note_sequence_is_one_second():
    assert sum(cycles for _, cycles in DEFAULT_NOTE_SEQUENCE) == 4194304


def test_render_note_sequence(generator):
    frames = render_note_sequence(generator)

    assert abs(len(frames) - 44100) <= 2
    assert frames.shape[1] == 2
    assert generator.get_controller().square1.frequency == 0x7C1


def test_render_note_sequence_custom_notes(mono_generator):
    frames = render_note_sequence(mono_generator, [(0x700, 4096), (0x600, 4096)])
    assert len(frames) == 88


def test_invalid_parameters_rejected(controller):
    with pytest.raises(SampleGeneratorError):
        SampleGenerator(controller, sample_rate=0)
    with pytest.raises(SampleGeneratorError):
        SampleGenerator(controller, output_channels=3)
    with pytest.raises(SampleGeneratorError):
        SampleGenerator(controller).generate_samples(-1)


def test_output_shift_from_config():
    controller = create_sound_controller(SoundConfig(output_shift=11, channels=1))
    generator = SampleGenerator(controller)
    controller.trigger_square1(0x783)
    frames = generator.generate_samples(200)
    assert frames.max() == 15 << 11
