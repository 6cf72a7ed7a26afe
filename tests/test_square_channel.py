"""Tests for SquareChannel period counter, duty lookup and phase stepping."""

import pytest

from pygbaudio.core import (
    DUTY_PATTERNS,
    InvalidValueError,
    SquareChannel,
    VolumeEnvelope,
    create_square_channel,
    frequency_to_period,
    hz_to_frequency,
    period_to_hz,
)


@pytest.mark.parametrize("frequency, period", [
    (0, 8192),
    (0x783, 500),
    (0x7C1, 252),
    (0x7FF, 4),
])
def test_frequency_to_period(frequency, period):
    assert frequency_to_period(frequency) == period


@pytest.mark.parametrize("frequency", [-1, 0x800, 4096])
def test_frequency_to_period_rejects_out_of_range(frequency):
    with pytest.raises(InvalidValueError):
        frequency_to_period(frequency)


def test_duty_patterns():
    assert len(DUTY_PATTERNS) == 4
    assert [sum(pattern) for pattern in DUTY_PATTERNS] == [1, 2, 4, 6]
    for pattern in DUTY_PATTERNS:
        assert len(pattern) == 8


def test_period_to_hz_and_back():
    clock = 4194304
    hz = period_to_hz(frequency_to_period(0x783), clock)
    assert hz == pytest.approx(1048.576)
    assert hz_to_frequency(hz, clock) == 0x783


def test_triggered_note_steps_four_phases(square):
    """0x783を4周期分進めると位相が4進み、出力はデューティ表の値×15"""
    square.init()
    square.update(500 * 4)

    assert square.phase == 4
    assert square.sample == DUTY_PATTERNS[2][4] * 15 == 0


def test_first_phase_step_outputs_high(square):
    square.init()
    square.update(499)
    assert square.phase == 0
    assert square.sample == 0

    square.update(1)
    assert square.phase == 1
    assert square.sample == 15
    assert square.get_counter() == 500


def test_phase_wraps_every_eight_periods(square):
    square.init()
    period = square.period

    square.update(period * 8)
    assert square.phase == 0
    assert square.get_counter() == period

    square.update(period * 8 * 3 + period * 2)
    assert square.phase == 2


@pytest.mark.parametrize("duty", [0, 1, 2, 3])
def test_sample_sequence_repeats_every_eight_periods(duty):
    channel = create_square_channel(duty, 15, 0, 0, 0x783)
    channel.init()
    period = channel.period

    samples = []
    for _ in range(16):
        channel.update(period)
        samples.append(channel.sample)

    assert samples[:8] == samples[8:]
    assert samples[:8] == [DUTY_PATTERNS[duty][(i + 1) % 8] * 15 for i in range(8)]


def test_zero_cycles_is_a_no_op(square):
    square.init()
    square.update(137)
    before = square.get_state()

    square.update(0)

    assert square.get_state() == before


def test_split_updates_match_single_update():
    first = create_square_channel(1, 15, 0, 3, 0x6A0)
    second = create_square_channel(1, 15, 0, 3, 0x6A0)
    first.init()
    second.init()

    first.update(12345)
    for chunk in (1, 4999, 7, 2338, 5000):
        second.update(chunk)

    assert first.get_state() == second.get_state()


def test_negative_cycles_rejected(square):
    with pytest.raises(InvalidValueError):
        square.update(-1)


def test_init_reloads_counter_without_resetting_phase(square):
    square.init()
    square.update(500 * 3 + 120)
    assert square.phase == 3

    square.init()

    assert square.phase == 3
    assert square.get_counter() == 500


def test_frequency_change_keeps_running_counter(square):
    square.init()
    square.update(100)

    square.frequency = 0x7C1

    assert square.period == 252
    assert square.get_counter() == 400
    assert square.phase == 0


def test_sample_uses_envelope_volume():
    channel = SquareChannel(3, VolumeEnvelope(7, 0, 0), 0x7FF)
    channel.init()
    channel.update(4 * 2)

    assert channel.phase == 2
    assert channel.is_output_high()
    assert channel.sample == 7


def test_invalid_duty_rejected():
    with pytest.raises(InvalidValueError):
        create_square_channel(4, 15, 0, 3)


def test_state_roundtrip(square):
    square.init()
    square.update(3210)
    square.clock_envelope()

    restored = create_square_channel(0, 0, 0, 0)
    restored.set_state(square.get_state())

    assert restored == square
    assert restored.period == 500


def test_rejected_state_leaves_channel_untouched(square):
    square.init()
    square.update(777)
    before = square.get_state()

    state = create_square_channel(0, 3, 1, 1, 0x100).get_state()
    state['envelope']['direction'] = 5

    with pytest.raises(InvalidValueError):
        square.set_state(state)

    assert square.get_state() == before
    assert square.period == 500
