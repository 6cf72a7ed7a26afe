"""Tests for VolumeEnvelope tick behaviour and freeze at the rails."""

import pytest

from pygbaudio.core import (
    VolumeEnvelope,
    InvalidValueError,
    ENVELOPE_DECREASE,
    ENVELOPE_INCREASE,
)


def test_init_loads_initial_volume():
    envelope = VolumeEnvelope(12, ENVELOPE_DECREASE, 2)
    assert envelope.volume == 0
    assert envelope.updating is False

    envelope.init()

    assert envelope.volume == 12
    assert envelope.updating is True
    assert envelope.get_period_counter() == 2


def test_decrease_steps_every_period():
    """周期3では3tickごとに音量が1下がる"""
    envelope = VolumeEnvelope(15, ENVELOPE_DECREASE, 3)
    envelope.init()

    envelope.update()
    envelope.update()
    assert envelope.volume == 15

    envelope.update()
    assert envelope.volume == 14

    for _ in range(3):
        envelope.update()
    assert envelope.volume == 13


def test_decrease_converges_to_zero_and_freezes():
    envelope = VolumeEnvelope(15, ENVELOPE_DECREASE, 1)
    envelope.init()

    for _ in range(15):
        envelope.update()

    assert envelope.volume == 0
    assert envelope.updating is False

    for _ in range(20):
        envelope.update()
    assert envelope.volume == 0


def test_increase_converges_to_max_and_freezes():
    envelope = VolumeEnvelope(0, ENVELOPE_INCREASE, 2)
    envelope.init()

    for _ in range(30):
        envelope.update()

    assert envelope.volume == 15
    assert envelope.updating is False

    envelope.update()
    assert envelope.volume == 15


def test_volume_stays_in_range_for_every_setting():
    """全設定の組み合わせで音量が0-15の範囲に収まる"""
    for initial in range(16):
        for direction in (ENVELOPE_DECREASE, ENVELOPE_INCREASE):
            for period in range(8):
                envelope = VolumeEnvelope(initial, direction, period)
                envelope.init()
                for _ in range(130):
                    envelope.update()
                    assert 0 <= envelope.volume <= 15


def test_period_zero_holds_volume():
    envelope = VolumeEnvelope(9, ENVELOPE_DECREASE, 0)
    envelope.init()

    for _ in range(50):
        envelope.update()

    assert envelope.volume == 9
    assert envelope.get_period_counter() == 8


def test_initial_volume_on_rail_freezes_without_change():
    envelope = VolumeEnvelope(0, ENVELOPE_DECREASE, 1)
    envelope.init()
    envelope.update()

    assert envelope.volume == 0
    assert envelope.updating is False

    envelope = VolumeEnvelope(15, ENVELOPE_INCREASE, 1)
    envelope.init()
    envelope.update()

    assert envelope.volume == 15
    assert envelope.updating is False


def test_retrigger_restarts_envelope():
    envelope = VolumeEnvelope(4, ENVELOPE_DECREASE, 1)
    envelope.init()
    for _ in range(10):
        envelope.update()
    assert envelope.volume == 0

    envelope.init()
    assert envelope.volume == 4
    assert envelope.updating is True


def test_generate_volume_sequence_leaves_state_untouched():
    envelope = VolumeEnvelope(15, ENVELOPE_DECREASE, 1)
    before = envelope.get_state()

    sequence = envelope.generate_volume_sequence(4)

    assert sequence == [15, 14, 13, 12]
    assert envelope.get_state() == before


@pytest.mark.parametrize("initial_volume, direction, period", [
    (16, ENVELOPE_DECREASE, 1),
    (-1, ENVELOPE_DECREASE, 1),
    (8, 2, 1),
    (8, ENVELOPE_INCREASE, 8),
])
def test_invalid_parameters_rejected(initial_volume, direction, period):
    with pytest.raises(InvalidValueError):
        VolumeEnvelope(initial_volume, direction, period)


def test_state_roundtrip():
    envelope = VolumeEnvelope(10, ENVELOPE_INCREASE, 2)
    envelope.init()
    envelope.update()
    envelope.update()
    envelope.update()

    restored = VolumeEnvelope(0, ENVELOPE_DECREASE, 0)
    restored.set_state(envelope.get_state())

    assert restored == envelope
    assert restored.volume == 11


def test_rejected_state_leaves_envelope_untouched():
    envelope = VolumeEnvelope(12, ENVELOPE_DECREASE, 2)
    envelope.init()
    before = envelope.get_state()

    state = dict(before, initial_volume=3, period=9)
    with pytest.raises(InvalidValueError):
        envelope.set_state(state)

    assert envelope.get_state() == before
