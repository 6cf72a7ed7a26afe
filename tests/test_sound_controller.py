"""Tests for the SoundController cycle scheduler."""

import pytest

from pygbaudio.core import (
    InvalidValueError,
    SoundConfig,
    create_sound_controller,
)


def _scheduler_state(controller):
    state = controller.get_state()
    del state['debug_info']
    return state


def test_initial_state(controller):
    assert controller.name == "Game Boy APU"
    assert controller.master_clock_counter == 0
    assert controller.get_mixed_output() == 0
    assert controller.channels == (controller.square1,)


def test_update_accumulates_master_clock(controller):
    controller.update(1000)
    controller.update(0)
    controller.update(24)
    assert controller.master_clock_counter == 1024
    assert controller.tick(16) == 16
    assert controller.master_clock_counter == 1040


def test_negative_cycles_rejected(controller):
    with pytest.raises(InvalidValueError):
        controller.update(-5)


def test_zero_cycles_is_a_no_op(controller):
    controller.trigger_square1(0x783)
    controller.update(70000)
    before = _scheduler_state(controller)

    controller.update(0)

    assert _scheduler_state(controller) == before


def test_first_envelope_tick_at_step_seven(controller):
    controller.trigger_square1(0x783)

    controller.update(7 * 8192 - 1)
    assert controller.get_debug_info()['statistics']['envelope_ticks'] == 0

    controller.update(1)
    assert controller.get_debug_info()['statistics']['envelope_ticks'] == 1
    assert controller.frame_sequencer.step == 7


def test_one_envelope_tick_per_eight_frame_ticks(controller):
    controller.trigger_square1(0x783)
    controller.update(7 * 8192)

    controller.update(8192 * 8 * 5)

    stats = controller.get_debug_info()['statistics']
    assert stats['envelope_ticks'] == 6
    assert stats['frame_sequencer_ticks'] == 47


def test_envelope_ticks_independent_of_chunking():
    """どのような分割で進めても最終状態は同一"""
    whole = create_sound_controller()
    chunked = create_sound_controller()
    whole.trigger_square1(0x783)
    chunked.trigger_square1(0x783)

    total = 8192 * 8 * 4 + 777
    whole.update(total)

    chunks = [95, 96, 8191, 1, 3, 65536, 12000]
    consumed = 0
    index = 0
    while consumed < total:
        chunk = min(chunks[index % len(chunks)], total - consumed)
        chunked.update(chunk)
        consumed += chunk
        index += 1

    assert _scheduler_state(whole) == _scheduler_state(chunked)
    assert (whole.get_debug_info()['statistics']['envelope_ticks'] ==
            chunked.get_debug_info()['statistics']['envelope_ticks'] == 4)


def test_envelope_decays_on_frame_sequencer(controller):
    """周期3のエンベロープは3回目のエンベロープtickで音量14になる"""
    controller.trigger_square1(0x783)

    controller.update(15 * 8192)
    assert controller.square1.envelope.volume == 15

    controller.update(8 * 8192)
    assert controller.square1.envelope.volume == 14


def test_mixed_output_follows_square1(controller):
    controller.trigger_square1(0x783)
    controller.update(500)

    assert controller.get_channel_outputs() == [15]
    assert controller.get_mixed_output() == 15


def test_reset_restores_power_on_state(controller):
    controller.trigger_square1(0x783)
    controller.update(100000)

    controller.reset()

    fresh = create_sound_controller()
    assert controller.get_state() == fresh.get_state()


def test_state_roundtrip(controller):
    controller.trigger_square1(0x7C1)
    controller.update(123456)

    restored = create_sound_controller()
    restored.set_state(controller.get_state())

    assert restored.get_state() == controller.get_state()

    controller.update(5000)
    restored.update(5000)
    assert _scheduler_state(restored) == _scheduler_state(controller)


def test_set_state_rejects_wrong_channel_count(controller):
    state = controller.get_state()
    state['channel_states'] = []
    with pytest.raises(InvalidValueError):
        controller.set_state(state)


def test_rejected_state_leaves_controller_untouched(controller):
    controller.trigger_square1(0x7C1)
    controller.update(123456)
    state = controller.get_state()
    state['channel_states'][0]['phase'] = 9

    target = create_sound_controller()
    before = target.get_state()

    with pytest.raises(InvalidValueError):
        target.set_state(state)

    assert target.get_state() == before


def test_debug_output(capsys):
    controller = create_sound_controller(SoundConfig(enable_debug=True))
    controller.trigger_square1(0x783)

    captured = capsys.readouterr()
    assert "[DEBUG] Square1 triggered: frequency=0x783 period=500" in captured.out
