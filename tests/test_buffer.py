"""Tests for the PCM ring buffer."""

import numpy as np
import pytest

from pygbaudio.audio import AudioBuffer, AudioBufferError, create_audio_buffer


def test_write_then_read_preserves_order():
    buffer = AudioBuffer(8, channels=2)
    frames = np.arange(10, dtype=np.int16).reshape(5, 2)

    assert buffer.write(frames) == 5
    assert buffer.get_available_samples() == 5

    result = buffer.read(5, timeout=0.1)
    assert np.array_equal(result, frames)
    assert buffer.is_empty()


def test_wraparound():
    buffer = AudioBuffer(4, channels=1)
    buffer.write(np.array([1, 2, 3], dtype=np.int16))
    buffer.read(2, timeout=0.1)

    assert buffer.write(np.array([4, 5, 6], dtype=np.int16)) == 3
    assert buffer.is_full()

    result = buffer.read(4, timeout=0.1)
    assert result.tolist() == [3, 4, 5, 6]


def test_partial_write_counts_overrun():
    buffer = AudioBuffer(3, channels=1)
    assert buffer.write(np.ones(5, dtype=np.int16)) == 3
    assert buffer.get_statistics()['overruns'] == 1


def test_read_times_out_when_empty():
    buffer = AudioBuffer(3, channels=1)
    assert buffer.read(1, timeout=0.01) is None


def test_write_times_out_when_full():
    buffer = AudioBuffer(2, channels=1)
    buffer.write(np.ones(2, dtype=np.int16))
    assert buffer.write(np.ones(1, dtype=np.int16), timeout=0.01) == 0


def test_shape_mismatch_rejected():
    buffer = AudioBuffer(4, channels=2)
    with pytest.raises(AudioBufferError):
        buffer.write(np.ones(3, dtype=np.int16))


def test_clear_and_peek():
    buffer = AudioBuffer(4, channels=1)
    buffer.write(np.array([7, 8], dtype=np.int16))

    assert buffer.get_audio_buffer().tolist() == [7, 8]
    assert buffer.get_available_samples() == 2

    buffer.clear()
    assert buffer.is_empty()


def test_create_audio_buffer_size():
    buffer = create_audio_buffer(44100, buffer_duration=0.1)
    assert buffer.size == 4410
    assert buffer.channels == 2
