"""Tests for 16-bit PCM WAV output."""

import wave

import numpy as np
import pytest

from pygbaudio.audio import WaveFileWriter, WaveWriterError, write_wav_file
from pygbaudio.core import create_default_config, create_mono_config


def test_write_and_read_back(tmp_path):
    config = create_default_config()
    frames = np.array([[0, 0], [15360, 15360], [-1, -1], [32767, 32767]], dtype=np.int16)
    path = tmp_path / "out.wav"

    assert write_wav_file(path, frames, config) == 4

    with wave.open(str(path), "rb") as wav:
        assert wav.getnchannels() == 2
        assert wav.getsampwidth() == 2
        assert wav.getframerate() == 44100
        assert wav.getnframes() == 4
        data = np.frombuffer(wav.readframes(4), dtype='<i2').reshape(-1, 2)

    assert np.array_equal(data, frames)


def test_streaming_writes_accumulate(tmp_path):
    path = tmp_path / "mono.wav"
    with WaveFileWriter(path, create_mono_config()) as writer:
        writer.write_frames(np.zeros(10, dtype=np.int16))
        writer.write_frames(np.full(5, 1024, dtype=np.int16))
        assert writer.frames_written == 15
    assert not writer.is_open

    with wave.open(str(path), "rb") as wav:
        assert wav.getnchannels() == 1
        assert wav.getnframes() == 15


def test_shape_mismatch_rejected(tmp_path):
    with WaveFileWriter(tmp_path / "bad.wav", create_default_config()) as writer:
        with pytest.raises(WaveWriterError):
            writer.write_frames(np.zeros(10, dtype=np.int16))
        with pytest.raises(WaveWriterError):
            writer.write_frames(np.zeros((10, 2), dtype=np.float32))


def test_write_requires_open(tmp_path):
    writer = WaveFileWriter(tmp_path / "closed.wav", create_default_config())
    with pytest.raises(WaveWriterError):
        writer.write_frames(np.zeros((1, 2), dtype=np.int16))
