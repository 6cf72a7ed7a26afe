"""Tests for the matplotlib plotting helpers."""

import numpy as np
import pytest

from pygbaudio.core import VolumeEnvelope
from pygbaudio.debug import (
    WaveformViewerError,
    capture_channel_trace,
    plot_channel_trace,
    plot_envelope,
    plot_waveform,
)


def test_capture_channel_trace(generator):
    generator.get_controller().trigger_square1(0x783)
    amplitudes, volumes = capture_channel_trace(generator, 300)

    assert len(amplitudes) == len(volumes) == 300
    assert set(np.unique(amplitudes).tolist()) <= {0, 15}
    assert (volumes == 15).all()


def test_plot_waveform_writes_png(tmp_path, generator):
    generator.get_controller().trigger_square1(0x783)
    frames = generator.generate_samples(500)

    path = plot_waveform(frames, 44100, tmp_path / "wave.png", count=200)

    assert path.exists()
    assert path.stat().st_size > 0


def test_plot_envelope_writes_png(tmp_path):
    envelope = VolumeEnvelope(15, 0, 1)
    path = plot_envelope(envelope, 20, tmp_path / "env.png")
    assert path.exists()


def test_plot_channel_trace_length_mismatch(tmp_path):
    with pytest.raises(WaveformViewerError):
        plot_channel_trace(np.zeros(3), np.zeros(4), 44100, tmp_path / "x.png")
