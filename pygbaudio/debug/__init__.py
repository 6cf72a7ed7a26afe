"""
PyGBAudio デバッグツール

レンダリング結果とエンベロープ推移の可視化機能を提供します。
"""

from .waveform_viewer import (
    WaveformViewerError,
    capture_channel_trace,
    plot_waveform,
    plot_envelope,
    plot_channel_trace,
)

__all__ = [
    "WaveformViewerError",
    "capture_channel_trace",
    "plot_waveform",
    "plot_envelope",
    "plot_channel_trace",
]
