"""
波形ビューアモジュール

レンダリング済みPCMフレームとエンベロープ音量の推移を
matplotlibでプロットし、画像ファイルに保存します。
"""

from pathlib import Path
from typing import Union, Tuple
import numpy as np
from matplotlib.figure import Figure
from ..core.types import GBAudioError
from ..core.volume_envelope import VolumeEnvelope
from ..audio.sample_generator import SampleGenerator


class WaveformViewerError(GBAudioError):
    """波形ビューア関連のエラー"""
    pass


def capture_channel_trace(generator: SampleGenerator, count: int) -> Tuple[np.ndarray, np.ndarray]:
    """出力サンプルごとに矩形波チャンネル1の振幅とエンベロープ音量を記録

    Args:
        generator: サンプル生成器（コントローラを進める）
        count: 記録するサンプル数

    Returns:
        (振幅配列, エンベロープ音量配列)
    """
    if count < 0:
        raise WaveformViewerError(f"Count must be non-negative, got {count}")

    square1 = generator.get_controller().square1
    amplitudes = np.zeros(count, dtype=np.int16)
    volumes = np.zeros(count, dtype=np.int16)

    for i in range(count):
        generator.generate_samples(1)
        amplitudes[i] = square1.sample
        volumes[i] = square1.envelope.volume

    return amplitudes, volumes


def plot_waveform(frames: np.ndarray, sample_rate: int, path: Union[str, Path],
                  start: int = 0, count: int = None, title: str = "Square 1") -> Path:
    """PCMフレームの波形をプロットして保存

    Args:
        frames: int16フレーム（モノラル (n,) またはステレオ (n, 2)）
        sample_rate: サンプルレート（Hz）
        path: 出力画像パス
        start: 表示開始サンプル
        count: 表示サンプル数（Noneで末尾まで）
        title: グラフタイトル

    Returns:
        保存した画像パス
    """
    if frames.ndim not in (1, 2):
        raise WaveformViewerError(f"Expected 1D or 2D frames, got {frames.ndim}D")
    if sample_rate <= 0:
        raise WaveformViewerError(f"Sample rate must be positive, got {sample_rate}")

    mono = frames if frames.ndim == 1 else frames[:, 0]
    end = len(mono) if count is None else min(len(mono), start + count)
    segment = mono[start:end]
    times_ms = (np.arange(start, end) / sample_rate) * 1000.0

    fig = Figure(figsize=(10, 4))
    ax = fig.add_subplot(1, 1, 1)
    ax.step(times_ms, segment, where='post', linewidth=0.8)
    ax.set_title(title)
    ax.set_xlabel("time [ms]")
    ax.set_ylabel("amplitude")
    ax.set_ylim(-1024, 32767)
    ax.grid(True, alpha=0.3)

    path = Path(path)
    fig.savefig(path)
    return path


def plot_envelope(envelope: VolumeEnvelope, ticks: int, path: Union[str, Path]) -> Path:
    """トリガーからのエンベロープ音量推移をプロットして保存

    Args:
        envelope: 対象のエンベロープ（状態は変更されない）
        ticks: 表示するエンベロープtick数
        path: 出力画像パス

    Returns:
        保存した画像パス
    """
    if ticks <= 0:
        raise WaveformViewerError(f"Ticks must be positive, got {ticks}")

    sequence = envelope.generate_volume_sequence(ticks)

    fig = Figure(figsize=(8, 3))
    ax = fig.add_subplot(1, 1, 1)
    ax.step(range(ticks), sequence, where='post')
    ax.set_title(f"Envelope (initial={envelope.initial_volume}, "
                 f"period={envelope.period}, direction={envelope.direction})")
    ax.set_xlabel("envelope tick (64 Hz)")
    ax.set_ylabel("volume")
    ax.set_ylim(-0.5, 15.5)
    ax.grid(True, alpha=0.3)

    path = Path(path)
    fig.savefig(path)
    return path


def plot_channel_trace(amplitudes: np.ndarray, volumes: np.ndarray, sample_rate: int,
                       path: Union[str, Path]) -> Path:
    """チャンネル振幅とエンベロープ音量を2段でプロットして保存

    Args:
        amplitudes: capture_channel_trace の振幅配列
        volumes: capture_channel_trace のエンベロープ音量配列
        sample_rate: サンプルレート（Hz）
        path: 出力画像パス

    Returns:
        保存した画像パス
    """
    if len(amplitudes) != len(volumes):
        raise WaveformViewerError(
            f"Length mismatch: {len(amplitudes)} amplitudes, {len(volumes)} volumes")

    times_ms = (np.arange(len(amplitudes)) / sample_rate) * 1000.0

    fig = Figure(figsize=(10, 6))
    ax_wave = fig.add_subplot(2, 1, 1)
    ax_wave.step(times_ms, amplitudes, where='post', linewidth=0.8)
    ax_wave.set_ylabel("sample")
    ax_wave.set_ylim(-0.5, 15.5)
    ax_wave.grid(True, alpha=0.3)

    ax_env = fig.add_subplot(2, 1, 2, sharex=ax_wave)
    ax_env.step(times_ms, volumes, where='post', color='tab:orange')
    ax_env.set_xlabel("time [ms]")
    ax_env.set_ylabel("envelope volume")
    ax_env.set_ylim(-0.5, 15.5)
    ax_env.grid(True, alpha=0.3)

    path = Path(path)
    fig.savefig(path)
    return path
