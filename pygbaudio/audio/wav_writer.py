"""
WAVファイル出力モジュール

生成済みの16ビットPCMフレームをRIFF/WAVEファイルへ書き出すシンクです。
フォーマット（サンプルレート、チャンネル数、サンプル幅）はSoundConfigから決まります。
"""

import wave
from pathlib import Path
from typing import Optional, Union
import numpy as np
from ..core.types import GBAudioError
from ..core.device_config import SoundConfig


class WaveWriterError(GBAudioError):
    """WAV出力関連のエラー"""
    pass


class WaveFileWriter:
    """16ビットPCM WAVファイルライター

    コンテキストマネージャとして使用します::

        with WaveFileWriter("output.wav", config) as writer:
            writer.write_frames(frames)
    """

    def __init__(self, path: Union[str, Path], config: SoundConfig):
        """WaveFileWriterを初期化

        Args:
            path: 出力ファイルパス
            config: 出力フォーマットを決める設定
        """
        self._path = Path(path)
        self._sample_rate = config.sample_rate
        self._channels = config.channels
        self._sample_width = config.sample_width
        self._wave: Optional[wave.Wave_write] = None
        self._frames_written = 0

    @property
    def path(self) -> Path:
        """出力ファイルパス"""
        return self._path

    @property
    def frames_written(self) -> int:
        """書き込み済みフレーム数"""
        return self._frames_written

    @property
    def is_open(self) -> bool:
        return self._wave is not None

    def open(self) -> None:
        """ファイルを開いてヘッダを設定

        Raises:
            WaveWriterError: 既に開いている場合やファイルを作成できない場合
        """
        if self._wave is not None:
            raise WaveWriterError(f"{self._path} is already open")

        try:
            self._wave = wave.open(str(self._path), "wb")
        except OSError as e:
            raise WaveWriterError(f"Failed to open {self._path}: {e}") from e

        self._wave.setnchannels(self._channels)
        self._wave.setsampwidth(self._sample_width)
        self._wave.setframerate(self._sample_rate)
        self._frames_written = 0

    def write_frames(self, frames: np.ndarray) -> None:
        """int16フレームを書き込み

        Args:
            frames: モノラルは shape=(n,)、ステレオは shape=(n, 2) のint16配列

        Raises:
            WaveWriterError: ファイル未オープン、または形式が不正な場合
        """
        if self._wave is None:
            raise WaveWriterError("Writer is not open")

        if frames.dtype != np.int16:
            raise WaveWriterError(f"Frames must be int16, got {frames.dtype}")

        expected_ndim = 1 if self._channels == 1 else 2
        if frames.ndim != expected_ndim or (expected_ndim == 2 and frames.shape[1] != self._channels):
            raise WaveWriterError(
                f"Frames shape {frames.shape} does not match {self._channels} channel(s)")

        # WAVはリトルエンディアン、チャンネルはインターリーブ
        self._wave.writeframes(frames.astype('<i2').tobytes())
        self._frames_written += len(frames)

    def close(self) -> None:
        """ファイルを閉じる（ヘッダのデータ長を確定）"""
        if self._wave is not None:
            self._wave.close()
            self._wave = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def write_wav_file(path: Union[str, Path], frames: np.ndarray, config: SoundConfig) -> int:
    """フレーム配列をWAVファイルに一括書き出し

    Args:
        path: 出力ファイルパス
        frames: int16フレーム配列
        config: 出力フォーマットを決める設定

    Returns:
        書き込んだフレーム数
    """
    with WaveFileWriter(path, config) as writer:
        writer.write_frames(frames)
        return writer.frames_written
