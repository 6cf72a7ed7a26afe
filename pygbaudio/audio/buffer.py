"""
音声バッファ管理モジュール

リアルタイム再生用に、16ビットPCMフレームを保持する循環バッファを提供します。
サンプル生成スレッド（プロデューサー）と音声コールバック（コンシューマー）間の
フレーム受け渡しに使用します。
"""

import threading
from typing import Optional
import numpy as np
from ..core.types import GBAudioError


class AudioBufferError(GBAudioError):
    """音声バッファ関連のエラー"""
    pass


class AudioBuffer:
    """PCMフレーム用循環バッファ

    スレッドセーフな固定長リングバッファです。モノラルは shape=(size,)、
    ステレオは shape=(size, 2) の配列で保持します。
    """

    def __init__(self, size: int, channels: int = 2, dtype=np.int16):
        """AudioBufferを初期化

        Args:
            size: バッファサイズ（フレーム数）
            channels: チャンネル数（1=モノラル、2=ステレオ）
            dtype: サンプルデータ型

        Raises:
            AudioBufferError: 無効なパラメータが指定された場合
        """
        if size <= 0:
            raise AudioBufferError(f"Buffer size must be positive, got {size}")
        if channels not in (1, 2):
            raise AudioBufferError(f"Channels must be 1 or 2, got {channels}")

        self._size = size
        self._channels = channels
        self._dtype = dtype
        self._buffer = np.zeros(self._frame_shape(size), dtype=dtype)

        # バッファ制御変数
        self._write_pos = 0
        self._read_pos = 0
        self._available = 0

        # スレッド同期
        self._lock = threading.RLock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

        # 統計情報
        self._underruns = 0
        self._overruns = 0
        self._total_written = 0
        self._total_read = 0

    def _frame_shape(self, count: int) -> tuple:
        return (count,) if self._channels == 1 else (count, self._channels)

    @property
    def size(self) -> int:
        """バッファサイズを取得"""
        return self._size

    @property
    def channels(self) -> int:
        """チャンネル数を取得"""
        return self._channels

    @property
    def dtype(self):
        """データ型を取得"""
        return self._dtype

    def get_available_samples(self) -> int:
        """読み取り可能なフレーム数を取得"""
        with self._lock:
            return self._available

    def get_free_space(self) -> int:
        """書き込み可能なフレーム数を取得"""
        with self._lock:
            return self._size - self._available

    def is_empty(self) -> bool:
        with self._lock:
            return self._available == 0

    def is_full(self) -> bool:
        with self._lock:
            return self._available >= self._size

    def write(self, frames: np.ndarray, timeout: Optional[float] = None) -> int:
        """フレームをバッファに書き込み

        Args:
            frames: 書き込むフレームデータ
            timeout: 空き待ちのタイムアウト（秒）、Noneで無制限

        Returns:
            実際に書き込まれたフレーム数（タイムアウト時は0）

        Raises:
            AudioBufferError: データ形式が不正な場合
        """
        if frames.size == 0:
            return 0

        if frames.shape[1:] != self._buffer.shape[1:]:
            raise AudioBufferError(
                f"Expected frames of shape {self._frame_shape(len(frames))}, got {frames.shape}")

        requested = len(frames)

        with self._not_full:
            while self._available >= self._size:
                if not self._not_full.wait(timeout):
                    return 0

            count = min(requested, self._size - self._available)

            # 循環バッファに書き込み（境界をまたぐ場合は2分割）
            first = min(count, self._size - self._write_pos)
            self._buffer[self._write_pos:self._write_pos + first] = frames[:first]
            self._buffer[:count - first] = frames[first:count]
            self._write_pos = (self._write_pos + count) % self._size

            self._available += count
            self._total_written += count

            if count < requested:
                self._overruns += 1

            self._not_empty.notify_all()
            return count

    def read(self, count: int, timeout: Optional[float] = None) -> Optional[np.ndarray]:
        """フレームをバッファから読み取り

        Args:
            count: 読み取るフレーム数
            timeout: データ待ちのタイムアウト（秒）、Noneで無制限

        Returns:
            読み取ったフレームデータ、タイムアウト時はNone
        """
        if count <= 0:
            return np.zeros(self._frame_shape(0), dtype=self._dtype)

        with self._not_empty:
            while self._available == 0:
                if not self._not_empty.wait(timeout):
                    return None

            result = self._peek(min(count, self._available))
            read_count = len(result)
            self._read_pos = (self._read_pos + read_count) % self._size

            self._available -= read_count
            self._total_read += read_count

            if read_count < count:
                self._underruns += 1

            self._not_full.notify_all()
            return result

    def _peek(self, count: int) -> np.ndarray:
        """読み取り位置を変更せずにフレームをコピー"""
        result = np.zeros(self._frame_shape(count), dtype=self._dtype)
        first = min(count, self._size - self._read_pos)
        result[:first] = self._buffer[self._read_pos:self._read_pos + first]
        result[first:] = self._buffer[:count - first]
        return result

    def get_audio_buffer(self, count: int = None) -> np.ndarray:
        """バッファ内容のコピーを取得（デバッグ・可視化用）

        Args:
            count: 取得するフレーム数（Noneで全て）

        Returns:
            バッファ内容のコピー
        """
        with self._lock:
            if count is None:
                count = self._available
            return self._peek(max(0, min(count, self._available)))

    def clear(self) -> None:
        """バッファをクリア"""
        with self._lock:
            self._write_pos = 0
            self._read_pos = 0
            self._available = 0
            self._buffer.fill(0)

            self._not_empty.notify_all()
            self._not_full.notify_all()

    def get_statistics(self) -> dict:
        """バッファ統計情報を取得

        Returns:
            統計情報辞書
        """
        with self._lock:
            return {
                'size': self._size,
                'channels': self._channels,
                'available_samples': self._available,
                'free_space': self._size - self._available,
                'utilization': self._available / self._size,
                'underruns': self._underruns,
                'overruns': self._overruns,
                'total_written': self._total_written,
                'total_read': self._total_read,
                'memory_usage_bytes': self._buffer.nbytes
            }

    def reset_statistics(self) -> None:
        """統計情報をリセット"""
        with self._lock:
            self._underruns = 0
            self._overruns = 0
            self._total_written = 0
            self._total_read = 0


def create_audio_buffer(sample_rate: int, buffer_duration: float = 0.1,
                        channels: int = 2) -> AudioBuffer:
    """標準的な音声バッファを作成

    Args:
        sample_rate: サンプルレート（Hz）
        buffer_duration: バッファ持続時間（秒）
        channels: チャンネル数

    Returns:
        AudioBufferインスタンス
    """
    buffer_size = max(1, int(sample_rate * buffer_duration))
    return AudioBuffer(buffer_size, channels)
