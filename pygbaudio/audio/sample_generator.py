"""
サンプル生成モジュール

サウンドコントローラから16ビットPCMサンプルを生成します。
マスタークロック（4194304Hz）と出力サンプルレート（44100Hz等）の
非整数比を小数累積カウンタで変換し、ドリフトなしにクロックドメインをまたぎます。
"""

import time
from typing import List, Sequence, Tuple
import numpy as np
from ..core.sound_controller import SoundController
from ..core.types import GBAudioError, CLOCK_SPEED

INT16_MAX = 32767

# (周波数レジスタ値, マスタークロックサイクル数) の組
DEFAULT_NOTE_SEQUENCE: List[Tuple[int, int]] = [
    (0x783, 351136),
    (0x7C1, CLOCK_SPEED - 351136),
]


class SampleGeneratorError(GBAudioError):
    """サンプル生成関連のエラー"""
    pass


class SampleGenerator:
    """サウンドコントローラ用サンプル生成器

    出力1サンプルごとに累積カウンタへ clock / sample_rate を加算し、
    整数部だけコントローラを進めて小数部を持ち越します。
    累積消費サイクル数と N * clock / sample_rate の差は常に1サイクル未満です。
    """

    def __init__(self, controller: SoundController, sample_rate: int = None,
                 output_channels: int = None, output_shift: int = None):
        """SampleGeneratorを初期化

        Args:
            controller: サウンドコントローラ
            sample_rate: 出力サンプルレート（Hz、Noneで設定値）
            output_channels: 出力チャンネル数（1=モノラル、2=ステレオ、Noneで設定値）
            output_shift: 16ビットへのスケール用左シフト量（Noneで設定値）

        Raises:
            SampleGeneratorError: 無効なパラメータが指定された場合
        """
        config = controller.get_config()
        if sample_rate is None:
            sample_rate = config.sample_rate
        if output_channels is None:
            output_channels = config.channels
        if output_shift is None:
            output_shift = config.output_shift

        if sample_rate <= 0:
            raise SampleGeneratorError(f"Sample rate must be positive, got {sample_rate}")
        if output_channels not in (1, 2):
            raise SampleGeneratorError(f"Output channels must be 1 or 2, got {output_channels}")
        if not (0 <= output_shift <= 15):
            raise SampleGeneratorError(f"Output shift must be 0-15, got {output_shift}")

        self._controller = controller
        self._sample_rate = sample_rate
        self._output_channels = output_channels
        self._output_shift = output_shift

        # クロックドメイン変換用の累積カウンタ
        self._master_clock = config.clock_frequency
        self._cycles_per_sample = self._master_clock / sample_rate
        self._cycle_accumulator = 0.0

        # 統計情報
        self._samples_generated = 0
        self._cycles_executed = 0

        self._debug_enabled = config.enable_debug

    @property
    def sample_rate(self) -> int:
        """出力サンプルレートを取得"""
        return self._sample_rate

    @property
    def output_channels(self) -> int:
        """出力チャンネル数を取得"""
        return self._output_channels

    @property
    def output_shift(self) -> int:
        """16ビットスケール用シフト量を取得"""
        return self._output_shift

    @property
    def cycles_per_sample(self) -> float:
        """出力1サンプルあたりのマスタークロックサイクル数"""
        return self._cycles_per_sample

    @property
    def cycles_executed(self) -> int:
        """累積消費マスタークロックサイクル数"""
        return self._cycles_executed

    @property
    def samples_generated(self) -> int:
        """累積生成サンプル数"""
        return self._samples_generated

    def _advance_one_sample(self) -> int:
        """出力1サンプル分だけコントローラを進め、16ビット値を返す"""
        self._cycle_accumulator += self._cycles_per_sample
        whole_cycles = int(self._cycle_accumulator)
        self._cycle_accumulator -= whole_cycles

        self._controller.update(whole_cycles)
        self._cycles_executed += whole_cycles
        self._samples_generated += 1

        return self.scale_sample(self._controller.get_mixed_output())

    def scale_sample(self, amplitude: int) -> int:
        """4ビット振幅を16ビットPCM値にスケール

        Args:
            amplitude: チャンネル振幅（合算値）

        Returns:
            int16範囲にクリップされたPCM値
        """
        return min(amplitude << self._output_shift, INT16_MAX)

    def _to_frames(self, values: List[int]) -> np.ndarray:
        mono = np.asarray(values, dtype=np.int16)
        if self._output_channels == 1:
            return mono
        # 左右に同じ値を複製
        return np.repeat(mono[:, np.newaxis], self._output_channels, axis=1)

    def generate_samples(self, count: int) -> np.ndarray:
        """指定された数のサンプルを生成

        Args:
            count: 生成するサンプル数

        Returns:
            int16サンプルデータ
            - モノラル: shape=(count,)
            - ステレオ: shape=(count, 2)
        """
        if count < 0:
            raise SampleGeneratorError(f"Sample count must be non-negative, got {count}")

        values = [self._advance_one_sample() for _ in range(count)]
        return self._to_frames(values)

    def render_cycles(self, total_cycles: int) -> np.ndarray:
        """指定マスタークロックサイクル数を消費するまでサンプルを生成

        各サンプル生成前に消費済みサイクルが total_cycles 未満かを判定するため、
        最後のサンプルで total_cycles をわずかに超える場合があります。

        Args:
            total_cycles: 消費するマスタークロックサイクル数

        Returns:
            int16サンプルデータ
        """
        if total_cycles < 0:
            raise SampleGeneratorError(f"Total cycles must be non-negative, got {total_cycles}")

        start = self._cycles_executed
        values = []
        while self._cycles_executed - start < total_cycles:
            values.append(self._advance_one_sample())

        if self._debug_enabled:
            print(f"[DEBUG] Rendered {len(values)} samples for {total_cycles} cycles "
                  f"(consumed {self._cycles_executed - start})")

        return self._to_frames(values)

    def generate_samples_with_timing(self, count: int) -> Tuple[np.ndarray, dict]:
        """タイミング情報付きでサンプルを生成

        Args:
            count: 生成するサンプル数

        Returns:
            (サンプルデータ, タイミング情報辞書)
        """
        start_time = time.perf_counter()
        samples = self.generate_samples(count)
        generation_time = time.perf_counter() - start_time

        timing_info = {
            'generation_time': generation_time,
            'samples_per_second': count / generation_time if generation_time > 0 else 0,
            'real_time_factor': (count / self._sample_rate) / generation_time if generation_time > 0 else 0,
            'cycles_per_sample': self._cycles_per_sample,
            'cycle_accumulator': self._cycle_accumulator
        }

        return samples, timing_info

    def reset_timing(self) -> None:
        """累積カウンタをリセット"""
        self._cycle_accumulator = 0.0

    def get_controller(self) -> SoundController:
        """サウンドコントローラを取得"""
        return self._controller

    def get_drift(self) -> float:
        """理想サイクル数と実消費サイクル数の差を取得

        Returns:
            N * clock / sample_rate - 累積消費サイクル数 (0以上1未満)
        """
        ideal = self._samples_generated * self._master_clock / self._sample_rate
        return ideal - self._cycles_executed

    def get_statistics(self) -> dict:
        """統計情報を取得

        Returns:
            統計情報辞書
        """
        return {
            'sample_rate': self._sample_rate,
            'output_channels': self._output_channels,
            'output_shift': self._output_shift,
            'master_clock': self._master_clock,
            'cycles_per_sample': self._cycles_per_sample,
            'cycle_accumulator': self._cycle_accumulator,
            'samples_generated': self._samples_generated,
            'cycles_executed': self._cycles_executed,
            'average_cycles_per_sample': (
                self._cycles_executed / self._samples_generated
                if self._samples_generated > 0 else 0
            )
        }

    def reset_statistics(self) -> None:
        """統計情報をリセット"""
        self._samples_generated = 0
        self._cycles_executed = 0


def render_note_sequence(generator: SampleGenerator,
                         notes: Sequence[Tuple[int, int]] = None) -> np.ndarray:
    """音符シーケンスをレンダリング

    各 (周波数, サイクル数) について矩形波チャンネル1をトリガーし、
    そのサイクル数を消費するまでサンプルを生成します。
    累積カウンタは音符間で持ち越されます。

    Args:
        generator: サンプル生成器
        notes: (周波数レジスタ値, マスタークロックサイクル数) のシーケンス

    Returns:
        連結されたint16サンプルデータ
    """
    if notes is None:
        notes = DEFAULT_NOTE_SEQUENCE

    controller = generator.get_controller()
    chunks = []
    for frequency, cycles in notes:
        controller.trigger_square1(frequency)
        chunks.append(generator.render_cycles(cycles))

    if not chunks:
        return generator.generate_samples(0)
    return np.concatenate(chunks, axis=0)


def create_sample_generator(controller: SoundController, stereo: bool = True) -> SampleGenerator:
    """標準的なサンプル生成器を作成

    Args:
        controller: サウンドコントローラ
        stereo: ステレオ出力を使用するかどうか

    Returns:
        SampleGeneratorインスタンス
    """
    return SampleGenerator(controller, output_channels=2 if stereo else 1)
