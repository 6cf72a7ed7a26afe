"""
Game Boy APU エミュレータ - デバイス設定

このモジュールは、APUエミュレータのデバイス設定クラスを提供します。
クロック周波数、サンプルレート、チャンネル初期設定、デバッグ設定などを管理します。
"""

from dataclasses import dataclass
from .types import (
    InvalidValueError,
    CLOCK_SPEED,
    FRAME_SEQUENCER_RATE,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_OUTPUT_SHIFT,
    MAX_OUTPUT_SHIFT,
    NUM_DUTY_PATTERNS,
    MAX_VOLUME,
    MAX_ENVELOPE_PERIOD,
    ENVELOPE_DECREASE,
    ENVELOPE_INCREASE
)


@dataclass
class SoundConfig:
    """APU設定クラス

    APUエミュレータの動作パラメータを定義します。

    Attributes:
        device_id: デバイス識別子
        clock_frequency: マスタークロック周波数 (Hz、512の倍数)
        sample_rate: 音声サンプルレート (Hz)
        channels: 出力チャンネル数 (1: モノラル、2: ステレオ)
        sample_width: 出力サンプル幅 (バイト、16ビットのみ)
        buffer_size: 音声バッファサイズ (サンプル数)
        output_shift: 4ビット振幅を16ビットPCMへスケールする左シフト量
        square1_duty: 矩形波チャンネル1のデューティパターン番号
        square1_initial_volume: 矩形波チャンネル1のエンベロープ初期音量
        square1_envelope_period: 矩形波チャンネル1のエンベロープ周期
        square1_envelope_direction: 矩形波チャンネル1のエンベロープ方向
        enable_debug: デバッグモード有効化
    """

    # 基本設定
    device_id: str = "gbapu"
    clock_frequency: int = CLOCK_SPEED

    # 音声設定
    sample_rate: int = DEFAULT_SAMPLE_RATE
    channels: int = 2  # ステレオ（左右同一）
    sample_width: int = 2  # 16ビット
    buffer_size: int = 1024
    output_shift: int = DEFAULT_OUTPUT_SHIFT

    # 矩形波チャンネル1設定
    square1_duty: int = 2  # 50%
    square1_initial_volume: int = 15
    square1_envelope_period: int = 3
    square1_envelope_direction: int = ENVELOPE_DECREASE

    # デバッグ設定
    enable_debug: bool = False

    def __post_init__(self):
        """初期化後の検証"""
        # クロック周波数の検証
        if self.clock_frequency <= 0:
            raise InvalidValueError(f"Clock frequency must be positive, got {self.clock_frequency}")

        if self.clock_frequency % FRAME_SEQUENCER_RATE != 0:
            raise InvalidValueError(
                f"Clock frequency {self.clock_frequency} must be a multiple of {FRAME_SEQUENCER_RATE}")

        # サンプルレートの検証
        if self.sample_rate <= 0:
            raise InvalidValueError(f"Sample rate must be positive, got {self.sample_rate}")

        if self.sample_rate > 192000:  # 192kHz上限
            raise InvalidValueError(f"Sample rate too high: {self.sample_rate} Hz")

        # チャンネル数の検証
        if self.channels not in [1, 2]:
            raise InvalidValueError(f"Channels must be 1 or 2, got {self.channels}")

        # サンプル幅の検証
        if self.sample_width != 2:
            raise InvalidValueError(f"Only 16-bit output is supported, got sample width {self.sample_width}")

        # バッファサイズの検証
        if self.buffer_size <= 0 or self.buffer_size > 8192:
            raise InvalidValueError(f"Buffer size must be in range [1, 8192], got {self.buffer_size}")

        # 出力シフトの検証
        if not (0 <= self.output_shift <= MAX_OUTPUT_SHIFT):
            raise InvalidValueError(
                f"Output shift must be in range [0, {MAX_OUTPUT_SHIFT}], got {self.output_shift}")

        # チャンネル設定の検証
        if not (0 <= self.square1_duty < NUM_DUTY_PATTERNS):
            raise InvalidValueError(
                f"Duty {self.square1_duty} out of range [0, {NUM_DUTY_PATTERNS - 1}]")

        if not (0 <= self.square1_initial_volume <= MAX_VOLUME):
            raise InvalidValueError(
                f"Initial volume {self.square1_initial_volume} out of range [0, {MAX_VOLUME}]")

        if not (0 <= self.square1_envelope_period <= MAX_ENVELOPE_PERIOD):
            raise InvalidValueError(
                f"Envelope period {self.square1_envelope_period} out of range [0, {MAX_ENVELOPE_PERIOD}]")

        if self.square1_envelope_direction not in (ENVELOPE_DECREASE, ENVELOPE_INCREASE):
            raise InvalidValueError(
                f"Envelope direction must be {ENVELOPE_DECREASE} or {ENVELOPE_INCREASE}, "
                f"got {self.square1_envelope_direction}")

    @property
    def frame_sequencer_cycles(self) -> int:
        """フレームシーケンサ1tickあたりのマスタークロックサイクル数

        Returns:
            分周値 (4194304Hzの場合は8192)
        """
        return self.clock_frequency // FRAME_SEQUENCER_RATE

    @property
    def cycles_per_sample(self) -> float:
        """出力1サンプルあたりのマスタークロックサイクル数

        Returns:
            非整数の比率 (4194304 / 44100 ≈ 95.1)
        """
        return self.clock_frequency / self.sample_rate

    def copy(self) -> 'SoundConfig':
        """設定のコピーを作成

        Returns:
            コピーされた設定オブジェクト
        """
        return SoundConfig(
            device_id=self.device_id,
            clock_frequency=self.clock_frequency,
            sample_rate=self.sample_rate,
            channels=self.channels,
            sample_width=self.sample_width,
            buffer_size=self.buffer_size,
            output_shift=self.output_shift,
            square1_duty=self.square1_duty,
            square1_initial_volume=self.square1_initial_volume,
            square1_envelope_period=self.square1_envelope_period,
            square1_envelope_direction=self.square1_envelope_direction,
            enable_debug=self.enable_debug
        )

    def __str__(self) -> str:
        """文字列表現"""
        return (f"SoundConfig("
                f"clock={self.clock_frequency/1000000:.3f}MHz, "
                f"sample_rate={self.sample_rate}Hz, "
                f"channels={self.channels}, "
                f"shift={self.output_shift}, "
                f"debug={self.enable_debug})")


# =============================================================================
# プリセット設定
# =============================================================================

def create_default_config() -> SoundConfig:
    """デフォルト設定を作成

    Returns:
        デフォルト設定オブジェクト (44.1kHz, 16ビット, ステレオ)
    """
    return SoundConfig()


def create_mono_config() -> SoundConfig:
    """モノラル設定を作成

    Returns:
        モノラル出力の設定オブジェクト
    """
    return SoundConfig(channels=1)


def create_high_quality_config() -> SoundConfig:
    """高品質設定を作成

    Returns:
        高品質設定オブジェクト (48kHz, 大きめのバッファ)
    """
    return SoundConfig(
        sample_rate=48000,
        buffer_size=2048
    )


def create_debug_config() -> SoundConfig:
    """デバッグ設定を作成

    Returns:
        デバッグ設定オブジェクト (デバッグ出力有効)
    """
    return SoundConfig(enable_debug=True)
