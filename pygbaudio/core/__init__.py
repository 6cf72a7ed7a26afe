"""
Game Boy APU エミュレータ - コア層

このモジュールは、APUエミュレータのコア機能を提供します。
基本型定義、設定クラス、チャンネルジェネレータ、およびサイクルスケジューラを含みます。
"""

from .types import (
    # エラークラス
    GBAudioError,
    InvalidValueError,
    AudioDriverError,

    # 状態クラス
    SoundControllerState,

    # 抽象基底クラス
    Device,
    Channel,

    # 定数
    CLOCK_SPEED,
    FRAME_SEQUENCER_RATE,
    FRAME_SEQUENCER_STEPS,
    ENVELOPE_STEP,
    MAX_FREQUENCY,
    PHASE_STEPS,
    NUM_DUTY_PATTERNS,
    MAX_VOLUME,
    MAX_ENVELOPE_PERIOD,
    ENVELOPE_DECREASE,
    ENVELOPE_INCREASE,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_OUTPUT_SHIFT,
)

from .device_config import (
    # 設定クラス
    SoundConfig,

    # プリセット設定関数
    create_default_config,
    create_mono_config,
    create_high_quality_config,
    create_debug_config,
)

from .volume_envelope import VolumeEnvelope

from .square_channel import (
    # 矩形波チャンネルクラス
    SquareChannel,
    DUTY_PATTERNS,

    # ユーティリティ関数
    frequency_to_period,
    period_to_hz,
    hz_to_frequency,
    create_square_channel,
)

from .frame_sequencer import FrameSequencer

from .sound_controller import (
    # サイクルスケジューラ
    SoundController,

    # ファクトリ関数
    create_sound_controller,
    create_debug_controller,
)

# パブリックAPI
__all__ = [
    # エラークラス
    "GBAudioError",
    "InvalidValueError",
    "AudioDriverError",

    # 状態クラス
    "SoundControllerState",

    # 抽象基底クラス
    "Device",
    "Channel",

    # 設定クラス
    "SoundConfig",

    # コンポーネントクラス
    "VolumeEnvelope",
    "SquareChannel",
    "FrameSequencer",
    "SoundController",

    # 定数
    "CLOCK_SPEED",
    "FRAME_SEQUENCER_RATE",
    "FRAME_SEQUENCER_STEPS",
    "ENVELOPE_STEP",
    "MAX_FREQUENCY",
    "PHASE_STEPS",
    "NUM_DUTY_PATTERNS",
    "MAX_VOLUME",
    "MAX_ENVELOPE_PERIOD",
    "ENVELOPE_DECREASE",
    "ENVELOPE_INCREASE",
    "DEFAULT_SAMPLE_RATE",
    "DEFAULT_OUTPUT_SHIFT",
    "DUTY_PATTERNS",

    # プリセット設定関数
    "create_default_config",
    "create_mono_config",
    "create_high_quality_config",
    "create_debug_config",

    # ファクトリ関数
    "create_square_channel",
    "create_sound_controller",
    "create_debug_controller",

    # ユーティリティ関数
    "frequency_to_period",
    "period_to_hz",
    "hz_to_frequency",
]
