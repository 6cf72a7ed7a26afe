"""
PyGBAudio - Game Boy APU エミュレータ

Python実装のGame Boy Audio Processing Unit (APU) エミュレータライブラリ。
マスタークロック単位の正確なサイクルスケジューリングで矩形波チャンネルを駆動し、
WAVファイル出力・リアルタイム音声出力・デバッグ可視化機能を提供します。

主な機能:
- 矩形波チャンネル（4種類のデューティパターン）
- ボリュームエンベロープ（64Hz）
- 512Hzフレームシーケンサ
- 境界を跨がないサブステップ分割によるサイクルスケジューラ
- 小数アキュムレータによるサンプルレート変換
- WAVファイル出力・リアルタイム音声出力
- 状態保存・復元

使用例:
    >>> from pygbaudio import create_default_config, create_emulator
    >>> config = create_default_config()
    >>> print(config)
    SoundConfig(clock=4.194MHz, sample_rate=44100Hz, channels=2, shift=10, debug=False)

    >>> apu = create_emulator(config)
    >>> apu.trigger_square1(0x783)
    >>> apu.update(4194304 // 60)
"""

# バージョン情報
__version__ = "1.0.0"
__author__ = "PyGBAudio Development Team"
__license__ = "MIT"
__description__ = "Game Boy APU Emulator - cycle-accurate square channel and frame sequencer emulation"

# バージョン情報辞書
VERSION_INFO = {
    'version': __version__,
    'author': __author__,
    'license': __license__,
    'description': __description__
}

# コア機能のインポート
from .core import (
    # エラークラス
    GBAudioError,
    InvalidValueError,
    AudioDriverError,

    # 状態・設定クラス
    SoundControllerState,
    SoundConfig,

    # 抽象基底クラス
    Device,
    Channel,

    # コンポーネントクラス
    VolumeEnvelope,
    SquareChannel,
    FrameSequencer,
    SoundController,

    # プリセット設定関数
    create_default_config,
    create_mono_config,
    create_high_quality_config,
    create_debug_config,

    # ファクトリ関数
    create_square_channel,
    create_sound_controller,
    create_debug_controller,

    # ユーティリティ関数
    frequency_to_period,

    # 重要な定数
    CLOCK_SPEED,
    FRAME_SEQUENCER_RATE,
    DUTY_PATTERNS,
)

# 音声出力機能のインポート
from .audio import (
    # 音声クラス
    AudioDriver,
    AudioBuffer,
    SampleGenerator,
    WaveFileWriter,

    # 関数
    DEFAULT_NOTE_SEQUENCE,
    render_note_sequence,
    write_wav_file,
    create_audio_driver,
    list_audio_devices,
)

# ユーティリティ機能のインポート
from .utils import (
    StateManager,
    create_state_manager,
)

# パブリックAPI定義
__all__ = [
    # バージョン情報
    "__version__",
    "__author__",
    "__license__",
    "__description__",

    # エラークラス
    "GBAudioError",
    "InvalidValueError",
    "AudioDriverError",

    # 状態・設定クラス
    "SoundControllerState",
    "SoundConfig",

    # 抽象基底クラス
    "Device",
    "Channel",

    # コンポーネントクラス
    "VolumeEnvelope",
    "SquareChannel",
    "FrameSequencer",
    "SoundController",

    # プリセット設定関数
    "create_default_config",
    "create_mono_config",
    "create_high_quality_config",
    "create_debug_config",

    # ファクトリ関数
    "create_square_channel",
    "create_sound_controller",
    "create_debug_controller",
    "create_emulator",

    # ユーティリティ関数
    "frequency_to_period",

    # 音声出力
    "AudioDriver",
    "AudioBuffer",
    "SampleGenerator",
    "WaveFileWriter",
    "DEFAULT_NOTE_SEQUENCE",
    "render_note_sequence",
    "write_wav_file",
    "create_audio_driver",
    "list_audio_devices",

    # 状態管理
    "StateManager",
    "create_state_manager",

    # 重要な定数
    "CLOCK_SPEED",
    "FRAME_SEQUENCER_RATE",
    "DUTY_PATTERNS",
]


def get_version_info() -> dict:
    """バージョン情報を取得

    Returns:
        バージョン情報辞書
    """
    return dict(VERSION_INFO)


def create_emulator(config: SoundConfig = None) -> SoundController:
    """エミュレータインスタンスを作成

    Args:
        config: エミュレータ設定 (Noneの場合はデフォルト設定)

    Returns:
        SoundControllerインスタンス
    """
    return create_sound_controller(config)


# ライブラリ初期化時のメッセージ (デバッグモードでのみ表示)
import os
if os.environ.get('PYGBAUDIO_DEBUG'):
    print(f"PyGBAudio v{__version__} - Game Boy APU Emulator")
    print(f"Author: {__author__}")
    print(f"License: {__license__}")
