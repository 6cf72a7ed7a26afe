"""
Game Boy APU エミュレータ - 基本型定義とエラークラス

このモジュールは、APUエミュレータの基本的な型定義、
データクラス、およびエラークラスを提供します。
"""

from dataclasses import dataclass
from typing import Dict, Any
from abc import ABC, abstractmethod


# =============================================================================
# エラークラス定義
# =============================================================================

class GBAudioError(Exception):
    """APUエミュレータ基本例外"""
    pass


class InvalidValueError(GBAudioError):
    """無効な値エラー

    周波数・デューティ・エンベロープ設定や、負のサイクル数など
    範囲外の値が渡された時に発生
    """
    pass


class AudioDriverError(GBAudioError):
    """音声ドライバエラー

    音声出力システムでエラーが発生した時に発生
    """
    pass


# =============================================================================
# 状態管理データクラス
# =============================================================================

@dataclass
class SoundControllerState:
    """サウンドコントローラのスケジューラ状態

    フレームシーケンサのカウンタとステップ、および累積マスタークロックを保持します。
    チャンネル側の状態は各チャンネルの get_state() が管理します。

    Attributes:
        master_clock_counter: 起動からの累積マスタークロックサイクル数
        frame_sequencer_counter: 次のフレームシーケンサtickまでの残りサイクル数
        frame_sequencer_step: 現在のフレームシーケンサステップ (0-7)
    """
    master_clock_counter: int = 0
    frame_sequencer_counter: int = 0
    frame_sequencer_step: int = 0

    def __post_init__(self):
        """初期化後の検証"""
        if self.master_clock_counter < 0:
            raise InvalidValueError(
                f"Master clock counter must be non-negative, got {self.master_clock_counter}")

        if self.frame_sequencer_counter < 0:
            raise InvalidValueError(
                f"Frame sequencer counter must be non-negative, got {self.frame_sequencer_counter}")

        if not (0 <= self.frame_sequencer_step < FRAME_SEQUENCER_STEPS):
            raise InvalidValueError(
                f"Frame sequencer step {self.frame_sequencer_step} out of range "
                f"[0, {FRAME_SEQUENCER_STEPS - 1}]")

    def to_dict(self) -> Dict[str, Any]:
        """辞書形式にシリアライズ"""
        return {
            'master_clock_counter': self.master_clock_counter,
            'frame_sequencer_counter': self.frame_sequencer_counter,
            'frame_sequencer_step': self.frame_sequencer_step
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SoundControllerState':
        """辞書からデシリアライズ"""
        return cls(**data)


# =============================================================================
# 抽象基底クラス
# =============================================================================

class Device(ABC):
    """デバイス抽象基底クラス"""

    @property
    @abstractmethod
    def name(self) -> str:
        """デバイス名"""
        pass

    @abstractmethod
    def reset(self) -> None:
        """デバイスリセット"""
        pass

    @abstractmethod
    def tick(self, master_cycles: int) -> int:
        """Tick駆動実行"""
        pass


class Channel(ABC):
    """チャンネルジェネレータ抽象基底クラス

    サウンドコントローラに登録される全チャンネル（矩形波・波形メモリ・ノイズ）が
    実装すべき契約。コントローラはサブステップごとに update() を呼び、
    フレームシーケンサのエンベロープステップで clock_envelope() を通知します。
    """

    @property
    @abstractmethod
    def sample(self) -> int:
        """現在の瞬時振幅 (0-15)"""
        pass

    @abstractmethod
    def init(self) -> None:
        """チャンネルをトリガー"""
        pass

    @abstractmethod
    def update(self, cycles: int) -> None:
        """指定マスタークロックサイクル数だけ進める"""
        pass

    @abstractmethod
    def clock_envelope(self) -> None:
        """フレームシーケンサのエンベロープtick通知"""
        pass

    @abstractmethod
    def get_state(self) -> Dict[str, Any]:
        """状態を辞書として取得"""
        pass

    @abstractmethod
    def validate_state(self, state: Dict[str, Any]) -> None:
        """状態辞書を検証（チャンネルは変更しない）"""
        pass

    @abstractmethod
    def set_state(self, state: Dict[str, Any]) -> None:
        """状態を辞書から復元"""
        pass


# =============================================================================
# 定数定義
# =============================================================================

# クロック定数
CLOCK_SPEED = 4194304  # 2^22 Hz
FRAME_SEQUENCER_RATE = 512  # Hz
FRAME_SEQUENCER_STEPS = 8
ENVELOPE_STEP = 7  # エンベロープtickを発火するステップ

# 矩形波チャンネル定数
MAX_FREQUENCY = 0x7FF  # 11ビット
PHASE_STEPS = 8
NUM_DUTY_PATTERNS = 4

# エンベロープ定数
MAX_VOLUME = 15  # 4ビット
MAX_ENVELOPE_PERIOD = 7  # 3ビット
ENVELOPE_PERIOD_ZERO_RELOAD = 8  # 周期0の時のカウンタ初期値

# エンベロープ方向定数
ENVELOPE_DECREASE = 0
ENVELOPE_INCREASE = 1

# 出力定数
DEFAULT_SAMPLE_RATE = 44100
DEFAULT_OUTPUT_SHIFT = 10  # 4ビット振幅を16ビットPCMへスケール
MAX_OUTPUT_SHIFT = 11  # 15 << 11 = 30720 (int16に収まる上限)
