"""
Game Boy APU エミュレータ - サウンドコントローラ

このモジュールは、フレームシーケンサと全チャンネルジェネレータを
マスタークロック単位で同期して進めるサイクルスケジューラを実装します。
"""

from typing import Dict, Any, List, Tuple
from .types import (
    SoundControllerState, Device, Channel,
    InvalidValueError,
    ENVELOPE_STEP
)
from .device_config import SoundConfig
from .frame_sequencer import FrameSequencer
from .square_channel import SquareChannel, create_square_channel


class SoundController(Device):
    """サウンドコントローラ（サイクルスケジューラ）

    フレームシーケンサと全チャンネルを排他的に所有し、
    update(cycles) で指定サイクル数だけ正確に進めます。

    主な機能:
    - フレームシーケンサ境界を越えないサブステップ分割
    - エンベロープtickの全チャンネルへの配送
    - チャンネル出力の合算
    - 状態保存・復元

    スレッド安全ではありません。1つのスレッドからのみ更新してください。

    Attributes:
        _config: エミュレータ設定
        _frame_sequencer: フレームシーケンサ
        _square1: 矩形波チャンネル1
        _channels: 登録済みチャンネル（更新順）
        _master_clock_counter: 累積マスタークロック
    """

    def __init__(self, config: SoundConfig):
        """SoundControllerを初期化

        Args:
            config: エミュレータ設定
        """
        self._config = config
        self._frame_sequencer = FrameSequencer(config.clock_frequency)

        # チャンネルインスタンス作成
        self._square1 = self._create_square1()
        self._channels: List[Channel] = [self._square1]

        self._master_clock_counter = 0

        # デバッグ情報
        self._debug_info = self._new_debug_info()

    def _create_square1(self) -> SquareChannel:
        config = self._config
        return create_square_channel(
            duty=config.square1_duty,
            initial_volume=config.square1_initial_volume,
            envelope_direction=config.square1_envelope_direction,
            envelope_period=config.square1_envelope_period
        )

    @staticmethod
    def _new_debug_info() -> Dict[str, Any]:
        return {
            'total_cycles': 0,
            'update_calls': 0,
            'frame_sequencer_ticks': 0,
            'envelope_ticks': 0
        }

    @property
    def name(self) -> str:
        """デバイス名を取得"""
        return "Game Boy APU"

    @property
    def square1(self) -> SquareChannel:
        """矩形波チャンネル1"""
        return self._square1

    @property
    def channels(self) -> Tuple[Channel, ...]:
        """登録済みチャンネル（更新順）"""
        return tuple(self._channels)

    @property
    def frame_sequencer(self) -> FrameSequencer:
        """フレームシーケンサ"""
        return self._frame_sequencer

    @property
    def master_clock_counter(self) -> int:
        """累積マスタークロックサイクル数"""
        return self._master_clock_counter

    def reset(self) -> None:
        """コントローラを電源投入時の状態にリセット"""
        self._frame_sequencer.reset()
        self._square1 = self._create_square1()
        self._channels = [self._square1]
        self._master_clock_counter = 0
        self._debug_info = self._new_debug_info()

        if self._config.enable_debug:
            print(f"[DEBUG] {self.name} reset completed")

    def update(self, cycles: int) -> None:
        """指定マスタークロックサイクル数だけ全コンポーネントを進める

        各サブステップは min(残りサイクル, フレームシーケンサ残りカウンタ) で、
        チャンネル更新の後にフレームシーケンサを進めます。

        Args:
            cycles: 実行するマスタークロックサイクル数

        Raises:
            InvalidValueError: サイクル数が負の場合
        """
        if cycles < 0:
            raise InvalidValueError(f"Cycles must be non-negative, got {cycles}")

        self._debug_info['update_calls'] += 1
        remaining = cycles

        while remaining > 0:
            step = min(remaining, self._frame_sequencer.counter)

            for channel in self._channels:
                channel.update(step)

            if self._frame_sequencer.advance(step):
                self._debug_info['frame_sequencer_ticks'] += 1
                self._dispatch_frame_sequencer_step(self._frame_sequencer.step)

            remaining -= step

        self._master_clock_counter += cycles
        self._debug_info['total_cycles'] += cycles

    def _dispatch_frame_sequencer_step(self, step: int) -> None:
        """フレームシーケンサのステップイベントを各チャンネルに配送"""
        if step == ENVELOPE_STEP:
            self._debug_info['envelope_ticks'] += 1
            for channel in self._channels:
                channel.clock_envelope()

    def tick(self, master_cycles: int) -> int:
        """Tick駆動実行

        Args:
            master_cycles: 実行するマスタークロックサイクル数

        Returns:
            実際に消費されたサイクル数
        """
        self.update(master_cycles)
        return master_cycles

    def trigger_square1(self, frequency: int) -> None:
        """矩形波チャンネル1に周波数を設定してトリガー

        Args:
            frequency: 周波数レジスタ値 (0-2047)
        """
        self._square1.frequency = frequency
        self._square1.init()

        if self._config.enable_debug:
            print(f"[DEBUG] Square1 triggered: frequency=0x{frequency:03X} "
                  f"period={self._square1.period} "
                  f"at cycle {self._master_clock_counter}")

    def get_mixed_output(self) -> int:
        """全チャンネルの瞬時振幅の合計を取得

        Returns:
            合算振幅 (チャンネル数 × 0-15)
        """
        return sum(channel.sample for channel in self._channels)

    def get_channel_outputs(self) -> List[int]:
        """各チャンネルの個別出力を取得

        Returns:
            各チャンネルの瞬時振幅リスト（登録順）
        """
        return [channel.sample for channel in self._channels]

    def get_config(self) -> SoundConfig:
        """エミュレータ設定を取得"""
        return self._config

    def get_state(self) -> Dict[str, Any]:
        """現在の状態を取得

        Returns:
            状態辞書
        """
        scheduler_state = SoundControllerState(
            master_clock_counter=self._master_clock_counter,
            frame_sequencer_counter=self._frame_sequencer.counter,
            frame_sequencer_step=self._frame_sequencer.step
        )

        state_dict = scheduler_state.to_dict()
        state_dict['channel_states'] = [channel.get_state() for channel in self._channels]
        state_dict['debug_info'] = self._debug_info.copy()
        return state_dict

    def set_state(self, state: Dict[str, Any]) -> None:
        """状態を復元

        全コンポーネントの状態を検証してから書き込むため、
        例外が発生した場合コントローラは変更されません。

        Args:
            state: 状態辞書

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        basic_state = {}
        for key in ['master_clock_counter', 'frame_sequencer_counter', 'frame_sequencer_step']:
            if key in state:
                basic_state[key] = state[key]

        scheduler_state = SoundControllerState.from_dict(basic_state)
        sequencer_state = {
            'counter': scheduler_state.frame_sequencer_counter,
            'step': scheduler_state.frame_sequencer_step
        }

        channel_states = state.get('channel_states', [])
        if len(channel_states) != len(self._channels):
            raise InvalidValueError(
                f"Expected {len(self._channels)} channel states, got {len(channel_states)}")

        self._frame_sequencer.validate_state(sequencer_state)
        for channel, channel_state in zip(self._channels, channel_states):
            channel.validate_state(channel_state)
        if not isinstance(state.get('debug_info', {}), dict):
            raise InvalidValueError("debug_info must be a dict")

        self._frame_sequencer.set_state(sequencer_state)
        for channel, channel_state in zip(self._channels, channel_states):
            channel.set_state(channel_state)
        self._master_clock_counter = scheduler_state.master_clock_counter

        if 'debug_info' in state:
            self._debug_info.update(state['debug_info'])

        if self._config.enable_debug:
            print("[DEBUG] State restored successfully")

    def get_debug_info(self) -> Dict[str, Any]:
        """デバッグ情報を取得

        Returns:
            デバッグ情報辞書
        """
        return {
            'config': {
                'clock_frequency': self._config.clock_frequency,
                'frame_sequencer_cycles': self._config.frame_sequencer_cycles,
                'sample_rate': self._config.sample_rate,
                'enable_debug': self._config.enable_debug
            },
            'statistics': self._debug_info.copy(),
            'current_state': {
                'master_clock_counter': self._master_clock_counter,
                'frame_sequencer': self._frame_sequencer.get_state(),
                'channel_outputs': self.get_channel_outputs(),
                'square1': self._square1.get_state()
            }
        }

    def __str__(self) -> str:
        return (f"SoundController(clock={self._config.clock_frequency}Hz, "
                f"cycles={self._master_clock_counter})")

    def __repr__(self) -> str:
        return (f"SoundController(config={self._config}, "
                f"frame_sequencer={self._frame_sequencer!r}, "
                f"square1={self._square1!r})")


# =============================================================================
# ファクトリ関数
# =============================================================================

def create_sound_controller(config: SoundConfig = None) -> SoundController:
    """SoundControllerを作成

    Args:
        config: エミュレータ設定 (Noneの場合はデフォルト作成)

    Returns:
        SoundControllerインスタンス
    """
    if config is None:
        from .device_config import create_default_config
        config = create_default_config()

    return SoundController(config)


def create_debug_controller() -> SoundController:
    """デバッグ用SoundControllerを作成

    Returns:
        デバッグ出力有効のSoundControllerインスタンス
    """
    from .device_config import create_debug_config
    return SoundController(create_debug_config())
