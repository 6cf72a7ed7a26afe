"""
Game Boy APU エミュレータ - フレームシーケンサ

マスタークロックを分周して512Hzのtickを生成する8ステップのシーケンサです。
"""

from typing import Dict, Any
from .types import (
    InvalidValueError,
    FRAME_SEQUENCER_RATE,
    FRAME_SEQUENCER_STEPS,
    ENVELOPE_STEP
)


class FrameSequencer:
    """512Hzフレームシーケンサ

    ダウンカウンタが0になるたびにフル分周値を再ロードし、
    ステップ番号を (step + 1) % 8 に進めます。
    イベントの配送はサウンドコントローラが行います。

    Attributes:
        _divider: 1tickあたりのマスタークロックサイクル数
        _counter: 次のtickまでの残りサイクル数
        _step: 現在のステップ (0-7)
    """

    def __init__(self, master_clock_hz: int):
        """フレームシーケンサを初期化

        Args:
            master_clock_hz: マスタークロック周波数 (Hz、512の倍数)

        Raises:
            InvalidValueError: クロックが512で割り切れない場合
        """
        if master_clock_hz <= 0 or master_clock_hz % FRAME_SEQUENCER_RATE != 0:
            raise InvalidValueError(
                f"Master clock {master_clock_hz} must be a positive multiple of {FRAME_SEQUENCER_RATE}")

        self._divider = master_clock_hz // FRAME_SEQUENCER_RATE
        self._counter = self._divider
        self._step = 0

    @property
    def divider(self) -> int:
        """1tickあたりのマスタークロックサイクル数"""
        return self._divider

    @property
    def counter(self) -> int:
        """次のtickまでの残りサイクル数"""
        return self._counter

    @property
    def step(self) -> int:
        """現在のステップ (0-7)"""
        return self._step

    def advance(self, cycles: int) -> bool:
        """カウンタを進める

        呼び出し側は cycles を counter 以下に制限する必要があります。

        Args:
            cycles: 進めるマスタークロックサイクル数 (0 <= cycles <= counter)

        Returns:
            tickが発生した場合True（ステップは既に進んでいる）

        Raises:
            InvalidValueError: cyclesが範囲外の場合
        """
        if not (0 <= cycles <= self._counter):
            raise InvalidValueError(f"Cycles {cycles} out of range [0, {self._counter}]")

        self._counter -= cycles
        if self._counter > 0:
            return False

        self._counter = self._divider
        self._step = (self._step + 1) % FRAME_SEQUENCER_STEPS
        return True

    def is_envelope_step(self) -> bool:
        """現在のステップがエンベロープtickステップかどうか"""
        return self._step == ENVELOPE_STEP

    def cycles_until_envelope(self) -> int:
        """次のエンベロープtickまでのマスタークロックサイクル数を予測"""
        steps_ahead = (ENVELOPE_STEP - self._step - 1) % FRAME_SEQUENCER_STEPS
        return self._counter + steps_ahead * self._divider

    def reset(self) -> None:
        """シーケンサをリセット"""
        self._counter = self._divider
        self._step = 0

    def get_state(self) -> Dict[str, Any]:
        """現在の状態を辞書として取得"""
        return {
            'counter': self._counter,
            'step': self._step
        }

    def validate_state(self, state: Dict[str, Any]) -> None:
        """状態辞書を検証（シーケンサは変更しない）

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        counter = state.get('counter')
        step = state.get('step')

        if counter is None or not (1 <= counter <= self._divider):
            raise InvalidValueError(f"Invalid counter in state: {counter}")
        if step is None or not (0 <= step < FRAME_SEQUENCER_STEPS):
            raise InvalidValueError(f"Invalid step in state: {step}")

    def set_state(self, state: Dict[str, Any]) -> None:
        """状態を辞書から復元

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        self.validate_state(state)
        self._counter = state['counter']
        self._step = state['step']

    def __repr__(self) -> str:
        return (f"FrameSequencer(divider={self._divider}, "
                f"counter={self._counter}, "
                f"step={self._step})")
