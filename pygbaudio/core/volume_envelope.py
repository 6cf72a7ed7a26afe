"""
Game Boy APU エミュレータ - ボリュームエンベロープ

このモジュールは、各チャンネルの音量を時間経過とともに増減させる
ボリュームエンベロープを実装します。
エンベロープはマスタークロックではなくフレームシーケンサ（512Hz）の
エンベロープステップで駆動されます。
"""

from typing import Dict, Any
from .types import (
    InvalidValueError,
    MAX_VOLUME,
    MAX_ENVELOPE_PERIOD,
    ENVELOPE_PERIOD_ZERO_RELOAD,
    ENVELOPE_DECREASE,
    ENVELOPE_INCREASE
)


class VolumeEnvelope:
    """ボリュームエンベロープ

    トリガー時に初期音量からスタートし、周期ごとに音量を1ずつ
    増加または減少させます。音量が0（減少時）または15（増加時）に
    到達するとフリーズし、次の init() まで変化しません。

    設計方針:
        - update(1回) は「フレームシーケンサのエンベロープtick 1回」を意味
        - 周期は64Hz単位（エンベロープtick単位）で計測
        - 周期0はエンベロープ停止（音量は初期値のまま）

    Attributes:
        _initial_volume: 初期音量 (0-15)
        _direction: 方向 (ENVELOPE_DECREASE / ENVELOPE_INCREASE)
        _period: エンベロープ周期 (0-7)
        _period_counter: 次の音量変化までの残りtick数
        _volume: 現在の音量 (0-15)
        _updating: 音量変化中フラグ
    """

    def __init__(self, initial_volume: int, direction: int, period: int):
        """エンベロープを初期化

        Args:
            initial_volume: 初期音量 (0-15)
            direction: 方向 (ENVELOPE_DECREASE / ENVELOPE_INCREASE)
            period: エンベロープ周期 (0-7)

        Raises:
            InvalidValueError: パラメータが無効な場合
        """
        self.initial_volume = initial_volume
        self.direction = direction
        self.period = period

        self._period_counter = 0
        self._volume = 0
        self._updating = False

    # -------------------------------------------------------------------------
    # 設定プロパティ
    # -------------------------------------------------------------------------

    @property
    def initial_volume(self) -> int:
        """初期音量"""
        return self._initial_volume

    @initial_volume.setter
    def initial_volume(self, value: int) -> None:
        if not (0 <= value <= MAX_VOLUME):
            raise InvalidValueError(f"Initial volume {value} out of range [0, {MAX_VOLUME}]")
        self._initial_volume = value

    @property
    def direction(self) -> int:
        """エンベロープ方向"""
        return self._direction

    @direction.setter
    def direction(self, value: int) -> None:
        if value not in (ENVELOPE_DECREASE, ENVELOPE_INCREASE):
            raise InvalidValueError(
                f"Envelope direction must be {ENVELOPE_DECREASE} or {ENVELOPE_INCREASE}, got {value}")
        self._direction = value

    @property
    def period(self) -> int:
        """エンベロープ周期"""
        return self._period

    @period.setter
    def period(self, value: int) -> None:
        if not (0 <= value <= MAX_ENVELOPE_PERIOD):
            raise InvalidValueError(f"Envelope period {value} out of range [0, {MAX_ENVELOPE_PERIOD}]")
        self._period = value

    # -------------------------------------------------------------------------
    # 状態遷移
    # -------------------------------------------------------------------------

    def init(self) -> None:
        """エンベロープをトリガー（再初期化）"""
        self._volume = self._initial_volume
        self._period_counter = self._period if self._period > 0 else ENVELOPE_PERIOD_ZERO_RELOAD
        self._updating = True

    def update(self) -> None:
        """エンベロープtickを1回処理

        フレームシーケンサのエンベロープステップごとに1回呼ばれます。
        """
        if self._period == 0 or not self._updating:
            return

        self._period_counter -= 1
        if self._period_counter > 0:
            return

        self._period_counter = self._period

        delta = 1 if self._direction == ENVELOPE_INCREASE else -1
        new_volume = self._volume + delta

        # 初期音量が既にレール上の場合は変化させずにフリーズ
        if not (0 <= new_volume <= MAX_VOLUME):
            self._updating = False
            return

        self._volume = new_volume
        if self._volume == 0 or self._volume == MAX_VOLUME:
            self._updating = False

    @property
    def volume(self) -> int:
        """現在の音量 (0-15)"""
        return self._volume

    @property
    def updating(self) -> bool:
        """音量変化中かどうか"""
        return self._updating

    def get_period_counter(self) -> int:
        """次の音量変化までの残りtick数を取得"""
        return self._period_counter

    def generate_volume_sequence(self, ticks: int) -> list:
        """トリガーからのエンベロープ音量シーケンスを生成（状態は変更しない）

        Args:
            ticks: 生成するエンベロープtick数

        Returns:
            各tick処理前の音量のリスト
        """
        saved_state = self.get_state()

        self.init()
        sequence = []
        for _ in range(ticks):
            sequence.append(self._volume)
            self.update()

        self.set_state(saved_state)
        return sequence

    # -------------------------------------------------------------------------
    # 状態保存・復元
    # -------------------------------------------------------------------------

    def get_state(self) -> Dict[str, Any]:
        """現在の状態を辞書として取得"""
        return {
            'initial_volume': self._initial_volume,
            'direction': self._direction,
            'period': self._period,
            'period_counter': self._period_counter,
            'volume': self._volume,
            'updating': self._updating
        }

    @staticmethod
    def validate_state(state: Dict[str, Any]) -> None:
        """状態辞書を検証（エンベロープは変更しない）

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        required_keys = {'initial_volume', 'direction', 'period',
                         'period_counter', 'volume', 'updating'}
        if not all(key in state for key in required_keys):
            raise InvalidValueError(f"State must contain keys: {required_keys}")

        if not (0 <= state['initial_volume'] <= MAX_VOLUME):
            raise InvalidValueError(f"Invalid initial volume in state: {state['initial_volume']}")
        if state['direction'] not in (ENVELOPE_DECREASE, ENVELOPE_INCREASE):
            raise InvalidValueError(f"Invalid direction in state: {state['direction']}")
        if not (0 <= state['period'] <= MAX_ENVELOPE_PERIOD):
            raise InvalidValueError(f"Invalid period in state: {state['period']}")
        if not (0 <= state['volume'] <= MAX_VOLUME):
            raise InvalidValueError(f"Invalid volume in state: {state['volume']}")
        if not (0 <= state['period_counter'] <= ENVELOPE_PERIOD_ZERO_RELOAD):
            raise InvalidValueError(f"Invalid period counter in state: {state['period_counter']}")

    def set_state(self, state: Dict[str, Any]) -> None:
        """状態を辞書から復元

        検証に失敗した場合、エンベロープは変更されません。

        Args:
            state: 状態辞書

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        self.validate_state(state)

        self._initial_volume = state['initial_volume']
        self._direction = state['direction']
        self._period = state['period']
        self._period_counter = state['period_counter']
        self._volume = state['volume']
        self._updating = bool(state['updating'])

    def __repr__(self) -> str:
        return (f"VolumeEnvelope(initial_volume={self._initial_volume}, "
                f"direction={self._direction}, "
                f"period={self._period}, "
                f"volume={self._volume}, "
                f"updating={self._updating})")

    def __eq__(self, other) -> bool:
        if not isinstance(other, VolumeEnvelope):
            return False
        return self.get_state() == other.get_state()
