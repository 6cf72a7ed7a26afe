"""
Game Boy APU エミュレータ - 矩形波チャンネル

このモジュールは、11ビット周波数レジスタから導出される周期カウンタと
8ステップのデューティパターンを使用する矩形波チャンネルを実装します。
"""

from typing import Dict, Any, List
from .types import (
    Channel,
    InvalidValueError,
    MAX_FREQUENCY,
    PHASE_STEPS,
    NUM_DUTY_PATTERNS
)
from .volume_envelope import VolumeEnvelope


# デューティパターン（8ステップ、1=ハイ）
DUTY_PATTERNS: List[List[int]] = [
    [0, 1, 0, 0, 0, 0, 0, 0],  # 12.5%
    [1, 1, 0, 0, 0, 0, 0, 0],  # 25%
    [1, 1, 1, 1, 0, 0, 0, 0],  # 50%
    [0, 0, 1, 1, 1, 1, 1, 1],  # 75%
]


def frequency_to_period(frequency: int) -> int:
    """11ビット周波数値から位相更新周期を計算

    Args:
        frequency: 周波数レジスタ値 (0-2047)

    Returns:
        位相が1ステップ進むまでのマスタークロックサイクル数

    Raises:
        InvalidValueError: 周波数が11ビット範囲外の場合

    Formula:
        period = (2048 - f) * 4

    Note:
        f = 0 も受け付けます（実機でも有効な値で、周期は最長の8192）。
        受け付ける範囲は 0 < f ではなく 0 <= f <= 2047 です。
    """
    if not (0 <= frequency <= MAX_FREQUENCY):
        raise InvalidValueError(f"Frequency {frequency} out of range [0, {MAX_FREQUENCY}]")

    return (MAX_FREQUENCY + 1 - frequency) * 4


def period_to_hz(period: int, master_clock_hz: float) -> float:
    """位相更新周期から出力音の周波数を計算

    1波形は8ステップなので F = F_clock / (8 * period)

    Args:
        period: 位相更新周期（マスタークロックサイクル数）
        master_clock_hz: マスタークロック周波数 (Hz)

    Returns:
        出力音の周波数 (Hz)
    """
    if period <= 0:
        raise InvalidValueError(f"Period must be positive, got {period}")
    if master_clock_hz <= 0:
        raise InvalidValueError(f"Master clock frequency must be positive, got {master_clock_hz}")

    return master_clock_hz / (PHASE_STEPS * period)


class SquareChannel(Channel):
    """矩形波チャンネル

    周期カウンタがマスタークロックでダウンカウントし、0になるたびに
    位相を1ステップ進め、デューティパターンとエンベロープ音量から
    瞬時振幅を再計算します。

    設計方針:
        - update(n) は「n マスタークロックサイクル」を意味
        - サブステップは周期カウンタの残り値を超えない
        - 周波数変更は周期のみ更新し、実行中のカウンタと位相は維持
        - init() はカウンタを再ロードするが位相はリセットしない

    Attributes:
        _frequency: 周波数レジスタ値 (0-2047)
        _period: 導出された位相更新周期
        _counter: 次の位相更新までの残りサイクル数
        _duty: デューティパターン番号 (0-3)
        _phase: 現在の位相 (0-7)
        _sample: 最後に計算された瞬時振幅 (0-15)
        _envelope: ボリュームエンベロープ
    """

    def __init__(self, duty: int, envelope: VolumeEnvelope, frequency: int = 0):
        """矩形波チャンネルを初期化

        Args:
            duty: デューティパターン番号 (0-3)
            envelope: ボリュームエンベロープ
            frequency: 初期周波数レジスタ値 (0-2047)

        Raises:
            InvalidValueError: パラメータが無効な場合
        """
        self.duty = duty
        self._envelope = envelope
        self.frequency = frequency

        self._counter = self._period
        self._phase = 0
        self._sample = 0

    # -------------------------------------------------------------------------
    # 設定プロパティ
    # -------------------------------------------------------------------------

    @property
    def frequency(self) -> int:
        """周波数レジスタ値"""
        return self._frequency

    @frequency.setter
    def frequency(self, value: int) -> None:
        self._period = frequency_to_period(value)
        self._frequency = value

    @property
    def period(self) -> int:
        """位相更新周期（マスタークロックサイクル数）"""
        return self._period

    @property
    def duty(self) -> int:
        """デューティパターン番号"""
        return self._duty

    @duty.setter
    def duty(self, value: int) -> None:
        if not (0 <= value < NUM_DUTY_PATTERNS):
            raise InvalidValueError(f"Duty {value} out of range [0, {NUM_DUTY_PATTERNS - 1}]")
        self._duty = value

    @property
    def envelope(self) -> VolumeEnvelope:
        """ボリュームエンベロープ"""
        return self._envelope

    # -------------------------------------------------------------------------
    # 状態遷移
    # -------------------------------------------------------------------------

    def init(self) -> None:
        """チャンネルをトリガー

        エンベロープを再初期化し、周期カウンタをフル周期に再ロードします。
        位相はリセットしません。
        """
        self._envelope.init()
        self._counter = self._period

    def update(self, cycles: int) -> None:
        """指定マスタークロックサイクル数分の波形生成を実行

        Args:
            cycles: 実行するマスタークロックサイクル数

        Raises:
            InvalidValueError: サイクル数が負の場合
        """
        if cycles < 0:
            raise InvalidValueError(f"Cycles must be non-negative, got {cycles}")

        while cycles > 0:
            # カウンタの残りとcyclesの小さい方だけ進める
            run_cycles = min(self._counter, cycles)
            self._counter -= run_cycles
            cycles -= run_cycles

            if self._counter == 0:
                self._counter = self._period
                self._phase = (self._phase + 1) % PHASE_STEPS
                self._sample = DUTY_PATTERNS[self._duty][self._phase] * self._envelope.volume

    def clock_envelope(self) -> None:
        """フレームシーケンサからのエンベロープtick通知"""
        self._envelope.update()

    @property
    def sample(self) -> int:
        """最後に計算された瞬時振幅 (0-15)"""
        return self._sample

    @property
    def phase(self) -> int:
        """現在の位相 (0-7)"""
        return self._phase

    def get_counter(self) -> int:
        """次の位相更新までの残りサイクル数を取得"""
        return self._counter

    def is_output_high(self) -> bool:
        """現在の位相のデューティビットがハイかどうか"""
        return DUTY_PATTERNS[self._duty][self._phase] == 1

    def calculate_frequency(self, master_clock_hz: float) -> float:
        """出力音の周波数を計算

        Args:
            master_clock_hz: マスタークロック周波数 (Hz)

        Returns:
            出力音の周波数 (Hz)
        """
        return period_to_hz(self._period, master_clock_hz)

    # -------------------------------------------------------------------------
    # 状態保存・復元
    # -------------------------------------------------------------------------

    def get_state(self) -> Dict[str, Any]:
        """現在の状態を辞書として取得"""
        return {
            'frequency': self._frequency,
            'counter': self._counter,
            'duty': self._duty,
            'phase': self._phase,
            'sample': self._sample,
            'envelope': self._envelope.get_state()
        }

    def validate_state(self, state: Dict[str, Any]) -> None:
        """状態辞書を検証（チャンネルは変更しない）

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        required_keys = {'frequency', 'counter', 'duty', 'phase', 'sample', 'envelope'}
        if not all(key in state for key in required_keys):
            raise InvalidValueError(f"State must contain keys: {required_keys}")

        frequency_to_period(state['frequency'])

        # 周波数変更直後はカウンタが現在の周期より大きい場合がある
        counter = state['counter']
        if not (1 <= counter <= frequency_to_period(0)):
            raise InvalidValueError(f"Invalid counter in state: {counter}")

        if not (0 <= state['duty'] < NUM_DUTY_PATTERNS):
            raise InvalidValueError(f"Invalid duty in state: {state['duty']}")

        phase = state['phase']
        if not (0 <= phase < PHASE_STEPS):
            raise InvalidValueError(f"Invalid phase in state: {phase}")

        sample = state['sample']
        if not (0 <= sample <= 15):
            raise InvalidValueError(f"Invalid sample in state: {sample}")

        self._envelope.validate_state(state['envelope'])

    def set_state(self, state: Dict[str, Any]) -> None:
        """状態を辞書から復元

        検証に失敗した場合、チャンネルとエンベロープは変更されません。

        Args:
            state: 状態辞書

        Raises:
            InvalidValueError: 状態が無効な場合
        """
        self.validate_state(state)

        self.duty = state['duty']
        self.frequency = state['frequency']
        self._envelope.set_state(state['envelope'])
        self._counter = state['counter']
        self._phase = state['phase']
        self._sample = state['sample']

    def __str__(self) -> str:
        return (f"SquareChannel(frequency=0x{self._frequency:03X}, "
                f"duty={self._duty}, "
                f"phase={self._phase}, "
                f"sample={self._sample})")

    def __repr__(self) -> str:
        return (f"SquareChannel(frequency=0x{self._frequency:03X}, "
                f"period={self._period}, "
                f"counter={self._counter}, "
                f"duty={self._duty}, "
                f"phase={self._phase}, "
                f"sample={self._sample}, "
                f"envelope={self._envelope!r})")

    def __eq__(self, other) -> bool:
        if not isinstance(other, SquareChannel):
            return False
        return self.get_state() == other.get_state()


# =============================================================================
# ユーティリティ関数
# =============================================================================

def create_square_channel(duty: int, initial_volume: int, envelope_direction: int,
                          envelope_period: int, frequency: int = 0) -> SquareChannel:
    """エンベロープ付き矩形波チャンネルを作成

    Args:
        duty: デューティパターン番号 (0-3)
        initial_volume: エンベロープ初期音量 (0-15)
        envelope_direction: エンベロープ方向
        envelope_period: エンベロープ周期 (0-7)
        frequency: 周波数レジスタ値 (0-2047)

    Returns:
        設定されたSquareChannelインスタンス
    """
    envelope = VolumeEnvelope(initial_volume, envelope_direction, envelope_period)
    return SquareChannel(duty, envelope, frequency)


def hz_to_frequency(frequency_hz: float, master_clock_hz: float) -> int:
    """目標周波数から最も近い周波数レジスタ値を計算

    Args:
        frequency_hz: 目標周波数 (Hz)
        master_clock_hz: マスタークロック周波数 (Hz)

    Returns:
        周波数レジスタ値 (0-2047)
    """
    if frequency_hz <= 0:
        raise InvalidValueError(f"Frequency must be positive, got {frequency_hz}")
    if master_clock_hz <= 0:
        raise InvalidValueError(f"Master clock frequency must be positive, got {master_clock_hz}")

    # period = F_clock / (8 * F) = (2048 - f) * 4
    period = master_clock_hz / (PHASE_STEPS * frequency_hz)
    value = int(round(MAX_FREQUENCY + 1 - period / 4.0))
    return max(0, min(MAX_FREQUENCY, value))
