"""
リアルタイム再生ドライバ

sounddeviceの出力ストリームでサウンドコントローラを鳴らします。
生成スレッドがPCMフレームを循環バッファへ先行生成し、
ストリームのコールバックはバッファから取り出すだけです。
"""

import threading
import time
from typing import Optional, Callable, Dict, Any
import numpy as np

try:
    import sounddevice as sd
    SOUNDDEVICE_AVAILABLE = True
except (ImportError, OSError):
    # PortAudio共有ライブラリが無い環境ではOSError
    SOUNDDEVICE_AVAILABLE = False
    sd = None

from .buffer import AudioBuffer, create_audio_buffer
from .sample_generator import SampleGenerator
from ..core.sound_controller import SoundController
from ..core.types import AudioDriverError, GBAudioError


class _SampleProducer(threading.Thread):
    """バッファに空きがある間、チャンク単位でフレームを生成するスレッド

    再生中にコントローラを進めるのはこのスレッドだけです。
    """

    def __init__(self, generator: SampleGenerator, buffer: AudioBuffer, chunk_size: int,
                 on_error: Optional[Callable[[Exception], None]] = None):
        super().__init__(name="GBAudioSampleProducer", daemon=True)
        self._generator = generator
        self._buffer = buffer
        self._chunk_size = chunk_size
        self._on_error = on_error

        self._halt = threading.Event()
        self._hold = threading.Event()
        self._idle = threading.Event()
        self._idle.set()

    def run(self) -> None:
        while not self._halt.is_set():
            if self._hold.is_set() or self._buffer.get_free_space() < self._chunk_size:
                self._idle.set()
                time.sleep(0.001)
                continue

            self._idle.clear()
            if self._hold.is_set():
                continue

            try:
                frames = self._generator.generate_samples(self._chunk_size)
                self._buffer.write(frames, timeout=0.01)
            except GBAudioError as e:
                if self._on_error is None:
                    raise
                self._on_error(e)
                time.sleep(0.01)
            finally:
                self._idle.set()

    def hold(self, timeout: float = 1.0) -> None:
        """生成を止め、処理中のチャンクが書き終わるまで待つ"""
        self._hold.set()
        if self.is_alive():
            self._idle.wait(timeout)

    def release(self) -> None:
        self._hold.clear()

    def halt(self, timeout: float = 1.0) -> None:
        self._halt.set()
        if self.is_alive():
            self.join(timeout)


class AudioDriver:
    """リアルタイム再生ドライバ

    再生中にチャンネルを操作する（音符のトリガーなど）場合は、
    pause() で生成スレッドを止めてから行い、resume() で再開します::

        with AudioDriver(controller) as driver:
            driver.pause()
            controller.trigger_square1(0x783)
            driver.resume()
    """

    def __init__(self, controller: SoundController, buffer_duration: float = 0.1,
                 device: Optional[int] = None, latency: Optional[float] = None):
        """AudioDriverを初期化

        Args:
            controller: 再生するサウンドコントローラ
            buffer_duration: 先行生成バッファの長さ（秒）
            device: 出力デバイス番号（Noneで既定デバイス）
            latency: ストリーム遅延（秒、Noneでsounddeviceの既定値）

        Raises:
            AudioDriverError: sounddeviceを読み込めない場合
        """
        if not SOUNDDEVICE_AVAILABLE:
            raise AudioDriverError(
                "Realtime playback needs the sounddevice package and PortAudio "
                "(pip install sounddevice)")

        config = controller.get_config()
        self._controller = controller
        self._sample_rate = config.sample_rate
        self._channels = config.channels
        self._device = device
        self._latency = latency
        self._debug_enabled = config.enable_debug

        self._sample_generator = SampleGenerator(controller)
        self._audio_buffer = create_audio_buffer(self._sample_rate, buffer_duration, self._channels)
        self._chunk_size = max(256, min(4096, self._audio_buffer.size // 4))

        self._stream = None
        self._producer: Optional[_SampleProducer] = None
        self._error_callback: Optional[Callable[[Exception], None]] = None

        self._started_at = 0.0
        self._stats = {
            'callbacks': 0,
            'underruns': 0,
            'frames_played': 0
        }

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def is_playing(self) -> bool:
        return self._stream is not None

    @property
    def sample_generator(self) -> SampleGenerator:
        return self._sample_generator

    @property
    def audio_buffer(self) -> AudioBuffer:
        return self._audio_buffer

    def set_error_callback(self, callback: Optional[Callable[[Exception], None]]) -> None:
        """生成スレッドで発生したエミュレータエラーの通知先を設定

        未設定の場合、エラーは生成スレッドを終了させます。
        """
        self._error_callback = callback

    def start(self) -> None:
        """再生を開始

        Raises:
            AudioDriverError: 再生中の場合、またはストリームを開けない場合
        """
        if self.is_playing:
            raise AudioDriverError("Audio driver is already playing")

        for key in self._stats:
            self._stats[key] = 0
        self._audio_buffer.reset_statistics()

        producer = _SampleProducer(self._sample_generator, self._audio_buffer,
                                   self._chunk_size, self._error_callback)
        try:
            stream = sd.OutputStream(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype='int16',
                callback=self._on_stream_data,
                device=self._device,
                latency=self._latency
            )
            producer.start()
            stream.start()
        except Exception as e:
            producer.halt()
            raise AudioDriverError(f"Failed to open output stream: {e}") from e

        self._producer = producer
        self._stream = stream
        self._started_at = time.time()

        if self._debug_enabled:
            print(f"[DEBUG] Playback started: {self._sample_rate}Hz, {self._channels}ch, "
                  f"chunk={self._chunk_size}")

    def stop(self) -> None:
        """再生を停止し、バッファを空にする"""
        if not self.is_playing:
            return

        stream, self._stream = self._stream, None
        stream.stop()
        stream.close()

        self._producer.halt()
        self._producer = None
        self._audio_buffer.clear()

        if self._debug_enabled:
            print(f"[DEBUG] Playback stopped: {self._stats['frames_played']} frames, "
                  f"{self._stats['underruns']} underruns")

    def pause(self) -> None:
        """フレーム生成を一時停止（再生はバッファが尽きるまで続く）"""
        if self._producer is not None:
            self._producer.hold()

    def resume(self) -> None:
        """フレーム生成を再開"""
        if self._producer is not None:
            self._producer.release()

    def _on_stream_data(self, outdata: np.ndarray, frames: int,
                        time_info: Any, status: Any) -> None:
        self._stats['callbacks'] += 1

        chunk = self._audio_buffer.read(frames, timeout=0.001)
        filled = 0 if chunk is None else len(chunk)

        if filled:
            # モノラルのバッファは (n,)、ストリームは (n, 1)
            outdata[:filled] = chunk.reshape(filled, self._channels)
            self._stats['frames_played'] += filled

        if filled < frames:
            outdata[filled:] = 0
            self._stats['underruns'] += 1
            if self._debug_enabled:
                print(f"[DEBUG] Underrun #{self._stats['underruns']}: {filled}/{frames} frames")

    def get_statistics(self) -> Dict[str, Any]:
        """再生統計を取得"""
        callbacks = self._stats['callbacks']
        return {
            'is_playing': self.is_playing,
            'sample_rate': self._sample_rate,
            'channels': self._channels,
            'runtime': time.time() - self._started_at if self.is_playing else 0.0,
            'underrun_rate': self._stats['underruns'] / callbacks if callbacks else 0.0,
            **self._stats,
            'buffer': self._audio_buffer.get_statistics(),
            'generator': self._sample_generator.get_statistics()
        }

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


def create_audio_driver(controller: SoundController, buffer_duration: float = 0.1) -> AudioDriver:
    """既定デバイスで再生するドライバを作成"""
    return AudioDriver(controller, buffer_duration)


def list_audio_devices() -> Dict[str, Any]:
    """出力デバイスの一覧を取得

    Returns:
        'available' と、利用可能な場合は 'devices' / 'default_output' を含む辞書
    """
    if not SOUNDDEVICE_AVAILABLE:
        return {'available': False, 'devices': []}

    default_device = sd.default.device
    if isinstance(default_device, (tuple, list)):
        default_device = default_device[1]

    return {
        'available': True,
        'devices': [dict(info) for info in sd.query_devices()
                    if info['max_output_channels'] > 0],
        'default_output': default_device
    }
