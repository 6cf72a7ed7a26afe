"""
PyGBAudio Audio Layer

APUエミュレータの音声出力機能を提供します。
サンプルレート変換、WAVファイル出力、リアルタイム音声再生を含みます。

主要コンポーネント:
- SampleGenerator: マスタークロックから出力サンプルレートへの変換
- WaveFileWriter: 16ビットPCM WAVファイル出力
- AudioBuffer: 循環バッファによるフレーム管理
- AudioDriver: sounddeviceを使用したリアルタイム音声出力

使用例:
    ```python
    from pygbaudio.core import create_sound_controller
    from pygbaudio.audio import SampleGenerator, render_note_sequence, write_wav_file

    controller = create_sound_controller()
    generator = SampleGenerator(controller)
    frames = render_note_sequence(generator)
    write_wav_file("output.wav", frames, controller.get_config())
    ```
"""

from .buffer import (
    AudioBuffer,
    AudioBufferError,
    create_audio_buffer
)

from .sample_generator import (
    SampleGenerator,
    SampleGeneratorError,
    DEFAULT_NOTE_SEQUENCE,
    render_note_sequence,
    create_sample_generator
)

from .wav_writer import (
    WaveFileWriter,
    WaveWriterError,
    write_wav_file
)

from .driver import (
    AudioDriver,
    create_audio_driver,
    list_audio_devices,
    SOUNDDEVICE_AVAILABLE
)

# 公開API
__all__ = [
    # バッファ関連
    "AudioBuffer",
    "AudioBufferError",
    "create_audio_buffer",

    # サンプル生成関連
    "SampleGenerator",
    "SampleGeneratorError",
    "DEFAULT_NOTE_SEQUENCE",
    "render_note_sequence",
    "create_sample_generator",

    # WAV出力関連
    "WaveFileWriter",
    "WaveWriterError",
    "write_wav_file",

    # ドライバ関連
    "AudioDriver",
    "create_audio_driver",
    "list_audio_devices",
    "SOUNDDEVICE_AVAILABLE",
]
