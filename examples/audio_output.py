#!/usr/bin/env python3
"""
Game Boy APU Emulator - 音声出力例

このスクリプトは、APUエミュレータのリアルタイム音声出力を紹介します。
sounddeviceが利用できない環境ではWAVファイル出力にフォールバックします。
"""

import time
from pygbaudio.core import create_default_config, create_sound_controller, hz_to_frequency
from pygbaudio.audio import (
    AudioDriver,
    SOUNDDEVICE_AVAILABLE,
    SampleGenerator,
    render_note_sequence,
    write_wav_file,
)


# ドレミファソ（Hz, 秒）
MELODY = [
    (523.25, 0.3),
    (587.33, 0.3),
    (659.25, 0.3),
    (698.46, 0.3),
    (783.99, 0.6),
]


def example_realtime_audio(device, config):
    """リアルタイム音声出力の例"""
    print("\n=== リアルタイム音声出力 ===")

    with AudioDriver(device, buffer_duration=0.2) as driver:
        for hz, seconds in MELODY:
            frequency = hz_to_frequency(hz, config.clock_frequency)
            driver.pause()
            device.trigger_square1(frequency)
            driver.resume()
            print(f"  {hz:.2f} Hz (0x{frequency:03X})")
            time.sleep(seconds)

        stats = driver.get_statistics()
        print(f"  アンダーラン: {stats['underruns']}")


def example_file_output(device, config):
    """同じメロディーをWAVファイルに書き出す例"""
    print("\n=== ファイル出力: melody.wav ===")

    notes = [(hz_to_frequency(hz, config.clock_frequency), int(seconds * config.clock_frequency))
             for hz, seconds in MELODY]
    frames = render_note_sequence(SampleGenerator(device), notes)
    write_wav_file("melody.wav", frames, config)
    print(f"  {len(frames)} フレームを書き出しました")


def main():
    """メイン関数"""
    print("Game Boy APU Emulator - 音声出力例")
    print("=" * 50)

    config = create_default_config()
    device = create_sound_controller(config)

    try:
        if SOUNDDEVICE_AVAILABLE:
            example_realtime_audio(device, config)
        else:
            print("sounddeviceが利用できないためリアルタイム出力をスキップします")

        device.reset()
        example_file_output(device, config)

    except KeyboardInterrupt:
        print("\n\n中断されました")


if __name__ == "__main__":
    main()
