#!/usr/bin/env python3
"""
Game Boy APU Emulator - 基本的な使用例

このスクリプトは、APUエミュレータの基本的な使用方法を示します。
矩形波チャンネル1で2つの音符を順に鳴らし、output.wav に書き出します。
"""

import time
from pygbaudio.core import create_default_config, create_sound_controller, frequency_to_period
from pygbaudio.audio import SampleGenerator, render_note_sequence, write_wav_file
from pygbaudio.debug import plot_envelope


def setup_device():
    """デバイスをセットアップ"""
    print("Game Boy APUエミュレータを初期化中...")
    config = create_default_config()
    device = create_sound_controller(config)
    generator = SampleGenerator(device)

    return device, generator, config


def example_1_render_notes(device, generator, config):
    """例1: 2音を1秒分レンダリングしてWAVに保存"""
    print("\n=== 例1: 0x783 → 0x7C1 を output.wav に書き出し ===")

    notes = [
        (0x783, 351136),
        (0x7C1, config.clock_frequency - 351136),
    ]
    for frequency, cycles in notes:
        hz = config.clock_frequency / (8 * frequency_to_period(frequency))
        print(f"  0x{frequency:03X}: {hz:.1f} Hz, {cycles} cycles")

    start_time = time.perf_counter()
    frames = render_note_sequence(generator, notes)
    write_wav_file("output.wav", frames, config)
    elapsed_ms = (time.perf_counter() - start_time) * 1000.0

    print(f"  {len(frames)} フレームを書き出しました")
    print(f"Generated in {elapsed_ms:.0f} ms")


def example_2_envelope_plot(device):
    """例2: エンベロープ推移をプロット"""
    print("\n=== 例2: エンベロープ推移を envelope.png に保存 ===")
    path = plot_envelope(device.square1.envelope, 64, "envelope.png")
    print(f"  {path} に保存しました")


def main():
    """メイン関数"""
    print("Game Boy APU Emulator - 基本的な使用例")
    print("=" * 50)

    device, generator, config = setup_device()

    example_1_render_notes(device, generator, config)
    example_2_envelope_plot(device)

    print("\n" + "=" * 50)
    print("全ての例が完了しました！")

    # デバイス情報表示
    stats = generator.get_statistics()
    print(f"\nデバイス情報:")
    print(f"  名前: {device.name}")
    print(f"  クロック周波数: {config.clock_frequency/1000000:.3f} MHz")
    print(f"  サンプルレート: {config.sample_rate} Hz")
    print(f"  消費サイクル数: {stats['cycles_executed']}")
    print(f"  ドリフト: {generator.get_drift():.6f} cycles")


if __name__ == "__main__":
    main()
