"""
Game Boy APU Emulator - Command Line Interface

コマンドライン用のエントリーポイントを提供します。
"""

import os
import sys
import time
import argparse
from typing import List, Optional, Tuple

import psutil


def parse_note(text: str) -> Tuple[int, int]:
    """'周波数:サイクル数' 形式の音符指定を解析

    周波数・サイクル数とも 0x 接頭辞の16進表記を受け付けます。

    Args:
        text: 例 '0x783:351136'

    Returns:
        (周波数レジスタ値, マスタークロックサイクル数)
    """
    try:
        frequency_text, cycles_text = text.split(':')
        frequency = int(frequency_text, 0)
        cycles = int(cycles_text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid note '{text}', expected FREQUENCY:CYCLES")

    if not (0 <= frequency <= 0x7FF):
        raise argparse.ArgumentTypeError(f"frequency {frequency} out of range [0, 2047]")
    if cycles < 0:
        raise argparse.ArgumentTypeError(f"cycles must be non-negative, got {cycles}")

    return frequency, cycles


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--note',
        type=parse_note,
        action='append',
        default=None,
        metavar='FREQ:CYCLES',
        help='矩形波チャンネル1でトリガーする音符（複数指定可、default: 0x783 → 0x7C1）'
    )
    parser.add_argument(
        '--sample-rate',
        type=int,
        default=44100,
        help='出力サンプルレート (default: 44100)'
    )
    parser.add_argument(
        '--mono',
        action='store_true',
        help='モノラルで出力'
    )
    parser.add_argument(
        '--duty',
        type=int,
        choices=[0, 1, 2, 3],
        default=2,
        help='デューティパターン (0=12.5%%, 1=25%%, 2=50%%, 3=75%%, default: 2)'
    )
    parser.add_argument(
        '--envelope',
        type=int,
        nargs=3,
        default=[15, 3, 0],
        metavar=('VOLUME', 'PERIOD', 'DIRECTION'),
        help='エンベロープ設定 初期音量 周期 方向(0=減少, 1=増加) (default: 15 3 0)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='デバッグ出力を有効化'
    )


def _build_generator(parsed_args):
    from pygbaudio.core import SoundConfig, create_sound_controller
    from pygbaudio.audio import SampleGenerator

    volume, period, direction = parsed_args.envelope
    config = SoundConfig(
        sample_rate=parsed_args.sample_rate,
        channels=1 if parsed_args.mono else 2,
        square1_duty=parsed_args.duty,
        square1_initial_volume=volume,
        square1_envelope_period=period,
        square1_envelope_direction=direction,
        enable_debug=parsed_args.debug
    )
    controller = create_sound_controller(config)
    return SampleGenerator(controller)


def render_main(args: Optional[List[str]] = None) -> int:
    """WAVレンダリングのメインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description='Game Boy APU Emulator - render square channel notes to WAV',
        prog='pygbaudio-render'
    )
    parser.add_argument(
        '-o', '--output',
        default='output.wav',
        help='出力WAVファイル (default: output.wav)'
    )
    _add_common_arguments(parser)
    parsed_args = parser.parse_args(args)

    from pygbaudio.core import GBAudioError
    from pygbaudio.audio import render_note_sequence, write_wav_file

    try:
        start_time = time.perf_counter()

        generator = _build_generator(parsed_args)
        frames = render_note_sequence(generator, parsed_args.note)
        write_wav_file(parsed_args.output, frames, generator.get_controller().get_config())

        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        memory_mb = psutil.Process(os.getpid()).memory_info().rss / (1024 * 1024)

        stats = generator.get_statistics()
        print(f"{parsed_args.output}: {len(frames)} frames, "
              f"{stats['cycles_executed']} cycles")
        print(f"Generated in {elapsed_ms:.0f} ms (RSS {memory_mb:.1f} MB)")
        return 0

    except GBAudioError as e:
        print(f"エラー: {e}")
        return 1


def play_main(args: Optional[List[str]] = None) -> int:
    """リアルタイム再生のメインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description='Game Boy APU Emulator - play square channel notes',
        prog='pygbaudio-play'
    )
    _add_common_arguments(parser)
    parsed_args = parser.parse_args(args)

    from pygbaudio.core import GBAudioError
    from pygbaudio.audio import DEFAULT_NOTE_SEQUENCE, AudioDriver

    notes = parsed_args.note or DEFAULT_NOTE_SEQUENCE

    try:
        generator = _build_generator(parsed_args)
        controller = generator.get_controller()
        clock = controller.get_config().clock_frequency

        with AudioDriver(controller, buffer_duration=0.2) as driver:
            for frequency, cycles in notes:
                driver.pause()
                controller.trigger_square1(frequency)
                driver.resume()
                print(f"再生中: frequency=0x{frequency:03X} ({cycles / clock:.2f} s)")
                time.sleep(cycles / clock)

        return 0

    except KeyboardInterrupt:
        print("\n中断されました")
        return 1
    except GBAudioError as e:
        print(f"エラー: {e}")
        return 1


def plot_main(args: Optional[List[str]] = None) -> int:
    """波形プロットのメインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description='Game Boy APU Emulator - plot square channel waveform and envelope',
        prog='pygbaudio-plot'
    )
    parser.add_argument(
        '-o', '--output',
        default='waveform.png',
        help='出力画像ファイル (default: waveform.png)'
    )
    parser.add_argument(
        '--samples',
        type=int,
        default=44100,
        help='プロットするサンプル数 (default: 44100)'
    )
    _add_common_arguments(parser)
    parsed_args = parser.parse_args(args)

    from pygbaudio.core import GBAudioError
    from pygbaudio.debug import capture_channel_trace, plot_channel_trace

    try:
        generator = _build_generator(parsed_args)
        frequency = parsed_args.note[0][0] if parsed_args.note else 0x783
        generator.get_controller().trigger_square1(frequency)

        amplitudes, volumes = capture_channel_trace(generator, parsed_args.samples)
        path = plot_channel_trace(amplitudes, volumes, generator.sample_rate, parsed_args.output)
        print(f"{path} に保存しました")
        return 0

    except GBAudioError as e:
        print(f"エラー: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(render_main())
