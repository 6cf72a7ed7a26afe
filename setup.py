#!/usr/bin/env python3
"""
Game Boy APU Emulator - Setup Script

Pythonパッケージ設定ファイル
"""

from setuptools import setup, find_packages
import os

# README.mdを読み込み
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Game Boy APU Emulator - cycle-accurate square channel and frame sequencer emulation"

# 依存関係を定義
INSTALL_REQUIRES = [
    'numpy>=1.19.0',
    'matplotlib>=3.3.0',
    'sounddevice>=0.4.0',
    'psutil>=5.7.0',
]

EXTRAS_REQUIRE = {
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.10.0',
    ],
}

setup(
    # パッケージ基本情報
    name='pygbaudio',
    version='1.0.0',
    description='Game Boy APU Emulator - cycle-accurate square channel and frame sequencer emulation',
    long_description=read_readme(),
    long_description_content_type='text/markdown',

    # ライセンス
    license='MIT',

    # 分類
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Sound/Audio',
        'Topic :: System :: Emulators',
    ],

    # キーワード
    keywords='game boy apu emulator sound audio chiptune square wave',

    # パッケージ構成
    packages=find_packages(exclude=['tests*', 'docs*', 'examples*']),
    python_requires='>=3.8',

    # 依存関係
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,

    # エントリーポイント
    entry_points={
        'console_scripts': [
            'pygbaudio-render=pygbaudio.cli:render_main',
            'pygbaudio-play=pygbaudio.cli:play_main',
            'pygbaudio-plot=pygbaudio.cli:plot_main',
        ],
    },

    zip_safe=False,
)
