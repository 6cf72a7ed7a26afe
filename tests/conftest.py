import pytest

from pygbaudio.core import (
    SoundConfig,
    create_default_config,
    create_sound_controller,
    create_square_channel,
)
from pygbaudio.audio import SampleGenerator


@pytest.fixture
def config():
    return create_default_config()


@pytest.fixture
def controller(config):
    return create_sound_controller(config)


@pytest.fixture
def generator(controller):
    return SampleGenerator(controller)


@pytest.fixture
def mono_generator():
    controller = create_sound_controller(SoundConfig(channels=1))
    return SampleGenerator(controller)


@pytest.fixture
def square():
    """デューティ50%、音量15、減少、周期3の矩形波チャンネル"""
    return create_square_channel(duty=2, initial_volume=15, envelope_direction=0,
                                 envelope_period=3, frequency=0x783)
