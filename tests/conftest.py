# tests/conftest.py
"""
テスト共通のフィクスチャ。
"""
import os

# Qtウィジェットのテストはディスプレイのない環境でも実行する
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from chip8_core_tracer.config.builder import SystemBuilder
from chip8_core_tracer.config.models import EmulatorConfig, DisplayConfig, SoundConfig
from chip8_core_tracer.emulator import Emulator


@pytest.fixture
def config() -> EmulatorConfig:
    return EmulatorConfig(
        random_seed=1234,
        display=DisplayConfig(backend="null"),
        sound=SoundConfig(enabled=False),
    )


@pytest.fixture
def emulator(config) -> Emulator:
    emu = SystemBuilder().build_system(config)
    yield emu
    emu.close()
