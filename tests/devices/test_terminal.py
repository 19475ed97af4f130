# tests/devices/test_terminal.py
"""
chip8_core_tracer.devices.terminal モジュールの単体テスト。
"""
import io
import os
import sys
import threading

import pytest

from chip8_core_tracer.devices.input import KEYPAD_LAYOUT
from chip8_core_tracer.devices.terminal import TerminalKeyboard

# @intent:test_suite 端末の文字入力からキーパッドへの対応付けと、保持時間による離鍵を検証します。


class ManualClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def keyboard(clock):
    return TerminalKeyboard(stream=io.StringIO(), hold_time=0.1, clock=clock)


def test_layout_covers_keypad():
    assert sorted(KEYPAD_LAYOUT.values()) == list(range(16))


@pytest.mark.parametrize("char, key", [
    ("1", 0x1), ("4", 0xC), ("q", 0x4), ("R", 0xD),
    ("a", 0x7), ("f", 0xE), ("z", 0xA), ("x", 0x0), ("v", 0xF),
])
def test_feed_maps_character(keyboard, char, key):
    assert keyboard.feed(char) == key
    assert keyboard.is_key_down(key)


def test_unmapped_character_is_ignored(keyboard):
    assert keyboard.feed("p") is None
    assert keyboard.feed("\n") is None
    assert not keyboard.is_any_key_down()


def test_key_released_after_hold_time(keyboard, clock):
    keyboard.feed("w")
    clock.now = 0.05
    keyboard.release_expired()
    assert keyboard.is_key_down(0x5)

    clock.now = 0.1
    keyboard.release_expired()
    assert not keyboard.is_key_down(0x5)


def test_repeated_character_extends_hold(keyboard, clock):
    keyboard.feed("s")
    clock.now = 0.08
    keyboard.feed("s")
    clock.now = 0.15
    keyboard.release_expired()
    assert keyboard.is_key_down(0x8)
    clock.now = 0.2
    keyboard.release_expired()
    assert not keyboard.is_key_down(0x8)


def test_repeated_character_is_not_a_new_press(keyboard):
    keyboard.feed("e")
    result = {}

    def worker():
        result["key"] = keyboard.wait_until_key_down(timeout=0.1)

    thread = threading.Thread(target=worker)
    thread.start()
    for _ in range(500):
        if keyboard._waiting:
            break
        threading.Event().wait(0.002)
    keyboard.feed("e")
    thread.join(1.0)
    assert result == {"key": None}


def test_start_without_terminal_does_nothing(keyboard):
    keyboard.start()
    assert not keyboard.is_reading
    keyboard.close()


@pytest.mark.skipif(sys.platform == "win32", reason="select() on pipes requires POSIX")
def test_read_loop_presses_keys_until_eof():
    keyboard = TerminalKeyboard(stream=io.StringIO(), hold_time=60.0)
    read_fd, write_fd = os.pipe()
    thread = threading.Thread(target=keyboard._read_loop, args=(read_fd,))
    thread.start()
    try:
        os.write(write_fd, b"qv")
        for _ in range(500):
            if keyboard.is_key_down(0x4) and keyboard.is_key_down(0xF):
                break
            threading.Event().wait(0.002)
        assert keyboard.is_key_down(0x4)
        assert keyboard.is_key_down(0xF)
    finally:
        os.close(write_fd)
        thread.join(1.0)
        os.close(read_fd)
    assert not thread.is_alive()
    # 入力の終端で全てのキーが離される
    assert not keyboard.is_any_key_down()
