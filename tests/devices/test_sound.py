# tests/devices/test_sound.py
"""
chip8_core_tracer.devices.sound モジュールの単体テスト。
"""
import threading

from chip8_core_tracer.devices.sound import BellSoundDevice, NullSoundDevice


def test_null_device_is_idempotent():
    sound = NullSoundDevice()
    sound.start_beep()
    sound.start_beep()
    assert sound.beeping
    sound.end_beep()
    sound.end_beep()
    assert not sound.beeping


def test_bell_device_beeps_while_active():
    beeped = threading.Event()
    count = []

    def beep():
        count.append(1)
        beeped.set()

    sound = BellSoundDevice(beep=beep, duration=0.001)
    try:
        assert not sound.is_beeping
        sound.start_beep()
        assert sound.is_beeping
        assert beeped.wait(1.0)
        sound.end_beep()
        assert not sound.is_beeping
    finally:
        sound.close()
    assert count


def test_bell_device_silent_until_started():
    calls = []
    sound = BellSoundDevice(beep=lambda: calls.append(1), duration=0.001)
    threading.Event().wait(0.02)
    sound.close()
    assert calls == []
