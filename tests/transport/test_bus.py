# tests/transport/test_bus.py
"""
chip8_core_tracer.transport.bus モジュールの単体テスト。
"""
import pytest

from chip8_core_tracer.devices.display import DisplaySurface
from chip8_core_tracer.devices.input import KeyboardState
from chip8_core_tracer.transport.bus import Bus, BusAccess, BusAccessType
from chip8_core_tracer.transport.memory import Memory

# @intent:test_suite バス経由のアクセスと、そのアクティビティログを検証します。


@pytest.fixture
def bus():
    return Bus(Memory(), DisplaySurface(), KeyboardState())


def test_read_and_write_are_logged(bus):
    bus.write_byte(0x300, 0x42)
    assert bus.read_byte(0x300) == 0x42
    log = bus.get_and_clear_activity_log()
    assert log == [
        BusAccess(0x300, 0x42, BusAccessType.WRITE, 0x00),
        BusAccess(0x300, 0x42, BusAccessType.READ),
    ]
    assert bus.get_and_clear_activity_log() == []


def test_read_ushort_logs_two_reads(bus):
    bus.memory.write_bytes(0x200, b"\x12\x34")
    assert bus.read_ushort(0x200) == 0x1234
    log = bus.get_and_clear_activity_log()
    assert [(a.address, a.data) for a in log] == [(0x200, 0x12), (0x201, 0x34)]


def test_write_bytes_records_previous_values(bus):
    bus.memory.write_bytes(0x300, b"\x09\x08")
    bus.write_bytes(0x300, b"\x01\x02")
    log = bus.get_and_clear_activity_log()
    assert [(a.address, a.data, a.previous_data) for a in log] == [(0x300, 1, 9), (0x301, 2, 8)]


def test_failed_write_is_not_logged(bus):
    with pytest.raises(IndexError):
        bus.write_bytes(0xFFF, b"\x01\x02")
    assert bus.get_and_clear_activity_log() == []


def test_peek_does_not_log(bus):
    assert bus.peek(0) == 0xF0
    assert bus.get_and_clear_activity_log() == []
