# tests/transport/test_memory.py
"""
chip8_core_tracer.transport.memory / font モジュールの単体テスト。
"""
import pytest

from chip8_core_tracer.core.errors import Chip8Error, MemoryAccessError
from chip8_core_tracer.transport.font import FONT_DATA, glyph_address
from chip8_core_tracer.transport.memory import Memory, MEMORY_SIZE

# @intent:test_suite メモリの読み書き、範囲チェック、フォントの配置を検証します。


@pytest.fixture
def memory():
    return Memory()


def test_size(memory):
    assert memory.get_size() == MEMORY_SIZE == 4096


def test_font_loaded_at_zero(memory):
    assert len(FONT_DATA) == 80
    assert memory.read_bytes(0, 80) == bytes(FONT_DATA)
    # 0 のグリフ
    assert memory.read_bytes(glyph_address(0), 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
    assert glyph_address(0xF) == 75


def test_read_ushort_is_big_endian(memory):
    memory.write_bytes(0x200, b"\x6A\x02")
    assert memory.read_ushort(0x200) == 0x6A02


def test_write_byte_validates_value(memory):
    memory.write_byte(0x300, 0xFF)
    assert memory.read_byte(0x300) == 0xFF
    with pytest.raises(ValueError):
        memory.write_byte(0x300, 0x100)


@pytest.mark.parametrize("address", [-1, 0x1000])
def test_out_of_range_byte(memory, address):
    with pytest.raises(IndexError):
        memory.read_byte(address)
    with pytest.raises(IndexError):
        memory.write_byte(address, 0)


def test_read_ushort_at_last_byte(memory):
    with pytest.raises(IndexError):
        memory.read_ushort(0xFFF)


def test_bulk_write_is_atomic(memory):
    with pytest.raises(IndexError):
        memory.write_bytes(0xFFE, b"\x01\x02\x03")
    assert memory.read_bytes(0xFFE, 2) == b"\x00\x00"


def test_invalid_size():
    with pytest.raises(ValueError):
        Memory(0)


def test_out_of_range_is_a_chip8_fault(memory):
    with pytest.raises(Chip8Error):
        memory.read_bytes(0xFFF, 5)
    with pytest.raises(MemoryAccessError) as excinfo:
        memory.write_bytes(0xFFD, b"\x01\x02\x03\x04")
    assert excinfo.value.address == 0xFFD
    assert excinfo.value.count == 4
