# tests/loader/test_loader.py
"""
chip8_core_tracer.loader.loader モジュールの単体テスト。
"""
import pytest

from chip8_core_tracer.core.errors import ProgramLoadError
from chip8_core_tracer.loader.loader import ProgramLoader
from tests.helpers import program

# @intent:test_suite ROMイメージのロードとエラー処理を検証します。


def test_load_file_sets_pc(tmp_path, emulator):
    rom = tmp_path / "jump.ch8"
    rom.write_bytes(program(0x6A02, 0x1202))

    size = ProgramLoader().load(rom, emulator.cpu)
    assert size == 4
    assert emulator.memory.read_bytes(0x200, 4) == b"\x6A\x02\x12\x02"
    assert emulator.cpu.state.pc == 0x200


def test_custom_load_address(emulator):
    loader = ProgramLoader(load_address=0x600)
    loader.load_bytes(b"\x00\xE0", emulator.cpu)
    assert emulator.memory.read_ushort(0x600) == 0x00E0
    assert emulator.cpu.state.pc == 0x600


def test_missing_file(tmp_path, emulator):
    with pytest.raises(ProgramLoadError):
        ProgramLoader().load(tmp_path / "missing.ch8", emulator.cpu)


def test_largest_program_fits(emulator):
    data = bytes([0xAA]) * (4096 - 0x200)
    assert ProgramLoader().load_bytes(data, emulator.cpu) == len(data)
    assert emulator.memory.read_byte(0xFFF) == 0xAA


def test_program_too_large(emulator):
    data = bytes(4096 - 0x200 + 1)
    with pytest.raises(ProgramLoadError):
        ProgramLoader().load_bytes(data, emulator.cpu)
    assert emulator.memory.read_byte(0x200) == 0


def test_emulator_load_program(tmp_path, emulator):
    rom = tmp_path / "cls.ch8"
    rom.write_bytes(program(0x00E0))
    assert emulator.load_program(str(rom)) == 2
    assert emulator.step().operation.mnemonic == "CLS"
