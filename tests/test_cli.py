# tests/test_cli.py
"""
chip8_core_tracer.cli モジュールの単体テスト。
"""
import pytest

from chip8_core_tracer import cli
from chip8_core_tracer.config.models import EmulatorConfig
from tests.helpers import program


def test_resolve_config_overrides(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("cpu_frequency_hz: 500\nrandom_seed: 1\n")
    args = cli.build_parser().parse_args([
        "rom.ch8", "--config", str(config_file), "--strict", "--frequency", "1000",
        "--null-display", "--no-sound", "--seed", "7",
    ])
    config = cli.resolve_config(args)
    assert config.stack_fault_policy == "strict"
    assert config.cpu_frequency_hz == 1000
    assert config.display.backend == "null"
    assert config.sound.enabled is False
    assert config.random_seed == 7


def test_resolve_config_defaults():
    args = cli.build_parser().parse_args(["rom.ch8"])
    assert cli.resolve_config(args) == EmulatorConfig()


def test_runs_program(tmp_path):
    rom = tmp_path / "loop.ch8"
    rom.write_bytes(program(0x6A02, 0x1202))
    assert cli.main([str(rom), "--cycles", "10", "--null-display", "--no-sound"]) == 0


def test_missing_rom_exits_with_error(tmp_path):
    assert cli.main([str(tmp_path / "missing.ch8"), "--null-display", "--no-sound"]) == 1


def test_fault_exits_with_error(tmp_path):
    rom = tmp_path / "bad.ch8"
    rom.write_bytes(program(0xF0FF))
    assert cli.main([str(rom), "--cycles", "10", "--null-display", "--no-sound"]) == 1


def test_strict_stack_underflow(tmp_path):
    rom = tmp_path / "ret.ch8"
    rom.write_bytes(program(0x00EE))
    assert cli.main([str(rom), "--cycles", "5", "--null-display", "--no-sound", "--strict"]) == 1
    assert cli.main([str(rom), "--cycles", "5", "--null-display", "--no-sound"]) == 0


def test_invalid_frequency(tmp_path):
    assert cli.main(["rom.ch8", "--frequency", "0"]) == 2


def test_version(capsys):
    with pytest.raises(SystemExit):
        cli.main(["--version"])
    assert "chip8-tracer" in capsys.readouterr().out


def test_memory_fault_exits_with_error(tmp_path):
    rom = tmp_path / "overrun.ch8"
    # LD I, $FFF / DRW V0, V0, 5
    rom.write_bytes(program(0xAFFF, 0xD005))
    assert cli.main([str(rom), "--cycles", "10", "--null-display", "--no-sound"]) == 1


def test_program_running_off_end_of_memory(tmp_path):
    rom = tmp_path / "slide.ch8"
    # JP $FFE / 末尾の2バイトは 0000 (SYS) なので PC は 0x1000 に進む
    rom.write_bytes(program(0x1FFE))
    assert cli.main([str(rom), "--cycles", "10", "--null-display", "--no-sound"]) == 1
