# tests/ui/test_ui.py
"""
UIウィジェット（ScreenView / RegisterView / CodeView / MainWindow）のテスト。
QApplicationがあれば、表示を伴わずにロジックを検証できます。
"""
import pytest
from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QFocusEvent
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QApplication

from chip8_core_tracer.config.models import EmulatorConfig, DisplayConfig, SoundConfig
from chip8_core_tracer.devices.display import DisplaySurface
from chip8_core_tracer.ui.code_view import CodeView
from chip8_core_tracer.ui.main_window import MainWindow
from chip8_core_tracer.ui.qt_devices import KEY_MAP, map_key
from chip8_core_tracer.ui.register_view import RegisterView
from chip8_core_tracer.ui.screen_view import ScreenView
from tests.helpers import program

# PySide6のテストにはQApplicationのインスタンスが必要
@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def window(qapp, tmp_path):
    config = EmulatorConfig(display=DisplayConfig(backend="null"), sound=SoundConfig(enabled=False))
    win = MainWindow(config)
    rom = tmp_path / "test.ch8"
    # LD VA, 2 / LD I, $000 / DRW V0, V0, 5 / JP $206
    rom.write_bytes(program(0x6A02, 0xA000, 0xD005, 0x1206))
    win.load_rom(str(rom))
    yield win
    win.close()


def test_key_map_covers_keypad():
    assert sorted(KEY_MAP.values()) == list(range(16))
    assert map_key(Qt.Key_X) == 0x0
    assert map_key(Qt.Key_V) == 0xF
    assert map_key(Qt.Key_P) is None


def test_screen_view_refresh_consumes_dirty_flag(qapp):
    surface = DisplaySurface()
    view = ScreenView(surface)
    surface.take_dirty()
    surface.draw_sprite(0, 0, b"\xFF")
    view.refresh()
    assert not surface.dirty
    # 描画処理が例外なく完了すること
    assert not view.grab().isNull()


def test_register_view_shows_hex_values(qapp, emulator):
    view = RegisterView()
    view.set_cpu(emulator.cpu)
    assert view.value_text("PC") == "0200"
    assert view.value_text("VA") == "00"

    emulator.cpu.state.v[0xA] = 0x2B
    view.update_registers()
    assert view.value_text("VA") == "2B"

    view.update_registers({"I": 0x123})
    assert view.value_text("I") == "0123"


def test_code_view_highlights_pc(qapp, emulator):
    emulator.load_bytes(program(0x6A02, 0x1202))
    view = CodeView()
    view.update_code(emulator.cpu, 0x200)
    assert view.table.item(0, 0).text() == "0200"
    assert view.table.item(0, 2).text() == "LD VA, #$02"
    rows = view.table.rowCount()

    # 範囲内のPCでは再逆アセンブルしない
    view.update_code(emulator.cpu, 0x202)
    assert view.table.rowCount() == rows
    assert view.table.item(1, 0).background().color().name() == "#404000"

    view.reset_cache()
    assert view.table.rowCount() == 0


def test_main_window_step(window):
    window.step()
    assert window.emulator.cpu.state.v[0xA] == 0x02
    assert window.register_view.value_text("VA") == "02"
    assert window.register_view.value_text("PC") == "0202"


def test_main_window_keypad(window):
    QTest.keyPress(window, Qt.Key_Q)
    assert window.keyboard.is_key_down(0x4)
    QTest.keyRelease(window, Qt.Key_Q)
    assert not window.keyboard.is_key_down(0x4)


def test_main_window_run_and_pause(window, qapp):
    window.run()
    assert window.is_running()
    assert not window.run_action.isEnabled()
    QTest.qWait(50)

    window.pause()
    assert window.loop_thread.wait(2000)
    qapp.processEvents()
    assert not window.is_running()
    assert window.run_action.isEnabled()
    assert window.emulator.cpu.state.pc == 0x206
    assert any(window.surface.pixel(x, 0) for x in range(8))


def test_main_window_reset(window):
    window.step()
    window.reset()
    assert window.emulator.cpu.state.pc == 0x200
    assert window.emulator.cpu.state.v[0xA] == 0
    assert window.debugger.get_history() == []


def test_register_view_shows_flags(qapp, emulator):
    view = RegisterView()
    view.set_cpu(emulator.cpu)
    assert view.flag_text("VF") == "0"
    assert view.flag_text("ST") == "0"

    emulator.cpu.state.v[0xF] = 1
    view.update_registers()
    assert view.flag_text("VF") == "1"


def test_main_window_focus_out_releases_keys(window):
    QTest.keyPress(window, Qt.Key_Q)
    QTest.keyPress(window, Qt.Key_V)
    assert window.keyboard.is_any_key_down()
    window.focusOutEvent(QFocusEvent(QEvent.Type.FocusOut))
    assert not window.keyboard.is_any_key_down()


def test_main_window_recovers_from_memory_fault(window, qapp, tmp_path):
    rom = tmp_path / "overrun.ch8"
    # LD I, $FFF / DRW V0, V0, 5
    rom.write_bytes(program(0xAFFF, 0xD005))
    window.load_rom(str(rom))

    window.run()
    assert window.loop_thread.wait(2000)
    qapp.processEvents()
    assert not window.is_running()
    assert window.run_action.isEnabled()
    assert window.step_action.isEnabled()
    assert window.reset_action.isEnabled()
    assert window.status_label.text().startswith("Fault:")

    window.reset()
    assert window.status_label.text() == "Reset"


def test_main_window_close_during_key_wait(window, qapp, tmp_path):
    rom = tmp_path / "wait.ch8"
    # LD V0, K / JP $200
    rom.write_bytes(program(0xF00A, 0x1200))
    window.load_rom(str(rom))

    window.run()
    QTest.qWait(50)
    window.close()
    assert not window.is_running()
