# tests/devices/test_display.py
"""
chip8_core_tracer.devices.display / console モジュールの単体テスト。
"""
import io

import pytest

from chip8_core_tracer.devices.console import ConsoleDisplay, CLEAR_SCREEN, CURSOR_HOME
from chip8_core_tracer.devices.display import DisplaySurface, DISPLAY_WIDTH, DISPLAY_HEIGHT

# @intent:test_suite スプライト描画（XOR、折り返し、衝突）とコンソール描画を検証します。


@pytest.fixture
def surface():
    return DisplaySurface()


def lit(surface):
    return set(surface.lit_pixels())


def test_dimensions(surface):
    assert (surface.width, surface.height) == (DISPLAY_WIDTH, DISPLAY_HEIGHT) == (64, 32)
    assert lit(surface) == set()


def test_draw_msb_first(surface):
    assert surface.draw_sprite(10, 3, b"\x81") is False
    assert lit(surface) == {(10, 3), (17, 3)}


def test_empty_sprite_changes_nothing(surface):
    assert surface.draw_sprite(0, 0, b"") is False
    assert lit(surface) == set()


def test_double_draw_restores_and_collides(surface):
    sprite = bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
    assert surface.draw_sprite(5, 5, sprite) is False
    before = lit(surface)
    assert before
    assert surface.draw_sprite(5, 5, sprite) is True
    assert lit(surface) == set()


def test_partial_overlap_collision(surface):
    surface.draw_sprite(0, 0, b"\x80")
    assert surface.draw_sprite(0, 0, b"\xC0") is True
    assert lit(surface) == {(1, 0)}


def test_wraps_horizontally(surface):
    surface.draw_sprite(63, 0, b"\xFF")
    assert lit(surface) == {(63, 0)} | {(x, 0) for x in range(7)}


def test_wraps_vertically(surface):
    surface.draw_sprite(0, 31, b"\x80\x80")
    assert lit(surface) == {(0, 31), (0, 0)}


def test_coordinates_beyond_screen_wrap(surface):
    surface.draw_sprite(64 + 2, 32 + 1, b"\x80")
    assert lit(surface) == {(2, 1)}


def test_clear_and_dirty_flag(surface):
    # 初回フレームは常に描画対象
    assert surface.take_dirty()
    assert not surface.take_dirty()
    surface.draw_sprite(0, 0, b"\xFF")
    assert surface.dirty
    assert surface.take_dirty()
    assert not surface.dirty
    surface.clear()
    assert surface.take_dirty()
    assert lit(surface) == set()


class TestConsoleDisplay:
    def test_frame_is_written_once_per_change(self):
        stream = io.StringIO()
        display = ConsoleDisplay(8, 2, stream=stream, on_char="#", off_char=".")

        display.on_start_frame()
        display.draw_sprite(0, 0, b"\x81")
        display.on_finish_frame()
        output = stream.getvalue()
        assert output == CLEAR_SCREEN + CURSOR_HOME + "#......#\n........\n"

        # 変化のないフレームは出力しない
        display.on_finish_frame()
        assert stream.getvalue() == output

        display.draw_sprite(0, 1, b"\x80")
        display.on_finish_frame()
        assert stream.getvalue() == output + CURSOR_HOME + "#......#\n#.......\n"

    def test_identical_frame_after_redraw_is_skipped(self):
        stream = io.StringIO()
        display = ConsoleDisplay(8, 1, stream=stream)
        display.draw_sprite(0, 0, b"\x80")
        display.on_finish_frame()
        written = stream.getvalue()

        # 2回描画して元に戻った場合も出力しない
        display.draw_sprite(0, 0, b"\x40")
        display.draw_sprite(0, 0, b"\x40")
        display.on_finish_frame()
        assert stream.getvalue() == written
