"""
コンソール描画バックエンド。

フレーム全体をバックバッファ（文字列）に合成し、フレーム完了時に一度だけ書き出します。
画面に変化がないフレームでは何も出力しません。
"""
import sys
from typing import Optional, TextIO

from chip8_core_tracer.devices.display import DisplaySurface, DISPLAY_WIDTH, DISPLAY_HEIGHT

# ANSI: カーソルをホームへ移動
CURSOR_HOME = "\x1b[H"
CLEAR_SCREEN = "\x1b[2J"


# @intent:responsibility ピクセル状態をテキストとしてストリームへダブルバッファ描画します。
class ConsoleDisplay(DisplaySurface):
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT,
                 stream: Optional[TextIO] = None, on_char: str = "█", off_char: str = " "):
        super().__init__(width, height)
        self._stream = stream if stream is not None else sys.stdout
        self._on_char = on_char
        self._off_char = off_char
        self._front_buffer = ""
        self._started = False

    # @intent:responsibility 現在のピクセル状態から1フレーム分のテキストを合成します。
    def compose_frame(self) -> str:
        lines = []
        for row in self._pixels:
            lines.append("".join(self._on_char if lit else self._off_char for lit in row))
        return "\n".join(lines) + "\n"

    # @intent:responsibility 変化があった場合のみバックバッファを合成して書き出し、フロントと入れ替えます。
    def on_finish_frame(self) -> None:
        if not self.take_dirty():
            return
        back_buffer = self.compose_frame()
        if back_buffer == self._front_buffer:
            return
        prefix = CURSOR_HOME if self._started else CLEAR_SCREEN + CURSOR_HOME
        self._stream.write(prefix + back_buffer)
        self._stream.flush()
        self._front_buffer = back_buffer
        self._started = True
