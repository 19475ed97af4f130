# chip8_core_tracer/ui/screen_view.py
"""
CHIP-8 画面を描画するウィジェット。
"""
from PySide6.QtCore import QTimer, Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from chip8_core_tracer.devices.display import DisplaySurface

COLOR_OFF = "#101010"
COLOR_ON = "#33FF66"
REFRESH_INTERVAL_MS = 16 # 約60Hz
PIXEL_SCALE = 10

# @intent:responsibility DisplaySurface のピクセル状態を拡大して描画します。
# @intent:rationale 実行ループは別スレッドで画面を更新するため、描画はタイマで定期的に行い、
#                  変更があったフレームのみ再描画します。
class ScreenView(QWidget):
    def __init__(self, surface: DisplaySurface, parent=None):
        super().__init__(parent)
        self._surface = surface
        self.setMinimumSize(surface.width * 4, surface.height * 4)
        self.resize(surface.width * PIXEL_SCALE, surface.height * PIXEL_SCALE)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setFocusPolicy(Qt.NoFocus)

        self._timer = QTimer(self)
        self._timer.setInterval(REFRESH_INTERVAL_MS)
        self._timer.timeout.connect(self.refresh)
        self._timer.start()

    def set_surface(self, surface: DisplaySurface) -> None:
        self._surface = surface
        self.update()

    # @intent:responsibility 画面に変更があれば再描画を要求します。
    def refresh(self) -> None:
        if self._surface.take_dirty():
            self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(COLOR_OFF))

        scale = max(1, min(self.width() // self._surface.width, self.height() // self._surface.height))
        offset_x = (self.width() - scale * self._surface.width) // 2
        offset_y = (self.height() - scale * self._surface.height) // 2

        on = QColor(COLOR_ON)
        for x, y in self._surface.lit_pixels():
            painter.fillRect(offset_x + x * scale, offset_y + y * scale, scale, scale, on)
        painter.end()
