"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import List, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from chip8_core_tracer.core.cpu import AbstractCpu
from chip8_core_tracer.ui.fonts import get_monospace_font

WINDOW_BYTES = 512 # 一度に逆アセンブルするバイト数
HIGHLIGHT = QColor("#404000")
BACKGROUND = QColor("#101010")

# @intent:responsibility PC周辺の逆アセンブル結果を表形式で表示し、現在のPCをハイライトします。
class CodeView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Bytes", "Mnemonic"])
        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB;")
        layout.addWidget(self.table)

        self.disassembled_data: List[Tuple[int, str, str]] = []
        self._highlighted_row = -1

    # @intent:responsibility PCが表示範囲外（または命令境界がずれている）場合のみ再逆アセンブルします。
    # @intent:rationale 命令は2バイト固定ですが、奇数アドレスへのジャンプもあり得るため、
    #                  PCを起点に逆アセンブルし直します。
    def update_code(self, cpu: AbstractCpu, pc: int):
        row_index = self._find_row(pc)
        if row_index < 0:
            self.disassembled_data = cpu.disassemble(pc, WINDOW_BYTES)
            self.table.setRowCount(len(self.disassembled_data))
            for row, (addr, hex_dump, text) in enumerate(self.disassembled_data):
                self.table.setItem(row, 0, QTableWidgetItem(f"{addr:04X}"))
                self.table.setItem(row, 1, QTableWidgetItem(hex_dump))
                self.table.setItem(row, 2, QTableWidgetItem(text))
            self._highlighted_row = -1
            row_index = self._find_row(pc)

        self._set_row_background(self._highlighted_row, BACKGROUND)
        self._set_row_background(row_index, HIGHLIGHT)
        self._highlighted_row = row_index
        if row_index >= 0:
            self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)

    def _find_row(self, pc: int) -> int:
        for row, (addr, _, _) in enumerate(self.disassembled_data):
            if addr == pc:
                return row
        return -1

    def _set_row_background(self, row: int, color: QColor) -> None:
        if not 0 <= row < self.table.rowCount():
            return
        for col in range(self.table.columnCount()):
            item = self.table.item(row, col)
            if item is not None:
                item.setBackground(color)

    # @intent:responsibility メモリ内容が変わった時（プログラムのロードなど）にキャッシュを破棄します。
    def reset_cache(self):
        self.disassembled_data = []
        self._highlighted_row = -1
        self.table.setRowCount(0)
