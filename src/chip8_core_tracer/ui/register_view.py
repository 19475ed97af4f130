# chip8_core_tracer/ui/register_view.py
"""
CPUのレジスタを表示するウィジェット。
AbstractCpuのレイアウト情報を利用して動的にUIを構築します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from chip8_core_tracer.common.types import RegisterMap
from chip8_core_tracer.core.cpu import AbstractCpu
from chip8_core_tracer.ui.fonts import get_monospace_font_family

COLUMNS = 4 # 汎用レジスタは4列で表示

# @intent:responsibility CPUのレジスタ値とフラグを表示するUIウィジェットを提供します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = get_monospace_font_family()
        self._value_labels: Dict[str, QLabel] = {}
        self._flag_labels: Dict[str, QLabel] = {}
        self._widths: Dict[str, int] = {}
        self._cpu: Optional[AbstractCpu] = None

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._setup_ui()
        self.update_registers()

    # @intent:responsibility CPUから取得したグループ情報に基づいて、レジスタごとのラベルを生成します。
    def _setup_ui(self):
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._value_labels.clear()
        self._flag_labels.clear()
        self._widths.clear()

        for group in self._cpu.get_register_layout():
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet(
                "QGroupBox { font-weight: bold; border: 1px solid #222; margin-top: 16px; color: #EEE; }"
                "QGroupBox::title { subcontrol-origin: margin; left: 8px; padding: 0 4px; color: #00AAAA; }"
            )
            grid = QGridLayout(group_box)
            grid.setContentsMargins(8, 12, 8, 8)
            grid.setHorizontalSpacing(12)

            for n, reg in enumerate(group.registers):
                width = (reg.width + 3) // 4 # 16bit -> 4桁, 8bit -> 2桁
                self._widths[reg.name] = width

                name_label = QLabel(f"{reg.name}:")
                name_label.setStyleSheet("font-weight: bold; color: #BBBBBB;")
                value_label = QLabel("0" * width)
                value_label.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
                value_label.setAlignment(Qt.AlignRight)

                row, col = divmod(n, COLUMNS)
                grid.addWidget(name_label, row, col * 2)
                grid.addWidget(value_label, row, col * 2 + 1)
                self._value_labels[reg.name] = value_label

            self._layout.addWidget(group_box)

        self._layout.addWidget(self._create_flag_group())
        self._layout.addStretch()

    # @intent:responsibility get_flag_state() の各フラグを 0/1 で表示するグループを生成します。
    def _create_flag_group(self) -> QGroupBox:
        group_box = QGroupBox("Flags")
        group_box.setStyleSheet(
            "QGroupBox { font-weight: bold; border: 1px solid #222; margin-top: 16px; color: #EEE; }"
            "QGroupBox::title { subcontrol-origin: margin; left: 8px; padding: 0 4px; color: #00AAAA; }"
        )
        row = QHBoxLayout(group_box)
        row.setContentsMargins(8, 12, 8, 8)
        for name in self._cpu.get_flag_state():
            name_label = QLabel(f"{name}:")
            name_label.setStyleSheet("font-weight: bold; color: #BBBBBB;")
            value_label = QLabel("0")
            value_label.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;")
            value_label.setAlignment(Qt.AlignCenter)
            row.addWidget(name_label)
            row.addWidget(value_label)
            self._flag_labels[name] = value_label
        row.addStretch(1)
        return group_box

    # @intent:responsibility レジスタの表示値を更新します。registers が省略された場合はCPUから取得します。
    def update_registers(self, registers: Optional[RegisterMap] = None):
        if registers is None:
            if self._cpu is None:
                return
            registers = self._cpu.get_register_map()

        for name, value in registers.items():
            label = self._value_labels.get(name)
            if label is not None:
                label.setText(f"{value:0{self._widths[name]}X}")
        self._update_flags()

    def _update_flags(self):
        if self._cpu is None:
            return
        for name, is_set in self._cpu.get_flag_state().items():
            label = self._flag_labels.get(name)
            if label is not None:
                label.setText("1" if is_set else "0")

    def value_text(self, name: str) -> str:
        return self._value_labels[name].text()

    def flag_text(self, name: str) -> str:
        return self._flag_labels[name].text()
