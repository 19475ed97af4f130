# chip8_core_tracer/ui/qt_devices.py
"""
Qtフロントエンド用のデバイスアダプタ。

実行ループのスレッドから発生するビープ要求をGUIスレッドへ中継し、
物理キーボードのキーを16キーパッドへ対応付けます。
"""
from typing import Dict, Optional

from PySide6.QtCore import QObject, Qt, Signal, Slot
from PySide6.QtWidgets import QApplication

from chip8_core_tracer.devices.input import KEYPAD_LAYOUT
from chip8_core_tracer.devices.sound import BellSoundDevice

# @intent:constant 端末フロントエンドと同じキー配置を Qt のキーコードで表したもの。
KEY_MAP: Dict[int, int] = {
    getattr(Qt.Key, f"Key_{name}"): value for name, value in KEYPAD_LAYOUT.items()
}


def map_key(qt_key: int) -> Optional[int]:
    return KEY_MAP.get(qt_key)


# @intent:responsibility ワーカースレッドからのビープ要求をシグナル経由でGUIスレッドに渡します。
# @intent:rationale QApplication.beep はGUIスレッドからのみ安全に呼び出せます。
class QtBeeper(QObject):
    beep_requested = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.beep_requested.connect(self._beep, Qt.QueuedConnection)

    def request_beep(self) -> None:
        self.beep_requested.emit()

    @Slot()
    def _beep(self):
        QApplication.beep()


def create_qt_sound_device(beeper: QtBeeper) -> BellSoundDevice:
    return BellSoundDevice(beep=beeper.request_beep)
