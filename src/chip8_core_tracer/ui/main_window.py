# chip8_core_tracer/ui/main_window.py
"""
メインウィンドウの実装。
画面、レジスタ、逆アセンブル表示を保持し、実行ループをバックグラウンドスレッドで駆動します。
"""
import logging
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QFocusEvent, QKeyEvent
from PySide6.QtCore import Qt, QThread, QTimer, Signal, Slot

from chip8_core_tracer.config.builder import SystemBuilder
from chip8_core_tracer.config.loader import ConfigLoader
from chip8_core_tracer.config.models import EmulatorConfig
from chip8_core_tracer.core.errors import Chip8Error
from chip8_core_tracer.core.snapshot import Snapshot
from chip8_core_tracer.debugger.debugger import Debugger
from chip8_core_tracer.devices.display import DisplaySurface
from chip8_core_tracer.devices.input import KeyboardState
from chip8_core_tracer.devices.sound import NullSoundDevice, SoundDevice
from chip8_core_tracer.emulator import Emulator
from .code_view import CodeView
from .fonts import get_monospace_font_family
from .qt_devices import QtBeeper, create_qt_sound_device, map_key
from .register_view import RegisterView
from .screen_view import ScreenView

logger = logging.getLogger(__name__)

INSPECTOR_REFRESH_MS = 100

# @intent:responsibility デバッガのrunメソッドをバックグラウンドで実行します。
class LoopThread(QThread):
    """
    Debugger.run() をノンブロッキングで実行するためのスレッド。
    ブレークポイント、一時停止、停止のいずれかで run() が戻ると halted を通知します。
    """
    halted = Signal(object)     # 最後の Snapshot（未実行なら None）
    fault = Signal(str)

    def __init__(self, debugger: Debugger):
        super().__init__()
        self.debugger = debugger

    # @intent:post-condition フォルトで終了した場合も halted は必ず通知され、UIは操作可能な状態に戻ります。
    def run(self):
        try:
            self.debugger.run()
        except Chip8Error as e:
            logger.error("%s", e)
            self.fault.emit(str(e))
        finally:
            self.halted.emit(self.debugger.get_last_snapshot())


# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[EmulatorConfig] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("CHIP-8 Core Tracer")
        self.resize(1100, 600)

        self._beeper = QtBeeper(self)
        self._fault: Optional[str] = None
        self._config = config if config is not None else EmulatorConfig()
        self.loop_thread: Optional[LoopThread] = None

        self._set_dark_theme()
        self._setup_backend(self._config)
        self.screen_view = ScreenView(self.surface)
        self.setCentralWidget(self.screen_view)
        self._create_toolbar()
        self._create_docks()
        self._create_menus()
        self.status_label = QLabel("Ready")
        self.statusBar().addWidget(self.status_label)

        self._inspector_timer = QTimer(self)
        self._inspector_timer.setInterval(INSPECTOR_REFRESH_MS)
        self._inspector_timer.timeout.connect(self._refresh_inspectors)

        self._attach_views()
        self._update_ui_state(False)
        self.setFocusPolicy(Qt.StrongFocus)

    # @intent:responsibility 設定に基づいてエミュレータを構築します。画面とキーパッドはGUIのものを注入します。
    def _setup_backend(self, config: EmulatorConfig):
        self.surface = DisplaySurface(config.display.width, config.display.height)
        self.keyboard = KeyboardState()
        sound: SoundDevice = create_qt_sound_device(self._beeper) if config.sound.enabled else NullSoundDevice()
        self.emulator: Emulator = SystemBuilder().build_system(
            config, display=self.surface, input_device=self.keyboard, sound=sound
        )
        self.debugger = Debugger(self.emulator.loop)
        self.loop_thread = LoopThread(self.debugger)
        self.loop_thread.halted.connect(self._on_halted)
        self.loop_thread.fault.connect(self._on_fault)

    def _attach_views(self):
        self.screen_view.set_surface(self.surface)
        self.register_view.set_cpu(self.emulator.cpu)
        self.code_view.reset_cache()
        self.code_view.update_code(self.emulator.cpu, self.emulator.cpu.state.pc)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._load_rom_dialog)
        file_menu.addAction(self.load_rom_action)

        self.load_config_action = QAction("Load Config...", self)
        self.load_config_action.triggered.connect(self._load_config_dialog)
        file_menu.addAction(self.load_config_action)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        toolbar.setFocusPolicy(Qt.NoFocus)
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.run)
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(self.pause)
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset)
        toolbar.addAction(self.reset_action)

    def _create_docks(self):
        register_dock = QDockWidget("Registers", self)
        self.register_view = RegisterView()
        register_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, register_dock)

        code_dock = QDockWidget("Code", self)
        self.code_view = CodeView()
        code_dock.setWidget(self.code_view)
        self.addDockWidget(Qt.LeftDockWidgetArea, code_dock)

    # @intent:responsibility 実行状態に応じてUIコンポーネントの有効/無効を切り替えます。
    def _update_ui_state(self, is_running: bool):
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.reset_action.setEnabled(not is_running)
        self.load_rom_action.setEnabled(not is_running)
        self.load_config_action.setEnabled(not is_running)
        self.pause_action.setEnabled(is_running)

    def is_running(self) -> bool:
        return self.loop_thread is not None and self.loop_thread.isRunning()

    @Slot()
    def run(self):
        if self.is_running():
            return
        self._fault = None
        self.keyboard.clear_interrupt()
        self._update_ui_state(True)
        self.status_label.setText("Running...")
        self._inspector_timer.start()
        self.loop_thread.start()

    # @intent:responsibility 実行ループを一時停止します。スレッドは現在のサイクル完了後に halted を通知します。
    @Slot()
    def pause(self):
        self.status_label.setText("Pausing...")
        self.emulator.pause()

    @Slot()
    def step(self):
        if self.is_running():
            return
        try:
            snapshot = self.debugger.step_instruction()
        except Chip8Error as e:
            self._on_fault(str(e))
            return
        self._update_ui_from_snapshot(snapshot)

    @Slot()
    def reset(self):
        if self.is_running():
            return
        self.emulator.reset()
        self.debugger.reset()
        self._fault = None
        self._attach_views()
        self.status_label.setText("Reset")

    @Slot(object)
    def _on_halted(self, snapshot: Optional[Snapshot]):
        self._inspector_timer.stop()
        self._update_ui_state(False)
        hit = self.debugger.get_last_hit()
        if self._fault is not None:
            self.status_label.setText(f"Fault: {self._fault}")
        elif hit is not None:
            self.status_label.setText(f"Breakpoint hit at {hit.snapshot.pc:04X}")
        else:
            self.status_label.setText("Paused")
        if snapshot is not None:
            self._update_ui_from_snapshot(snapshot)

    @Slot(str)
    def _on_fault(self, message: str):
        self._fault = message
        self.status_label.setText(f"Fault: {message}")

    @Slot()
    def _refresh_inspectors(self):
        self.register_view.update_registers()

    def _update_ui_from_snapshot(self, snapshot: Snapshot):
        self.register_view.update_registers(snapshot.registers)
        self.code_view.update_code(self.emulator.cpu, snapshot.pc)
        self.screen_view.refresh()

    # @intent:responsibility ROMをロードし、CPUを初期状態から開始できるようにします。
    def load_rom(self, path: str) -> None:
        self.emulator.reset()
        self.emulator.load_program(path)
        self.debugger.reset()
        self._attach_views()
        self.status_label.setText(f"Loaded {path}")

    # @intent:responsibility 設定ファイルを読み込み、エミュレータを再構築します。
    def load_config(self, path: str) -> None:
        config = ConfigLoader().load_from_file(path)
        self.emulator.close()
        self._config = config
        self._setup_backend(config)
        self._attach_views()
        self.status_label.setText(f"Loaded config {path}")

    @Slot()
    def _load_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 Programs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            try:
                self.load_rom(file_name)
            except Chip8Error as e:
                QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")

    @Slot()
    def _load_config_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if file_name:
            try:
                self.load_config(file_name)
            except (OSError, ValueError) as e:
                QMessageBox.critical(self, "Error", f"Failed to load config: {e}")

    # @intent:responsibility 物理キーの押下をキーパッドに伝えます。オートリピートは無視します。
    def keyPressEvent(self, event: QKeyEvent):
        key = map_key(event.key())
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.keyboard.press(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = map_key(event.key())
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.keyboard.release(key)

    # @intent:responsibility フォーカスを失うと離鍵イベントが届かないため、全キーを離した状態にします。
    def focusOutEvent(self, event: QFocusEvent):
        self.keyboard.release_all()
        super().focusOutEvent(event)

    def _set_dark_theme(self):
        palette = QPalette()
        palette.setColor(QPalette.Window, QColor(29, 29, 29))
        palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        palette.setColor(QPalette.Base, QColor(30, 30, 30))
        palette.setColor(QPalette.Text, QColor(224, 224, 224))
        palette.setColor(QPalette.Button, QColor(53, 53, 53))
        palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        QApplication.setPalette(palette)
        self.setStyleSheet(
            f"QWidget {{ font-family: '{get_monospace_font_family()}', monospace; font-size: 10pt; }}"
            "QMainWindow, QToolBar { background-color: #1D1D1D; border: none; }"
            "QDockWidget::title { text-align: left; background: #101010; padding: 4px; font-weight: bold; }"
        )

    # @intent:responsibility アプリケーション終了時に呼ばれ、バックグラウンドスレッドを安全に停止します。
    def closeEvent(self, event: QCloseEvent):
        """
        キー入力待ち（LD Vx, K）でブロックしている場合も解放してからスレッドの終了を待ちます。
        """
        self._inspector_timer.stop()
        if self.is_running():
            self.loop_thread.halted.disconnect(self._on_halted)
            self.debugger.stop()
            self.keyboard.interrupt()
            self.loop_thread.wait()
        self.emulator.close()
        event.accept()
