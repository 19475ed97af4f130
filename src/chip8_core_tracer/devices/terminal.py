# chip8_core_tracer/devices/terminal.py
"""
端末用のキーボード入力。

標準入力を cbreak モードで読み取り、1234/QWER/ASDF/ZXCV の各キーをキーパッドへ対応付けます。
端末はキーを離したことを通知しないため、最後の入力から一定時間が経過したキーは離されたものとみなします。
押しっぱなしの間は端末のキーリピートが押下時刻を更新し続けます。
"""
import logging
import os
import select
import sys
import threading
import time
from typing import Callable, Dict, Optional, TextIO

from chip8_core_tracer.devices.input import KEYPAD_LAYOUT, KeyboardState

logger = logging.getLogger(__name__)

HOLD_TIME_SEC = 0.15
POLL_INTERVAL_SEC = 0.02
READ_CHUNK = 32


# @intent:responsibility 端末の文字入力をキーパッドの押下・離鍵に変換します。
class TerminalKeyboard(KeyboardState):
    def __init__(self, stream: Optional[TextIO] = None,
                 hold_time: float = HOLD_TIME_SEC,
                 clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._stream = stream if stream is not None else sys.stdin
        self._hold_time = hold_time
        self._clock = clock
        self._pressed_at: Dict[int, float] = {}
        self._stop_requested = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._saved_attributes = None

    @property
    def is_reading(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # @intent:responsibility 1文字分の入力を処理し、対応するキーを押下状態にします。
    # @intent:post-condition 対応するキーがなければ None を返し、状態は変化しません。
    def feed(self, char: str) -> Optional[int]:
        key = KEYPAD_LAYOUT.get(char.upper())
        if key is None:
            return None
        self.press(key)
        self._pressed_at[key] = self._clock()
        return key

    # @intent:responsibility 保持時間を過ぎたキーを離鍵状態にします。
    def release_expired(self) -> None:
        now = self._clock()
        for key, pressed_at in list(self._pressed_at.items()):
            if now - pressed_at >= self._hold_time:
                del self._pressed_at[key]
                self.release(key)

    # @intent:responsibility 標準入力が端末であれば cbreak モードに切り替え、読み取りスレッドを開始します。
    # @intent:post-condition 端末でない場合（パイプ、テスト実行時など）は何もしません。
    def start(self) -> None:
        if self.is_reading:
            return
        if sys.platform == "win32" or not self._stream.isatty():
            logger.info("Standard input is not a POSIX terminal; keypad input is disabled")
            return

        import termios
        import tty

        fd = self._stream.fileno()
        self._saved_attributes = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._stop_requested.clear()
        self._thread = threading.Thread(target=self._read_loop, args=(fd,),
                                        name="terminal-keyboard", daemon=True)
        self._thread.start()

    # @intent:responsibility 入力を読み取り続けます。EOFまたは停止要求で終了します。
    # @intent:rationale TextIO のバッファを介さず os.read で読み、select の通知と読み取り量を一致させます。
    def _read_loop(self, fd: int) -> None:
        while not self._stop_requested.is_set():
            ready, _, _ = select.select([fd], [], [], POLL_INTERVAL_SEC)
            if ready:
                data = os.read(fd, READ_CHUNK)
                if not data:
                    break
                for char in data.decode("ascii", errors="ignore"):
                    self.feed(char)
            self.release_expired()
        self.release_all()
        self._pressed_at.clear()

    # @intent:responsibility 読み取りスレッドを停止し、端末の設定を元に戻します。
    def close(self) -> None:
        self._stop_requested.set()
        if self._thread is not None:
            self._thread.join(1.0)
            self._thread = None
        if self._saved_attributes is not None:
            import termios
            termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attributes)
            self._saved_attributes = None
