"""
サウンドデバイス。

サウンドタイマの Elapsed/Stopped 通知によって開始/停止されるトーンを出力します。
トーンはタイマ更新とは非同期に、独立したスレッドで発音されます。
"""
import logging
import sys
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

BEEP_DURATION_SEC = 0.06


# @intent:responsibility サウンドデバイスのインターフェースを定義します。start/end は冪等です。
class SoundDevice(ABC):
    @abstractmethod
    def start_beep(self) -> None:
        pass

    @abstractmethod
    def end_beep(self) -> None:
        pass

    def close(self) -> None:
        pass


class NullSoundDevice(SoundDevice):
    """音を出さないサウンドデバイス。ヘッドレス実行とテストで使用します。"""
    def __init__(self):
        self.beeping = False

    def start_beep(self) -> None:
        self.beeping = True

    def end_beep(self) -> None:
        self.beeping = False


# @intent:utility_function 端末ベルを鳴らします。
def terminal_bell() -> None:
    sys.stdout.write("\a")
    sys.stdout.flush()


# @intent:responsibility Event がセットされている間、バックグラウンドスレッドでビープを繰り返します。
# @intent:rationale 実行ループとの同期は開始/停止シグナルのみで、共有する可変状態を持ちません。
class BellSoundDevice(SoundDevice):
    """
    beep 呼び出しを別スレッドで繰り返すサウンドデバイス。
    beep には端末ベルや QApplication.beep などの呼び出し可能オブジェクトを渡します。
    """
    def __init__(self, beep: Optional[Callable[[], None]] = None, duration: float = BEEP_DURATION_SEC):
        self._beep = beep if beep is not None else terminal_bell
        self._duration = duration
        self._event = threading.Event()
        self._closed = False
        self._thread = threading.Thread(target=self._thread_main, name="BellSoundDeviceThread", daemon=True)
        self._thread.start()

    def start_beep(self) -> None:
        if not self._event.is_set():
            self._event.set()

    def end_beep(self) -> None:
        self._event.clear()

    @property
    def is_beeping(self) -> bool:
        return self._event.is_set()

    def close(self) -> None:
        self._closed = True
        self._event.set()
        self._thread.join(timeout=1.0)

    def _thread_main(self) -> None:
        while True:
            self._event.wait()
            if self._closed:
                return
            try:
                self._beep()
            except OSError as e:
                logger.warning("Beep failed: %s", e)
            time.sleep(self._duration)
