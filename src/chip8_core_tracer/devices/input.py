# chip8_core_tracer/devices/input.py
"""
入力デバイス。

16キー（0x0-0xF）のキーパッド状態を提供します。
LD Vx, K 命令のために、キー押下まで呼び出しスレッドをブロックする操作を持ちます。
"""
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Optional

from chip8_core_tracer.core.errors import InputInterrupted

KEY_COUNT = 16

# @intent:constant 物理キーボードの4x4ブロックをCHIP-8キーパッドの配置に対応付けます。
#   1 2 3 C      1 2 3 4
#   4 5 6 D  ->  Q W E R
#   7 8 9 E      A S D F
#   A 0 B F      Z X C V
KEYPAD_LAYOUT: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}


# @intent:responsibility 入力デバイスのインターフェースを定義します。
class InputDevice(ABC):
    @abstractmethod
    def is_key_down(self, key: int) -> bool:
        pass

    @abstractmethod
    def is_any_key_down(self) -> bool:
        pass

    # @intent:responsibility キーが押下されるまでブロックし、そのキーコードを返します。
    @abstractmethod
    def wait_until_key_down(self) -> int:
        pass

    # @intent:responsibility 入力の取り込みを開始します。外部の入力源を持つデバイスのみが実装します。
    def start(self) -> None:
        pass

    def close(self) -> None:
        pass


# @intent:responsibility スレッドセーフなキー状態テーブルを保持します。
# @intent:rationale UIスレッドから press/release され、実行ループのスレッドから参照されるため、
#                  Condition で状態を保護します。
class KeyboardState(InputDevice):
    """
    押下状態を保持するキーパッド。
    press/release は任意のスレッドから呼び出すことができます。
    """
    def __init__(self):
        self._keys = [False] * KEY_COUNT
        self._condition = threading.Condition()
        self._transitions: Deque[int] = deque()
        self._waiting = False
        self._interrupted = False

    @staticmethod
    def _check_key(key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key {key} is out of range 0x0-0xF.")

    # @intent:responsibility キーを押下状態にします。離された状態からの遷移のみ待機者に通知されます。
    def press(self, key: int) -> None:
        self._check_key(key)
        with self._condition:
            if self._keys[key]:
                return
            self._keys[key] = True
            if self._waiting:
                self._transitions.append(key)
                self._condition.notify_all()

    def release(self, key: int) -> None:
        self._check_key(key)
        with self._condition:
            self._keys[key] = False

    def release_all(self) -> None:
        with self._condition:
            self._keys = [False] * KEY_COUNT

    def is_key_down(self, key: int) -> bool:
        # 範囲外のキー値は押されていないものとして扱う
        if not 0 <= key < KEY_COUNT:
            return False
        with self._condition:
            return self._keys[key]

    def is_any_key_down(self) -> bool:
        with self._condition:
            return any(self._keys)

    # @intent:responsibility 呼び出し以降に発生した最初の押下遷移を待ちます。
    # @intent:post-condition timeout を指定して時間内に押下がなければ None を返します。
    #                        interrupt() されている場合（待機開始前を含む）は InputInterrupted を送出します。
    def wait_until_key_down(self, timeout: Optional[float] = None) -> Optional[int]:
        with self._condition:
            self._waiting = True
            self._transitions.clear()
            try:
                ready = self._condition.wait_for(lambda: self._transitions or self._interrupted, timeout=timeout)
                if self._interrupted:
                    raise InputInterrupted("Wait for key press was interrupted.")
                if not ready:
                    return None
                return self._transitions.popleft()
            finally:
                self._waiting = False
                self._transitions.clear()

    # @intent:responsibility キー待ちを中断します（シャットダウン用）。
    # @intent:rationale 中断状態は clear_interrupt() まで保持され、これから待機に入るスレッドも即座に解放されます。
    def interrupt(self) -> None:
        with self._condition:
            self._interrupted = True
            self._condition.notify_all()

    # @intent:responsibility 中断状態を解除します。新しい実行を開始する前に呼び出します。
    def clear_interrupt(self) -> None:
        with self._condition:
            self._interrupted = False

    @property
    def interrupted(self) -> bool:
        with self._condition:
            return self._interrupted
