# chip8_core_tracer/core/timer.py
"""
Timer Register

CPUの命令レートとは独立に、一定間隔（60Hz）でカウントダウンする8ビットレジスタです。
値が0でない間は Active、0になると Inactive になります。
"""
from typing import Callable, List

TIMER_FREQUENCY_HZ = 60

TimerListener = Callable[["TimerRegister"], None]


# @intent:responsibility 一定間隔で値をデクリメントし、Elapsed/Stopped を通知するカウンタ。
class TimerRegister:
    """
    カウントダウンタイマレジスタ。

    update() には経過ティック数を渡します。残り時間が0以下になるたびに値を1減らして
    Elapsed を通知し、値が0に達した場合は続けて Stopped を通知します。
    0を越えて経過した分（オーバーシュート）は次の間隔に繰り越され、長期的な精度を保ちます。
    """
    # @intent:pre-condition interval は1ティック間隔（正の値）である必要があります。
    def __init__(self, interval: float):
        if interval <= 0:
            raise ValueError("Timer interval must be positive.")
        self.interval = interval
        self.remaining: float = 0
        self._value = 0
        self._elapsed_listeners: List[TimerListener] = []
        self._stopped_listeners: List[TimerListener] = []

    @property
    def value(self) -> int:
        return self._value

    # @intent:responsibility 値を設定します。0以外の値を設定すると、新しい間隔が1つ分セットされます。
    @value.setter
    def value(self, value: int) -> None:
        self._value = value & 0xFF
        self.remaining = self.interval if self._value else 0

    @property
    def is_active(self) -> bool:
        return self._value != 0

    def add_elapsed_listener(self, listener: TimerListener) -> None:
        self._elapsed_listeners.append(listener)

    def add_stopped_listener(self, listener: TimerListener) -> None:
        self._stopped_listeners.append(listener)

    # @intent:responsibility 経過時間を反映し、ゼロ交差ごとに1回だけ通知を行います。
    def update(self, elapsed: float) -> None:
        if not self.is_active:
            return

        self.remaining -= elapsed
        if self.remaining > 0:
            return

        self._value -= 1
        for listener in self._elapsed_listeners:
            listener(self)

        if self._value != 0:
            # remaining は0以下。超過分を次の間隔から差し引く
            self.remaining = self.interval + self.remaining
        else:
            self.remaining = 0
            for listener in self._stopped_listeners:
                listener(self)

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"TimerRegister(value={self._value}, interval={self.interval}, remaining={self.remaining})"
