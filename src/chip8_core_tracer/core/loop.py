# chip8_core_tracer/core/loop.py
"""
Execution Loop

フェッチ・デコード・実行を目標の命令レートで駆動し、実時間でペース配分を行い、
各サイクルの実測経過時間で2つのタイマを更新します。
"""
import logging
import threading
import time
from typing import Callable, Optional

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.state import ticks_per_period
from chip8_core_tracer.core.errors import Chip8Error
from chip8_core_tracer.core.snapshot import Snapshot
from chip8_core_tracer.devices.display import DisplayDevice

logger = logging.getLogger(__name__)

CPU_FREQUENCY_HZ = 730
PAUSE_POLL_INTERVAL_SEC = 0.1

Clock = Callable[[], int]
CycleHook = Callable[[Snapshot], None]


# @intent:responsibility マシン全体の実行サイクルを駆動します。
# @intent:rationale 命令間の待機はスリープではなくビジーウェイトで行い、CPU効率よりタイミング精度を優先します。
class ExecutionLoop:
    """
    固定レートの実行ループ。

    1サイクル:
      1. ディスプレイにフレーム開始を通知
      2. 命令を1つ実行（PCの更新はCPUが行う）
      3. ディスプレイにフレーム完了を通知
      4. 目標間隔に満たなければビジーウェイト
      5. 実測の経過ティックで DT と ST を更新
    一時停止中はフェッチもタイマ更新も行わず、粗い間隔でスリープしながら状態を再確認します。
    """
    def __init__(self, cpu: Chip8Cpu, display: DisplayDevice,
                 cpu_frequency_hz: float = CPU_FREQUENCY_HZ,
                 clock: Clock = time.perf_counter_ns,
                 pause_poll_interval: float = PAUSE_POLL_INTERVAL_SEC,
                 busy_wait: bool = True):
        if cpu_frequency_hz <= 0:
            raise ValueError("CPU frequency must be positive.")
        self._cpu = cpu
        self._display = display
        self._clock = clock
        self._target_delta = ticks_per_period(cpu_frequency_hz)
        self._pause_poll_interval = pause_poll_interval
        self._busy_wait = busy_wait
        self._running = False
        self._stop_requested = threading.Event()
        self._start_time: Optional[int] = None
        self._cycles = 0
        self.on_cycle: Optional[CycleHook] = None

    @property
    def cpu(self) -> Chip8Cpu:
        return self._cpu

    @property
    def target_delta(self) -> float:
        return self._target_delta

    @property
    def cycle_count(self) -> int:
        return self._cycles

    @property
    def is_paused(self) -> bool:
        return self._cpu.state.paused

    @property
    def is_running(self) -> bool:
        return self._running

    def pause(self) -> None:
        self._cpu.state.paused = True

    # @intent:responsibility 一時停止を解除します。停止中の時間がタイマに反映されないよう基準時刻を破棄します。
    def resume(self) -> None:
        self.reset_clock()
        self._cpu.state.paused = False

    # @intent:responsibility サイクルの基準時刻を破棄します。次のサイクルは呼び出し時点から計測されます。
    def reset_clock(self) -> None:
        self._start_time = None

    def stop(self) -> None:
        self._stop_requested.set()

    # @intent:responsibility 目標時刻に達するまで待機し、実際の時刻を返します。
    def _wait_until(self, target_end: float) -> int:
        now = self._clock()
        while now < target_end:
            if not self._busy_wait:
                time.sleep(max(0.0, (target_end - now) / 1e9))
            now = self._clock()
        return now

    # @intent:responsibility 1サイクル（命令1つとタイマ更新）を実行し、その命令のスナップショットを返します。
    # @intent:post-condition 同一サイクル内で、命令実行は必ずタイマ更新より先に行われます。
    def step(self) -> Snapshot:
        if self._start_time is None:
            self._start_time = self._clock()
        start = self._start_time

        self._display.on_start_frame()
        snapshot = self._cpu.step()
        self._display.on_finish_frame()

        end = self._wait_until(start + self._target_delta)

        delta = end - start
        state = self._cpu.state
        state.dt.update(delta)
        state.st.update(delta)

        self._start_time = end
        self._cycles += 1

        if self.on_cycle is not None:
            self.on_cycle(snapshot)
        return snapshot

    # @intent:responsibility 停止要求または指定サイクル数に達するまでループを実行します。
    # @intent:post-condition CPUレベルのフォルトはログに記録した上で呼び出し元へ伝播します（実行は終了）。
    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        実行したサイクル数を返します。
        """
        self._stop_requested.clear()
        self.reset_clock()
        self._running = True
        executed = 0
        try:
            while not self._stop_requested.is_set():
                if max_cycles is not None and executed >= max_cycles:
                    break
                if self.is_paused:
                    self._start_time = None
                    time.sleep(self._pause_poll_interval)
                    continue
                self.step()
                executed += 1
        except Chip8Error:
            logger.exception("Execution halted at PC %#06x", self._cpu.state.pc)
            raise
        finally:
            self._running = False
            self._cpu.sound.end_beep()
        return executed
