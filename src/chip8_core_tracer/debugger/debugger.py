# chip8_core_tracer/debugger/debugger.py
"""
デバッガモジュール。

実行ループの各サイクルを監視し、ユーザーが指定した条件（ブレークポイント）で
実行を中断（一時停止）させる責務を負います。
"""
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional

from chip8_core_tracer.core.loop import ExecutionLoop
from chip8_core_tracer.core.snapshot import Snapshot
from chip8_core_tracer.common.types import RegisterMap
from chip8_core_tracer.transport.bus import BusAccessType

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 1024

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # 次に実行するPCが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    レジスタ名は get_register_map() のキー（"V0" ... "VF", "I", "PC", "SP", "DT", "ST"）です。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUEで使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGEで使用
    enabled: bool = True                  # 有効/無効状態

# @intent:responsibility ヒットしたブレークポイントと、その時点のスナップショットを記録します。
@dataclass(frozen=True)
class BreakpointHit:
    condition: BreakpointCondition
    snapshot: Snapshot

# @intent:responsibility 実行ループの制御とブレークポイント管理を行います。
# @intent:rationale ループの on_cycle フックに接続することで、デバッガ経由でも ExecutionLoop.run() 経由でも
#                  同じ条件判定が行われます。ヒット時はループを一時停止させます。
class Debugger:
    """
    実行ループを監視し、ブレークポイントの管理と実行履歴の記録を行うクラス。
    """
    def __init__(self, loop: ExecutionLoop, history_limit: int = HISTORY_LIMIT):
        self._loop = loop
        self._cpu = loop.cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_registers: RegisterMap = self._cpu.get_register_map()
        self._last_snapshot: Optional[Snapshot] = None
        self._last_hit: Optional[BreakpointHit] = None
        # @intent:responsibility 直近の実行履歴を保持します。古いものから破棄されます。
        self._history: Deque[Snapshot] = deque(maxlen=history_limit)
        loop.on_cycle = self._on_cycle

    @property
    def loop(self) -> ExecutionLoop:
        return self._loop

    @property
    def is_running(self) -> bool:
        return self._running

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        """
        ブレークポイント条件を追加します。
        """
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def update_breakpoint(self, old_condition: BreakpointCondition, new_condition: BreakpointCondition) -> None:
        if old_condition in self._breakpoints:
            idx = self._breakpoints.index(old_condition)
            self._breakpoints[idx] = new_condition

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        """
        現在設定されている全てのブレークポイントのリストを返します。
        """
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def get_last_hit(self) -> Optional[BreakpointHit]:
        return self._last_hit

    # @intent:responsibility CPUのリセットやプログラムのロード後に、履歴と比較基準を初期化します。
    def reset(self) -> None:
        self._history.clear()
        self._last_snapshot = None
        self._last_hit = None
        self._previous_registers = self._cpu.get_register_map()

    def _check_breakpoints(self, snapshot: Snapshot) -> Optional[BreakpointCondition]:
        """
        Snapshotに基づいて、最初に成立したブレークポイント条件を返します。
        """
        registers = snapshot.registers

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.PC_MATCH:
                if registers["PC"] == bp.value:
                    return bp
            elif bp.condition_type == BreakpointConditionType.MEMORY_READ:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.READ and access.address == bp.address:
                        return bp
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                for access in snapshot.bus_activity:
                    if access.access_type == BusAccessType.WRITE and access.address == bp.address:
                        return bp
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name in registers and registers[bp.register_name] == bp.value:
                    return bp
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                name = bp.register_name
                if name in registers and name in self._previous_registers:
                    if registers[name] != self._previous_registers[name]:
                        return bp
        return None

    # @intent:responsibility 実行ループから各サイクルのスナップショットを受け取り、履歴記録と条件判定を行います。
    def _on_cycle(self, snapshot: Snapshot) -> None:
        self._last_snapshot = snapshot
        self._history.append(snapshot)

        hit = self._check_breakpoints(snapshot)
        self._previous_registers = snapshot.registers
        if hit is not None:
            self._last_hit = BreakpointHit(hit, snapshot)
            self._loop.pause()
            logger.info("Breakpoint hit at PC: %#06x (%s)", snapshot.pc, hit.condition_type.value)

    def step_instruction(self) -> Snapshot:
        """
        実行ループを1サイクル進め、その結果のSnapshotを返します。
        単独のステップ実行では、前回のステップからの待ち時間はタイマに反映されません。
        """
        if not self._running:
            self._loop.reset_clock()
        return self._loop.step()

    # @intent:responsibility ブレークポイントにヒットするか、停止・一時停止されるまで実行を継続します。
    # @intent:post-condition ヒットした場合はその条件を返し、ループは一時停止状態になります。
    def run(self, max_cycles: Optional[int] = None) -> Optional[BreakpointCondition]:
        self._last_hit = None
        if self._loop.is_paused:
            self._loop.resume()
        self._loop.reset_clock()
        self._running = True

        executed = 0
        try:
            while self._running:
                if max_cycles is not None and executed >= max_cycles:
                    break
                self.step_instruction()
                executed += 1
                if self._last_hit is not None or self._loop.is_paused:
                    break
        finally:
            self._running = False

        return self._last_hit.condition if self._last_hit is not None else None

    def stop(self) -> None:
        self._running = False
