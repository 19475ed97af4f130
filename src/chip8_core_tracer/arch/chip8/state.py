# chip8_core_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.core.timer import TimerRegister, TIMER_FREQUENCY_HZ
from chip8_core_tracer.transport.memory import PROGRAM_START

REGISTER_COUNT = 16
STACK_DEPTH = 16
TICKS_PER_SECOND = 1_000_000_000 # perf_counter_ns

# @intent:constant 汎用レジスタのインデックス。VFはフラグレジスタを兼ねます。
V0, V1, V2, V3, V4, V5, V6, V7, V8, V9, VA, VB, VC, VD, VE, VF = range(REGISTER_COUNT)


# @intent:utility_function 指定された周波数の1周期をティック（ns）で返します。
def ticks_per_period(frequency_hz: float) -> float:
    return TICKS_PER_SECOND / frequency_hz


# @intent:responsibility CHIP-8 CPUの全てのレジスタ、スタック、タイマの状態を保持します。
# @intent:rationale V0..VF は個別フィールドではなく、名前付きインデックス定数を持つ単一の配列とします。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    sp は積まれている戻りアドレスの数（0 ... STACK_DEPTH）です。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000 # Address register
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    dt: TimerRegister = field(default_factory=lambda: TimerRegister(ticks_per_period(TIMER_FREQUENCY_HZ)))
    st: TimerRegister = field(default_factory=lambda: TimerRegister(ticks_per_period(TIMER_FREQUENCY_HZ)))
    paused: bool = False

    @property
    def vf(self) -> int:
        return self.v[VF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[VF] = value & 0xFF

    @property
    def stack_full(self) -> bool:
        return self.sp >= STACK_DEPTH

    @property
    def stack_empty(self) -> bool:
        return self.sp == 0
