# chip8_core_tracer/arch/chip8/instructions/base.py
"""
CHIP-8 命令実装用の共通定義。
"""
import random
from dataclasses import dataclass, field
from enum import Enum

from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.state import Chip8CpuState
from chip8_core_tracer.arch.chip8.instruction import Instruction


# @intent:responsibility CALL/RET のスタック境界違反をどう扱うかを定義します。
class StackFaultPolicy(Enum):
    STRICT = "strict" # 致命的フォルトとして例外を送出
    IGNORE = "ignore" # 命令を無視して実行を継続


# @intent:responsibility 命令ハンドラが参照する実行コンテキストを保持します。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    bus: Bus
    rng: random.Random = field(default_factory=random.Random)
    stack_fault_policy: StackFaultPolicy = StackFaultPolicy.IGNORE


# @intent:utility_function PCを1命令分スキップします（条件分岐命令用）。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + Instruction.SIZE) & 0xFFFF


# @intent:utility_function Iを基点としたアドレスを16ビットで折り返して返します。
def address_from_i(state: Chip8CpuState, offset: int = 0) -> int:
    return (state.i + offset) & 0xFFFF
