# chip8_core_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、画面クリア）の実装。
"""
import logging

from chip8_core_tracer.core.errors import StackOverflowError, StackUnderflowError
from chip8_core_tracer.arch.chip8.instruction import Instruction
from chip8_core_tracer.arch.chip8.state import STACK_DEPTH
from .base import ExecutionContext, StackFaultPolicy, skip_next

logger = logging.getLogger(__name__)

# --- 0nnn SYS ---
# @intent:responsibility 旧来のマシンコードルーチン呼び出し。現代のインタプリタ同様、何もしません。
def execute_sys(ctx: ExecutionContext, ins: Instruction) -> bool:
    # Intentional: SYS addr is ignored
    return True

# --- 00E0 CLS ---
def execute_cls(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.bus.display.clear()
    return True

# --- 00EE RET ---
# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。
# @intent:pre-condition スタックが空の場合、ポリシーに従い例外送出または無視します（状態は変更しません）。
def execute_ret(ctx: ExecutionContext, ins: Instruction) -> bool:
    state = ctx.state
    if state.stack_empty:
        if ctx.stack_fault_policy is StackFaultPolicy.STRICT:
            raise StackUnderflowError(state.pc)
        logger.warning("RET with empty stack at %#06x ignored", state.pc)
        return True

    state.sp -= 1
    state.pc = state.stack[state.sp]
    return False

# --- 1nnn JP ---
def execute_jp(ctx: ExecutionContext, ins: Instruction) -> bool:
    state = ctx.state
    if state.pc == ins.nnn:
        logger.debug("JP: branch to self at %#06x", state.pc)
    state.pc = ins.nnn
    return False

# --- 2nnn CALL ---
# @intent:responsibility 次の命令のアドレスをスタックにプッシュしてからジャンプします。
# @intent:pre-condition スタックが満杯の場合、ポリシーに従い例外送出または無視します（状態は変更しません）。
def execute_call(ctx: ExecutionContext, ins: Instruction) -> bool:
    state = ctx.state
    if state.stack_full:
        if ctx.stack_fault_policy is StackFaultPolicy.STRICT:
            raise StackOverflowError(state.pc, STACK_DEPTH)
        logger.warning("CALL with full stack at %#06x ignored", state.pc)
        return True

    state.stack[state.sp] = (state.pc + Instruction.SIZE) & 0xFFFF
    state.sp += 1
    state.pc = ins.nnn
    return False

# --- 3xkk SE Vx, byte ---
def execute_se_imm(ctx: ExecutionContext, ins: Instruction) -> bool:
    if ctx.state.v[ins.x] == ins.kk:
        skip_next(ctx.state)
    return True

# --- 4xkk SNE Vx, byte ---
def execute_sne_imm(ctx: ExecutionContext, ins: Instruction) -> bool:
    if ctx.state.v[ins.x] != ins.kk:
        skip_next(ctx.state)
    return True

# --- 5xy0 SE Vx, Vy ---
def execute_se(ctx: ExecutionContext, ins: Instruction) -> bool:
    if ctx.state.v[ins.x] == ctx.state.v[ins.y]:
        skip_next(ctx.state)
    return True

# --- 9xy0 SNE Vx, Vy ---
def execute_sne(ctx: ExecutionContext, ins: Instruction) -> bool:
    if ctx.state.v[ins.x] != ctx.state.v[ins.y]:
        skip_next(ctx.state)
    return True

# --- Bnnn JP V0, addr ---
def execute_jp_v0(ctx: ExecutionContext, ins: Instruction) -> bool:
    state = ctx.state
    target = (ins.nnn + state.v[0]) & 0xFFFF
    if state.pc == target:
        logger.debug("JP V0: branch to self at %#06x", state.pc)
    state.pc = target
    return False

# --- Ex9E SKP Vx ---
def execute_skp(ctx: ExecutionContext, ins: Instruction) -> bool:
    if ctx.bus.input.is_key_down(ctx.state.v[ins.x]):
        skip_next(ctx.state)
    return True

# --- ExA1 SKNP Vx ---
def execute_sknp(ctx: ExecutionContext, ins: Instruction) -> bool:
    if not ctx.bus.input.is_key_down(ctx.state.v[ins.x]):
        skip_next(ctx.state)
    return True
