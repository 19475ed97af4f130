# chip8_core_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

フラグ（VF）はオペランドから計算し、結果レジスタへの書き込みは最後に行います。
そのため Vx が VF の場合は演算結果が残ります。
"""
from chip8_core_tracer.arch.chip8.instruction import Instruction
from chip8_core_tracer.arch.chip8.state import VF
from .base import ExecutionContext

# --- 7xkk ADD Vx, byte ---
# @intent:responsibility 即値を加算します。キャリーフラグは変化しません。
def execute_add_imm(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    v[ins.x] = (v[ins.x] + ins.kk) & 0xFF
    return True

# --- 8xy0 LD Vx, Vy ---
def execute_ld(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    v[ins.x] = v[ins.y]
    return True

# --- 8xy1 OR ---
def execute_or(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    v[ins.x] |= v[ins.y]
    return True

# --- 8xy2 AND ---
def execute_and(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    v[ins.x] &= v[ins.y]
    return True

# --- 8xy3 XOR ---
def execute_xor(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    v[ins.x] ^= v[ins.y]
    return True

# --- 8xy4 ADD Vx, Vy ---
# @intent:responsibility 加算結果が8ビットを超えた場合 VF=1、それ以外は VF=0。下位8ビットを Vx に格納します。
def execute_add(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    res = v[ins.x] + v[ins.y]
    v[VF] = 1 if res > 0xFF else 0
    v[ins.x] = res & 0xFF
    return True

# --- 8xy5 SUB Vx, Vy ---
# @intent:responsibility Vx > Vy なら VF=1（NOT borrow）。Vx = Vx - Vy（8ビットで折り返し）。
def execute_sub(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    vx, vy = v[ins.x], v[ins.y]
    v[VF] = 1 if vx > vy else 0
    v[ins.x] = (vx - vy) & 0xFF
    return True

# --- 8xy6 SHR Vx ---
# @intent:responsibility シフト前の最下位ビットを VF に設定し、Vx を自身の位置で1ビット右シフトします。Vy は参照しません。
def execute_shr(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    vx = v[ins.x]
    v[VF] = vx & 0x01
    v[ins.x] = vx >> 1
    return True

# --- 8xy7 SUBN Vx, Vy ---
def execute_subn(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    vx, vy = v[ins.x], v[ins.y]
    v[VF] = 1 if vy > vx else 0
    v[ins.x] = (vy - vx) & 0xFF
    return True

# --- 8xyE SHL Vx ---
def execute_shl(ctx: ExecutionContext, ins: Instruction) -> bool:
    v = ctx.state.v
    vx = v[ins.x]
    v[VF] = (vx >> 7) & 0x01
    v[ins.x] = (vx << 1) & 0xFF
    return True

# --- Cxkk RND Vx, byte ---
# @intent:responsibility [0, 256) の一様乱数と即値の論理積を Vx に格納します。
def execute_rnd(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.v[ins.x] = ctx.rng.randrange(256) & ins.kk
    return True
