# chip8_core_tracer/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、アドレスレジスタ、タイマ、メモリ、描画）の実装。
"""
from chip8_core_tracer.arch.chip8.instruction import Instruction
from chip8_core_tracer.arch.chip8.state import VF
from chip8_core_tracer.transport.font import glyph_address
from .base import ExecutionContext, address_from_i

# --- 6xkk LD Vx, byte ---
def execute_ld_imm(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.v[ins.x] = ins.kk
    return True

# --- Annn LD I, addr ---
def execute_ld_i(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.i = ins.nnn
    return True

# --- Dxyn DRW Vx, Vy, nibble ---
# @intent:responsibility Iから nバイトのスプライトを読み出し、(Vx, Vy) に描画して衝突結果を VF に設定します。
def execute_drw(ctx: ExecutionContext, ins: Instruction) -> bool:
    state = ctx.state
    sprite = ctx.bus.read_bytes(state.i, ins.n)
    collided = ctx.bus.display.draw_sprite(state.v[ins.x], state.v[ins.y], sprite)
    state.v[VF] = 1 if collided else 0
    return True

# --- Fx07 LD Vx, DT ---
def execute_ld_vx_dt(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.v[ins.x] = ctx.state.dt.value
    return True

# --- Fx0A LD Vx, K ---
# @intent:responsibility キーが押されるまでマシン全体を停止し、押されたキーを Vx に格納します。
def execute_ld_vx_k(ctx: ExecutionContext, ins: Instruction) -> bool:
    key = ctx.bus.input.wait_until_key_down()
    ctx.state.v[ins.x] = key & 0x0F
    return True

# --- Fx15 LD DT, Vx ---
def execute_ld_dt_vx(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.dt.value = ctx.state.v[ins.x]
    return True

# --- Fx18 LD ST, Vx ---
def execute_ld_st_vx(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.st.value = ctx.state.v[ins.x]
    return True

# --- Fx1E ADD I, Vx ---
def execute_add_i(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.i = address_from_i(ctx.state, ctx.state.v[ins.x])
    return True

# --- Fx29 LD F, Vx ---
# @intent:responsibility Vx の下位ニブルに対応するフォントグリフのアドレスを I に設定します。
def execute_ld_f(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.state.i = glyph_address(ctx.state.v[ins.x])
    return True

# --- Fx33 LD B, Vx ---
# @intent:responsibility Vx を百・十・一の位に分解し、I, I+1, I+2 に書き込みます。
def execute_ld_b(ctx: ExecutionContext, ins: Instruction) -> bool:
    vx = ctx.state.v[ins.x]
    digits = bytes([vx // 100, (vx // 10) % 10, vx % 10])
    ctx.bus.write_bytes(ctx.state.i, digits)
    return True

# --- Fx55 LD [I], Vx ---
# @intent:responsibility V0 から Vx までを昇順に I 以降のメモリへ書き込みます。
def execute_ld_mem_vx(ctx: ExecutionContext, ins: Instruction) -> bool:
    ctx.bus.write_bytes(ctx.state.i, bytes(ctx.state.v[:ins.x + 1]))
    return True

# --- Fx65 LD Vx, [I] ---
def execute_ld_vx_mem(ctx: ExecutionContext, ins: Instruction) -> bool:
    data = ctx.bus.read_bytes(ctx.state.i, ins.x + 1)
    for index, value in enumerate(data):
        ctx.state.v[index] = value
    return True
