"""
ディスパッチインデックスと命令実装のマッピング定義。
"""
from chip8_core_tracer.arch.chip8.instruction import InstructionIndex, INSTRUCTION_COUNT
from . import load
from . import alu
from . import control

# @intent:map インデックスから実行関数へのテーブル。並び順は InstructionIndex と一致します。
EXECUTE_TABLE = [
    # 0
    control.execute_sys, control.execute_cls, control.execute_ret,
    # 1 - 7
    control.execute_jp,
    control.execute_call,
    control.execute_se_imm,
    control.execute_sne_imm,
    control.execute_se,
    load.execute_ld_imm,
    alu.execute_add_imm,
    # 8
    alu.execute_ld, alu.execute_or, alu.execute_and, alu.execute_xor,
    alu.execute_add, alu.execute_sub, alu.execute_shr, alu.execute_subn, alu.execute_shl,
    # 9 - D
    control.execute_sne,
    load.execute_ld_i,
    control.execute_jp_v0,
    alu.execute_rnd,
    load.execute_drw,
    # E
    control.execute_skp, control.execute_sknp,
    # F
    load.execute_ld_vx_dt, load.execute_ld_vx_k, load.execute_ld_dt_vx, load.execute_ld_st_vx,
    load.execute_add_i, load.execute_ld_f, load.execute_ld_b,
    load.execute_ld_mem_vx, load.execute_ld_vx_mem,
]

# @intent:map インデックスからニーモニックへのテーブル。
MNEMONIC_TABLE = {
    InstructionIndex.SYS: "SYS",
    InstructionIndex.CLS: "CLS",
    InstructionIndex.RET: "RET",
    InstructionIndex.JP: "JP",
    InstructionIndex.CALL: "CALL",
    InstructionIndex.SE_IMM: "SE",
    InstructionIndex.SNE_IMM: "SNE",
    InstructionIndex.SE: "SE",
    InstructionIndex.LD_IMM: "LD",
    InstructionIndex.ADD_IMM: "ADD",
    InstructionIndex.LD: "LD",
    InstructionIndex.OR: "OR",
    InstructionIndex.AND: "AND",
    InstructionIndex.XOR: "XOR",
    InstructionIndex.ADD: "ADD",
    InstructionIndex.SUB: "SUB",
    InstructionIndex.SHR: "SHR",
    InstructionIndex.SUBN: "SUBN",
    InstructionIndex.SHL: "SHL",
    InstructionIndex.SNE: "SNE",
    InstructionIndex.LD_I: "LD",
    InstructionIndex.JP_V0: "JP",
    InstructionIndex.RND: "RND",
    InstructionIndex.DRW: "DRW",
    InstructionIndex.SKP: "SKP",
    InstructionIndex.SKNP: "SKNP",
    InstructionIndex.LD_VX_DT: "LD",
    InstructionIndex.LD_VX_K: "LD",
    InstructionIndex.LD_DT_VX: "LD",
    InstructionIndex.LD_ST_VX: "LD",
    InstructionIndex.ADD_I: "ADD",
    InstructionIndex.LD_F: "LD",
    InstructionIndex.LD_B: "LD",
    InstructionIndex.LD_MEM_VX: "LD",
    InstructionIndex.LD_VX_MEM: "LD",
}

assert len(EXECUTE_TABLE) == INSTRUCTION_COUNT
