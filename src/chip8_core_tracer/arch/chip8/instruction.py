# chip8_core_tracer/arch/chip8/instruction.py
"""
CHIP-8 命令ワード

16ビットの命令ワードに対するビットフィールドのビューと、
35個の密なディスパッチインデックスへの解決規則を提供します。
"""
from dataclasses import dataclass
from enum import IntEnum

from chip8_core_tracer.core.errors import UnknownInstructionError


# @intent:responsibility ハンドラテーブルの並び順どおりに、35個のディスパッチインデックスを命名します。
class InstructionIndex(IntEnum):
    SYS = 0         # 0nnn
    CLS = 1         # 00E0
    RET = 2         # 00EE
    JP = 3          # 1nnn
    CALL = 4        # 2nnn
    SE_IMM = 5      # 3xkk
    SNE_IMM = 6     # 4xkk
    SE = 7          # 5xy0
    LD_IMM = 8      # 6xkk
    ADD_IMM = 9     # 7xkk
    LD = 10         # 8xy0
    OR = 11         # 8xy1
    AND = 12        # 8xy2
    XOR = 13        # 8xy3
    ADD = 14        # 8xy4
    SUB = 15        # 8xy5
    SHR = 16        # 8xy6
    SUBN = 17       # 8xy7
    SHL = 18        # 8xyE
    SNE = 19        # 9xy0
    LD_I = 20       # Annn
    JP_V0 = 21      # Bnnn
    RND = 22        # Cxkk
    DRW = 23        # Dxyn
    SKP = 24        # Ex9E
    SKNP = 25       # ExA1
    LD_VX_DT = 26   # Fx07
    LD_VX_K = 27    # Fx0A
    LD_DT_VX = 28   # Fx15
    LD_ST_VX = 29   # Fx18
    ADD_I = 30      # Fx1E
    LD_F = 31       # Fx29
    LD_B = 32       # Fx33
    LD_MEM_VX = 33  # Fx55
    LD_VX_MEM = 34  # Fx65


INSTRUCTION_COUNT = len(InstructionIndex)

# @intent:map Fx?? 命令の下位バイトからインデックスへの対応表。
_F_TABLE = {
    0x07: InstructionIndex.LD_VX_DT,
    0x0A: InstructionIndex.LD_VX_K,
    0x15: InstructionIndex.LD_DT_VX,
    0x18: InstructionIndex.LD_ST_VX,
    0x1E: InstructionIndex.ADD_I,
    0x29: InstructionIndex.LD_F,
    0x33: InstructionIndex.LD_B,
    0x55: InstructionIndex.LD_MEM_VX,
    0x65: InstructionIndex.LD_VX_MEM,
}


# @intent:responsibility 16ビット命令ワードの不変ビュー。独立したライフサイクルは持ちません。
@dataclass(frozen=True)
class Instruction:
    data: int

    SIZE = 2

    def __post_init__(self):
        if not 0 <= self.data <= 0xFFFF:
            raise ValueError(f"Instruction word {self.data} is not a 16-bit value.")

    # 12 ... 15 : 4
    @property
    def op1(self) -> int:
        return (self.data >> 12) & 0xF

    # 00 ... 03 : 4
    @property
    def op2(self) -> int:
        return self.data & 0xF

    # 00 ... 07 : 8
    @property
    def op3(self) -> int:
        return self.data & 0xFF

    # 00 ... 11 : 12
    @property
    def nnn(self) -> int:
        return self.data & 0xFFF

    # 00 ... 03 : 4
    @property
    def n(self) -> int:
        return self.data & 0xF

    # 08 ... 11 : 4
    @property
    def x(self) -> int:
        return (self.data >> 8) & 0xF

    # 04 ... 07 : 4
    @property
    def y(self) -> int:
        return (self.data >> 4) & 0xF

    # 00 ... 07 : 8
    @property
    def kk(self) -> int:
        return self.data & 0xFF

    # @intent:responsibility 命令ワードをディスパッチインデックスに解決します。
    # @intent:rationale 線形探索ではなく、上位ニブルによる範囲/等値判定を優先順に入れ子で行います。
    # @intent:post-condition どの規則にも一致しない場合は UnknownInstructionError を送出します。
    def resolve_index(self) -> InstructionIndex:
        op1 = self.op1

        if op1 == 0x0:
            if self.op3 == 0xE0:
                return InstructionIndex.CLS
            if self.op3 == 0xEE:
                return InstructionIndex.RET
            return InstructionIndex.SYS

        # 1 ... 7
        if op1 < 0x8:
            return InstructionIndex(op1 + 2)

        if op1 == 0x8:
            if self.op2 != 0xE:
                return InstructionIndex(self.op2 + 10)
            return InstructionIndex.SHL

        # 9 ... D
        if op1 < 0xE:
            return InstructionIndex(op1 + 10)

        if op1 == 0xE:
            if self.op3 == 0x9E:
                return InstructionIndex.SKP
            return InstructionIndex.SKNP

        index = _F_TABLE.get(self.op3)
        if index is None:
            raise UnknownInstructionError(self.data)
        return index

    def __str__(self) -> str:
        return f"{self.data:04X}"
