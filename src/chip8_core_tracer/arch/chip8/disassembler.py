# chip8_core_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のアセンブリ言語（ニーモニック）に変換します。
Instruction のインデックス解決を再利用しますが、バスアクセスログを汚さないように
メモリを直接参照します。
"""
from typing import Callable, Dict, List, Optional, Tuple

from chip8_core_tracer.core.errors import UnknownInstructionError
from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.transport.memory import Memory
from chip8_core_tracer.arch.chip8.instruction import Instruction, InstructionIndex as Idx
from chip8_core_tracer.arch.chip8.instructions import MNEMONIC_TABLE


def _vx(ins: Instruction) -> str:
    return f"V{ins.x:X}"

def _vy(ins: Instruction) -> str:
    return f"V{ins.y:X}"

def _addr(ins: Instruction) -> str:
    return f"${ins.nnn:03X}"

def _byte(ins: Instruction) -> str:
    return f"#${ins.kk:02X}"

# @intent:map インデックスからオペランド文字列生成関数へのマッピング。
_OPERANDS: Dict[Idx, Callable[[Instruction], List[str]]] = {
    Idx.SYS: lambda i: [_addr(i)],
    Idx.CLS: lambda i: [],
    Idx.RET: lambda i: [],
    Idx.JP: lambda i: [_addr(i)],
    Idx.CALL: lambda i: [_addr(i)],
    Idx.SE_IMM: lambda i: [_vx(i), _byte(i)],
    Idx.SNE_IMM: lambda i: [_vx(i), _byte(i)],
    Idx.SE: lambda i: [_vx(i), _vy(i)],
    Idx.LD_IMM: lambda i: [_vx(i), _byte(i)],
    Idx.ADD_IMM: lambda i: [_vx(i), _byte(i)],
    Idx.SNE: lambda i: [_vx(i), _vy(i)],
    Idx.LD_I: lambda i: ["I", _addr(i)],
    Idx.JP_V0: lambda i: ["V0", _addr(i)],
    Idx.RND: lambda i: [_vx(i), _byte(i)],
    Idx.DRW: lambda i: [_vx(i), _vy(i), f"{i.n}"],
    Idx.SKP: lambda i: [_vx(i)],
    Idx.SKNP: lambda i: [_vx(i)],
    Idx.LD_VX_DT: lambda i: [_vx(i), "DT"],
    Idx.LD_VX_K: lambda i: [_vx(i), "K"],
    Idx.LD_DT_VX: lambda i: ["DT", _vx(i)],
    Idx.LD_ST_VX: lambda i: ["ST", _vx(i)],
    Idx.ADD_I: lambda i: ["I", _vx(i)],
    Idx.LD_F: lambda i: ["F", _vx(i)],
    Idx.LD_B: lambda i: ["B", _vx(i)],
    Idx.LD_MEM_VX: lambda i: ["[I]", _vx(i)],
    Idx.LD_VX_MEM: lambda i: [_vx(i), "[I]"],
}


# @intent:responsibility 命令ワードを表示用のOperationに変換します。
# @intent:post-condition 未定義の命令は例外を送出せず、データワード（DW）として表現します。
def describe(instruction: Instruction, index: Optional[Idx] = None) -> Operation:
    if index is None:
        try:
            index = instruction.resolve_index()
        except UnknownInstructionError:
            return Operation(str(instruction), "DW", [f"${instruction.data:04X}"])

    formatter = _OPERANDS.get(index)
    # 8xy? のレジスタ間演算は共通書式
    operands = formatter(instruction) if formatter else [_vx(instruction), _vy(instruction)]
    return Operation(str(instruction), MNEMONIC_TABLE[index], operands, int(index))


# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr
    end_addr = min(start_addr + length, memory.get_size() - 1)

    while current_addr < end_addr:
        word = memory.read_ushort(current_addr)
        operation = describe(Instruction(word))
        hex_bytes = f"{word >> 8:02X} {word & 0xFF:02X}"
        result.append((current_addr, hex_bytes, operation.text))
        current_addr += Instruction.SIZE

    return result
