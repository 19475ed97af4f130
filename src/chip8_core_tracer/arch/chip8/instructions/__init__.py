# chip8_core_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8 命令セット実装パッケージ。
"""
from typing import Optional

from chip8_core_tracer.arch.chip8.instruction import Instruction, InstructionIndex
from .base import ExecutionContext, StackFaultPolicy
from .maps import EXECUTE_TABLE, MNEMONIC_TABLE


# @intent:responsibility 命令をインデックスに解決し、対応するハンドラをO(1)で呼び出します。
class InstructionDispatcher:
    """
    35個のオペコードハンドラのテーブルを保持するディスパッチャ。
    execute() の戻り値は、PCを1命令分進めるべきか（True）、
    ハンドラが既にPCを更新したか（False）を表します。
    """
    def __init__(self, table=None):
        self._table = list(table if table is not None else EXECUTE_TABLE)

    # @intent:pre-condition index を渡す場合は instruction.resolve_index() の結果である必要があります。
    def execute(self, ctx: ExecutionContext, instruction: Instruction,
                index: Optional[InstructionIndex] = None) -> bool:
        if index is None:
            index = instruction.resolve_index()
        return self._table[index](ctx, instruction)


# @intent:responsibility デフォルトのディスパッチャで命令を実行します。
def execute_instruction(ctx: ExecutionContext, instruction: Instruction) -> bool:
    return _default_dispatcher.execute(ctx, instruction)


_default_dispatcher = InstructionDispatcher()

__all__ = [
    "ExecutionContext",
    "InstructionDispatcher",
    "MNEMONIC_TABLE",
    "StackFaultPolicy",
    "execute_instruction",
]
