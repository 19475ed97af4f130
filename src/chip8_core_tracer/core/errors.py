# chip8_core_tracer/core/errors.py
"""
例外定義モジュール。

実行中に致命的となるフォルト（スタック境界違反、未定義命令、範囲外メモリアクセス）と、
実行開始前に発生するロード失敗を表現します。
"""
from typing import Optional


# @intent:responsibility このパッケージが送出する全ての例外の基底クラス。
class Chip8Error(Exception):
    pass


# @intent:responsibility スタックが満杯の状態でCALLが実行されたことを表します。
class StackOverflowError(Chip8Error):
    def __init__(self, pc: int, depth: int):
        super().__init__(f"Stack overflow at PC {pc:#06x} (depth {depth})")
        self.pc = pc
        self.depth = depth


# @intent:responsibility スタックが空の状態でRETが実行されたことを表します。
class StackUnderflowError(Chip8Error):
    def __init__(self, pc: int):
        super().__init__(f"Stack underflow at PC {pc:#06x}")
        self.pc = pc


# @intent:responsibility どのデコード規則にも一致しない命令ワードを表します。
# @intent:rationale オペコード空間は網羅的に列挙されているため、ここに到達するのは
#                  破損したプログラムか未対応の拡張命令のみです。常に致命的です。
class UnknownInstructionError(Chip8Error):
    def __init__(self, data: int, address: Optional[int] = None):
        where = f" at {address:#06x}" if address is not None else ""
        super().__init__(f"Unknown instruction {data:04X}{where}")
        self.data = data
        self.address = address


# @intent:responsibility プログラムのロードに失敗したことを表します。実行ループ開始前に送出されます。
class ProgramLoadError(Chip8Error):
    pass


# @intent:responsibility キー入力待ちが外部から中断されたことを表します（ウィンドウを閉じた場合など）。
class InputInterrupted(Chip8Error):
    pass


# @intent:responsibility メモリ空間外へのアクセス（I の指す範囲の読み書き、末尾を越えたフェッチ）を表します。
# @intent:rationale IndexError も継承し、範囲外アクセスを IndexError として扱う呼び出し側とも互換を保ちます。
class MemoryAccessError(Chip8Error, IndexError):
    def __init__(self, address: int, count: int, size: int):
        super().__init__(f"Address range {address:#06x}+{count} out of bounds for memory of size {size}")
        self.address = address
        self.count = count
