# chip8_core_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令実行後のレジスタとバスの状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッグ時の状態記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core_tracer.common.types import RegisterMap
from chip8_core_tracer.transport.bus import BusAccess


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "6A02"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["VA", "#$02"]
    index: Optional[int] = None # ディスパッチインデックス（未定義命令はNone）
    length: int = 2 # 命令のバイト長

    @property
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計命令数、命令アドレスなど）を記録するデータクラス。
    """
    cycle_count: int
    address: int = 0 # 命令がフェッチされたアドレス
    symbol_info: Optional[str] = None # 例: "0200: LD VA, #$02"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
# @intent:rationale CPU状態オブジェクトはタイマのリスナーを持つため複製せず、
#                  レジスタ値を辞書として写し取ります。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点における、レジスタとバスアクセスを記録した不変のデータ構造。
    """
    registers: RegisterMap
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    @property
    def pc(self) -> int:
        return self.registers["PC"]
