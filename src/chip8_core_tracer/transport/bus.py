# chip8_core_tracer/transport/bus.py
"""
Transport Layer (共通バス)

このモジュールは、命令ハンドラからメモリおよび入出力デバイスへのアクセスを仲介し、
メモリアクセスを記録する責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from chip8_core_tracer.transport.memory import Memory
from chip8_core_tracer.devices.display import DisplayDevice
from chip8_core_tracer.devices.input import InputDevice

# @intent:responsibility バスアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のバスアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    バス上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType
    previous_data: Optional[int] = None # 書き込み前の値（WRITEのみ）

# @intent:responsibility メモリと入出力デバイスを束ね、命令ハンドラに唯一のアクセス経路を提供します。
# @intent:rationale バスの全てのメモリアクセスを記録し、Snapshotに含めることでシステムの観測可能性を高めます。
class Bus:
    """
    メモリ、ディスプレイ、入力デバイスへのアクセスを仲介する共通バス。
    バス上で行われた全てのメモリアクセスを記録する機能を提供します。
    """
    def __init__(self, memory: Memory, display: DisplayDevice, input_device: InputDevice):
        self.memory = memory
        self.display = display
        self.input = input_device
        self._bus_activity_log: List[BusAccess] = [] # バスアクセスログ

    # @intent:responsibility バスアクセスをログに記録します。
    def _log_access(self, address: int, data: int, access_type: BusAccessType, previous: Optional[int] = None) -> None:
        self._bus_activity_log.append(BusAccess(address, data, access_type, previous))

    # @intent:responsibility 記録されたバスアクティビティログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        """
        現在のバスアクティビティログを返し、内部ログをクリアします。
        """
        log = self._bus_activity_log
        self._bus_activity_log = []
        return log

    def read_byte(self, address: int) -> int:
        data = self.memory.read_byte(address)
        self._log_access(address, data, BusAccessType.READ)
        return data

    # @intent:responsibility 命令フェッチ用に16ビットワードを読み出します。2バイト分のREADとして記録されます。
    def read_ushort(self, address: int) -> int:
        word = self.memory.read_ushort(address)
        self._log_access(address, word >> 8, BusAccessType.READ)
        self._log_access(address + 1, word & 0xFF, BusAccessType.READ)
        return word

    def read_bytes(self, address: int, count: int) -> bytes:
        data = self.memory.read_bytes(address, count)
        for offset, value in enumerate(data):
            self._log_access(address + offset, value, BusAccessType.READ)
        return data

    def write_byte(self, address: int, value: int) -> None:
        previous = self.memory.read_byte(address)
        self.memory.write_byte(address, value)
        self._log_access(address, value, BusAccessType.WRITE, previous)

    # @intent:responsibility 連続したバイト列を書き込みます。範囲外であれば何も書き込まずに MemoryAccessError を送出します。
    def write_bytes(self, address: int, data: bytes) -> None:
        previous = self.memory.read_bytes(address, len(data))
        self.memory.write_bytes(address, data)
        for offset, value in enumerate(data):
            self._log_access(address + offset, value, BusAccessType.WRITE, previous[offset])

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        UIや逆アセンブラなどのインスペクタ用。
        """
        return self.memory.read_byte(address)
