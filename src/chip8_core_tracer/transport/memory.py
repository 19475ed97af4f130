# chip8_core_tracer/transport/memory.py
"""
Transport Layer (メインメモリ)

4KBのフラットなアドレス空間を提供します。
構築時に組み込みフォントをアドレス0へ配置します。
"""
from typing import Iterable

from chip8_core_tracer.core.errors import MemoryAccessError
from chip8_core_tracer.transport.font import FONT_ADDRESS, FONT_DATA

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200


# @intent:responsibility CHIP-8の4096バイトのメモリ空間を管理します。
class Memory:
    """
    4096バイトのメモリ。
    範囲外アクセスは MemoryAccessError（IndexError のサブクラス）を送出します。
    """
    # @intent:responsibility メモリ領域を確保し、組み込みフォントをロードします。
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._data = bytearray(size)
        self._size = size
        self.write_bytes(FONT_ADDRESS, FONT_DATA)

    # @intent:responsibility アドレス範囲が有効であることを検証します。
    # @intent:pre-condition count は0以上である必要があります。
    def _check_range(self, address: int, count: int = 1) -> None:
        if not 0 <= address or address + count > self._size:
            raise MemoryAccessError(address, count, self._size)

    def get_size(self) -> int:
        return self._size

    def read_byte(self, address: int) -> int:
        self._check_range(address)
        return self._data[address]

    # @intent:responsibility ビッグエンディアンで16ビットワードを読み出します（上位バイトが低位アドレス）。
    def read_ushort(self, address: int) -> int:
        self._check_range(address, 2)
        return (self._data[address] << 8) | self._data[address + 1]

    def write_byte(self, address: int, value: int) -> None:
        self._check_range(address)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Data {value} is not an 8-bit value.")
        self._data[address] = value

    def read_bytes(self, address: int, count: int) -> bytes:
        self._check_range(address, count)
        return bytes(self._data[address:address + count])

    # @intent:responsibility 連続したバイト列を書き込みます。
    # @intent:rationale 範囲チェックを書き込み前に一括で行い、部分的な書き込みが発生しないようにします。
    def write_bytes(self, address: int, data: Iterable[int]) -> None:
        buffer = bytes(data)
        self._check_range(address, len(buffer))
        self._data[address:address + len(buffer)] = buffer
