# chip8_core_tracer/loader/loader.py
"""
プログラムローダーモジュール。
CHIP-8 のROMイメージ（ヘッダのない生バイナリ）をメモリにロードします。
"""
import logging
import os
from typing import Union

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.core.errors import ProgramLoadError
from chip8_core_tracer.transport.memory import PROGRAM_START

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class ProgramLoader:
    """
    生バイナリのプログラムをロードアドレスに書き込み、PCをそのアドレスに設定するローダー。
    """
    def __init__(self, load_address: int = PROGRAM_START):
        self.load_address = load_address

    # @intent:responsibility ファイルからプログラムを読み込み、CPUのメモリにロードします。
    # @intent:post-condition 失敗した場合は ProgramLoadError を送出し、メモリは変更されません。
    def load(self, file_path: PathLike, cpu: Chip8Cpu) -> int:
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ProgramLoadError(f"Cannot read program '{file_path}': {e}") from e

        size = self.load_bytes(data, cpu)
        logger.info("Loaded %s (%d bytes) at %#05x", os.fspath(file_path), size, self.load_address)
        return size

    # @intent:responsibility バイト列をロードアドレスに書き込み、PCを設定します。書き込んだバイト数を返します。
    def load_bytes(self, data: bytes, cpu: Chip8Cpu) -> int:
        memory = cpu.bus.memory
        capacity = memory.get_size() - self.load_address
        if capacity < 0:
            raise ProgramLoadError(f"Load address {self.load_address:#05x} is outside memory.")
        if len(data) > capacity:
            raise ProgramLoadError(
                f"Program is too large: {len(data)} bytes, {capacity} bytes available at {self.load_address:#05x}."
            )

        memory.write_bytes(self.load_address, data)
        cpu.state.pc = self.load_address
        return len(data)
