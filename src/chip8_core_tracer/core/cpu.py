# chip8_core_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクルの駆動に関する抽象化を提供します。
具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Tuple

from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.core.snapshot import Snapshot, Operation, Metadata
from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.common.types import RegisterLayoutInfo, RegisterMap

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    CPUエミュレーションの基底となる抽象クラス。
    Busとのインターフェース、基本的な状態管理、命令サイクルの抽象化を提供します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @property
    def bus(self) -> Bus:
        return self._bus

    # @intent:rationale 各CPUアーキテクチャで初期状態が異なるため、抽象メソッドとして定義します。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 現在のPCから次の命令をフェッチします。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    # @intent:responsibility フェッチした命令を解析します。
    @abstractmethod
    def _decode(self, opcode: int) -> Tuple[Any, Operation]:
        """
        命令ワードを解析し、実行用のデコード結果と表示用のOperationを返します。
        """
        pass

    # @intent:responsibility デコードされた命令を実行します。PCを命令長分進めるべきならTrueを返します。
    @abstractmethod
    def _execute(self, decoded: Any) -> bool:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー
    #                  （ログクリア→フェッチ→デコード→実行→PC更新→Snapshot生成）を定義します。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        opcode = self._fetch()
        decoded, operation = self._decode(opcode)

        if self._execute(decoded):
            self._update_pc(operation)

        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility 命令実行後にPCを命令長分進めます。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += 1

        return Snapshot(
            registers=self.get_register_map(),
            operation=operation,
            metadata=Metadata(
                cycle_count=self._cycle_count,
                address=initial_pc,
                symbol_info=f"{initial_pc:04X}: {operation.text}",
            ),
            bus_activity=bus_activity,
        )

    @abstractmethod
    def get_register_map(self) -> RegisterMap:
        """
        現在のレジスタ値を辞書形式で返す。
        UIがCPUの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
