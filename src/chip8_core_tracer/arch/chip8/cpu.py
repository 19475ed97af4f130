# chip8_core_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import random
from typing import Dict, List, Optional, Tuple

from chip8_core_tracer.common.types import RegisterInfo, RegisterLayoutInfo, RegisterMap
from chip8_core_tracer.core.cpu import AbstractCpu
from chip8_core_tracer.core.errors import UnknownInstructionError
from chip8_core_tracer.core.snapshot import Operation
from chip8_core_tracer.core.timer import TimerRegister, TIMER_FREQUENCY_HZ
from chip8_core_tracer.devices.sound import NullSoundDevice, SoundDevice
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.transport.memory import PROGRAM_START
from chip8_core_tracer.arch.chip8.instruction import Instruction, InstructionIndex
from chip8_core_tracer.arch.chip8.state import Chip8CpuState, REGISTER_COUNT, ticks_per_period
from chip8_core_tracer.arch.chip8.instructions import ExecutionContext, InstructionDispatcher, StackFaultPolicy
from chip8_core_tracer.arch.chip8 import disassembler

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    サウンドタイマ（ST）の Elapsed でビープを開始し、Stopped で停止するよう配線します。
    """
    def __init__(self, bus: Bus, sound: Optional[SoundDevice] = None,
                 stack_fault_policy: StackFaultPolicy = StackFaultPolicy.IGNORE,
                 rng: Optional[random.Random] = None,
                 load_address: int = PROGRAM_START,
                 dispatcher: Optional[InstructionDispatcher] = None,
                 timer_frequency_hz: float = TIMER_FREQUENCY_HZ):
        self._sound = sound if sound is not None else NullSoundDevice()
        self._load_address = load_address
        self._timer_interval = ticks_per_period(timer_frequency_hz)
        self._dispatcher = dispatcher if dispatcher is not None else InstructionDispatcher()
        self._stack_fault_policy = stack_fault_policy
        self._rng = rng if rng is not None else random.Random()
        super().__init__(bus)
        self._context = ExecutionContext(self._state, bus, self._rng, stack_fault_policy)

    @property
    def state(self) -> Chip8CpuState:
        return self._state

    @property
    def sound(self) -> SoundDevice:
        return self._sound

    @property
    def stack_fault_policy(self) -> StackFaultPolicy:
        return self._stack_fault_policy

    # @intent:responsibility CHIP-8の初期状態を生成し、サウンドタイマをサウンドデバイスに接続します。
    def _create_initial_state(self) -> Chip8CpuState:
        state = Chip8CpuState(
            pc=self._load_address,
            dt=TimerRegister(self._timer_interval),
            st=TimerRegister(self._timer_interval),
        )
        state.st.add_elapsed_listener(lambda timer: self._sound.start_beep())
        state.st.add_stopped_listener(lambda timer: self._sound.end_beep())
        return state

    # @intent:responsibility リセット後も実行コンテキストが新しい状態を参照するようにします。
    def reset(self) -> None:
        super().reset()
        self._sound.end_beep()
        self._context = ExecutionContext(self._state, self._bus, self._rng, self._stack_fault_policy)

    # @intent:responsibility メモリから次の命令ワード（ビッグエンディアン）をフェッチします。
    def _fetch(self) -> int:
        return self._bus.read_ushort(self._state.pc)

    # @intent:responsibility 命令ワードをデコードします。未定義命令の場合はアドレス付きで例外を送出します。
    # @intent:post-condition 解決したインデックスは実行と表示の両方で再利用され、規則表の探索は1命令につき1回です。
    def _decode(self, opcode: int) -> Tuple[Tuple[Instruction, InstructionIndex], Operation]:
        instruction = Instruction(opcode)
        try:
            index = instruction.resolve_index()
        except UnknownInstructionError:
            raise UnknownInstructionError(opcode, self._state.pc) from None
        return (instruction, index), disassembler.describe(instruction, index)

    def _execute(self, decoded: Tuple[Instruction, InstructionIndex]) -> bool:
        instruction, index = decoded
        return self._dispatcher.execute(self._context, instruction, index)

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> RegisterMap:
        s = self._state
        registers = {f"V{n:X}": s.v[n] for n in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.dt.value, "ST": s.st.value,
        })
        return registers

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [RegisterInfo("DT", 8), RegisterInfo("ST", 8)]),
        ]

    # @intent:responsibility UI表示用に、フラグ相当の状態を辞書形式で提供します。
    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "VF": s.vf != 0,
            "DT": s.dt.is_active,
            "ST": s.st.is_active,
        }

    def get_stack(self) -> List[int]:
        """積まれている戻りアドレスを古い順に返します。"""
        return list(self._state.stack[:self._state.sp])

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus.memory, start_addr, length)
