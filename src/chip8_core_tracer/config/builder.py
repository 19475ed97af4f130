import logging
import random
from typing import Optional

from chip8_core_tracer.transport.memory import Memory
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.instructions import StackFaultPolicy
from chip8_core_tracer.core.loop import ExecutionLoop
from chip8_core_tracer.devices.console import ConsoleDisplay
from chip8_core_tracer.devices.display import DisplayDevice, DisplaySurface
from chip8_core_tracer.devices.input import InputDevice, KeyboardState
from chip8_core_tracer.devices.terminal import TerminalKeyboard
from chip8_core_tracer.devices.sound import BellSoundDevice, NullSoundDevice, SoundDevice
from chip8_core_tracer.loader.loader import ProgramLoader
from chip8_core_tracer.emulator import Emulator
from .models import EmulatorConfig, DisplayConfig

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、メモリ、デバイス、バス、CPU、実行ループを生成・接続します。
class SystemBuilder:
    def build_system(self, config: EmulatorConfig,
                     display: Optional[DisplayDevice] = None,
                     input_device: Optional[InputDevice] = None,
                     sound: Optional[SoundDevice] = None) -> Emulator:
        """
        明示的に渡されたデバイスは設定より優先されます（GUIが独自のデバイスを注入する場合など）。
        """
        memory = Memory()

        if display is None:
            display = self.create_display(config.display)
        if input_device is None:
            input_device = self.create_input_device(config.display)
        if sound is None:
            sound = BellSoundDevice() if config.sound.enabled else NullSoundDevice()

        bus = Bus(memory, display, input_device)

        rng = random.Random(config.random_seed)
        cpu = Chip8Cpu(
            bus,
            sound=sound,
            stack_fault_policy=StackFaultPolicy(config.stack_fault_policy),
            rng=rng,
            load_address=config.load_address,
            timer_frequency_hz=config.timer_frequency_hz,
        )

        loop = ExecutionLoop(
            cpu,
            display,
            cpu_frequency_hz=config.cpu_frequency_hz,
            pause_poll_interval=config.pause_poll_interval,
        )

        logger.debug("Built system: %.0f Hz CPU, %s display, policy=%s",
                     config.cpu_frequency_hz, type(display).__name__, config.stack_fault_policy)

        return Emulator(
            config=config,
            memory=memory,
            bus=bus,
            display=display,
            input_device=input_device,
            sound=sound,
            cpu=cpu,
            loop=loop,
            loader=ProgramLoader(config.load_address),
        )

    # @intent:responsibility 設定されたバックエンドのディスプレイを生成します。
    def create_display(self, config: DisplayConfig) -> DisplayDevice:
        if config.backend == "console":
            return ConsoleDisplay(config.width, config.height)
        if config.backend == "null":
            return DisplaySurface(config.width, config.height)
        raise ValueError(f"Unsupported display backend: {config.backend}")

    # @intent:responsibility コンソール表示では端末のキー入力を、それ以外では外部から操作するキー状態を使用します。
    def create_input_device(self, config: DisplayConfig) -> InputDevice:
        if config.backend == "console":
            return TerminalKeyboard()
        return KeyboardState()
