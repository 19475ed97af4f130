# chip8_core_tracer/emulator.py
"""
エミュレータファサード。

SystemBuilder が生成した各コンポーネントを束ね、フロントエンド（CLI/GUI）に
プログラムのロードと実行制御の窓口を提供します。
"""
import logging
from dataclasses import dataclass
from typing import Optional

from chip8_core_tracer.transport.memory import Memory
from chip8_core_tracer.transport.bus import Bus
from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.core.loop import ExecutionLoop
from chip8_core_tracer.core.snapshot import Snapshot
from chip8_core_tracer.devices.display import DisplayDevice
from chip8_core_tracer.devices.input import InputDevice
from chip8_core_tracer.devices.sound import SoundDevice
from chip8_core_tracer.loader.loader import ProgramLoader, PathLike
from chip8_core_tracer.config.models import EmulatorConfig

logger = logging.getLogger(__name__)


@dataclass
class Emulator:
    config: EmulatorConfig
    memory: Memory
    bus: Bus
    display: DisplayDevice
    input_device: InputDevice
    sound: SoundDevice
    cpu: Chip8Cpu
    loop: ExecutionLoop
    loader: ProgramLoader

    def load_program(self, path: PathLike) -> int:
        return self.loader.load(path, self.cpu)

    def load_bytes(self, data: bytes) -> int:
        return self.loader.load_bytes(data, self.cpu)

    def run(self, max_cycles: Optional[int] = None) -> int:
        return self.loop.run(max_cycles)

    def step(self) -> Snapshot:
        return self.loop.step()

    def pause(self) -> None:
        self.loop.pause()

    def resume(self) -> None:
        self.loop.resume()

    def stop(self) -> None:
        self.loop.stop()

    # @intent:responsibility CPUと画面を初期状態に戻します。ロード済みのプログラムはメモリに残ります。
    def reset(self) -> None:
        self.cpu.reset()
        self.display.clear()

    def close(self) -> None:
        self.loop.stop()
        self.sound.close()
        self.input_device.close()
