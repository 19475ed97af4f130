from dataclasses import dataclass, field
from typing import Optional

@dataclass
class DisplayConfig:
    width: int = 64
    height: int = 32
    backend: str = "console"  # "console", "null"

@dataclass
class SoundConfig:
    enabled: bool = True

@dataclass
class EmulatorConfig:
    cpu_frequency_hz: float = 730
    timer_frequency_hz: float = 60
    load_address: int = 0x200
    stack_fault_policy: str = "ignore"  # "ignore", "strict"
    random_seed: Optional[int] = None
    pause_poll_interval: float = 0.1 # 一時停止中のポーリング間隔（秒）
    display: DisplayConfig = field(default_factory=DisplayConfig)
    sound: SoundConfig = field(default_factory=SoundConfig)
