import yaml
from typing import Dict, Any, Optional
from .models import EmulatorConfig, DisplayConfig, SoundConfig

DISPLAY_BACKENDS = ("console", "null")
STACK_FAULT_POLICIES = ("ignore", "strict")

class ConfigLoader:
    def load_from_file(self, path: str) -> EmulatorConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self.parse(data)

    # @intent:responsibility 辞書形式の設定（YAMLの読み込み結果）を EmulatorConfig に変換します。
    # @intent:rationale 空のファイルは全て既定値として扱います。
    def parse(self, data: Optional[Dict[str, Any]]) -> EmulatorConfig:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping, got {type(data).__name__}")

        defaults = EmulatorConfig()

        display_data = data.get("display") or {}
        backend = display_data.get("backend", defaults.display.backend)
        if backend not in DISPLAY_BACKENDS:
            raise ValueError(f"Unknown display backend: {backend}")
        display = DisplayConfig(
            width=self._parse_int(display_data.get("width", defaults.display.width)),
            height=self._parse_int(display_data.get("height", defaults.display.height)),
            backend=backend
        )

        sound_data = data.get("sound") or {}
        sound = SoundConfig(enabled=bool(sound_data.get("enabled", defaults.sound.enabled)))

        policy = str(data.get("stack_fault_policy", defaults.stack_fault_policy)).lower()
        if policy not in STACK_FAULT_POLICIES:
            raise ValueError(f"Unknown stack fault policy: {policy}")

        seed = data.get("random_seed")

        return EmulatorConfig(
            cpu_frequency_hz=self._parse_frequency(data.get("cpu_frequency_hz", defaults.cpu_frequency_hz)),
            timer_frequency_hz=self._parse_frequency(data.get("timer_frequency_hz", defaults.timer_frequency_hz)),
            load_address=self._parse_int(data.get("load_address", defaults.load_address)),
            stack_fault_policy=policy,
            random_seed=None if seed is None else self._parse_int(seed),
            pause_poll_interval=float(data.get("pause_poll_interval", defaults.pause_poll_interval)),
            display=display,
            sound=sound
        )

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_frequency(self, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Invalid frequency: {value}")
        if value <= 0:
            raise ValueError(f"Frequency must be positive: {value}")
        return value
