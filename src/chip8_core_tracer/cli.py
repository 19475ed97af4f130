# chip8_core_tracer/cli.py
"""
ターミナル用のエントリポイント。

ROMをロードし、コンソール（またはヘッドレス）ディスプレイで実行します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from chip8_core_tracer import __version__
from chip8_core_tracer.common.log import configure_logging
from chip8_core_tracer.config.builder import SystemBuilder
from chip8_core_tracer.config.loader import ConfigLoader
from chip8_core_tracer.config.models import EmulatorConfig
from chip8_core_tracer.core.errors import Chip8Error

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-tracer", description="Run a CHIP-8 program.")
    parser.add_argument("rom", help="path to a CHIP-8 program image")
    parser.add_argument("--config", metavar="FILE", help="YAML configuration file")
    parser.add_argument("--strict", action="store_true",
                        help="treat call stack overflow/underflow as a fatal fault")
    parser.add_argument("--cycles", type=int, metavar="N", help="stop after N instructions")
    parser.add_argument("--frequency", type=float, metavar="HZ", help="instructions per second")
    parser.add_argument("--null-display", action="store_true", help="do not render the screen")
    parser.add_argument("--no-sound", action="store_true", help="disable the sound timer tone")
    parser.add_argument("--seed", type=int, metavar="N", help="seed for the RND instruction")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# @intent:responsibility 設定ファイルの内容にコマンドラインの指定を上書きします。
def resolve_config(args: argparse.Namespace) -> EmulatorConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else EmulatorConfig()

    if args.strict:
        config.stack_fault_policy = "strict"
    if args.frequency is not None:
        if args.frequency <= 0:
            raise ValueError(f"Frequency must be positive: {args.frequency}")
        config.cpu_frequency_hz = args.frequency
    if args.null_display:
        config.display.backend = "null"
    if args.no_sound:
        config.sound.enabled = False
    if args.seed is not None:
        config.random_seed = args.seed
    return config


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    try:
        config = resolve_config(args)
    except (OSError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    emulator = SystemBuilder().build_system(config)
    try:
        emulator.load_program(args.rom)
        emulator.input_device.start()
        executed = emulator.run(args.cycles)
        logger.info("Executed %d instructions", executed)
    except Chip8Error as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        emulator.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
