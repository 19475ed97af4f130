# chip8_core_tracer/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
アプリケーションを初期化し、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_core_tracer.common.log import configure_logging
from chip8_core_tracer.config.loader import ConfigLoader
from chip8_core_tracer.config.models import EmulatorConfig
from chip8_core_tracer.core.errors import Chip8Error
from .main_window import MainWindow

logger = logging.getLogger(__name__)

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="chip8-tracer-gui", description="CHIP-8 tracer with a Qt front end.")
    parser.add_argument("rom", nargs="?", help="path to a CHIP-8 program image")
    parser.add_argument("--config", metavar="FILE", help="YAML configuration file")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)
    configure_logging(args.debug)

    config = ConfigLoader().load_from_file(args.config) if args.config else EmulatorConfig()

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    if args.rom:
        try:
            main_win.load_rom(args.rom)
        except Chip8Error as e:
            logger.error("%s", e)
            return 1
    main_win.show()
    return app.exec()

if __name__ == '__main__':
    sys.exit(main())
