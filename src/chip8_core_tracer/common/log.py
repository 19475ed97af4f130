"""
ロギング設定。

CLIとGUIのエントリポイントから一度だけ呼び出され、ルートロガーに RichHandler を設定します。
ログはコンソール描画（標準出力）と混ざらないよう標準エラー出力に書き出します。
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(debug: bool = False, console: Optional[Console] = None) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt=TIME_FORMAT,
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                show_path=debug,
                tracebacks_show_locals=debug,
                console=console if console is not None else Console(stderr=True),
            )
        ],
        force=True,
    )
