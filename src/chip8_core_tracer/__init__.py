"""
Chip8 Core Tracer

CHIP-8 仮想マシンのインタプリタとトレーサ。
命令デコード、ディスパッチ、タイマ、フレームバッファを備えた実行エンジンを提供します。
"""
__version__ = "0.1.0"
