# chip8_core_tracer/devices/display.py
"""
Display Surface

モノクロのピクセル状態ビットマップと、スプライト描画（XOR合成・折り返し・衝突検出）を提供します。
描画バックエンド（コンソール、Qt、ヘッドレス）からは独立しています。
"""
from abc import ABC, abstractmethod
from typing import Iterable, List

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8


# @intent:responsibility 描画バックエンドが満たすべきインターフェースを定義します。
class DisplayDevice(ABC):
    """
    ディスプレイデバイスの抽象基底クラス。
    実行ループはフレームの開始/終了を通知し、命令ハンドラはclear/draw_spriteを呼び出します。
    """
    # @intent:responsibility 新しいフレームの開始を通知します。
    @abstractmethod
    def on_start_frame(self) -> None:
        pass

    # @intent:responsibility フレームの完了を通知します。バックバッファのフリップはここで行います。
    @abstractmethod
    def on_finish_frame(self) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    # @intent:responsibility スプライトを描画し、衝突（セット済みピクセルの消去）があったかを返します。
    @abstractmethod
    def draw_sprite(self, x: int, y: int, data: bytes) -> bool:
        pass


# @intent:responsibility ピクセル状態を保持し、スプライト描画アルゴリズムを実装します。
# @intent:rationale フレームフックは何もしないため、そのままヘッドレスバックエンドとして使用できます。
class DisplaySurface(DisplayDevice):
    """
    幅×高さのブール値グリッド。
    ピクセル状態は、最後のクリア以降に描画された全スプライトのXOR累積です。
    """
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        if width <= 0 or height <= 0:
            raise ValueError("Display dimensions must be positive.")
        self.width = width
        self.height = height
        self._pixels: List[List[bool]] = [[False] * width for _ in range(height)]
        self._dirty = True

    def on_start_frame(self) -> None:
        # Intentional: ヘッドレスでは何もしない
        pass

    def on_finish_frame(self) -> None:
        pass

    # @intent:responsibility 全ピクセルをクリアします。
    def clear(self) -> None:
        for row in self._pixels:
            for x in range(self.width):
                row[x] = False
        self._dirty = True

    # @intent:responsibility スプライトをXOR合成で描画します。
    # @intent:post-condition 座標は幅・高さで折り返され、クリップされることはありません。
    def draw_sprite(self, x: int, y: int, data: bytes) -> bool:
        """
        data の各バイトを1行とし、最上位ビットから順に8列分を描画します。
        セットされていたピクセルがXORにより消去された場合、衝突としてTrueを返します。
        """
        collision = False
        for row_offset, row_bits in enumerate(data):
            py = (y + row_offset) % self.height
            row = self._pixels[py]
            for col_offset in range(SPRITE_WIDTH):
                if not row_bits & (0x80 >> col_offset):
                    continue
                px = (x + col_offset) % self.width
                if row[px]:
                    collision = True
                row[px] = not row[px]
        self._dirty = True
        return collision

    def pixel(self, x: int, y: int) -> bool:
        return self._pixels[y][x]

    # @intent:responsibility 描画バックエンド向けに、各行のピクセル状態のコピーを返します。
    def rows(self) -> List[List[bool]]:
        return [list(row) for row in self._pixels]

    @property
    def dirty(self) -> bool:
        return self._dirty

    # @intent:responsibility 前回の呼び出し以降に画面が変化したかを返し、変化フラグをリセットします。
    def take_dirty(self) -> bool:
        dirty = self._dirty
        self._dirty = False
        return dirty

    def lit_pixels(self) -> Iterable[tuple]:
        for py, row in enumerate(self._pixels):
            for px, lit in enumerate(row):
                if lit:
                    yield px, py
