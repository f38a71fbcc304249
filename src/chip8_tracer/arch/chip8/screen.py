"""
CHIP-8 画面バッファ。

64x32のモノクロピクセル配列を保持し、スプライトのXOR描画と衝突判定を行います。
描画結果の表示（ウィンドウ、端末など）はこのモジュールの責務外です。
"""
from typing import List, Sequence

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# @intent:constant スプライトの1行は8ピクセル幅で、MSBが左端です。
SPRITE_WIDTH = 8

# @intent:responsibility ピクセル状態を保持し、clear/draw_spriteを提供します。
class Screen:
    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self._width = width
        self._height = height
        self._pixels: List[List[bool]] = [[False] * width for _ in range(height)]

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        for row in self._pixels:
            for x in range(self._width):
                row[x] = False

    def is_set(self, x: int, y: int) -> bool:
        return self._pixels[y % self._height][x % self._width]

    # @intent:responsibility スプライトをXOR描画し、点灯していたピクセルが消えた場合にTrueを返します。
    # @intent:note 座標は画面サイズでラップアラウンドします。
    def draw_sprite(self, x: int, y: int, sprite: Sequence[int], height: int) -> bool:
        collision = False
        for ly in range(height):
            row_bits = sprite[ly]
            py = (y + ly) % self._height
            for lx in range(SPRITE_WIDTH):
                if not row_bits & (0x80 >> lx):
                    continue
                px = (x + lx) % self._width
                if self._pixels[py][px]:
                    collision = True
                self._pixels[py][px] = not self._pixels[py][px]
        return collision

    # @intent:responsibility ピクセル状態の行単位コピーを返します（テストや表示層向け）。
    def rows(self) -> List[List[bool]]:
        return [list(row) for row in self._pixels]

    # @intent:responsibility 画面内容を文字列化します。トレース出力やデバッグ用。
    def render_text(self, on: str = "#", off: str = ".") -> str:
        return "\n".join("".join(on if p else off for p in row) for row in self._pixels)
