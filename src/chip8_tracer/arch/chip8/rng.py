"""
CHIP-8 乱数源 (Cxkk用)。
"""
import random
from typing import Optional


# @intent:responsibility 起動時に一度だけシードされる単一の擬似乱数列から0-255のバイトを返します。
class SeededRandomSource:
    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def next_byte(self) -> int:
        return self._random.randrange(0x100)
