"""
CHIP-8 キーボード。

ホスト側の生キーコードをCHIP-8のキー番号 (0x0-0xF) に変換し、
各キーの押下状態を保持します。Fx0Aのブロッキング待機もここで提供します。
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Union

from chip8_tracer.arch.chip8.errors import KeyEventSourceClosedError

logger = logging.getLogger(__name__)

KEY_COUNT = 16

# @intent:constant 既定のキーマップ。キー番号iに対応する生キーコードは "0123456789abcdef"[i] の文字コード。
DEFAULT_KEYMAP: List[int] = [ord(c) for c in "0123456789abcdef"]

RawKey = Union[int, str]


# @intent:responsibility 文字列で与えられたキー指定を生キーコードに正規化します。
def to_raw_code(key: RawKey) -> int:
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError(f"Key must be a single character: {key!r}")
        return ord(key)
    return key


class Keyboard:
    """
    16キーのCHIP-8キーパッド。
    """
    def __init__(self, keymap: Optional[Sequence[RawKey]] = None):
        codes = [to_raw_code(k) for k in (keymap if keymap is not None else DEFAULT_KEYMAP)]
        if len(codes) != KEY_COUNT:
            raise ValueError(f"Keymap must define exactly {KEY_COUNT} keys, got {len(codes)}.")
        if len(set(codes)) != KEY_COUNT:
            raise ValueError("Keymap contains duplicate key codes.")
        self._keymap = codes
        self._reverse: Dict[int, int] = {code: index for index, code in enumerate(codes)}
        self._down = [False] * KEY_COUNT

    # @intent:return 認識されたキーならキー番号、そうでなければNone。
    def map(self, raw_code: RawKey) -> Optional[int]:
        return self._reverse.get(to_raw_code(raw_code))

    def key_down(self, key: int) -> None:
        self._down[self._check_key(key)] = True

    def key_up(self, key: int) -> None:
        self._down[self._check_key(key)] = False

    def is_down(self, key: int) -> bool:
        return self._down[self._check_key(key)]

    def release_all(self) -> None:
        self._down = [False] * KEY_COUNT

    def get_keymap(self) -> List[int]:
        return list(self._keymap)

    def _check_key(self, key: int) -> int:
        if not 0 <= key < KEY_COUNT:
            raise IndexError(f"Key index {key} out of range 0..{KEY_COUNT - 1}.")
        return key


# @intent:responsibility 入力イベント列から最初の認識可能なキー押下を待ち、そのキー番号を返します。
# @intent:note 認識できないキーは読み飛ばします。イベント列が尽きた場合は例外となります。
def wait_for_key(events: Iterable[RawKey], keyboard: Keyboard) -> int:
    for raw in events:
        key = keyboard.map(raw)
        if key is None:
            logger.debug("Ignoring unmapped key code %r while waiting for key", raw)
            continue
        return key
    raise KeyEventSourceClosedError("Key event source closed while waiting for a key press.")
