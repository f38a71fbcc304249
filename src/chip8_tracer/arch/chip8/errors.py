"""
CHIP-8 例外階層。

Chip8Error (base)
├── ProgramTooLargeError - プログラムイメージがメモリに収まらない
├── StackOverflowError - コールスタックの容量超過
├── StackUnderflowError - 空のコールスタックからのRET
├── UnknownOpcodeError - 未定義オペコード (UnknownOpcodePolicy.RAISE時のみ)
├── CpuSuspendedError - キー入力待ち中にexecuteが呼ばれた
└── KeyEventSourceClosedError - ブロッキング待機中に入力イベントが尽きた
"""
from typing import Optional


class Chip8Error(Exception):
    """CHIP-8コアが送出する全ての例外の基底クラス。"""
    pass


# @intent:responsibility ロード時の致命的な事前条件違反を表します。切り詰めは行いません。
class ProgramTooLargeError(Chip8Error, ValueError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Program of {size} bytes does not fit in memory (must be less than {limit} bytes).")


class StackOverflowError(Chip8Error):
    pass


class StackUnderflowError(Chip8Error):
    pass


class UnknownOpcodeError(Chip8Error):
    def __init__(self, opcode: int, pc: Optional[int] = None):
        self.opcode = opcode
        self.pc = pc
        location = f" at PC {pc:#06x}" if pc is not None else ""
        super().__init__(f"Unknown opcode {opcode:#06x}{location}.")


class CpuSuspendedError(Chip8Error):
    pass


class KeyEventSourceClosedError(Chip8Error):
    pass
