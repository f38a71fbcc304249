"""
CHIP-8 コールスタック。
"""
from typing import List

from chip8_tracer.arch.chip8.errors import StackOverflowError, StackUnderflowError

# @intent:constant コールスタックの固定容量。
STACK_DEPTH = 16

# @intent:responsibility CALL/RETの戻りアドレスを保持する有界LIFO。深さの上限はここで強制します。
class CallStack:
    def __init__(self, capacity: int = STACK_DEPTH):
        if capacity <= 0:
            raise ValueError("Stack capacity must be a positive integer.")
        self._capacity = capacity
        self._entries: List[int] = []

    def push(self, address: int) -> None:
        if len(self._entries) >= self._capacity:
            raise StackOverflowError(f"Call stack overflow: depth limit {self._capacity} exceeded pushing {address:#06x}.")
        self._entries.append(address & 0xFFFF)

    def pop(self) -> int:
        if not self._entries:
            raise StackUnderflowError("Return with an empty call stack.")
        return self._entries.pop()

    def clear(self) -> None:
        self._entries.clear()

    # @intent:responsibility スタック内容の読み取り専用コピーを返します（底から順）。
    def entries(self) -> List[int]:
        return list(self._entries)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)
