# chip8_tracer/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。

このモジュールは、CHIP-8のレジスタ、タイマー、および実行状態を保持するデータ構造を定義します。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from chip8_tracer.core.state import CpuState

# @intent:constant メモリ構成。
MEMORY_SIZE = 0x1000
PROGRAM_LOAD_ADDRESS = 0x200

REGISTER_COUNT = 16
# @intent:constant 暗黙のキャリー/ボロー/衝突出力として使われるレジスタ番号。
FLAG_REGISTER = 0xF


# @intent:responsibility 命令ディスパッチの実行状態。AWAITING_KEYはFx0Aによるキー入力待ちを表す。
class RunState(Enum):
    RUNNING = "RUNNING"
    AWAITING_KEY = "AWAITING_KEY"


# @intent:responsibility CHIP-8 CPUの全てのレジスタと実行状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    spはコールスタックの現在の深さを表示用に保持します（スタック本体はCallStackが持つ）。
    """
    pc: int = PROGRAM_LOAD_ADDRESS
    v: List[int] = field(default_factory=lambda: [0x00] * REGISTER_COUNT)
    i: int = 0x0000  # Index register
    delay_timer: int = 0x00
    sound_timer: int = 0x00

    run_state: RunState = RunState.RUNNING
    key_register: Optional[int] = None  # Fx0Aの格納先 (AWAITING_KEY中のみ)

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    @property
    def awaiting_key(self) -> bool:
        return self.run_state is RunState.AWAITING_KEY
