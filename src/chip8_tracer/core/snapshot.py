# chip8_tracer/core/snapshot.py
"""
step() ごとに返される不変の実行記録。
トレース表示とテストでの検証に使います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_tracer.core.state import CpuState
from chip8_tracer.transport.bus import BusAccessType, BusAccess


# @intent:responsibility デコード済み命令の表示用情報。
@dataclass(frozen=True)
class Operation:
    opcode_hex: str                  # "2ABC"
    mnemonic: str                    # "CALL"
    operands: List[str] = field(default_factory=list)       # ["$ABC"]
    operand_bytes: List[int] = field(default_factory=list)  # [0x2A, 0xBC]
    cycle_count: int = 0
    length: int = 1                  # PCを進めるバイト数


@dataclass(frozen=True)
class Metadata:
    cycle_count: int                 # 累計実行命令数
    symbol_info: Optional[str] = None  # "CALL $ABC"


# @intent:responsibility ある命令の実行直後のCPU状態、命令、バスアクセスをまとめて保持します。
@dataclass(frozen=True)
class Snapshot:
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    def accesses_of(self, access_type: BusAccessType) -> List[BusAccess]:
        return [access for access in self.bus_activity if access.access_type is access_type]
