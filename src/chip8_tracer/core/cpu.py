# chip8_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

1命令サイクルの流れ（フェッチ→デコード→PC前進→実行→Snapshot）を固定し、
命令の中身はアーキテクチャ側のフックに任せます。
"""
import copy
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Metadata, Operation, Snapshot
from chip8_tracer.core.state import CpuState
from chip8_tracer.common.types import RegisterLayoutInfo


# @intent:responsibility 状態の保持と step() のテンプレートを提供する抽象CPU。
class AbstractCpu(ABC):
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._instruction_count = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._instruction_count = 0

    def get_state(self) -> CpuState:
        return self._state

    def get_bus(self) -> Bus:
        return self._bus

    @property
    def instruction_count(self) -> int:
        return self._instruction_count

    # --- Architecture hooks ---

    @abstractmethod
    def _fetch(self) -> int:
        """PCの位置から命令語を読み出します。"""
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:return 停止中ならフェッチせずに返すSnapshot、実行可能ならNone。
    def _handle_suspend(self, current_pc: int) -> Optional[Snapshot]:
        return None

    # @intent:responsibility 実行前にPCを命令長だけ進めます。スキップ命令はここからさらに加算します。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # --- Cycle ---

    # @intent:responsibility 1命令を実行し、その結果のSnapshotを返します。
    # @intent:post-condition Snapshot.bus_activity にはこのstepで発生したアクセスだけが含まれる。
    def step(self) -> Snapshot:
        self._bus.get_and_clear_activity_log()

        suspended = self._handle_suspend(self._state.pc)
        if suspended is not None:
            return suspended

        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)
        return self._create_snapshot(operation)

    # @intent:responsibility 現在の状態を複製してSnapshotを組み立てます。以後の実行はSnapshotに影響しません。
    def _create_snapshot(self, operation: Operation) -> Snapshot:
        self._instruction_count += operation.cycle_count
        text = operation.mnemonic
        if operation.operands:
            text = f"{text} {', '.join(operation.operands)}"
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._instruction_count, symbol_info=text),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # --- Introspection ---

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """(address, hex_bytes, text) のリストを返します。"""
        pass
