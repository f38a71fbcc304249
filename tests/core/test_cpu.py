# tests/core/test_cpu.py
"""
chip8_tracer.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Tuple

from chip8_tracer.core.state import CpuState
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.core.snapshot import Snapshot, Operation
from chip8_tracer.transport.bus import Bus, RAM, BusAccessType
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite 抽象CPUのテンプレートメソッド（フェッチ→デコード→PC更新→実行→Snapshot）を検証します。

class StubCpu(AbstractCpu):
    def __init__(self, bus: Bus, initial_pc: int = 0x0000):
        self._initial_pc = initial_pc
        self.suspended = False
        super().__init__(bus)

    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._initial_pc)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        mnemonic = "NOP" if opcode == 0x00 else "UNKNOWN"
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic=mnemonic, cycle_count=1, length=1)

    def _execute(self, operation: Operation) -> None:
        self._bus.write(0x0020, 0xFF)

    def _handle_suspend(self, current_pc: int):
        if not self.suspended:
            return None
        return self._create_snapshot(Operation(opcode_hex="--", mnemonic="SUSPENDED", length=0))

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]


@pytest.fixture
def setup_cpu():
    bus = Bus()
    ram = RAM(256)
    bus.register_device(0x0000, 0x00FF, ram)
    cpu = StubCpu(bus, initial_pc=0x0010)
    return cpu, bus, ram


def test_abstract_cpu_reset(setup_cpu):
    cpu, _, _ = setup_cpu
    cpu.get_state().pc = 0xAAAA
    cpu.reset()
    assert cpu.get_state().pc == 0x0010

def test_abstract_cpu_step(setup_cpu):
    cpu, bus, _ = setup_cpu
    bus.write(0x0010, 0x12)

    snapshot = cpu.step()

    assert cpu.get_state().pc == 0x0011
    assert isinstance(snapshot, Snapshot)
    assert snapshot.state == cpu.get_state()
    assert snapshot.operation.mnemonic == "UNKNOWN"
    assert snapshot.metadata.cycle_count == 1
    assert cpu.instruction_count == 1
    assert snapshot.metadata.symbol_info == "UNKNOWN"
    assert [(a.address, a.access_type) for a in snapshot.bus_activity] == [
        (0x0010, BusAccessType.READ),
        (0x0020, BusAccessType.WRITE),
    ]
    assert len(snapshot.accesses_of(BusAccessType.WRITE)) == 1

# @intent:test_case_isolation Snapshotの状態は後続の実行で変化しないことを検証します。
def test_snapshot_state_is_isolated(setup_cpu):
    cpu, _, _ = setup_cpu
    snapshot = cpu.step()
    cpu.step()
    assert snapshot.state.pc == 0x0011
    assert cpu.get_state().pc == 0x0012

def test_suspend_hook_skips_fetch(setup_cpu):
    cpu, _, _ = setup_cpu
    cpu.suspended = True
    snapshot = cpu.step()
    assert snapshot.operation.mnemonic == "SUSPENDED"
    assert snapshot.bus_activity == []
    assert cpu.get_state().pc == 0x0010
