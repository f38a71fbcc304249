# tests/arch/chip8/test_chip8_cpu.py
"""
Chip8Cpuの統合テスト（ロード、ステップ実行、リセット、未定義オペコードのポリシー、レジスタ表示）。
"""
import logging

import pytest

from chip8_tracer.transport.bus import Bus, RAM, BusAccessType
from chip8_tracer.arch.chip8 import Chip8Cpu, Chip8CpuState, UnknownOpcodePolicy
from chip8_tracer.arch.chip8.fonts import FONT_SET
from chip8_tracer.arch.chip8.errors import ProgramTooLargeError, UnknownOpcodeError


@pytest.fixture
def cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return Chip8Cpu(bus)


def test_initial_state(cpu):
    state = cpu.get_state()
    assert isinstance(state, Chip8CpuState)
    assert state.pc == 0x200
    assert state.v == [0] * 16
    assert state.i == 0
    bus = cpu.get_bus()
    assert bytes(bus.peek(a) for a in range(len(FONT_SET))) == FONT_SET

def test_load_writes_program_and_sets_pc(cpu):
    state = cpu.get_state()
    state.pc = 0x400
    cpu.load(bytes([0x12, 0x34, 0x56]))
    bus = cpu.get_bus()
    assert [bus.peek(0x200 + k) for k in range(3)] == [0x12, 0x34, 0x56]
    assert state.pc == 0x200

def test_load_largest_program(cpu):
    cpu.load(bytes([0xAB]) * (0x1000 - 0x200 - 1))
    assert cpu.get_bus().peek(0xFFE) == 0xAB

# @intent:test_case_fatal 大きすぎるプログラムは切り詰めずにロードを中止します。
def test_load_rejects_oversized_program(cpu):
    with pytest.raises(ProgramTooLargeError):
        cpu.load(bytes([0xAB]) * (0x1000 - 0x200))
    assert cpu.get_bus().peek(0x200) == 0x00

def test_step_fetches_big_endian_and_advances_pc(cpu):
    cpu.load(bytes([0x6A, 0x42, 0x7A, 0x01]))
    snapshot = cpu.step()
    assert snapshot.operation.opcode_hex == "6A42"
    assert snapshot.metadata.symbol_info == "LD VA, $42"
    assert [(a.address, a.access_type) for a in snapshot.bus_activity] == [
        (0x200, BusAccessType.READ), (0x201, BusAccessType.READ),
    ]
    assert snapshot.state.pc == 0x202

    cpu.step()
    state = cpu.get_state()
    assert state.v[0xA] == 0x43
    assert state.pc == 0x204
    assert snapshot.state.v[0xA] == 0x42

# @intent:test_case_skip step()経由ではフェッチの+2とスキップの+2が合算されます。
def test_step_skip_adds_to_baseline(cpu):
    cpu.load(bytes([0x30, 0x00, 0x60, 0x01, 0x61, 0x01]))
    cpu.step()
    assert cpu.get_state().pc == 0x204
    cpu.step()
    assert cpu.get_state().v[0] == 0
    assert cpu.get_state().v[1] == 1

def test_step_call_and_return(cpu):
    program = bytes([
        0x22, 0x06,  # 200: CALL 206
        0x60, 0x07,  # 202: LD V0, 07
        0x00, 0x00,  # 204
        0x61, 0x09,  # 206: LD V1, 09
        0x00, 0xEE,  # 208: RET
    ])
    cpu.load(program)
    for _ in range(4):
        cpu.step()
    state = cpu.get_state()
    assert (state.v[0], state.v[1]) == (0x07, 0x09)
    assert state.pc == 0x204
    assert state.sp == 0

def test_reset_restores_power_on_state(cpu):
    cpu.load(bytes([0x60, 0x05, 0x23, 0x00]))
    cpu.step()
    cpu.step()
    cpu.screen.draw_sprite(0, 0, [0xFF], 1)
    cpu.press_key("1")

    cpu.reset()
    state = cpu.get_state()
    assert state.v[0] == 0
    assert state.pc == 0x200
    assert len(cpu.stack) == 0
    assert not cpu.screen.is_set(0, 0)
    assert not cpu.keyboard.is_down(1)
    assert cpu.get_bus().peek(0x200) == 0
    assert cpu.get_bus().peek(0) == FONT_SET[0]


class TestUnknownOpcodePolicy:
    def test_ignore_is_default_and_silent(self, cpu, caplog):
        state = cpu.get_state()
        before = (list(state.v), state.i, state.pc)
        with caplog.at_level(logging.WARNING):
            cpu.execute(0xFFFF)
        assert (list(state.v), state.i, state.pc) == before
        assert caplog.records == []

    def test_log_policy_warns(self, cpu, caplog):
        cpu.unknown_opcode_policy = UnknownOpcodePolicy.LOG
        with caplog.at_level(logging.WARNING, logger="chip8_tracer.arch.chip8.cpu"):
            cpu.execute(0x8128)
        assert "0x8128" in caplog.text

    def test_raise_policy(self, cpu):
        cpu.unknown_opcode_policy = UnknownOpcodePolicy.RAISE
        with pytest.raises(UnknownOpcodeError) as excinfo:
            cpu.execute(0xE0FF)
        assert excinfo.value.opcode == 0xE0FF


def test_register_map_and_flags(cpu):
    state = cpu.get_state()
    state.v[0xF] = 1
    state.i = 0x345
    registers = cpu.get_register_map()
    assert registers["VF"] == 1
    assert registers["I"] == 0x345
    assert registers["PC"] == 0x200
    assert cpu.get_flag_state() == {"VF": True}

    layout = cpu.get_register_layout()
    assert [group.group_name for group in layout] == ["General", "Pointers", "Timers"]
    assert len(layout[0].registers) == 16

def test_disassemble(cpu):
    cpu.load(bytes([0x00, 0xE0, 0xA2, 0x2A, 0xFF, 0xFF]))
    cpu.get_bus().get_and_clear_activity_log()
    listing = cpu.disassemble(0x200, 6)
    assert listing == [
        (0x200, "00E0", "CLS"),
        (0x202, "A22A", "LD I, $22A"),
        (0x204, "FFFF", "DW $FFFF"),
    ]
    assert cpu.get_bus().get_and_clear_activity_log() == []

def test_vf_alias_masks_to_byte(cpu):
    state = cpu.get_state()
    state.vf = 0x1FF
    assert state.v[0xF] == 0xFF
    assert state.vf == 0xFF
    state.v[0xF] = 0
    assert cpu.get_flag_state() == {"VF": False}
