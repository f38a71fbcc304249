# tests/arch/chip8/test_decode.py
"""
CHIP-8 デコーダ (主デコーダ/拡張デコーダ/サブデコーダ) の単体テスト。
"""
import pytest

from chip8_tracer.arch.chip8.instructions import decode_opcode, to_operation, InstructionKind as K
from chip8_tracer.arch.chip8.instructions.maps import EXECUTE_MAP
from chip8_tracer.arch.chip8.instructions.base import MNEMONIC_MAP


@pytest.mark.parametrize("opcode, kind", [
    (0x00E0, K.CLS), (0x00EE, K.RET), (0x5AB1, K.SE_VX_VY), (0x9ABF, K.SNE_VX_VY),
    (0x1234, K.JP), (0x2345, K.CALL),
    (0x3A12, K.SE_VX_BYTE), (0x4A12, K.SNE_VX_BYTE), (0x5AB0, K.SE_VX_VY),
    (0x6A12, K.LD_VX_BYTE), (0x7A12, K.ADD_VX_BYTE),
    (0x8AB0, K.LD_VX_VY), (0x8AB1, K.OR), (0x8AB2, K.AND), (0x8AB3, K.XOR),
    (0x8AB4, K.ADD_VX_VY), (0x8AB5, K.SUB), (0x8AB6, K.SHR), (0x8AB7, K.SUBN), (0x8ABE, K.SHL),
    (0x9AB0, K.SNE_VX_VY), (0xA123, K.LD_I_ADDR), (0xB123, K.JP_V0_ADDR),
    (0xCA12, K.RND), (0xDAB5, K.DRW), (0xEA9E, K.SKP), (0xEAA1, K.SKNP),
    (0xFA07, K.LD_VX_DT), (0xFA0A, K.LD_VX_K), (0xFA15, K.LD_DT_VX), (0xFA18, K.LD_ST_VX),
    (0xFA1E, K.ADD_I_VX), (0xFA29, K.LD_F_VX), (0xFA33, K.LD_B_VX),
    (0xFA55, K.LD_MEM_VX), (0xFA65, K.LD_VX_MEM),
])
def test_recognized_opcodes(opcode, kind):
    assert decode_opcode(opcode).kind is kind


@pytest.mark.parametrize("opcode", [0x0000, 0x0123, 0x00E1, 0x8AB8, 0x8ABF, 0xEA9F, 0xFA00, 0xFAFF])
def test_unrecognized_subcases_decode_to_unknown(opcode):
    assert decode_opcode(opcode).kind is K.UNKNOWN


def test_fields_are_extracted():
    ins = decode_opcode(0xD7A3)
    assert (ins.x, ins.y, ins.n, ins.kk, ins.nnn) == (0x7, 0xA, 0x3, 0xA3, 0x7A3)

def test_every_known_kind_has_an_executor():
    assert set(EXECUTE_MAP) == set(K) - {K.UNKNOWN}

def test_every_kind_has_a_mnemonic():
    assert set(MNEMONIC_MAP) == set(K)

@pytest.mark.parametrize("opcode, text", [
    (0x00E0, "CLS"),
    (0x2ABC, "CALL $ABC"),
    (0x6A2F, "LD VA, $2F"),
    (0x8AB4, "ADD VA, VB"),
    (0x8AB6, "SHR VA"),
    (0x5AB3, "SE VA, VB"),
    (0xD125, "DRW V1, V2, 5"),
    (0xF355, "LD [I], V3"),
    (0xFFFF, "UNKNOWN $FFFF"),
])
def test_operation_formatting(opcode, text):
    op = to_operation(decode_opcode(opcode))
    assert f"{op.mnemonic} {', '.join(op.operands)}".strip() == text
    assert op.length == 2
    assert op.opcode_hex == f"{opcode:04X}"
