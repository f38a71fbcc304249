# src/chip8_tracer/arch/chip8/instructions/maps.py
"""
CHIP-8 オペコードのデコードテーブルと、命令種別から実行関数へのマッピング定義。

デコードはオペコードのフィールド幅ごとに階層化されています。
  1. 主デコーダ: オペランドを持たない 00E0 / 00EE を判定
  2. 拡張デコーダ: 上位ニブルで命令ファミリーを選択
  3. ALUサブデコーダ (8xyN): 下位ニブル
  4. キーサブデコーダ (ExNN) / I/Oサブデコーダ (FxNN): 下位バイト
"""
from typing import Callable, Dict

from chip8_tracer.arch.chip8.instructions import alu, control, load, io
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction, InstructionKind

K = InstructionKind

ExecFunc = Callable[[ExecutionContext, Instruction], None]

# @intent:map 8xyN の下位ニブルから命令種別へ。
EIGHT_XYN_MAP: Dict[int, InstructionKind] = {
    0x0: K.LD_VX_VY,
    0x1: K.OR,
    0x2: K.AND,
    0x3: K.XOR,
    0x4: K.ADD_VX_VY,
    0x5: K.SUB,
    0x6: K.SHR,
    0x7: K.SUBN,
    0xE: K.SHL,
}

# @intent:map ExNN の下位バイトから命令種別へ。
E_X_MAP: Dict[int, InstructionKind] = {
    0x9E: K.SKP,
    0xA1: K.SKNP,
}

# @intent:map FxNN の下位バイトから命令種別へ。
F_X_MAP: Dict[int, InstructionKind] = {
    0x07: K.LD_VX_DT,
    0x0A: K.LD_VX_K,
    0x15: K.LD_DT_VX,
    0x18: K.LD_ST_VX,
    0x1E: K.ADD_I_VX,
    0x29: K.LD_F_VX,
    0x33: K.LD_B_VX,
    0x55: K.LD_MEM_VX,
    0x65: K.LD_VX_MEM,
}

# @intent:map 上位ニブルがそれだけで命令を決定するファミリー。
SIMPLE_FAMILY_MAP: Dict[int, InstructionKind] = {
    0x1: K.JP,
    0x2: K.CALL,
    0x3: K.SE_VX_BYTE,
    0x4: K.SNE_VX_BYTE,
    0x5: K.SE_VX_VY,
    0x6: K.LD_VX_BYTE,
    0x7: K.ADD_VX_BYTE,
    0x9: K.SNE_VX_VY,
    0xA: K.LD_I_ADDR,
    0xB: K.JP_V0_ADDR,
    0xC: K.RND,
    0xD: K.DRW,
}


def _decode_eight_xyn(opcode: int) -> InstructionKind:
    return EIGHT_XYN_MAP.get(opcode & 0x000F, K.UNKNOWN)

def _decode_e_x(opcode: int) -> InstructionKind:
    return E_X_MAP.get(opcode & 0x00FF, K.UNKNOWN)

def _decode_f_x(opcode: int) -> InstructionKind:
    return F_X_MAP.get(opcode & 0x00FF, K.UNKNOWN)


# @intent:map 上位ニブルからサブデコーダへ。
SUB_DECODER_MAP: Dict[int, Callable[[int], InstructionKind]] = {
    0x8: _decode_eight_xyn,
    0xE: _decode_e_x,
    0xF: _decode_f_x,
}


# @intent:responsibility 拡張デコーダ。上位ニブルで命令ファミリーを選択します。
def decode_extended(opcode: int) -> Instruction:
    family = (opcode >> 12) & 0xF
    kind = SIMPLE_FAMILY_MAP.get(family)
    if kind is None:
        sub_decoder = SUB_DECODER_MAP.get(family)
        kind = sub_decoder(opcode) if sub_decoder else K.UNKNOWN
    return Instruction.from_opcode(kind, opcode)


# @intent:responsibility 主デコーダ。オペランドを持たない2命令を判定し、それ以外は拡張デコーダに委譲します。
def decode_opcode(opcode: int) -> Instruction:
    """
    16bitオペコードをデコードし、Instructionを返します。
    未定義のオペコードは InstructionKind.UNKNOWN となります。
    """
    opcode &= 0xFFFF
    if opcode == 0x00E0:
        return Instruction.from_opcode(K.CLS, opcode)
    if opcode == 0x00EE:
        return Instruction.from_opcode(K.RET, opcode)
    return decode_extended(opcode)


# @intent:map 命令種別から実行関数へのマッピングテーブル。UNKNOWNは登録しない。
EXECUTE_MAP: Dict[InstructionKind, ExecFunc] = {
    # Control
    K.CLS: control.execute_cls,
    K.RET: control.execute_ret,
    K.JP: control.execute_jp,
    K.CALL: control.execute_call,
    K.SE_VX_BYTE: control.execute_se_vx_byte,
    K.SNE_VX_BYTE: control.execute_sne_vx_byte,
    K.SE_VX_VY: control.execute_se_vx_vy,
    K.SNE_VX_VY: control.execute_sne_vx_vy,
    K.JP_V0_ADDR: control.execute_jp_v0_addr,
    K.SKP: control.execute_skp,
    K.SKNP: control.execute_sknp,

    # ALU
    K.ADD_VX_BYTE: alu.execute_add_vx_byte,
    K.LD_VX_VY: alu.execute_ld_vx_vy,
    K.OR: alu.execute_or,
    K.AND: alu.execute_and,
    K.XOR: alu.execute_xor,
    K.ADD_VX_VY: alu.execute_add_vx_vy,
    K.SUB: alu.execute_sub,
    K.SHR: alu.execute_shr,
    K.SUBN: alu.execute_subn,
    K.SHL: alu.execute_shl,

    # Load/Store
    K.LD_VX_BYTE: load.execute_ld_vx_byte,
    K.LD_I_ADDR: load.execute_ld_i_addr,
    K.RND: load.execute_rnd,
    K.LD_VX_DT: load.execute_ld_vx_dt,
    K.LD_DT_VX: load.execute_ld_dt_vx,
    K.LD_ST_VX: load.execute_ld_st_vx,
    K.ADD_I_VX: load.execute_add_i_vx,
    K.LD_F_VX: load.execute_ld_f_vx,
    K.LD_B_VX: load.execute_ld_b_vx,
    K.LD_MEM_VX: load.execute_ld_mem_vx,
    K.LD_VX_MEM: load.execute_ld_vx_mem,

    # I/O
    K.DRW: io.execute_drw,
    K.LD_VX_K: io.execute_ld_vx_k,
}
