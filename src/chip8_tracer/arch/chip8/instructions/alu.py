# src/chip8_tracer/arch/chip8/instructions/alu.py
"""
CHIP-8 ALU命令 (8xyN群)。

各演算は純粋関数として (演算結果, フラグ) を返し、VFへの暗黙の書き込みを
呼び出し側で明示的に行います。
"""
from typing import NamedTuple, Optional

from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction


# @intent:data_structure ALU演算の結果。flagがNoneの場合、VFは変更されない。
class AluResult(NamedTuple):
    value: int
    flag: Optional[int] = None


# --- Pure operations (8bit) ---

def ld(vx: int, vy: int) -> AluResult:
    return AluResult(vy)

def or_(vx: int, vy: int) -> AluResult:
    return AluResult(vx | vy)

def and_(vx: int, vy: int) -> AluResult:
    return AluResult(vx & vy)

def xor(vx: int, vy: int) -> AluResult:
    return AluResult(vx ^ vy)

# @intent:responsibility キャリー付き加算。16bitに拡張した和が255を超えるとフラグ1。
def add(vx: int, vy: int) -> AluResult:
    total = vx + vy
    return AluResult(total & 0xFF, 1 if total > 0xFF else 0)

# @intent:responsibility 減算。Vx > Vy (厳密) のときNOT BORROWフラグ1。
def sub(vx: int, vy: int) -> AluResult:
    return AluResult((vx - vy) & 0xFF, 1 if vx > vy else 0)

# @intent:responsibility 逆方向減算 (Vy - Vx)。Vy > Vx のときフラグ1。
def subn(vx: int, vy: int) -> AluResult:
    return AluResult((vy - vx) & 0xFF, 1 if vy > vx else 0)

# @intent:responsibility 右シフト。フラグはシフト前のLSB。値は整数除算で求める。
def shr(vx: int, vy: int) -> AluResult:
    return AluResult(vx // 2, vx & 0x01)

# @intent:responsibility 左シフト。フラグはシフト前の最上位ビットをマスクしたそのままの値 (0 または 0x80)。
# @intent:note フラグを0/1に正規化しないのは既存ROMとの互換のため。
def shl(vx: int, vy: int) -> AluResult:
    return AluResult((vx * 2) & 0xFF, vx & 0x80)


# @intent:responsibility AluResultをレジスタに反映します。
# @intent:note フラグを先に、演算結果を後に書き込む。x == 0xF の場合は演算結果がVFに残る。
def apply_result(ctx: ExecutionContext, x: int, result: AluResult) -> None:
    v = ctx.state.v
    if result.flag is not None:
        ctx.state.vf = result.flag
    v[x] = result.value


def _execute(operation, ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    # オペランドは書き込み前にサンプリングする
    apply_result(ctx, ins.x, operation(v[ins.x], v[ins.y]))


# --- Execute functions ---

def execute_ld_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(ld, ctx, ins)

def execute_or(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(or_, ctx, ins)

def execute_and(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(and_, ctx, ins)

def execute_xor(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(xor, ctx, ins)

def execute_add_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(add, ctx, ins)

def execute_sub(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(sub, ctx, ins)

def execute_shr(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(shr, ctx, ins)

def execute_subn(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(subn, ctx, ins)

def execute_shl(ctx: ExecutionContext, ins: Instruction) -> None:
    _execute(shl, ctx, ins)

# @intent:responsibility 7xkk: 即値加算。8bitでラップし、VFは変更しない。
def execute_add_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    v = ctx.state.v
    v[ins.x] = (v[ins.x] + ins.kk) & 0xFF
