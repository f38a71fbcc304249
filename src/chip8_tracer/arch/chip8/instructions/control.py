# src/chip8_tracer/arch/chip8/instructions/control.py
"""
CHIP-8 制御命令 (ジャンプ、サブルーチン、条件スキップ)。

スキップ命令は呼び出し側のフェッチループによる通常の+2に加え、
条件成立時にのみ追加で+2します。
"""
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction, INSTRUCTION_LENGTH


# @intent:responsibility 条件成立時にPCを1命令分追加で進めます。
def _skip_if(ctx: ExecutionContext, condition: bool) -> None:
    if condition:
        ctx.state.pc = (ctx.state.pc + INSTRUCTION_LENGTH) & 0xFFFF


def execute_cls(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.screen.clear()

# @intent:pre-condition スタックが空の場合はCallStackがStackUnderflowErrorを送出する。
def execute_ret(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = ctx.stack.pop()
    ctx.state.sp = len(ctx.stack)

def execute_jp(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = ins.nnn

# @intent:responsibility 現在のPCをプッシュしてからnnnへジャンプします。
def execute_call(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.stack.push(ctx.state.pc)
    ctx.state.sp = len(ctx.stack)
    ctx.state.pc = ins.nnn

def execute_jp_v0_addr(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.pc = (ins.nnn + ctx.state.v[0x0]) & 0xFFFF

def execute_se_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    _skip_if(ctx, ctx.state.v[ins.x] == ins.kk)

def execute_sne_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    _skip_if(ctx, ctx.state.v[ins.x] != ins.kk)

def execute_se_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    _skip_if(ctx, ctx.state.v[ins.x] == ctx.state.v[ins.y])

def execute_sne_vx_vy(ctx: ExecutionContext, ins: Instruction) -> None:
    _skip_if(ctx, ctx.state.v[ins.x] != ctx.state.v[ins.y])

# @intent:responsibility Ex9E/ExA1: V[x]の下位4bitをキー番号として押下状態を判定します。
def execute_skp(ctx: ExecutionContext, ins: Instruction) -> None:
    _skip_if(ctx, ctx.keyboard.is_down(ctx.state.v[ins.x] & 0xF))

def execute_sknp(ctx: ExecutionContext, ins: Instruction) -> None:
    _skip_if(ctx, not ctx.keyboard.is_down(ctx.state.v[ins.x] & 0xF))
