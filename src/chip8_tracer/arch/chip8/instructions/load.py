# src/chip8_tracer/arch/chip8/instructions/load.py
"""
CHIP-8 ロード/ストア命令 (即値ロード、インデックスレジスタ、タイマー、BCD、ブロック転送)。
"""
from chip8_tracer.arch.chip8.fonts import SPRITE_HEIGHT, FONT_ADDRESS
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction


def execute_ld_vx_byte(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ins.kk

def execute_ld_i_addr(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = ins.nnn

# @intent:responsibility Cxkk: 乱数バイトとkkの論理積をVxに格納します。
def execute_rnd(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = (ctx.random_source.next_byte() & 0xFF) & ins.kk

# --- Timers ---

def execute_ld_vx_dt(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.v[ins.x] = ctx.state.delay_timer

def execute_ld_dt_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.delay_timer = ctx.state.v[ins.x]

def execute_ld_st_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.sound_timer = ctx.state.v[ins.x]

# --- Index register ---

# @intent:note 16bitでラップする。範囲外アドレスへのアクセスはメモリ側で検出される。
def execute_add_i_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = (ctx.state.i + ctx.state.v[ins.x]) & 0xFFFF

# @intent:responsibility Fx29: Vxの数字に対応する組み込みフォントグリフのアドレスをIに設定します。
def execute_ld_f_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    ctx.state.i = FONT_ADDRESS + ctx.state.v[ins.x] * SPRITE_HEIGHT

# --- Memory ---

# @intent:responsibility Fx33: Vxを10進の百・十・一の位に分解し、I, I+1, I+2 に格納します。
def execute_ld_b_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    value = ctx.state.v[ins.x]
    base = ctx.state.i
    ctx.bus.write(base, value // 100)
    ctx.bus.write(base + 1, value // 10 % 10)
    ctx.bus.write(base + 2, value % 10)

# @intent:responsibility Fx55: V0..Vx (xを含む) をIから始まるメモリへ格納します。Iは変更しない。
def execute_ld_mem_vx(ctx: ExecutionContext, ins: Instruction) -> None:
    base = ctx.state.i
    for index in range(ins.x + 1):
        ctx.bus.write(base + index, ctx.state.v[index])

# @intent:responsibility Fx65: Iから始まるメモリを V0..Vx (xを含む) へ読み込みます。Iは変更しない。
def execute_ld_vx_mem(ctx: ExecutionContext, ins: Instruction) -> None:
    base = ctx.state.i
    for index in range(ins.x + 1):
        ctx.state.v[index] = ctx.bus.read(base + index)
