# src/chip8_tracer/arch/chip8/instructions/io.py
"""
CHIP-8 入出力命令 (スプライト描画、キー入力待ち)。
"""
import logging

from chip8_tracer.arch.chip8.state import RunState
from chip8_tracer.arch.chip8.keyboard import wait_for_key
from chip8_tracer.arch.chip8.instructions.base import ExecutionContext, Instruction

logger = logging.getLogger(__name__)


# @intent:responsibility Dxyn: Iから読んだnバイトのスプライトを (Vx, Vy) に描画し、衝突をVFに格納します。
def execute_drw(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    sprite = [ctx.bus.read(state.i + row) for row in range(ins.n)]
    collision = ctx.screen.draw_sprite(state.v[ins.x], state.v[ins.y], sprite, ins.n)
    state.vf = 1 if collision else 0

# @intent:responsibility Fx0A: キー押下を待ち、そのキー番号をVxに格納します。
# @intent:rationale 入力イベント源が与えられていればその場でブロッキング待機し、
#                  そうでなければAWAITING_KEY状態へ遷移してCPUのpress_keyによる再開を待ちます。
def execute_ld_vx_k(ctx: ExecutionContext, ins: Instruction) -> None:
    state = ctx.state
    if ctx.key_events is not None:
        key = wait_for_key(ctx.key_events, ctx.keyboard)
        state.v[ins.x] = key
        logger.debug("Key wait resolved: V%X = %X", ins.x, key)
        return

    state.run_state = RunState.AWAITING_KEY
    state.key_register = ins.x
    logger.debug("Awaiting key press for V%X", ins.x)
