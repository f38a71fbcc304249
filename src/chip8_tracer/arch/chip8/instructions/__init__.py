"""
CHIP-8命令セット実装パッケージ。
"""
from .base import ExecutionContext, Instruction, InstructionKind, to_operation
from .maps import decode_opcode, EXECUTE_MAP

# @intent:responsibility デコード済みのCHIP-8命令を実行します。
# @intent:return 実行関数が存在した場合True。UNKNOWNでは何も変更せずFalseを返す。
def execute_instruction(instruction: Instruction, ctx: ExecutionContext) -> bool:
    """
    デコードされたCHIP-8命令を実行し、コンテキストの状態を変更します。
    """
    executor = EXECUTE_MAP.get(instruction.kind)
    if executor:
        executor(ctx, instruction)
        return True
    return False
