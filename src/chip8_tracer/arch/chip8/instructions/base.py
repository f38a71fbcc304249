# src/chip8_tracer/arch/chip8/instructions/base.py
"""
CHIP-8 デコード済み命令の型定義と、命令実行に必要なコンテキスト。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.core.snapshot import Operation
from chip8_tracer.arch.chip8.state import Chip8CpuState
from chip8_tracer.arch.chip8.stack import CallStack
from chip8_tracer.arch.chip8.screen import Screen
from chip8_tracer.arch.chip8.keyboard import Keyboard, RawKey

# @intent:constant 全ての命令は2バイト長。
INSTRUCTION_LENGTH = 2


# @intent:responsibility 認識される命令ごとに1つのメンバーを持ち、未定義オペコードはUNKNOWNで表す。
class InstructionKind(Enum):
    CLS = "CLS"                 # 00E0
    RET = "RET"                 # 00EE
    JP = "JP"                   # 1nnn
    CALL = "CALL"               # 2nnn
    SE_VX_BYTE = "SE_VX_BYTE"   # 3xkk
    SNE_VX_BYTE = "SNE_VX_BYTE" # 4xkk
    SE_VX_VY = "SE_VX_VY"       # 5xyN
    LD_VX_BYTE = "LD_VX_BYTE"   # 6xkk
    ADD_VX_BYTE = "ADD_VX_BYTE" # 7xkk
    LD_VX_VY = "LD_VX_VY"       # 8xy0
    OR = "OR"                   # 8xy1
    AND = "AND"                 # 8xy2
    XOR = "XOR"                 # 8xy3
    ADD_VX_VY = "ADD_VX_VY"     # 8xy4
    SUB = "SUB"                 # 8xy5
    SHR = "SHR"                 # 8xy6
    SUBN = "SUBN"               # 8xy7
    SHL = "SHL"                 # 8xyE
    SNE_VX_VY = "SNE_VX_VY"     # 9xyN
    LD_I_ADDR = "LD_I_ADDR"     # Annn
    JP_V0_ADDR = "JP_V0_ADDR"   # Bnnn
    RND = "RND"                 # Cxkk
    DRW = "DRW"                 # Dxyn
    SKP = "SKP"                 # Ex9E
    SKNP = "SKNP"               # ExA1
    LD_VX_DT = "LD_VX_DT"       # Fx07
    LD_VX_K = "LD_VX_K"         # Fx0A
    LD_DT_VX = "LD_DT_VX"       # Fx15
    LD_ST_VX = "LD_ST_VX"       # Fx18
    ADD_I_VX = "ADD_I_VX"       # Fx1E
    LD_F_VX = "LD_F_VX"         # Fx29
    LD_B_VX = "LD_B_VX"         # Fx33
    LD_MEM_VX = "LD_MEM_VX"     # Fx55
    LD_VX_MEM = "LD_VX_MEM"     # Fx65
    UNKNOWN = "UNKNOWN"


# @intent:responsibility 16bitオペコードを各フィールドに分解した不変の命令表現。
# @intent:note 各フィールドはデコード時に正規の幅へマスクされる（x/y/n: 4bit, kk: 8bit, nnn: 12bit）。
@dataclass(frozen=True)
class Instruction:
    kind: InstructionKind
    opcode: int
    x: int = 0
    y: int = 0
    n: int = 0
    kk: int = 0
    nnn: int = 0

    # @intent:responsibility オペコードからフィールドを切り出したInstructionを生成します。
    @classmethod
    def from_opcode(cls, kind: InstructionKind, opcode: int) -> "Instruction":
        opcode &= 0xFFFF
        return cls(
            kind=kind,
            opcode=opcode,
            x=(opcode >> 8) & 0x0F,
            y=(opcode >> 4) & 0x0F,
            n=opcode & 0x0F,
            kk=opcode & 0xFF,
            nnn=opcode & 0x0FFF,
        )


# @intent:responsibility 乱数源のインターフェース。
class RandomSource(Protocol):
    def next_byte(self) -> int: ...


# @intent:responsibility 命令実行関数が操作する全ての状態と協調オブジェクトをまとめたコンテキスト。
# @intent:rationale key_eventsがNoneの場合、Fx0AはAWAITING_KEY状態へ遷移し、呼び出し元に制御を返す。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    bus: Bus
    stack: CallStack
    screen: Screen
    keyboard: Keyboard
    random_source: RandomSource
    key_events: Optional[Iterator[RawKey]] = field(default=None)


# オペランド書式
_VX, _VY = "V{x:X}", "V{y:X}"
_BYTE, _ADDR = "${kk:02X}", "${nnn:03X}"

# @intent:map 命令種別からニーモニックとオペランド書式へ。書式はInstructionのフィールドで展開される。
MNEMONIC_MAP: Dict[InstructionKind, Tuple[str, Tuple[str, ...]]] = {
    InstructionKind.CLS: ("CLS", ()),
    InstructionKind.RET: ("RET", ()),
    InstructionKind.JP: ("JP", (_ADDR,)),
    InstructionKind.CALL: ("CALL", (_ADDR,)),
    InstructionKind.SE_VX_BYTE: ("SE", (_VX, _BYTE)),
    InstructionKind.SNE_VX_BYTE: ("SNE", (_VX, _BYTE)),
    InstructionKind.SE_VX_VY: ("SE", (_VX, _VY)),
    InstructionKind.LD_VX_BYTE: ("LD", (_VX, _BYTE)),
    InstructionKind.ADD_VX_BYTE: ("ADD", (_VX, _BYTE)),
    InstructionKind.LD_VX_VY: ("LD", (_VX, _VY)),
    InstructionKind.OR: ("OR", (_VX, _VY)),
    InstructionKind.AND: ("AND", (_VX, _VY)),
    InstructionKind.XOR: ("XOR", (_VX, _VY)),
    InstructionKind.ADD_VX_VY: ("ADD", (_VX, _VY)),
    InstructionKind.SUB: ("SUB", (_VX, _VY)),
    InstructionKind.SHR: ("SHR", (_VX,)),
    InstructionKind.SUBN: ("SUBN", (_VX, _VY)),
    InstructionKind.SHL: ("SHL", (_VX,)),
    InstructionKind.SNE_VX_VY: ("SNE", (_VX, _VY)),
    InstructionKind.LD_I_ADDR: ("LD", ("I", _ADDR)),
    InstructionKind.JP_V0_ADDR: ("JP", ("V0", _ADDR)),
    InstructionKind.RND: ("RND", (_VX, _BYTE)),
    InstructionKind.DRW: ("DRW", (_VX, _VY, "{n}")),
    InstructionKind.SKP: ("SKP", (_VX,)),
    InstructionKind.SKNP: ("SKNP", (_VX,)),
    InstructionKind.LD_VX_DT: ("LD", (_VX, "DT")),
    InstructionKind.LD_VX_K: ("LD", (_VX, "K")),
    InstructionKind.LD_DT_VX: ("LD", ("DT", _VX)),
    InstructionKind.LD_ST_VX: ("LD", ("ST", _VX)),
    InstructionKind.ADD_I_VX: ("ADD", ("I", _VX)),
    InstructionKind.LD_F_VX: ("LD", ("F", _VX)),
    InstructionKind.LD_B_VX: ("LD", ("B", _VX)),
    InstructionKind.LD_MEM_VX: ("LD", ("[I]", _VX)),
    InstructionKind.LD_VX_MEM: ("LD", (_VX, "[I]")),
    InstructionKind.UNKNOWN: ("UNKNOWN", ("${opcode:04X}",)),
}


def _format(ins: Instruction) -> Tuple[str, List[str]]:
    mnemonic, templates = MNEMONIC_MAP[ins.kind]
    fields = dict(x=ins.x, y=ins.y, n=ins.n, kk=ins.kk, nnn=ins.nnn, opcode=ins.opcode)
    return mnemonic, [template.format(**fields) for template in templates]


# @intent:responsibility Instructionをトレース用のOperationに変換します。
def to_operation(instruction: Instruction) -> Operation:
    mnemonic, operands = _format(instruction)
    return Operation(
        opcode_hex=f"{instruction.opcode:04X}",
        mnemonic=mnemonic,
        operands=operands,
        operand_bytes=[(instruction.opcode >> 8) & 0xFF, instruction.opcode & 0xFF],
        cycle_count=1,
        length=INSTRUCTION_LENGTH,
    )


# @intent:responsibility Operationに記録されたオペコードを取り出します。
def opcode_of(operation: Operation) -> int:
    return int(operation.opcode_hex, 16)
