# src/chip8_tracer/arch/chip8/disassembler.py
"""
CHIP-8 逆アセンブラ。
"""
from typing import List, Tuple

from chip8_tracer.transport.bus import Bus
from chip8_tracer.arch.chip8.instructions.base import InstructionKind, INSTRUCTION_LENGTH, to_operation
from chip8_tracer.arch.chip8.instructions.maps import decode_opcode

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを2バイト単位で解析し、(アドレス, HEX, ニーモニック) のリストを返す。
    未定義のワードは "DW $HHHH" として表示する。
    """
    results = []
    current_addr = start_addr
    end_addr = start_addr + length

    # バスアクティビティを汚さないようpeekで読む
    while current_addr < end_addr:
        opcode = (bus.peek(current_addr) << 8) | bus.peek(current_addr + 1)
        instruction = decode_opcode(opcode)

        if instruction.kind is InstructionKind.UNKNOWN:
            text = f"DW ${opcode:04X}"
        else:
            operation = to_operation(instruction)
            text = f"{operation.mnemonic} {', '.join(operation.operands)}".strip()

        results.append((current_addr, f"{opcode:04X}", text))
        current_addr += INSTRUCTION_LENGTH

    return results
