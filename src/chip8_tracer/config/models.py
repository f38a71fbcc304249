from dataclasses import dataclass, field
from typing import List, Optional, Union

@dataclass
class MemoryRegion:
    start: int
    end: int
    type: str  # "RAM"
    label: str = ""

@dataclass
class CpuInitialState:
    pc: int = 0x200
    registers: dict = field(default_factory=dict)  # 例: {"i": 0x300, "v": [...], "delay_timer": 10}

@dataclass
class SystemConfig:
    architecture: str = "CHIP8"
    memory_map: List[MemoryRegion] = field(default_factory=list)
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
    seed: Optional[int] = None
    unknown_opcode: str = "ignore"  # "ignore", "log", "raise"
    keymap: Optional[List[Union[int, str]]] = None
    rom: Optional[str] = None
