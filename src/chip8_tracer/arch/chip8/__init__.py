# src/chip8_tracer/arch/chip8/__init__.py
"""
CHIP-8 Architecture Package
"""
from .cpu import Chip8Cpu, UnknownOpcodePolicy
from .state import Chip8CpuState, RunState
