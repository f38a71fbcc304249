# chip8_tracer/core/state.py
"""
Core Layer (CPU状態)
"""
from dataclasses import dataclass


# @intent:responsibility 全アーキテクチャ共通のレジスタ。CHIP-8側で拡張します。
@dataclass
class CpuState:
    pc: int = 0
    sp: int = 0  # コールスタックの深さ
