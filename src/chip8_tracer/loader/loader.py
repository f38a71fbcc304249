# chip8_tracer/loader/loader.py
"""
ROMローダーモジュール。
CHIP-8のプログラムイメージ（生バイナリ）をファイルから読み込み、CPUにロードします。
"""
import logging
from pathlib import Path
from typing import Union

from chip8_tracer.arch.chip8.cpu import Chip8Cpu

logger = logging.getLogger(__name__)


class RomLoader:
    """
    生バイナリ形式 (.ch8) のROMファイルをCHIP-8 CPUにロードするローダー。
    """
    # @intent:return ロードしたバイト数。
    # @intent:pre-condition ファイルサイズは 4096 - 0x200 未満であること（CPU側でProgramTooLargeErrorとなる）。
    def load_rom(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> int:
        path = Path(file_path)
        data = path.read_bytes()
        logger.info("Loading ROM %s (%d bytes)", path, len(data))
        cpu.load(data)
        return len(data)
