# src/chip8_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

フェッチ・デコード・実行のサイクルはAbstractCpuのテンプレートに従い、
単一の公開ディスパッチ入口として execute(opcode) を提供します。
"""
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from chip8_tracer.core.snapshot import Operation, Snapshot
from chip8_tracer.common.types import RegisterLayoutInfo, RegisterInfo
from chip8_tracer.core.cpu import AbstractCpu
from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.state import (
    Chip8CpuState, RunState, MEMORY_SIZE, PROGRAM_LOAD_ADDRESS, REGISTER_COUNT,
)
from chip8_tracer.arch.chip8.fonts import FONT_SET, FONT_ADDRESS
from chip8_tracer.arch.chip8.stack import CallStack
from chip8_tracer.arch.chip8.screen import Screen
from chip8_tracer.arch.chip8.keyboard import Keyboard, RawKey
from chip8_tracer.arch.chip8.rng import SeededRandomSource
from chip8_tracer.arch.chip8.errors import ProgramTooLargeError, UnknownOpcodeError, CpuSuspendedError
from chip8_tracer.arch.chip8.instructions import (
    ExecutionContext, Instruction, InstructionKind, decode_opcode, execute_instruction, to_operation,
)
from chip8_tracer.arch.chip8.instructions.base import RandomSource, opcode_of
from chip8_tracer.arch.chip8 import disassembler

logger = logging.getLogger(__name__)


# @intent:responsibility 未定義オペコードの扱いを定義します。
class UnknownOpcodePolicy(Enum):
    IGNORE = "ignore"  # 何もしない
    LOG = "log"        # 何もせず警告をログ出力
    RAISE = "raise"    # UnknownOpcodeErrorを送出


# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。

    key_eventsを与えるとFx0Aはその入力イベント列上でブロッキング待機します。
    与えない場合、Fx0AはCPUをAWAITING_KEY状態にし、press_key()で再開します。
    """
    def __init__(
        self,
        bus: Bus,
        screen: Optional[Screen] = None,
        keyboard: Optional[Keyboard] = None,
        random_source: Optional[RandomSource] = None,
        stack: Optional[CallStack] = None,
        key_events: Optional[Iterable[RawKey]] = None,
        unknown_opcode_policy: UnknownOpcodePolicy = UnknownOpcodePolicy.IGNORE,
    ):
        super().__init__(bus)
        self._screen = screen if screen is not None else Screen()
        self._keyboard = keyboard if keyboard is not None else Keyboard()
        self._random_source = random_source if random_source is not None else SeededRandomSource()
        self._stack = stack if stack is not None else CallStack()
        self._key_events = iter(key_events) if key_events is not None else None
        self.unknown_opcode_policy = unknown_opcode_policy
        self._load_font()

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility 組み込みフォントをメモリ先頭に配置します。
    def _load_font(self) -> None:
        for offset, byte in enumerate(FONT_SET):
            self._bus.poke(FONT_ADDRESS + offset, byte)

    # @intent:responsibility 状態、スタック、画面、キー状態、メモリを初期化し、フォントを再配置します。
    def reset(self) -> None:
        super().reset()
        self._stack.clear()
        self._screen.clear()
        self._keyboard.release_all()
        for _, _, device in self._bus.get_devices():
            if isinstance(device, RAM):
                device.clear()
        self._load_font()

    # @intent:responsibility プログラムイメージを0x200から書き込み、PCを0x200に設定します。
    # @intent:pre-condition len(program) + 0x200 < 4096。違反時は何も書き込まずProgramTooLargeErrorを送出する。
    def load(self, program: bytes) -> None:
        limit = MEMORY_SIZE - PROGRAM_LOAD_ADDRESS
        if len(program) + PROGRAM_LOAD_ADDRESS >= MEMORY_SIZE:
            raise ProgramTooLargeError(len(program), limit)
        for offset, byte in enumerate(program):
            self._bus.poke(PROGRAM_LOAD_ADDRESS + offset, byte)
        self._state.pc = PROGRAM_LOAD_ADDRESS
        logger.info("Loaded %d byte program at %#05x", len(program), PROGRAM_LOAD_ADDRESS)

    # --- Collaborators ---

    @property
    def screen(self) -> Screen:
        return self._screen

    @property
    def keyboard(self) -> Keyboard:
        return self._keyboard

    @property
    def stack(self) -> CallStack:
        return self._stack

    def _context(self) -> ExecutionContext:
        return ExecutionContext(
            state=self._state,
            bus=self._bus,
            stack=self._stack,
            screen=self._screen,
            keyboard=self._keyboard,
            random_source=self._random_source,
            key_events=self._key_events,
        )

    # --- Dispatch ---

    # @intent:responsibility 単一の公開ディスパッチ入口。1つのオペコードを同期的に実行します。
    # @intent:pre-condition キー入力待ち中ではないこと（待機中はCpuSuspendedError）。
    def execute(self, opcode: int) -> Instruction:
        """
        16bitオペコードをデコードして実行し、デコード結果を返します。
        PCの通常の+2は呼び出し側（step()やフェッチループ）の責務です。
        """
        if self._state.awaiting_key:
            raise CpuSuspendedError(f"CPU is awaiting a key press for V{self._state.key_register:X}.")
        instruction = decode_opcode(opcode)
        self._dispatch(instruction)
        return instruction

    def _dispatch(self, instruction: Instruction) -> None:
        if instruction.kind is InstructionKind.UNKNOWN:
            self._handle_unknown(instruction.opcode)
            return
        execute_instruction(instruction, self._context())

    # @intent:responsibility 未定義オペコードをポリシーに従って処理します。状態は変更しません。
    def _handle_unknown(self, opcode: int) -> None:
        policy = self.unknown_opcode_policy
        if policy is UnknownOpcodePolicy.RAISE:
            raise UnknownOpcodeError(opcode, self._state.pc)
        if policy is UnknownOpcodePolicy.LOG:
            logger.warning("Ignoring unknown opcode %#06x (PC=%#06x)", opcode, self._state.pc)

    # @intent:responsibility PCから2バイトをビッグエンディアンでフェッチします。
    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return to_operation(decode_opcode(opcode))

    def _execute(self, operation: Operation) -> None:
        self._dispatch(decode_opcode(opcode_of(operation)))

    # @intent:responsibility キー入力待ち中はフェッチを行わず、PCを維持したSnapshotを返します。
    def _handle_suspend(self, current_pc: int) -> Optional[Snapshot]:
        if not self._state.awaiting_key:
            return None
        operation = Operation(
            opcode_hex=f"F{self._state.key_register:X}0A",
            mnemonic="WAIT KEY (suspended)",
            operands=[f"V{self._state.key_register:X}"],
            cycle_count=0,
            length=0,
        )
        return self._create_snapshot(operation)

    # --- Input ---

    # @intent:responsibility ホストのキー押下を通知します。待機中であれば格納先レジスタに書き込み、実行を再開します。
    # @intent:return 認識されたキーのキー番号。認識できないキーはNone（待機は継続）。
    def press_key(self, raw_code: RawKey) -> Optional[int]:
        key = self._keyboard.map(raw_code)
        if key is None:
            return None
        self._keyboard.key_down(key)
        state = self._state
        if state.awaiting_key:
            state.v[state.key_register] = key
            logger.debug("Key wait resolved: V%X = %X", state.key_register, key)
            state.run_state = RunState.RUNNING
            state.key_register = None
        return key

    def release_key(self, raw_code: RawKey) -> Optional[int]:
        key = self._keyboard.map(raw_code)
        if key is not None:
            self._keyboard.key_up(key)
        return key

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ0に向けて減算します。呼び出し頻度は呼び出し側が決定します。
    def tick_timers(self) -> None:
        state = self._state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    # --- Introspection ---

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({"I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer})
        return registers

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("General", [RegisterInfo(f"V{index:X}", 8) for index in range(REGISTER_COUNT)]),
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
        ]

    def get_flag_state(self) -> Dict[str, bool]:
        return {"VF": self._state.vf != 0}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
