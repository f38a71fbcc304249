import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple, Union

from chip8_tracer.transport.bus import Bus, RAM
from chip8_tracer.arch.chip8.cpu import Chip8Cpu, UnknownOpcodePolicy
from chip8_tracer.arch.chip8.keyboard import Keyboard, RawKey
from chip8_tracer.arch.chip8.rng import SeededRandomSource
from chip8_tracer.arch.chip8.state import Chip8CpuState, MEMORY_SIZE, REGISTER_COUNT
from chip8_tracer.loader.loader import RomLoader
from .models import SystemConfig, CpuInitialState, MemoryRegion

logger = logging.getLogger(__name__)

# @intent:responsibility システム構成（Config）に基づいて、Bus、Device、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(
        self,
        config: SystemConfig,
        key_events: Optional[Iterable[RawKey]] = None,
        base_dir: Optional[Union[str, Path]] = None,
    ) -> Tuple[Chip8Cpu, Bus]:
        if config.architecture.upper() not in ("CHIP8", "CHIP-8"):
            raise ValueError(f"Unsupported architecture: {config.architecture}")

        bus = Bus()
        regions = config.memory_map or [MemoryRegion(start=0x000, end=MEMORY_SIZE - 1, type="RAM", label="Main memory")]
        self._check_coverage(regions)

        for region in regions:
            if region.type != "RAM":
                logger.warning(
                    "Unknown device type '%s' for range %03X-%03X, defaulting to RAM", region.type, region.start, region.end
                )
            bus.register_device(region.start, region.end, RAM(region.end - region.start + 1))

        try:
            policy = UnknownOpcodePolicy(config.unknown_opcode)
        except ValueError:
            raise ValueError(f"Unsupported unknown_opcode policy: {config.unknown_opcode}") from None

        cpu = Chip8Cpu(
            bus,
            keyboard=Keyboard(config.keymap),
            random_source=SeededRandomSource(config.seed),
            key_events=key_events,
            unknown_opcode_policy=policy,
        )

        if config.rom:
            rom_path = Path(config.rom)
            if base_dir is not None and not rom_path.is_absolute():
                rom_path = Path(base_dir) / rom_path
            RomLoader().load_rom(rom_path, cpu)

        # 初期状態の適用
        self.apply_initial_state(cpu, config.initial_state)

        return cpu, bus

    # @intent:responsibility メモリマップが 0x000-0xFFF を隙間も重複もなく覆っていることを検証します。
    def _check_coverage(self, regions) -> None:
        expected_start = 0x000
        for region in sorted(regions, key=lambda r: r.start):
            if region.start != expected_start or region.end < region.start:
                raise ValueError(
                    f"Memory map must cover {0:#05x}-{MEMORY_SIZE - 1:#05x} contiguously; "
                    f"unexpected region {region.start:#05x}-{region.end:#05x}."
                )
            expected_start = region.end + 1
        if expected_start != MEMORY_SIZE:
            raise ValueError(f"Memory map must end at {MEMORY_SIZE - 1:#05x}.")

    # @intent:responsibility Configで定義された初期状態をCPUに適用します。
    def apply_initial_state(self, cpu: Chip8Cpu, config_state: CpuInitialState) -> None:
        """
        Configから指定されたPCとレジスタ値をCPUの状態に適用します。
        未知のレジスタ名は警告して無視します。
        """
        state: Chip8CpuState = cpu.get_state()
        state.pc = config_state.pc & 0xFFFF
        for reg_name, value in config_state.registers.items():
            if reg_name == "v":
                if len(value) > REGISTER_COUNT:
                    raise ValueError(f"Too many V register values: {len(value)}")
                for index, item in enumerate(value):
                    state.v[index] = item & 0xFF
            elif len(reg_name) == 2 and reg_name[0] in "vV" and reg_name[1] in "0123456789abcdefABCDEF":
                state.v[int(reg_name[1], 16)] = value & 0xFF
            elif reg_name == "i":
                state.i = value & 0xFFFF
            elif reg_name in ("delay_timer", "sound_timer"):
                setattr(state, reg_name, value & 0xFF)
            else:
                logger.warning("Ignoring unknown register '%s' in initial state", reg_name)
