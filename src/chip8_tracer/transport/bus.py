# chip8_tracer/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の4KBアドレス空間をデバイス（RAM）の並びとして表現します。
命令からのread/writeはアクセスログに残り、Snapshotの bus_activity になります。
フォント配置やROMロード、逆アセンブラはpeek/pokeを使い、ログを汚しません。
"""
import bisect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 1バイト分のバスアクセスを記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

    def __str__(self) -> str:
        arrow = "->" if self.access_type is BusAccessType.READ else "<-"
        return f"{self.access_type.value:<5} {self.address:03X} {arrow} {self.data:02X}"


# @intent:responsibility バスに接続できるデバイスのインターフェース。アドレスはデバイス内オフセットです。
class Device(ABC):
    @abstractmethod
    def read(self, offset: int) -> int:
        pass

    @abstractmethod
    def write(self, offset: int, data: int) -> None:
        pass

    @abstractmethod
    def get_size(self) -> int:
        pass


# @intent:responsibility バイト配列によるRAM。範囲外はIndexError、8bit超の値はValueError。
class RAM(Device):
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._cells = bytearray(size)

    def _check(self, offset: int) -> None:
        if not 0 <= offset < len(self._cells):
            raise IndexError(f"Address {offset} out of bounds for RAM of size {len(self._cells)}.")

    def read(self, offset: int) -> int:
        self._check(offset)
        return self._cells[offset]

    def write(self, offset: int, data: int) -> None:
        self._check(offset)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._cells[offset] = data

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))

    def get_size(self) -> int:
        return len(self._cells)


# @intent:responsibility アドレスから担当デバイスを引き、アクセスを委譲・記録します。
class Bus:
    """
    デバイスは開始アドレス順に保持され、二分探索で引かれます。
    範囲の重なりは登録時に拒否します。どのデバイスにも属さないアドレスはIndexErrorです。
    """
    def __init__(self):
        self._starts: List[int] = []
        self._regions: List[Tuple[int, int, Device]] = []
        self._activity: List[BusAccess] = []

    # @intent:pre-condition 0 <= start_address <= end_address、範囲長とデバイスサイズが一致、既存範囲と重ならないこと。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not (0 <= start_address <= end_address):
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")
        span = end_address - start_address + 1
        if device.get_size() != span:
            raise ValueError(
                f"Registered {type(device).__name__} device size ({device.get_size()} bytes) "
                f"does not match the address range ({span} bytes)."
            )
        for start, end, _ in self._regions:
            if start_address <= end and start <= end_address:
                raise ValueError(
                    f"Address range {start_address:#05x}-{end_address:#05x} overlaps {start:#05x}-{end:#05x}."
                )
        index = bisect.bisect(self._starts, start_address)
        self._starts.insert(index, start_address)
        self._regions.insert(index, (start_address, end_address, device))

    def get_devices(self) -> List[Tuple[int, int, Device]]:
        return list(self._regions)

    def _locate(self, address: int) -> Tuple[Device, int]:
        index = bisect.bisect_right(self._starts, address) - 1
        if index >= 0:
            start, end, device = self._regions[index]
            if address <= end:
                return device, address - start
        raise IndexError(f"Address {address:#06x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self._locate(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    def write(self, address: int, data: int) -> None:
        device, offset = self._locate(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # 記録なし
    def peek(self, address: int) -> int:
        device, offset = self._locate(address)
        return device.read(offset)

    def poke(self, address: int, data: int) -> None:
        device, offset = self._locate(address)
        device.write(offset, data)

    # @intent:responsibility 前回の取得以降のアクセスログを返し、ログを空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log, self._activity = self._activity, []
        return log
