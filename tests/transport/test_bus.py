# tests/transport/test_bus.py
"""
chip8_tracer.transport.busモジュールの単体テスト。
"""
import pytest
from chip8_tracer.transport.bus import Bus, RAM, BusAccessType

# @intent:test_suite 共通バスとRAMデバイスの基本的な機能とエラーハンドリングを検証します。

class TestRAM:
    """
    RAMデバイスの単体テスト。
    """
    def test_ram_init_valid_size(self):
        ram = RAM(16)
        assert ram.get_size() == 16
        assert all(ram.read(i) == 0 for i in range(16))

    # @intent:test_case_init 無効なサイズでRAMを初期化するとValueErrorが発生することを検証します。
    def test_ram_init_invalid_size(self):
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(0)
        with pytest.raises(ValueError, match="RAM size must be a positive integer."):
            RAM(1.5)

    # @intent:test_case_oob 境界外アドレスへのアクセス時にIndexErrorが発生することを検証します。
    def test_ram_read_write_out_of_bounds(self):
        ram = RAM(4)
        with pytest.raises(IndexError, match="Address 4 out of bounds for RAM of size 4."):
            ram.read(4)
        with pytest.raises(IndexError, match="Address -1 out of bounds for RAM of size 4."):
            ram.write(-1, 0x00)

    def test_ram_write_invalid_data(self):
        ram = RAM(1)
        with pytest.raises(ValueError, match="Data 256 is not an 8-bit value."):
            ram.write(0, 0x100)

    def test_ram_clear(self):
        ram = RAM(4)
        ram.write(2, 0x7F)
        ram.clear()
        assert ram.read(2) == 0

class TestBus:
    """
    Busの単体テスト。
    """
    def test_bus_register_and_access_device(self):
        bus = Bus()
        ram1 = RAM(16)
        ram2 = RAM(16)
        bus.register_device(0x0000, 0x000F, ram1)
        bus.register_device(0x0010, 0x001F, ram2)

        bus.write(0x001A, 0xBB)
        assert bus.read(0x001A) == 0xBB
        assert ram2.read(0x0A) == 0xBB # オフセット計算が正しいことを確認

    def test_bus_access_unmapped_address(self):
        bus = Bus()
        bus.register_device(0x100, 0x10F, RAM(16))
        with pytest.raises(IndexError, match="Address 0x0000 not mapped to any device."):
            bus.read(0x0000)
        with pytest.raises(IndexError, match="Address 0x0110 not mapped to any device."):
            bus.write(0x0110, 0xCC)

    def test_bus_register_invalid_address_range(self):
        bus = Bus()
        with pytest.raises(ValueError, match="Invalid address range"):
            bus.register_device(0x0010, 0x000F, RAM(16))

    def test_bus_register_ram_size_mismatch(self):
        bus = Bus()
        with pytest.raises(ValueError, match=r"Registered RAM device size \(10 bytes\) does not match"):
            bus.register_device(0x0000, 0x000F, RAM(10))

    def test_bus_register_invalid_device_type(self):
        bus = Bus()
        class NotADevice: pass
        with pytest.raises(TypeError, match="Device must be an instance of a class derived from Device."):
            bus.register_device(0x0000, 0x000F, NotADevice())

    # @intent:test_case_log read/writeは記録され、peek/pokeは記録されないことを検証します。
    def test_bus_activity_log(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        bus.write(0x300, 0x12)
        bus.read(0x300)
        bus.poke(0x301, 0x34)
        assert bus.peek(0x301) == 0x34

        log = bus.get_and_clear_activity_log()
        assert [(a.address, a.data, a.access_type) for a in log] == [
            (0x300, 0x12, BusAccessType.WRITE),
            (0x300, 0x12, BusAccessType.READ),
        ]
        assert bus.get_and_clear_activity_log() == []

    def test_bus_register_overlapping_range(self):
        bus = Bus()
        bus.register_device(0x000, 0x1FF, RAM(0x200))
        with pytest.raises(ValueError, match="overlaps"):
            bus.register_device(0x100, 0x2FF, RAM(0x200))

    def test_bus_devices_are_ordered_by_address(self):
        bus = Bus()
        high, low = RAM(0x100), RAM(0x100)
        bus.register_device(0x100, 0x1FF, high)
        bus.register_device(0x000, 0x0FF, low)
        assert [device for _, _, device in bus.get_devices()] == [low, high]
        bus.write(0x1FF, 0x5A)
        assert high.read(0xFF) == 0x5A

    def test_bus_access_str(self):
        bus = Bus()
        bus.register_device(0x000, 0xFFF, RAM(0x1000))
        bus.write(0x2A0, 0x07)
        bus.read(0x2A0)
        assert [str(a) for a in bus.get_and_clear_activity_log()] == ["WRITE 2A0 <- 07", "READ  2A0 -> 07"]
