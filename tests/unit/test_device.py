"""Tests for ModbusDevice name-based register access."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from modbus_device.device import BatchReadResult, ModbusDevice
from modbus_device.exceptions import (
    ConversionError,
    DeviceNotConnectedError,
    ProtocolExceptionError,
    RegisterNotFoundError,
    TransportFailureError,
)
from modbus_device.registers.catalog import RegisterCatalog
from modbus_device.registers.types import (
    AddressSpace,
    DataType,
    RegisterDefinition,
    RegisterValue,
)
from modbus_device.transports.modbus import ModbusTcpSession

if TYPE_CHECKING:
    from conftest import FakeSession


class TestBatchReads:
    """Tests for batched reads."""

    @pytest.mark.asyncio
    async def test_read_by_name_plans_windows(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test five names read in two round trips."""
        names = ["ProjectId", "Status", "Alarm", "Temperature", "TotalEnergy"]

        result = await device.read_input_registers_by_name(names)

        assert session.reads == [(AddressSpace.INPUT, 0, 4), (AddressSpace.INPUT, 10, 6)]
        assert dict(result) == {
            "ProjectId": RegisterValue(DataType.UINT32, 65538),
            "Status": RegisterValue(DataType.ENUM16, 7),
            "Alarm": RegisterValue(DataType.BOOLEAN, True),
            "Temperature": RegisterValue(DataType.FLOAT32, 25.0),
            "TotalEnergy": RegisterValue(DataType.UINT64, 100000),
        }
        assert result.skipped == {}

    @pytest.mark.asyncio
    async def test_unknown_names_skipped(
        self, device: ModbusDevice, session: FakeSession, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test unknown names are left out with a warning."""
        with caplog.at_level(logging.WARNING):
            result = await device.read_input_registers_by_name(["Offset", "Nope", "Version"])

        assert list(result) == ["Offset"]
        assert result["Offset"].value == -2
        assert set(result.skipped) == {"Nope", "Version"}
        assert result.skipped["Nope"] == "not found in input registers"
        assert "Nope does not exist in input space" in caplog.text
        assert session.reads == [(AddressSpace.INPUT, 20, 2)]

    @pytest.mark.asyncio
    async def test_repeated_names_read_once(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test a name given twice is read in a single window."""
        result = await device.read_input_registers_by_name(["Offset", "Offset", "Status", "Offset"])

        assert set(result) == {"Offset", "Status"}
        assert result["Offset"].value == -2
        assert result.skipped == {}
        assert session.reads == [(AddressSpace.INPUT, 2, 1), (AddressSpace.INPUT, 20, 2)]

    @pytest.mark.asyncio
    async def test_only_unknown_names_no_io(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test no round trip happens when nothing resolves."""
        result = await device.read_holding_registers_by_name(["Nope"])

        assert len(result) == 0
        assert session.reads == []

    @pytest.mark.asyncio
    async def test_empty_batch(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test an empty batch performs no I/O."""
        result = await device.read_registers([], AddressSpace.INPUT)

        assert isinstance(result, BatchReadResult)
        assert len(result) == 0
        assert session.reads == []

    @pytest.mark.asyncio
    async def test_malformed_register_dropped(
        self, session: FakeSession, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a register that fails to decode is dropped, siblings survive."""
        catalog = RegisterCatalog(
            input_registers=[
                RegisterDefinition("A", 0, 2, DataType.UINT32),
                RegisterDefinition("B", 2, 1, DataType.UINT16),
                RegisterDefinition("Broken", 3, 3, DataType.UINT32),
                RegisterDefinition("D", 6, 1, DataType.UINT16),
                RegisterDefinition("E", 7, 1, DataType.UINT16),
            ]
        )
        device = ModbusDevice(session, catalog)

        with caplog.at_level(logging.WARNING):
            result = await device.dump_input_registers()

        assert sorted(result) == ["A", "B", "D", "E"]
        assert "Broken" in result.skipped
        assert "Error converting register Broken" in caplog.text
        assert session.reads == [(AddressSpace.INPUT, 0, 8)]

    @pytest.mark.asyncio
    async def test_batch_matches_single_reads(self, device: ModbusDevice) -> None:
        """Test a batch returns what single reads return."""
        names = ["ProjectId", "Offset", "SerialBlob", "TotalEnergy"]

        batch = await device.read_input_registers_by_name(names)

        for name in names:
            assert batch[name] == await device.read_register_by_name(name)

    @pytest.mark.asyncio
    async def test_dump_input_skips_unreadable(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test dumps leave out read=false registers."""
        result = await device.dump_input_registers()

        assert "Hidden" not in result
        assert "Hidden" not in result.skipped
        assert len(result) == 8
        assert len(session.reads) == 5
        assert all(start != 100 for _, start, _ in session.reads)
        blob = result["SerialBlob"].value
        assert isinstance(blob, bytes)
        assert len(blob) == 66

    @pytest.mark.asyncio
    async def test_dump_holding(self, device: ModbusDevice) -> None:
        """Test a holding dump decodes every type."""
        result = await device.dump_holding_registers()

        assert result["Version"] == RegisterValue(DataType.UINT16, 3)
        assert result["ProductionRate[%]"] == RegisterValue(DataType.FLOAT32, 0.5)
        assert result["Setpoint"] == RegisterValue(DataType.INT32, 1500)
        assert result["Enabled"] == RegisterValue(DataType.BOOLEAN, False)
        assert result["Uuid"] == RegisterValue(DataType.UINT128, 9)
        assert result["Shared"] == RegisterValue(DataType.UINT32, 99)

    @pytest.mark.asyncio
    async def test_max_read_words(self, session: FakeSession, catalog: RegisterCatalog) -> None:
        """Test a lower request limit splits windows."""
        device = ModbusDevice(session, catalog, max_read_words=2)

        await device.read_input_registers_by_name(["ProjectId", "Status", "Alarm"])

        assert session.reads == [(AddressSpace.INPUT, 0, 2), (AddressSpace.INPUT, 2, 2)]

    @pytest.mark.asyncio
    async def test_transport_failure_aborts_batch(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test link failures propagate instead of being skipped."""
        session.read_error = TransportFailureError("link down")

        with pytest.raises(TransportFailureError):
            await device.dump_input_registers()

    @pytest.mark.asyncio
    async def test_protocol_error_aborts_batch(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test device rejections propagate."""
        session.read_error = ProtocolExceptionError("rejected", exception_code=2)

        with pytest.raises(ProtocolExceptionError):
            await device.read_input_registers_by_name(["ProjectId"])


class TestSingleReads:
    """Tests for single-register reads."""

    @pytest.mark.asyncio
    async def test_read_register_by_name_input(self, device: ModbusDevice) -> None:
        """Test input names resolve to the input space."""
        value = await device.read_register_by_name("ProjectId")
        assert value == RegisterValue(DataType.UINT32, 65538)

    @pytest.mark.asyncio
    async def test_read_register_by_name_holding(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test holding-only names resolve to the holding space."""
        value = await device.read_register_by_name("Setpoint")

        assert value == RegisterValue(DataType.INT32, 1500)
        assert session.reads == [(AddressSpace.HOLDING, 3, 2)]

    @pytest.mark.asyncio
    async def test_shared_name_prefers_input(
        self, device: ModbusDevice, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a name in both spaces reads the input register."""
        with caplog.at_level(logging.WARNING):
            value = await device.read_register_by_name("Shared")

        assert value == RegisterValue(DataType.UINT16, 42)
        assert "exists in both input and holding spaces" in caplog.text

    @pytest.mark.asyncio
    async def test_unknown_name(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test unknown names raise without I/O."""
        with pytest.raises(RegisterNotFoundError, match="Register Nope was not found"):
            await device.read_register_by_name("Nope")
        assert session.reads == []

    @pytest.mark.asyncio
    async def test_decode_failure_raises(self, session: FakeSession) -> None:
        """Test single reads raise instead of dropping."""
        broken = RegisterDefinition("Broken", 0, 3, DataType.UINT32)
        device = ModbusDevice(session, RegisterCatalog(holding_registers=[broken]))

        with pytest.raises(ConversionError):
            await device.read_holding_register(broken)

    def test_definition_lookups(self, device: ModbusDevice) -> None:
        """Test catalog lookups through the device."""
        assert device.get_input_register_by_name("Status") is not None
        assert device.get_input_register_by_name("Version") is None
        assert device.get_holding_register_by_name("Version") is not None


class TestWrites:
    """Tests for holding register writes."""

    @pytest.mark.asyncio
    async def test_write_float(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test a float write lands at the register address."""
        await device.write_register_by_name("ProductionRate[%]", 0.52)

        assert len(session.writes) == 1
        address, words = session.writes[0]
        assert address == 1
        assert len(words) == 2

        value = await device.read_register_by_name("ProductionRate[%]")
        assert value.value == pytest.approx(0.52, rel=1e-6)

    @pytest.mark.asyncio
    async def test_write_register_value(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test writing a tagged value."""
        await device.write_holding_register_by_name("Setpoint", RegisterValue(DataType.INT32, -7))

        assert session.writes == [(3, [0xFFFF, 0xFFF9])]

    @pytest.mark.asyncio
    async def test_write_input_only_name(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test input registers cannot be written."""
        with pytest.raises(RegisterNotFoundError):
            await device.write_register_by_name("ProjectId", 1)
        assert session.writes == []

    @pytest.mark.asyncio
    async def test_write_wrong_python_type(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test bare values must fit the register's type."""
        with pytest.raises(ConversionError):
            await device.write_register_by_name("Enabled", 1)
        assert session.writes == []

    @pytest.mark.asyncio
    async def test_write_mismatched_tag(
        self, device: ModbusDevice, session: FakeSession
    ) -> None:
        """Test tagged values must carry the register's type."""
        with pytest.raises(ConversionError):
            await device.write_register_by_name("Setpoint", RegisterValue(DataType.UINT16, 1))
        assert session.writes == []

    @pytest.mark.asyncio
    async def test_write_out_of_range(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test values that do not fit are rejected before I/O."""
        with pytest.raises(ConversionError):
            await device.write_register_by_name("Version", 70000)
        assert session.writes == []

    @pytest.mark.asyncio
    async def test_write_length_mismatch(self, session: FakeSession) -> None:
        """Test the encoded width must equal the declared length."""
        odd = RegisterDefinition("Odd", 0, 3, DataType.UINT32)
        device = ModbusDevice(session, RegisterCatalog(holding_registers=[odd]))

        with pytest.raises(ConversionError, match="3 words"):
            await device.write_register_by_name("Odd", 1)
        assert session.writes == []

    @pytest.mark.asyncio
    async def test_write_boolean(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test booleans write 1 and 0."""
        await device.write_register_by_name("Enabled", True)
        await device.write_register_by_name("Enabled", False)

        assert session.writes == [(5, [1]), (5, [0])]


class TestConnection:
    """Tests for connection handling."""

    @pytest.mark.asyncio
    async def test_context_manager(self, device: ModbusDevice, session: FakeSession) -> None:
        """Test the device connects and disconnects its session."""
        await session.disconnect()
        assert device.is_connected is False

        async with device:
            assert device.is_connected is True
        assert device.is_connected is False

    @pytest.mark.asyncio
    async def test_not_connected_no_io(self, catalog: RegisterCatalog) -> None:
        """Test operations on an unconnected device never touch the network."""
        with patch("pymodbus.client.AsyncModbusTcpClient") as mock_client_class:
            device = ModbusDevice(ModbusTcpSession(host="192.0.2.1"), catalog)

            with pytest.raises(DeviceNotConnectedError):
                await device.read_input_registers_by_name(["ProjectId"])
            with pytest.raises(DeviceNotConnectedError):
                await device.write_register_by_name("Version", 1)

            mock_client_class.assert_not_called()
