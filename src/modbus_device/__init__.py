"""Named, typed register access for Modbus TCP and RTU devices.

Usage:
    from modbus_device import ModbusDevice, RegisterCatalog
    from modbus_device.transports import create_tcp_session

    catalog = RegisterCatalog.from_files("input_registers.json", "holding_registers.json")
    async with ModbusDevice(create_tcp_session("192.168.1.100"), catalog) as device:
        values = await device.dump_input_registers()
        counter = await device.read_register_by_name("Counter")
        await device.write_register_by_name("ProductionRate[%]", 0.52)
"""

from __future__ import annotations

from .exceptions import (
    ConversionError,
    DefinitionError,
    DeviceNotConnectedError,
    ModbusDeviceError,
    ProtocolExceptionError,
    RegisterNotFoundError,
    TransportConnectionError,
    TransportFailureError,
)
from .registers import (
    AddressSpace,
    DataType,
    RegisterCatalog,
    RegisterDefinition,
    RegisterValue,
    load_definitions,
)
from .codec import decode, encode
from .planner import MAX_READ_WORDS, ReadWindow, plan_windows
from .device import BatchReadResult, ModbusDevice

__version__ = "0.1.0"
__all__ = [
    "ModbusDevice",
    "BatchReadResult",
    # Registers
    "AddressSpace",
    "DataType",
    "RegisterCatalog",
    "RegisterDefinition",
    "RegisterValue",
    "load_definitions",
    # Codec and planning
    "decode",
    "encode",
    "MAX_READ_WORDS",
    "ReadWindow",
    "plan_windows",
    # Exceptions
    "ModbusDeviceError",
    "ConversionError",
    "DefinitionError",
    "DeviceNotConnectedError",
    "ProtocolExceptionError",
    "RegisterNotFoundError",
    "TransportConnectionError",
    "TransportFailureError",
]
