"""Register definitions, catalog and definition loader.

- types: address spaces, data types, definitions and typed values
- catalog: immutable per-address-space name lookup
- loader: JSON register export parser
"""

from modbus_device.registers.catalog import RegisterCatalog
from modbus_device.registers.loader import (
    load_definitions,
    parse_definitions,
    parse_register,
)
from modbus_device.registers.types import (
    MAX_ADDRESS,
    SIZED_BYTE_LENGTH,
    AddressSpace,
    DataType,
    RegisterDefinition,
    RegisterValue,
)

__all__ = [
    "MAX_ADDRESS",
    "SIZED_BYTE_LENGTH",
    "AddressSpace",
    "DataType",
    "RegisterCatalog",
    "RegisterDefinition",
    "RegisterValue",
    "load_definitions",
    "parse_definitions",
    "parse_register",
]
