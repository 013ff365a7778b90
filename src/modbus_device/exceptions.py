"""Exceptions raised by modbus_device.

All exceptions inherit from :class:`ModbusDeviceError` so callers can use a
single ``except ModbusDeviceError`` to catch connection, transport, protocol
and conversion failures alike.

The transport-facing classes fall into three groups that the device
abstraction layer (:mod:`modbus_device.industrial`) must tell apart:

- device not reachable: :class:`TransportConnectionError`,
  :class:`TransportFailureError`
- request rejected: :class:`ProtocolExceptionError`
- conversion error: :class:`ConversionError`
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modbus_device.registers.types import AddressSpace

# Modbus exception codes (Modbus application protocol, section 7)
EXCEPTION_CODE_NAMES: dict[int, str] = {
    0x01: "illegal function",
    0x02: "illegal data address",
    0x03: "illegal data value",
    0x04: "server device failure",
    0x05: "acknowledge",
    0x06: "server device busy",
    0x08: "memory parity error",
    0x0A: "gateway path unavailable",
    0x0B: "gateway target device failed to respond",
}


class ModbusDeviceError(Exception):
    """Base exception for all modbus_device errors."""


class DeviceNotConnectedError(ModbusDeviceError):
    """Operation attempted before a connection was established."""

    def __init__(self, message: str = "Device is not connected") -> None:
        super().__init__(message)


class TransportConnectionError(ModbusDeviceError):
    """Failed to open the connection to the device."""


class TransportFailureError(ModbusDeviceError):
    """I/O failure on an established link (broken pipe, reset, timeout)."""

    def __init__(
        self,
        message: str,
        *,
        space: AddressSpace | None = None,
        address: int | None = None,
        count: int | None = None,
    ) -> None:
        self.space = space
        self.address = address
        self.count = count
        super().__init__(message)


class ProtocolExceptionError(ModbusDeviceError):
    """The device answered the request with a Modbus exception."""

    def __init__(
        self,
        message: str,
        *,
        exception_code: int | None = None,
        space: AddressSpace | None = None,
        address: int | None = None,
        count: int | None = None,
    ) -> None:
        """Initialize with the offending request context.

        Args:
            message: Human readable description
            exception_code: Modbus exception code from the reply, if any
            space: Address space of the rejected request
            address: Starting word address of the rejected request
            count: Number of words requested or written
        """
        self.exception_code = exception_code
        self.space = space
        self.address = address
        self.count = count
        super().__init__(message)

    @property
    def exception_name(self) -> str | None:
        """Get the textual name of the Modbus exception code."""
        if self.exception_code is None:
            return None
        return EXCEPTION_CODE_NAMES.get(self.exception_code, "unknown exception")


class ConversionError(ModbusDeviceError):
    """Words could not be converted to or from a typed value."""

    def __init__(self, message: str = "Conversion error") -> None:
        super().__init__(message)


class RegisterNotFoundError(ModbusDeviceError):
    """A register name is absent from the catalog."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Register {name} was not found")


class DefinitionError(ModbusDeviceError, ValueError):
    """A register definition is invalid."""


__all__ = [
    "EXCEPTION_CODE_NAMES",
    "ConversionError",
    "DefinitionError",
    "DeviceNotConnectedError",
    "ModbusDeviceError",
    "ProtocolExceptionError",
    "RegisterNotFoundError",
    "TransportConnectionError",
    "TransportFailureError",
]
