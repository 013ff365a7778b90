"""Generic industrial device interface backed by ModbusDevice.

Device-management frameworks talk to every field device through the small
:class:`IndustrialDevice` protocol and a five-class error taxonomy. This
module defines both and adapts :class:`~modbus_device.device.ModbusDevice`
to them.

Error translation (the source error is kept as ``__cause__``):

=================================  =============================
modbus_device error                industrial error
=================================  =============================
DeviceNotConnectedError            DeviceNotConnectedError
TransportConnectionError           DeviceNotAccessibleError
TransportFailureError              DeviceNotAccessibleError
ProtocolExceptionError             RequestError
ConversionError                    ConversionError
RegisterNotFoundError              RegisterNotFoundError
=================================  =============================
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

from modbus_device import exceptions as core
from modbus_device.device import ModbusDevice
from modbus_device.registers.types import AddressSpace, RegisterValue

_LOGGER = logging.getLogger(__name__)


class IndustrialDeviceError(Exception):
    """Base exception of the industrial device interface."""


class RequestError(IndustrialDeviceError):
    """The device rejected or could not serve a request."""


class DeviceNotAccessibleError(IndustrialDeviceError):
    """The device cannot be reached."""


class ConversionError(IndustrialDeviceError):
    """A value could not be converted."""


class DeviceNotConnectedError(IndustrialDeviceError):
    """The device is not connected."""


class RegisterNotFoundError(IndustrialDeviceError):
    """The requested register does not exist."""


_TRANSLATIONS: tuple[tuple[type[core.ModbusDeviceError], type[IndustrialDeviceError]], ...] = (
    (core.DeviceNotConnectedError, DeviceNotConnectedError),
    (core.TransportConnectionError, DeviceNotAccessibleError),
    (core.TransportFailureError, DeviceNotAccessibleError),
    (core.ProtocolExceptionError, RequestError),
    (core.ConversionError, ConversionError),
    (core.RegisterNotFoundError, RegisterNotFoundError),
)


def translate_error(err: core.ModbusDeviceError) -> IndustrialDeviceError:
    """Map a modbus_device error onto the industrial error taxonomy.

    Errors outside the table (such as DefinitionError) become RequestError.
    """
    for core_cls, industrial_cls in _TRANSLATIONS:
        if isinstance(err, core_cls):
            translated = industrial_cls(str(err))
            break
    else:
        translated = RequestError(str(err))
    translated.__cause__ = err
    return translated


@asynccontextmanager
async def _translated() -> AsyncIterator[None]:
    try:
        yield
    except core.ModbusDeviceError as err:
        raise translate_error(err) from err


class IndustrialDevice(Protocol):
    """Interface a device-management framework uses for any field device."""

    async def connect(self) -> None:
        """Connect to the device."""
        ...

    async def dump_registers(self) -> dict[str, RegisterValue]:
        """Read every readable value of the device."""
        ...

    async def read_register_by_name(self, name: str) -> RegisterValue:
        """Read one named value."""
        ...

    async def write_register_by_name(
        self, name: str, value: RegisterValue | int | float | bool | bytes
    ) -> None:
        """Write one named value."""
        ...


class ModbusIndustrialDevice:
    """IndustrialDevice implementation for a Modbus device.

    Example:
        device = ModbusIndustrialDevice(ModbusDevice(session, catalog))
        await device.connect()
        values = await device.dump_registers()
    """

    def __init__(self, device: ModbusDevice) -> None:
        self._device = device

    @property
    def device(self) -> ModbusDevice:
        """Get the wrapped ModbusDevice."""
        return self._device

    async def connect(self) -> None:
        async with _translated():
            await self._device.connect()

    async def dump_registers(self) -> dict[str, RegisterValue]:
        """Read every readable register of both address spaces.

        When a name exists in both spaces the input value is kept.
        """
        async with _translated():
            holding = await self._device.dump_registers(AddressSpace.HOLDING)
            inputs = await self._device.dump_registers(AddressSpace.INPUT)

        values = dict(holding)
        values.update(inputs)
        skipped = {**holding.skipped, **inputs.skipped}
        if skipped:
            _LOGGER.warning(
                "Dump left out %d registers: %s", len(skipped), ", ".join(sorted(skipped))
            )
        return values

    async def read_register_by_name(self, name: str) -> RegisterValue:
        async with _translated():
            return await self._device.read_register_by_name(name)

    async def write_register_by_name(
        self, name: str, value: RegisterValue | int | float | bool | bytes
    ) -> None:
        async with _translated():
            await self._device.write_register_by_name(name, value)


__all__ = [
    "ConversionError",
    "DeviceNotAccessibleError",
    "DeviceNotConnectedError",
    "IndustrialDevice",
    "IndustrialDeviceError",
    "ModbusIndustrialDevice",
    "RegisterNotFoundError",
    "RequestError",
    "translate_error",
]
