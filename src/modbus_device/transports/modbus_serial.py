"""Modbus RTU serial session implementation.

This module provides the ModbusSerialSession class for point-to-point
communication with a device over a serial line (typically a USB-to-RS485
adapter) using Modbus RTU.

Serial ports support only ONE concurrent connection. Keep one session per
port.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .session import BaseModbusSession

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusSerialClient

_LOGGER = logging.getLogger(__name__)


class ModbusSerialSession(BaseModbusSession):
    """Modbus RTU serial session.

    The line defaults to 8 data bits, no parity and two stop bits.

    Example:
        session = ModbusSerialSession(port="/dev/ttyUSB0", baudrate=9600, unit_id=3)
        async with session:
            words = await session.read_words(AddressSpace.HOLDING, 100, 2)

    Note:
        Requires the `pymodbus` and `pyserial` packages to be installed.
    """

    transport_type: str = "modbus_serial"

    def __init__(
        self,
        port: str,
        baudrate: int = 19200,
        unit_id: int = 1,
        bytesize: int = 8,
        parity: str = "N",
        stopbits: int = 2,
        timeout: float = 10.0,
        retries: int = 0,
    ) -> None:
        """Initialize Modbus serial session.

        Args:
            port: Serial port path (e.g., /dev/ttyUSB0, COM3)
            baudrate: Serial baud rate (default 19200)
            unit_id: Modbus slave ID of the device (default 1)
            bytesize: Data bits per byte (default 8)
            parity: Parity setting - 'N' (none), 'E' (even), 'O' (odd)
            stopbits: Number of stop bits (default 2)
            timeout: Connection and operation timeout in seconds
            retries: Retries passed to the pymodbus client (default 0)
        """
        super().__init__(unit_id=unit_id, timeout=timeout, retries=retries)
        self._port = port
        self._baudrate = baudrate
        self._bytesize = bytesize
        self._parity = parity
        self._stopbits = stopbits

    @property
    def port(self) -> str:
        """Get the serial port path."""
        return self._port

    @property
    def baudrate(self) -> int:
        """Get the serial baud rate."""
        return self._baudrate

    @property
    def endpoint(self) -> str:
        """Describe the link as ``port@baudrate``."""
        return f"{self._port}@{self._baudrate}"

    def _create_client(self) -> AsyncModbusSerialClient:
        from pymodbus.client import AsyncModbusSerialClient

        _LOGGER.debug(
            "Creating Modbus serial client for %s (%d%s%d)",
            self.endpoint,
            self._bytesize,
            self._parity,
            self._stopbits,
        )
        return AsyncModbusSerialClient(
            port=self._port,
            baudrate=self._baudrate,
            bytesize=self._bytesize,
            parity=self._parity,
            stopbits=self._stopbits,
            timeout=self._timeout,
            retries=self._retries,
        )


__all__ = ["ModbusSerialSession"]
