"""Modbus TCP session implementation.

This module provides the ModbusTcpSession class for talking to a device
over Modbus TCP, either directly or through an RS485-to-Ethernet gateway.

IMPORTANT: Single-Client Limitation
------------------------------------
Many Modbus TCP gateways serve only ONE connection at a time. Running
several clients against the same gateway causes transaction ID
desynchronization and intermittent timeouts. Keep one session per device.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .session import BaseModbusSession

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusTcpClient

_LOGGER = logging.getLogger(__name__)


class ModbusTcpSession(BaseModbusSession):
    """Modbus TCP session.

    Example:
        session = ModbusTcpSession(host="192.168.1.100")
        async with session:
            words = await session.read_words(AddressSpace.INPUT, 0, 10)

    Note:
        Requires the `pymodbus` package to be installed.
    """

    transport_type: str = "modbus_tcp"

    def __init__(
        self,
        host: str,
        port: int = 502,
        unit_id: int = 1,
        timeout: float = 10.0,
        retries: int = 0,
    ) -> None:
        """Initialize Modbus TCP session.

        Args:
            host: IP address or hostname of the device or gateway
            port: TCP port (default 502 for Modbus)
            unit_id: Modbus unit/slave ID (default 1)
            timeout: Connection and operation timeout in seconds
            retries: Retries passed to the pymodbus client (default 0)
        """
        super().__init__(unit_id=unit_id, timeout=timeout, retries=retries)
        self._host = host
        self._port = port

    @property
    def host(self) -> str:
        """Get the device host."""
        return self._host

    @property
    def port(self) -> int:
        """Get the device TCP port."""
        return self._port

    @property
    def endpoint(self) -> str:
        """Describe the link as ``host:port``."""
        return f"{self._host}:{self._port}"

    def _create_client(self) -> AsyncModbusTcpClient:
        # Imported here so tests can patch pymodbus.client
        from pymodbus.client import AsyncModbusTcpClient

        _LOGGER.debug("Creating Modbus TCP client for %s", self.endpoint)
        return AsyncModbusTcpClient(
            host=self._host,
            port=self._port,
            timeout=self._timeout,
            retries=self._retries,
        )


__all__ = ["ModbusTcpSession"]
