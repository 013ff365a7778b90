"""Transport configuration.

This module provides the TransportConfig dataclass for describing which
link a session uses, in a uniform way, with serialization to/from
dictionaries for storage.

Example:
    # Modbus TCP
    config = TransportConfig(
        transport_type=TransportType.MODBUS_TCP,
        host="192.168.1.100",
    )
    config.validate()

    # Serialize to dict for storage
    data = config.to_dict()

    # Restore from dict
    restored = TransportConfig.from_dict(data)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

_PARITIES = ("N", "E", "O")


class TransportType(StrEnum):
    """Transport type enumeration.

    String enum for easy serialization and comparison.
    """

    # Network endpoint (host:port)
    MODBUS_TCP = "modbus_tcp"

    # Serial device path plus baud rate and slave id
    MODBUS_SERIAL = "modbus_serial"


@dataclass
class TransportConfig:
    """Configuration for a single device link.

    Attributes:
        transport_type: MODBUS_TCP or MODBUS_SERIAL
        host: IP address or hostname (TCP only)
        port: TCP port (default 502, TCP only)
        serial_port: Serial device path (serial only)
        baudrate: Serial baud rate (default 19200, serial only)
        unit_id: Modbus unit/slave ID (default 1)
        timeout: Connection and operation timeout in seconds (default 10.0)
        bytesize: Serial data bits (default 8)
        parity: Serial parity, 'N', 'E' or 'O' (default 'N')
        stopbits: Serial stop bits (default 2)
    """

    transport_type: TransportType
    host: str = ""
    port: int = 502
    serial_port: str = ""
    baudrate: int = 19200
    unit_id: int = 1
    timeout: float = 10.0
    bytesize: int = 8
    parity: str = "N"
    stopbits: int = 2

    def validate(self) -> None:
        """Validate configuration completeness for the transport type.

        Raises:
            ValueError: If configuration is invalid
        """
        if not 0 <= self.unit_id <= 247:
            raise ValueError("unit_id must be between 0 and 247")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

        if self.transport_type == TransportType.MODBUS_TCP:
            if not self.host:
                raise ValueError("host required for MODBUS_TCP transport")
            if not 0 < self.port <= 65535:
                raise ValueError("port must be between 1 and 65535")
        elif self.transport_type == TransportType.MODBUS_SERIAL:
            if not self.serial_port:
                raise ValueError("serial_port required for MODBUS_SERIAL transport")
            if self.baudrate <= 0:
                raise ValueError("baudrate must be positive")
            if self.parity not in _PARITIES:
                raise ValueError(f"parity must be one of {', '.join(_PARITIES)}")
            if self.stopbits not in (1, 2):
                raise ValueError("stopbits must be 1 or 2")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization.

        Returns:
            Dictionary with all configuration values, suitable for JSON
        """
        return {
            "transport_type": self.transport_type.value,
            "host": self.host,
            "port": self.port,
            "serial_port": self.serial_port,
            "baudrate": self.baudrate,
            "unit_id": self.unit_id,
            "timeout": self.timeout,
            "bytesize": self.bytesize,
            "parity": self.parity,
            "stopbits": self.stopbits,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransportConfig:
        """Create configuration from dictionary.

        Args:
            data: Dictionary with configuration values (from to_dict())

        Returns:
            TransportConfig instance with values from dictionary
        """
        return cls(
            transport_type=TransportType(data.get("transport_type", "modbus_tcp")),
            host=data.get("host", ""),
            port=data.get("port", 502),
            serial_port=data.get("serial_port", ""),
            baudrate=data.get("baudrate", 19200),
            unit_id=data.get("unit_id", 1),
            timeout=data.get("timeout", 10.0),
            bytesize=data.get("bytesize", 8),
            parity=data.get("parity", "N"),
            stopbits=data.get("stopbits", 2),
        )


__all__ = [
    "TransportConfig",
    "TransportType",
]
