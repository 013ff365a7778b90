"""Factory functions for creating session instances.

Example:
    # Modbus TCP
    session = create_tcp_session(host="192.168.1.100")

    # Modbus RTU over a serial line
    session = create_serial_session(port="/dev/ttyUSB0", baudrate=9600, unit_id=3)

    # From stored configuration
    session = create_session_from_config(TransportConfig.from_dict(data))
"""

from __future__ import annotations

from .config import TransportConfig, TransportType
from .modbus import ModbusTcpSession
from .modbus_serial import ModbusSerialSession
from .session import BaseModbusSession


def create_tcp_session(
    host: str,
    *,
    port: int = 502,
    unit_id: int = 1,
    timeout: float = 10.0,
) -> ModbusTcpSession:
    """Create a Modbus TCP session.

    Args:
        host: Device IP address or hostname
        port: Modbus TCP port (default: 502)
        unit_id: Modbus unit ID (default: 1)
        timeout: Operation timeout in seconds (default: 10.0)

    Returns:
        ModbusTcpSession instance, not yet connected
    """
    return ModbusTcpSession(host=host, port=port, unit_id=unit_id, timeout=timeout)


def create_serial_session(
    port: str,
    *,
    baudrate: int = 19200,
    unit_id: int = 1,
    timeout: float = 10.0,
) -> ModbusSerialSession:
    """Create a Modbus RTU serial session.

    Args:
        port: Serial device path
        baudrate: Serial baud rate (default: 19200)
        unit_id: Modbus slave ID (default: 1)
        timeout: Operation timeout in seconds (default: 10.0)

    Returns:
        ModbusSerialSession instance, not yet connected
    """
    return ModbusSerialSession(port=port, baudrate=baudrate, unit_id=unit_id, timeout=timeout)


def create_session_from_config(config: TransportConfig) -> BaseModbusSession:
    """Create a session from a TransportConfig.

    The configuration is validated first.

    Raises:
        ValueError: If the configuration is invalid
    """
    config.validate()

    if config.transport_type == TransportType.MODBUS_SERIAL:
        return ModbusSerialSession(
            port=config.serial_port,
            baudrate=config.baudrate,
            unit_id=config.unit_id,
            bytesize=config.bytesize,
            parity=config.parity,
            stopbits=config.stopbits,
            timeout=config.timeout,
        )
    return ModbusTcpSession(
        host=config.host,
        port=config.port,
        unit_id=config.unit_id,
        timeout=config.timeout,
    )


__all__ = [
    "create_serial_session",
    "create_session_from_config",
    "create_tcp_session",
]
