"""Modbus sessions over TCP and serial links.

Usage:
    from modbus_device.transports import create_tcp_session

    session = create_tcp_session(host="192.168.1.100")
    async with session:
        words = await session.read_words(AddressSpace.INPUT, 0, 10)
"""

from __future__ import annotations

from .config import TransportConfig, TransportType
from .factory import create_serial_session, create_session_from_config, create_tcp_session
from .modbus import ModbusTcpSession
from .modbus_serial import ModbusSerialSession
from .session import BaseModbusSession, Connected, Disconnected, SessionState

__all__ = [
    # Factory functions (recommended)
    "create_tcp_session",
    "create_serial_session",
    "create_session_from_config",
    # Sessions
    "BaseModbusSession",
    "ModbusTcpSession",
    "ModbusSerialSession",
    # State
    "Connected",
    "Disconnected",
    "SessionState",
    # Configuration
    "TransportConfig",
    "TransportType",
]
