"""Shared fixtures for live-device integration tests."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from dotenv import load_dotenv

from modbus_device import ModbusDevice, RegisterCatalog
from modbus_device.transports import create_tcp_session

# Load .env file before running tests
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Device endpoint from environment
MODBUS_DEVICE_HOST = os.getenv("MODBUS_DEVICE_HOST")
MODBUS_DEVICE_PORT = int(os.getenv("MODBUS_DEVICE_PORT", "502"))
MODBUS_DEVICE_UNIT_ID = int(os.getenv("MODBUS_DEVICE_UNIT_ID", "1"))
MODBUS_DEVICE_INPUT_DEFS = os.getenv("MODBUS_DEVICE_INPUT_DEFS")
MODBUS_DEVICE_HOLDING_DEFS = os.getenv("MODBUS_DEVICE_HOLDING_DEFS")


@pytest.fixture
async def live_device() -> AsyncGenerator[ModbusDevice, None]:
    """Connected device built from the environment, or skip."""
    if not MODBUS_DEVICE_HOST:
        pytest.skip("MODBUS_DEVICE_HOST is not set")
    if not MODBUS_DEVICE_INPUT_DEFS and not MODBUS_DEVICE_HOLDING_DEFS:
        pytest.skip("No register definitions configured")

    catalog = RegisterCatalog.from_files(MODBUS_DEVICE_INPUT_DEFS, MODBUS_DEVICE_HOLDING_DEFS)
    session = create_tcp_session(
        MODBUS_DEVICE_HOST,
        port=MODBUS_DEVICE_PORT,
        unit_id=MODBUS_DEVICE_UNIT_ID,
    )
    async with ModbusDevice(session, catalog) as device:
        yield device
