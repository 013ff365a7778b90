"""Pytest configuration and fixtures for modbus_device tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from modbus_device.device import ModbusDevice
from modbus_device.exceptions import DeviceNotConnectedError
from modbus_device.registers.catalog import RegisterCatalog
from modbus_device.registers.types import AddressSpace

FIXTURES_DIR = Path(__file__).parent / "fixtures"
INPUT_DEFS = FIXTURES_DIR / "input_registers.json"
HOLDING_DEFS = FIXTURES_DIR / "holding_registers.json"

# Word images of the fixture device, keyed by start address
INPUT_WORDS: dict[int, list[int]] = {
    0: [0x0001, 0x0002],  # ProjectId = 65538
    2: [7],  # Status
    3: [0xFFFF],  # Alarm
    10: [0x41C8, 0x0000],  # Temperature = 25.0
    12: [0x0000, 0x0000, 0x0001, 0x86A0],  # TotalEnergy = 100000
    20: [0xFFFF, 0xFFFE],  # Offset = -2
    30: list(range(0x0100, 0x0100 + 33)),  # SerialBlob
    100: [5],  # Hidden
    200: [42],  # Shared (input)
}

HOLDING_WORDS: dict[int, list[int]] = {
    0: [3],  # Version
    1: [0x3F00, 0x0000],  # ProductionRate[%] = 0.5
    3: [0x0000, 0x05DC],  # Setpoint = 1500
    5: [0x0000],  # Enabled
    10: [0, 0, 0, 0, 0, 0, 0, 9],  # Uuid = 9
    200: [0x0000, 0x0063],  # Shared (holding) = 99
}


class FakeSession:
    """In-memory stand-in for a Modbus session.

    Records every raw read and write so tests can assert on round trips.
    """

    def __init__(self, *, connected: bool = True) -> None:
        self.connected = connected
        self.memory: dict[AddressSpace, dict[int, int]] = {
            AddressSpace.INPUT: {},
            AddressSpace.HOLDING: {},
        }
        self.reads: list[tuple[AddressSpace, int, int]] = []
        self.writes: list[tuple[int, list[int]]] = []
        self.read_error: Exception | None = None
        self.connect_error: Exception | None = None

    @property
    def is_connected(self) -> bool:
        return self.connected

    def load(self, space: AddressSpace, image: dict[int, list[int]]) -> None:
        for start, words in image.items():
            for offset, word in enumerate(words):
                self.memory[space][start + offset] = word

    async def connect(self) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def read_words(self, space: AddressSpace, address: int, count: int) -> list[int]:
        if not self.connected:
            raise DeviceNotConnectedError()
        if self.read_error is not None:
            raise self.read_error
        self.reads.append((space, address, count))
        return [self.memory[space].get(a, 0) for a in range(address, address + count)]

    async def write_words(self, address: int, words: list[int]) -> None:
        if not self.connected:
            raise DeviceNotConnectedError()
        self.writes.append((address, list(words)))
        for offset, word in enumerate(words):
            self.memory[AddressSpace.HOLDING][address + offset] = word


@pytest.fixture
def catalog() -> RegisterCatalog:
    """Catalog loaded from the JSON fixtures."""
    return RegisterCatalog.from_files(INPUT_DEFS, HOLDING_DEFS)


@pytest.fixture
def session() -> FakeSession:
    """Connected fake session holding the fixture device's words."""
    fake = FakeSession()
    fake.load(AddressSpace.INPUT, INPUT_WORDS)
    fake.load(AddressSpace.HOLDING, HOLDING_WORDS)
    return fake


@pytest.fixture
def device(session: FakeSession, catalog: RegisterCatalog) -> ModbusDevice:
    """ModbusDevice over the fake session and fixture catalog."""
    return ModbusDevice(session, catalog)
