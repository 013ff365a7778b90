"""Name-based register access on top of a Modbus session.

ModbusDevice ties the pieces together::

    names -> RegisterCatalog -> plan_windows -> session.read_words -> codec.decode

Batch reads are tolerant: names missing from the catalog and registers
whose words cannot be decoded are left out of the result and recorded in
``BatchReadResult.skipped`` (and logged), so one bad register never hides
its siblings. Transport and protocol failures still abort the batch.

Single-register operations are strict: an unknown name raises
RegisterNotFoundError and a failed decode raises ConversionError.

Example:
    catalog = RegisterCatalog.from_files("input.json", "holding.json")
    device = ModbusDevice(create_tcp_session("192.168.1.100"), catalog)
    await device.connect()

    values = await device.read_input_registers_by_name(["ProjectId", "Counter"])
    await device.write_register_by_name("ProductionRate[%]", 0.52)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Protocol

from modbus_device import codec
from modbus_device.exceptions import ConversionError, RegisterNotFoundError
from modbus_device.planner import MAX_READ_WORDS, ReadWindow, plan_windows
from modbus_device.registers.catalog import RegisterCatalog
from modbus_device.registers.types import AddressSpace, RegisterDefinition, RegisterValue

_LOGGER = logging.getLogger(__name__)


class RegisterSession(Protocol):
    """Word-level link the device reads and writes through.

    BaseModbusSession and its TCP/serial subclasses implement this.
    """

    @property
    def is_connected(self) -> bool:
        """Check whether the link is open."""
        ...

    async def connect(self) -> None:
        """Open the link."""
        ...

    async def disconnect(self) -> None:
        """Close the link."""
        ...

    async def read_words(self, space: AddressSpace, address: int, count: int) -> list[int]:
        """Read words from input or holding registers."""
        ...

    async def write_words(self, address: int, words: list[int]) -> None:
        """Write words to holding registers."""
        ...


class BatchReadResult(Mapping[str, RegisterValue]):
    """Values read by a batch, plus the names that were left out.

    Behaves as a read-only ``name -> RegisterValue`` mapping.

    Attributes:
        skipped: Name to reason for every requested register that is not in
            the mapping (unknown name or failed decode).
    """

    def __init__(
        self,
        values: Mapping[str, RegisterValue] | None = None,
        skipped: Mapping[str, str] | None = None,
    ) -> None:
        self._values = dict(values or {})
        self.skipped: dict[str, str] = dict(skipped or {})

    def merge(self, other: BatchReadResult) -> None:
        """Add another batch's values and skipped names to this one."""
        self._values.update(other._values)
        self.skipped.update(other.skipped)

    def __getitem__(self, name: str) -> RegisterValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"BatchReadResult(values={self._values!r}, skipped={self.skipped!r})"


class ModbusDevice:
    """Named, typed register access for one Modbus device.

    The device owns its session and catalog for its whole lifetime.
    Windows are read one after another, never concurrently.
    """

    def __init__(
        self,
        session: RegisterSession,
        catalog: RegisterCatalog,
        *,
        max_read_words: int = MAX_READ_WORDS,
    ) -> None:
        """Initialize the device.

        Args:
            session: Word-level link to the device (not yet connected)
            catalog: Register definitions for both address spaces
            max_read_words: Maximum words per read request (default 125)
        """
        self._session = session
        self._catalog = catalog
        self._max_read_words = max_read_words

    @property
    def session(self) -> RegisterSession:
        """Get the underlying session."""
        return self._session

    @property
    def catalog(self) -> RegisterCatalog:
        """Get the register catalog."""
        return self._catalog

    @property
    def is_connected(self) -> bool:
        """Check whether the session is connected."""
        return self._session.is_connected

    async def connect(self) -> None:
        """Connect the underlying session."""
        await self._session.connect()

    async def disconnect(self) -> None:
        """Disconnect the underlying session."""
        await self._session.disconnect()

    async def __aenter__(self) -> ModbusDevice:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.disconnect()

    # ------------------------------------------------------------------
    # Catalog access
    # ------------------------------------------------------------------

    def get_input_register_by_name(self, name: str) -> RegisterDefinition | None:
        """Get an input register definition, or None."""
        return self._catalog.lookup(AddressSpace.INPUT, name)

    def get_holding_register_by_name(self, name: str) -> RegisterDefinition | None:
        """Get a holding register definition, or None."""
        return self._catalog.lookup(AddressSpace.HOLDING, name)

    # ------------------------------------------------------------------
    # Batched reads
    # ------------------------------------------------------------------

    async def _read_window(self, window: ReadWindow, space: AddressSpace) -> BatchReadResult:
        _LOGGER.debug("Reading %s range %d:%d", space.value, window.start, window.count)
        words = await self._session.read_words(space, window.start, window.count)

        values: dict[str, RegisterValue] = {}
        skipped: dict[str, str] = {}
        for reg in window.registers:
            try:
                reg_words = window.slice_words(reg, words)
                values[reg.name] = codec.decode(reg_words, reg.data_type)
            except ConversionError as err:
                _LOGGER.warning("Error converting register %s, dropping it (%s)", reg.name, err)
                skipped[reg.name] = str(err)
        return BatchReadResult(values, skipped)

    async def read_registers(
        self,
        registers: Iterable[RegisterDefinition],
        space: AddressSpace,
    ) -> BatchReadResult:
        """Read a set of registers with as few round trips as possible.

        Args:
            registers: Definitions from a single address space
            space: The address space the definitions belong to

        Returns:
            Decoded values; registers whose decode failed are in ``skipped``

        Raises:
            DeviceNotConnectedError: If the session is not connected
            TransportFailureError: If the link fails during any window
            ProtocolExceptionError: If the device rejects any window
        """
        windows = plan_windows(registers, self._max_read_words)
        result = BatchReadResult()
        if not windows:
            _LOGGER.debug("There is no register to read")
            return result

        for window in windows:
            result.merge(await self._read_window(window, space))
        return result

    async def read_registers_by_name(
        self,
        names: Iterable[str],
        space: AddressSpace,
    ) -> BatchReadResult:
        """Read registers by name from one address space.

        Names missing from the catalog are skipped with a warning. A name given
        more than once is read once.
        """
        registers: list[RegisterDefinition] = []
        skipped: dict[str, str] = {}
        for name in dict.fromkeys(names):
            reg = self._catalog.lookup(space, name)
            if reg is None:
                _LOGGER.warning(
                    "Register %s does not exist in %s space, skipping it", name, space.value
                )
                skipped[name] = f"not found in {space.value} registers"
                continue
            registers.append(reg)

        result = await self.read_registers(registers, space)
        result.skipped.update(skipped)
        return result

    async def dump_registers(self, space: AddressSpace) -> BatchReadResult:
        """Read every readable register of an address space."""
        return await self.read_registers(self._catalog.readable(space), space)

    async def read_input_registers(
        self, registers: Iterable[RegisterDefinition]
    ) -> BatchReadResult:
        """Read input register definitions."""
        return await self.read_registers(registers, AddressSpace.INPUT)

    async def read_input_registers_by_name(self, names: Iterable[str]) -> BatchReadResult:
        """Read input registers by name."""
        return await self.read_registers_by_name(names, AddressSpace.INPUT)

    async def dump_input_registers(self) -> BatchReadResult:
        """Read every readable input register."""
        return await self.dump_registers(AddressSpace.INPUT)

    async def read_holding_registers(
        self, registers: Iterable[RegisterDefinition]
    ) -> BatchReadResult:
        """Read holding register definitions."""
        return await self.read_registers(registers, AddressSpace.HOLDING)

    async def read_holding_registers_by_name(self, names: Iterable[str]) -> BatchReadResult:
        """Read holding registers by name."""
        return await self.read_registers_by_name(names, AddressSpace.HOLDING)

    async def dump_holding_registers(self) -> BatchReadResult:
        """Read every readable holding register."""
        return await self.dump_registers(AddressSpace.HOLDING)

    # ------------------------------------------------------------------
    # Single register access
    # ------------------------------------------------------------------

    async def read_register(
        self, register: RegisterDefinition, space: AddressSpace
    ) -> RegisterValue:
        """Read one register.

        Raises:
            ConversionError: If the register's words cannot be decoded
        """
        result = await self.read_registers([register], space)
        if register.name not in result:
            raise ConversionError(result.skipped.get(register.name, "Conversion error"))
        return result[register.name]

    async def read_holding_register(self, register: RegisterDefinition) -> RegisterValue:
        """Read one holding register."""
        return await self.read_register(register, AddressSpace.HOLDING)

    async def read_register_by_name(self, name: str) -> RegisterValue:
        """Read one register by name from whichever space defines it.

        The input space is searched first; see RegisterCatalog.resolve.

        Raises:
            RegisterNotFoundError: If neither space has the name
            ConversionError: If the register's words cannot be decoded
        """
        resolved = self._catalog.resolve(name)
        if resolved is None:
            raise RegisterNotFoundError(name)
        space, register = resolved
        return await self.read_register(register, space)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def write_holding_register(
        self,
        register: RegisterDefinition,
        value: RegisterValue | int | float | bool | bytes,
    ) -> None:
        """Encode a value and write it to a holding register.

        A bare Python value is tagged with the register's data type.

        Raises:
            ConversionError: If the value does not match or fit the register
            DeviceNotConnectedError: If the session is not connected
        """
        if not isinstance(value, RegisterValue):
            try:
                value = RegisterValue(register.data_type, value)
            except TypeError as err:
                raise ConversionError(f"Cannot write {value!r} to {register.name}: {err}") from err
        elif value.data_type is not register.data_type:
            raise ConversionError(
                f"Cannot write {value.data_type.name} value to {register.name} "
                f"({register.data_type.name})"
            )

        words = codec.encode(value)
        if len(words) != register.length:
            raise ConversionError(
                f"Register {register.name} is {register.length} words, "
                f"value encodes to {len(words)}"
            )

        _LOGGER.debug("Writing register %s at %d: %s", register.name, register.address, words)
        await self._session.write_words(register.address, words)

    async def write_register_by_name(
        self,
        name: str,
        value: RegisterValue | int | float | bool | bytes,
    ) -> None:
        """Write one holding register by name.

        Raises:
            RegisterNotFoundError: If the holding space has no such register;
                no I/O is attempted
        """
        register = self.get_holding_register_by_name(name)
        if register is None:
            raise RegisterNotFoundError(name)
        await self.write_holding_register(register, value)

    write_holding_register_by_name = write_register_by_name


__all__ = ["BatchReadResult", "ModbusDevice", "RegisterSession"]
