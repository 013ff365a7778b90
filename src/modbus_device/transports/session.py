"""Shared Modbus session logic for TCP and serial links.

This module provides the BaseModbusSession class: connection state and the
two raw word-level primitives every higher layer is built on.

- ``read_words(space, address, count)`` reads input or holding registers
- ``write_words(address, words)`` writes holding registers

A session is either :class:`Disconnected` or :class:`Connected`. It starts
disconnected, becomes connected only through a successful ``connect()`` and
goes back only through ``disconnect()``. There is no automatic reconnect and
no retry: every transport failure is surfaced to the caller, mapped to the
error taxonomy in :mod:`modbus_device.exceptions`.

Subclasses must implement:
- _create_client(): build the pymodbus async client
- endpoint property: human readable link description for logs
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any

from pymodbus.exceptions import ConnectionException, ModbusException, ModbusIOException

from modbus_device.exceptions import (
    DeviceNotConnectedError,
    ProtocolExceptionError,
    TransportConnectionError,
    TransportFailureError,
)
from modbus_device.registers.types import AddressSpace

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Disconnected:
    """No link to the device."""


@dataclass(frozen=True)
class Connected:
    """Open link to the device.

    Attributes:
        client: The pymodbus async client owning the link.
    """

    client: Any


SessionState = Disconnected | Connected


class BaseModbusSession:
    """Base class for Modbus sessions (TCP and serial).

    One session owns one physical link exclusively. Round trips are
    serialized with a lock because the link carries one request at a time.

    Subclasses build the pymodbus client in ``_create_client()``; the client
    is only created when ``connect()`` is called.
    """

    transport_type: str = "modbus"

    def __init__(
        self,
        *,
        unit_id: int = 1,
        timeout: float = 10.0,
        retries: int = 0,
    ) -> None:
        """Initialize base Modbus session.

        Args:
            unit_id: Modbus unit/slave ID (default 1)
            timeout: Connection and operation timeout in seconds, enforced by
                pymodbus
            retries: Retries passed to the pymodbus client (default 0, no retry)
        """
        self._unit_id = unit_id
        self._timeout = timeout
        self._retries = retries
        self._state: SessionState = Disconnected()
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def unit_id(self) -> int:
        """Get the Modbus unit/slave ID."""
        return self._unit_id

    @property
    def timeout(self) -> float:
        """Get the operation timeout in seconds."""
        return self._timeout

    @property
    def state(self) -> SessionState:
        """Get the connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check whether ``connect()`` has succeeded."""
        return isinstance(self._state, Connected)

    @property
    def endpoint(self) -> str:
        """Describe the link, for logs and error messages."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------

    def _create_client(self) -> Any:
        """Build the pymodbus async client for this link."""
        raise NotImplementedError

    async def connect(self) -> None:
        """Open the link and move to the connected state.

        Calling this while already connected replaces the current client.

        Raises:
            TransportConnectionError: If the link cannot be opened
        """
        try:
            client = self._create_client()
            connected = await client.connect()
        except ImportError as err:
            raise TransportConnectionError(
                "pymodbus package not installed. Install with: pip install pymodbus"
            ) from err
        except (TimeoutError, OSError, ModbusException) as err:
            _LOGGER.error("Failed to connect to %s: %s", self.endpoint, err)
            raise TransportConnectionError(f"Failed to connect to {self.endpoint}: {err}") from err

        if not connected:
            raise TransportConnectionError(f"Failed to connect to {self.endpoint}")

        self._state = Connected(client)
        _LOGGER.info("Modbus session connected to %s (unit %s)", self.endpoint, self._unit_id)

    async def disconnect(self) -> None:
        """Close the link and move back to the disconnected state."""
        state = self._state
        if isinstance(state, Connected):
            state.client.close()
        self._state = Disconnected()
        _LOGGER.debug("Modbus session disconnected from %s", self.endpoint)

    async def __aenter__(self) -> BaseModbusSession:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    def _require_client(self) -> Any:
        state = self._state
        if isinstance(state, Connected):
            return state.client
        raise DeviceNotConnectedError()

    # ------------------------------------------------------------------
    # Raw register access
    # ------------------------------------------------------------------

    async def read_words(self, space: AddressSpace, address: int, count: int) -> list[int]:
        """Read ``count`` words starting at ``address``.

        Args:
            space: Input (FC 04) or holding (FC 03) registers
            address: Starting word address
            count: Number of words (pymodbus refuses to send more than 125)

        Returns:
            The words in ascending address order

        Raises:
            DeviceNotConnectedError: If not connected; no I/O is attempted
            TransportFailureError: If the link fails
            ProtocolExceptionError: If the device rejects the request or the
                request cannot be encoded (count above 125, address out of range)
        """
        client = self._require_client()
        _LOGGER.debug("Reading %s registers %d x%d", space.value, address, count)

        read_fn = (
            client.read_input_registers
            if space is AddressSpace.INPUT
            else client.read_holding_registers
        )
        context = {"space": space, "address": address, "count": count}

        async with self._lock:
            try:
                result = await read_fn(address=address, count=count, device_id=self._unit_id)
            except (ModbusException, TimeoutError, OSError, ValueError) as err:
                raise self._map_error(err, f"read {space.value} registers", **context) from err

        if result.isError():
            code = getattr(result, "exception_code", None)
            _LOGGER.error(
                "Device rejected %s register read at %d x%d: %s",
                space.value,
                address,
                count,
                result,
            )
            raise ProtocolExceptionError(
                f"Modbus read error at {space.value} address {address} x{count}: {result}",
                exception_code=code,
                **context,
            )

        registers = getattr(result, "registers", None)
        if registers is None or len(registers) != count:
            raise ProtocolExceptionError(
                f"Invalid Modbus response at {space.value} address {address}: "
                f"expected {count} registers, got {registers!r}",
                **context,
            )
        return list(registers)

    async def write_words(self, address: int, words: list[int]) -> None:
        """Write words to holding registers starting at ``address``.

        Raises:
            DeviceNotConnectedError: If not connected; no I/O is attempted
            TransportFailureError: If the link fails
            ProtocolExceptionError: If the device rejects the request
        """
        client = self._require_client()
        _LOGGER.debug("Writing holding registers %d x%d", address, len(words))
        context = {"space": AddressSpace.HOLDING, "address": address, "count": len(words)}

        async with self._lock:
            try:
                result = await client.write_registers(
                    address=address,
                    values=list(words),
                    device_id=self._unit_id,
                )
            except (ModbusException, TimeoutError, OSError, ValueError) as err:
                raise self._map_error(err, "write holding registers", **context) from err

        if result.isError():
            code = getattr(result, "exception_code", None)
            _LOGGER.error("Device rejected holding register write at %d: %s", address, result)
            raise ProtocolExceptionError(
                f"Modbus write error at holding address {address}: {result}",
                exception_code=code,
                **context,
            )

    def _map_error(
        self,
        err: Exception,
        action: str,
        *,
        space: AddressSpace,
        address: int,
        count: int,
    ) -> TransportFailureError | ProtocolExceptionError:
        """Translate a pymodbus/OS failure into the session error taxonomy.

        Broken links, resets and timeouts mean the device is unreachable.
        Any other pymodbus error, or a ValueError from pymodbus refusing to
        encode the request, means the request itself went wrong.
        """
        context = {"space": space, "address": address, "count": count}
        if isinstance(err, ConnectionException | ModbusIOException | TimeoutError | OSError):
            _LOGGER.error("Failed to %s at %d on %s: %s", action, address, self.endpoint, err)
            return TransportFailureError(
                f"Failed to {action} at {address} on {self.endpoint}: {err}", **context
            )
        _LOGGER.error("Failed to %s at %d x%d: %s", action, address, count, err)
        return ProtocolExceptionError(f"Failed to {action} at {address}: {err}", **context)


__all__ = ["BaseModbusSession", "Connected", "Disconnected", "SessionState"]
