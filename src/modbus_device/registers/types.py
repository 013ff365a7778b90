"""Register data model: address spaces, data types, definitions and values.

A :class:`RegisterDefinition` describes one named register: where it lives
(word address and length), how its words are interpreted (:class:`DataType`)
and whether it takes part in bulk dumps (``readable``).

A :class:`RegisterValue` is the decoded, typed content of one register. It is
produced by :func:`modbus_device.codec.decode` and consumed by
:func:`modbus_device.codec.encode`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from modbus_device.exceptions import DefinitionError

# Highest word address in either address space
MAX_ADDRESS = 0xFFFF

# Size of the fixed-width blob carried by DataType.SIZED
SIZED_BYTE_LENGTH = 66


class AddressSpace(StrEnum):
    """The two word-addressed register spaces of a Modbus device."""

    # Function code 0x04, read-only
    INPUT = "input"

    # Function code 0x03 (read) / 0x10 (write)
    HOLDING = "holding"

    @property
    def writable(self) -> bool:
        """Whether registers in this space can be written."""
        return self is AddressSpace.HOLDING


class DataType(StrEnum):
    """Data type tag of a register, valued by its canonical schema name."""

    UINT16 = "Uint16"
    UINT32 = "Uint32"
    UINT64 = "UInt64"
    UINT128 = "UInt128"
    INT32 = "Int32"
    ENUM16 = "Enum16"
    SIZED = "Sized+Uint16[31]"
    FLOAT32 = "IEEE-754 float32"
    BOOLEAN = "boolean"

    @property
    def word_length(self) -> int:
        """Number of 16-bit words a value of this type occupies."""
        return _WORD_LENGTHS[self]

    @property
    def byte_length(self) -> int:
        """Number of bytes a value of this type occupies."""
        return self.word_length * 2

    @classmethod
    def from_schema(cls, tag: str) -> DataType:
        """Get the data type for a schema type tag.

        Accepts the canonical tags plus the ``UInt16``/``UInt32`` spellings.

        Raises:
            DefinitionError: If the tag is unknown
        """
        try:
            return _SCHEMA_ALIASES.get(tag) or cls(tag)
        except ValueError as err:
            raise DefinitionError(f"Unknown register type {tag!r}") from err


_WORD_LENGTHS: dict[DataType, int] = {
    DataType.UINT16: 1,
    DataType.UINT32: 2,
    DataType.UINT64: 4,
    DataType.UINT128: 8,
    DataType.INT32: 2,
    DataType.ENUM16: 1,
    DataType.SIZED: SIZED_BYTE_LENGTH // 2,
    DataType.FLOAT32: 2,
    DataType.BOOLEAN: 1,
}

_SCHEMA_ALIASES: dict[str, DataType] = {
    "UInt16": DataType.UINT16,
    "UInt32": DataType.UINT32,
}

INTEGER_TYPES = frozenset(
    {
        DataType.UINT16,
        DataType.UINT32,
        DataType.UINT64,
        DataType.UINT128,
        DataType.INT32,
        DataType.ENUM16,
    }
)


@dataclass(frozen=True)
class RegisterDefinition:
    """Catalog entry for one named register.

    Attributes:
        name: Symbolic name, unique within its address space.
        address: Starting word address (0-65535).
        length: Length in 16-bit words (>= 1). The register occupies the
            half-open word extent ``[address, address + length)``.
        data_type: How the register's words are decoded.
        readable: False to leave the register out of bulk dumps.
    """

    name: str
    address: int
    length: int
    data_type: DataType
    readable: bool = True

    def __post_init__(self) -> None:
        if self.length < 1:
            raise DefinitionError(f"Register {self.name} has length {self.length}, expected >= 1")
        if not 0 <= self.address <= MAX_ADDRESS:
            raise DefinitionError(f"Register {self.name} has out of range address {self.address}")

    @property
    def end(self) -> int:
        """Exclusive end of the register's word extent."""
        return self.address + self.length


@dataclass(frozen=True)
class RegisterValue:
    """Typed value of one register.

    The payload type follows the tag: ``int`` for the integer and enum types,
    ``float`` for FLOAT32, ``bool`` for BOOLEAN and ``bytes`` for SIZED.
    Ranges are checked when the value is encoded.
    """

    data_type: DataType
    value: int | float | bool | bytes

    def __post_init__(self) -> None:
        value = self.value
        if self.data_type in INTEGER_TYPES:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{self.data_type.name} value must be int, got {value!r}")
        elif self.data_type is DataType.FLOAT32:
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise TypeError(f"FLOAT32 value must be float, got {value!r}")
            object.__setattr__(self, "value", float(value))
        elif self.data_type is DataType.BOOLEAN:
            if not isinstance(value, bool):
                raise TypeError(f"BOOLEAN value must be bool, got {value!r}")
        elif self.data_type is DataType.SIZED:
            if not isinstance(value, bytes | bytearray):
                raise TypeError(f"SIZED value must be bytes, got {value!r}")
            object.__setattr__(self, "value", bytes(value))


__all__ = [
    "INTEGER_TYPES",
    "MAX_ADDRESS",
    "SIZED_BYTE_LENGTH",
    "AddressSpace",
    "DataType",
    "RegisterDefinition",
    "RegisterValue",
]
