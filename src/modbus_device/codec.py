"""Conversion between raw register words and typed register values.

Words are transferred in ascending address order. A multi-word value is
decoded by rendering each word as its big-endian byte pair, concatenating
the pairs, reversing the whole byte sequence and reading the result as a
little-endian number. The net effect is a big-endian value with the most
significant word at the lowest address::

    decode([0x0001, 0x0002], DataType.UINT32)
    # bytes 00 01 00 02 -> reversed 02 00 01 00 -> little-endian 0x00010002

UINT16 and ENUM16 read the first word directly. BOOLEAN is true only when
the bitwise NOT of the first word is zero, that is when the word is 0xFFFF.
Encoding writes true as 1, so BOOLEAN values do not survive an
encode/decode round trip; see DESIGN.md.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence

from modbus_device.exceptions import ConversionError
from modbus_device.registers.types import DataType, RegisterValue

_WORD_MASK = 0xFFFF

_SIGNED_TYPES = frozenset({DataType.INT32})
_UNSIGNED_TYPES = frozenset({DataType.UINT32, DataType.UINT64, DataType.UINT128})


def words_to_bytes(words: Sequence[int]) -> bytes:
    """Concatenate words as big-endian byte pairs, in the order given.

    Raises:
        ConversionError: If a word is outside 0..0xFFFF
    """
    try:
        return b"".join(w.to_bytes(2, "big") for w in words)
    except (OverflowError, AttributeError) as err:
        raise ConversionError(f"Invalid register word in {list(words)!r}") from err


def bytes_to_words(data: bytes) -> list[int]:
    """Split bytes into big-endian words.

    Raises:
        ConversionError: If the byte count is odd
    """
    if len(data) % 2:
        raise ConversionError(f"Cannot split {len(data)} bytes into 16-bit words")
    return [int.from_bytes(data[i : i + 2], "big") for i in range(0, len(data), 2)]


def _first_word(words: Sequence[int], data_type: DataType) -> int:
    if not words:
        raise ConversionError(f"No words to decode as {data_type.name}")
    word = words[0]
    if not 0 <= word <= _WORD_MASK:
        raise ConversionError(f"Invalid register word {word!r}")
    return word


def decode(words: Sequence[int], data_type: DataType) -> RegisterValue:
    """Decode register words into a typed value.

    Args:
        words: Register words in ascending address order
        data_type: How to interpret the words

    Returns:
        The decoded value, tagged with ``data_type``

    Raises:
        ConversionError: If the byte length does not match the type's width
    """
    if data_type in (DataType.UINT16, DataType.ENUM16):
        return RegisterValue(data_type, _first_word(words, data_type))

    if data_type is DataType.BOOLEAN:
        word = _first_word(words, data_type)
        return RegisterValue(data_type, (~word & _WORD_MASK) == 0)

    raw = words_to_bytes(words)[::-1]
    if len(raw) != data_type.byte_length:
        raise ConversionError(
            f"Cannot decode {len(raw)} bytes as {data_type.name}, "
            f"expected {data_type.byte_length}"
        )

    if data_type in _UNSIGNED_TYPES:
        return RegisterValue(data_type, int.from_bytes(raw, "little"))
    if data_type in _SIGNED_TYPES:
        return RegisterValue(data_type, int.from_bytes(raw, "little", signed=True))
    if data_type is DataType.FLOAT32:
        return RegisterValue(data_type, struct.unpack("<f", raw)[0])
    return RegisterValue(data_type, bytes(raw))


def _natural_bytes(value: RegisterValue) -> bytes:
    """Render a value as its natural little-endian byte sequence."""
    data_type = value.data_type
    payload = value.value

    if data_type is DataType.BOOLEAN:
        return (1 if payload else 0).to_bytes(2, "little")
    if data_type is DataType.FLOAT32:
        try:
            return struct.pack("<f", payload)
        except (struct.error, OverflowError) as err:
            raise ConversionError(f"Cannot encode {payload!r} as FLOAT32") from err
    if data_type is DataType.SIZED:
        if len(payload) != data_type.byte_length:  # type: ignore[arg-type]
            raise ConversionError(
                f"SIZED value must be {data_type.byte_length} bytes, "
                f"got {len(payload)}"  # type: ignore[arg-type]
            )
        return bytes(payload)  # type: ignore[arg-type]

    try:
        return int(payload).to_bytes(
            data_type.byte_length, "little", signed=data_type in _SIGNED_TYPES
        )
    except OverflowError as err:
        raise ConversionError(f"Value {payload!r} does not fit in {data_type.name}") from err


def encode(value: RegisterValue) -> list[int]:
    """Encode a typed value into register words, in ascending address order.

    The inverse of :func:`decode`: the natural little-endian bytes are
    reversed and split into big-endian words.

    Raises:
        ConversionError: If the value is out of range for its type
    """
    return bytes_to_words(_natural_bytes(value)[::-1])


__all__ = ["bytes_to_words", "decode", "encode", "words_to_bytes"]
