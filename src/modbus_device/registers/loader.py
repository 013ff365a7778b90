"""Load register definitions from the device's JSON register export.

The export looks like::

    {
        "metaid": "...",
        "result": "...",
        "registers": [
            {"id": 412, "name": "Counter", "type": "Uint32", "len": 32},
            {"id": 500, "name": "Secret", "type": "Uint16", "len": 16, "read": false}
        ]
    }

``id`` is the word address and ``len`` is the width in bits; the stored
definition length is ``len // 16`` words. ``read`` defaults to true.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, Any

from modbus_device.exceptions import DefinitionError
from modbus_device.registers.types import DataType, RegisterDefinition

_LOGGER = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("id", "name", "type", "len")


def parse_register(record: dict[str, Any]) -> RegisterDefinition:
    """Build a definition from one ``registers`` record.

    Raises:
        DefinitionError: If the record is not an object or a field is missing or invalid
    """
    if not isinstance(record, dict):
        raise DefinitionError(f"Register record {record!r} is not an object")

    missing = [f for f in _REQUIRED_FIELDS if f not in record]
    if missing:
        raise DefinitionError(f"Register record {record!r} is missing {', '.join(missing)}")

    name = str(record["name"])
    address = record["id"]
    if not isinstance(address, int) or isinstance(address, bool):
        raise DefinitionError(f"Register {name} has address {address!r}, expected an integer")
    if not isinstance(record["type"], str):
        raise DefinitionError(f"Register {name} has type {record['type']!r}, expected a string")
    data_type = DataType.from_schema(record["type"])
    bits = record["len"]
    if not isinstance(bits, int) or bits <= 0 or bits % 16:
        raise DefinitionError(
            f"Register {name} has length {bits!r} bits, expected a positive multiple of 16"
        )

    length = bits // 16
    if length != data_type.word_length:
        _LOGGER.warning(
            "Register %s declares %d words but %s uses %d",
            name,
            length,
            data_type.value,
            data_type.word_length,
        )

    return RegisterDefinition(
        name=name,
        address=address,
        length=length,
        data_type=data_type,
        readable=bool(record.get("read", True)),
    )


def parse_definitions(document: dict[str, Any]) -> dict[str, RegisterDefinition]:
    """Build the name to definition mapping from a parsed export document.

    Raises:
        DefinitionError: If the document or one of its records is invalid
    """
    records = document.get("registers")
    if not isinstance(records, list):
        raise DefinitionError("Register document has no 'registers' list")

    definitions: dict[str, RegisterDefinition] = {}
    for record in records:
        reg = parse_register(record)
        if reg.name in definitions:
            _LOGGER.warning("Duplicate register name %s, keeping the last definition", reg.name)
        definitions[reg.name] = reg

    _LOGGER.debug(
        "Loaded %d register definitions (metaid=%s)",
        len(definitions),
        document.get("metaid"),
    )
    return definitions


def load_definitions(source: str | Path | IO[str]) -> dict[str, RegisterDefinition]:
    """Load definitions from a JSON file path or an open text file.

    Raises:
        DefinitionError: If the file is not valid JSON or has invalid records
    """
    try:
        if isinstance(source, str | Path):
            with Path(source).open(encoding="utf-8") as fh:
                document = json.load(fh)
        else:
            document = json.load(source)
    except json.JSONDecodeError as err:
        raise DefinitionError(f"Invalid register definition JSON: {err}") from err

    if not isinstance(document, dict):
        raise DefinitionError("Register document must be a JSON object")
    return parse_definitions(document)


__all__ = ["load_definitions", "parse_definitions", "parse_register"]
