#!/usr/bin/env python3
"""Register dump tool for modbus_device.

Connects to a device over Modbus TCP or RTU, reads registers by name (or
every readable register) and prints the decoded values.

Usage:
    modbus-device-dump --host 192.168.1.100 --input-defs input.json
    modbus-device-dump --serial-port /dev/ttyUSB0 --baudrate 9600 --unit-id 3 \\
        --holding-defs holding.json --space holding --format json
    modbus-device-dump --help
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from modbus_device import __version__
from modbus_device.device import BatchReadResult, ModbusDevice
from modbus_device.exceptions import ModbusDeviceError
from modbus_device.registers.catalog import RegisterCatalog
from modbus_device.registers.types import AddressSpace, RegisterValue
from modbus_device.transports.config import TransportConfig, TransportType
from modbus_device.transports.factory import create_session_from_config

_LOGGER = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="modbus-device-dump",
        description="Read named Modbus registers and print their decoded values.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  modbus-device-dump --host 192.168.1.100 --input-defs input.json
      Dump every readable input register over Modbus TCP

  modbus-device-dump --host 192.168.1.100 --holding-defs holding.json \\
      --space holding --name Version --name ProductionRate[%]
      Read two holding registers

  modbus-device-dump --serial-port /dev/ttyUSB0 --unit-id 3 \\
      --input-defs input.json --format json
      Dump over Modbus RTU as JSON
""",
    )

    conn_group = parser.add_argument_group("Connection Options")
    target = conn_group.add_mutually_exclusive_group(required=True)
    target.add_argument("--host", "-H", help="Device IP address or hostname")
    target.add_argument("--serial-port", help="Serial device path (Modbus RTU)")
    conn_group.add_argument(
        "--port",
        "-p",
        type=int,
        default=502,
        help="Modbus TCP port (default: %(default)s)",
    )
    conn_group.add_argument(
        "--baudrate",
        type=int,
        default=19200,
        help="Serial baud rate (default: %(default)s)",
    )
    conn_group.add_argument(
        "--unit-id",
        "-u",
        type=int,
        default=1,
        help="Modbus unit/slave ID (default: %(default)s)",
    )
    conn_group.add_argument(
        "--timeout",
        type=float,
        default=10.0,
        help="Operation timeout in seconds (default: %(default)s)",
    )

    reg_group = parser.add_argument_group("Register Options")
    reg_group.add_argument("--input-defs", type=Path, help="Input register definitions (JSON)")
    reg_group.add_argument("--holding-defs", type=Path, help="Holding register definitions (JSON)")
    reg_group.add_argument(
        "--space",
        choices=["input", "holding", "both"],
        default="both",
        help="Address space to read (default: %(default)s)",
    )
    reg_group.add_argument(
        "--name",
        "-n",
        action="append",
        dest="names",
        help="Register name to read (repeatable, default: all readable registers)",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--format",
        "-f",
        choices=["text", "json"],
        default="text",
        help="Output format (default: %(default)s)",
    )
    output_group.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def config_from_args(args: argparse.Namespace) -> TransportConfig:
    """Build the transport configuration from parsed arguments."""
    if args.serial_port:
        return TransportConfig(
            transport_type=TransportType.MODBUS_SERIAL,
            serial_port=args.serial_port,
            baudrate=args.baudrate,
            unit_id=args.unit_id,
            timeout=args.timeout,
        )
    return TransportConfig(
        transport_type=TransportType.MODBUS_TCP,
        host=args.host,
        port=args.port,
        unit_id=args.unit_id,
        timeout=args.timeout,
    )


def format_value(value: RegisterValue) -> Any:
    """Convert a register value to a JSON-friendly payload."""
    if isinstance(value.value, bytes):
        return value.value.hex()
    return value.value


def render(results: dict[AddressSpace, BatchReadResult], output_format: str) -> str:
    """Render read results as text or JSON."""
    if output_format == "json":
        return json.dumps(
            {
                space.value: {
                    "values": {name: format_value(v) for name, v in sorted(result.items())},
                    "skipped": dict(sorted(result.skipped.items())),
                }
                for space, result in results.items()
            },
            indent=2,
        )

    lines: list[str] = []
    for space, result in results.items():
        lines.append(f"[{space.value}]")
        for name, value in sorted(result.items()):
            lines.append(f"  {name} = {format_value(value)} ({value.data_type.name})")
        for name, reason in sorted(result.skipped.items()):
            lines.append(f"  {name} skipped: {reason}")
    return "\n".join(lines)


async def run_dump(args: argparse.Namespace) -> int:
    """Connect, read and print. Returns the process exit code."""
    spaces = (
        [AddressSpace.INPUT, AddressSpace.HOLDING]
        if args.space == "both"
        else [AddressSpace(args.space)]
    )

    try:
        catalog = RegisterCatalog.from_files(args.input_defs, args.holding_defs)
        device = ModbusDevice(create_session_from_config(config_from_args(args)), catalog)
        results: dict[AddressSpace, BatchReadResult] = {}
        async with device:
            for space in spaces:
                if args.names:
                    results[space] = await device.read_registers_by_name(args.names, space)
                else:
                    results[space] = await device.dump_registers(space)
    except (ModbusDeviceError, ValueError, OSError) as err:
        _LOGGER.debug("Dump failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print(render(results, args.format))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.input_defs is None and args.holding_defs is None:
        parser.error("at least one of --input-defs or --holding-defs is required")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run_dump(args))


if __name__ == "__main__":
    sys.exit(main())
