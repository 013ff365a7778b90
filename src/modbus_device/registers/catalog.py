"""Immutable per-address-space register catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

from modbus_device.registers.types import AddressSpace, RegisterDefinition

_LOGGER = logging.getLogger(__name__)

RegisterSource = Mapping[str, RegisterDefinition] | Iterable[RegisterDefinition]


def _index(registers: RegisterSource) -> MappingProxyType[str, RegisterDefinition]:
    if isinstance(registers, Mapping):
        return MappingProxyType(dict(registers))
    return MappingProxyType({r.name: r for r in registers})


class RegisterCatalog:
    """Name to definition mapping for the input and holding spaces.

    The catalog is built once and never changes. A failed lookup is not an
    error here: :meth:`lookup` returns ``None`` and the caller decides
    whether that is fatal.

    Example:
        catalog = RegisterCatalog(
            input_registers=[RegisterDefinition("Counter", 412, 2, DataType.UINT32)],
            holding_registers=[],
        )
        catalog.lookup(AddressSpace.INPUT, "Counter")
    """

    def __init__(
        self,
        input_registers: RegisterSource = (),
        holding_registers: RegisterSource = (),
    ) -> None:
        self._spaces: dict[AddressSpace, MappingProxyType[str, RegisterDefinition]] = {
            AddressSpace.INPUT: _index(input_registers),
            AddressSpace.HOLDING: _index(holding_registers),
        }

    @classmethod
    def from_files(
        cls,
        input_path: str | Path | None = None,
        holding_path: str | Path | None = None,
    ) -> RegisterCatalog:
        """Build a catalog from JSON definition files.

        Args:
            input_path: Input register definitions, or None for an empty space
            holding_path: Holding register definitions, or None for an empty space
        """
        from modbus_device.registers.loader import load_definitions

        return cls(
            input_registers=load_definitions(input_path) if input_path else (),
            holding_registers=load_definitions(holding_path) if holding_path else (),
        )

    def registers(self, space: AddressSpace) -> Mapping[str, RegisterDefinition]:
        """Get the read-only name mapping of one address space."""
        return self._spaces[space]

    def lookup(self, space: AddressSpace, name: str) -> RegisterDefinition | None:
        """Get a definition by name, or None if the space has no such register."""
        return self._spaces[space].get(name)

    def all(self, space: AddressSpace) -> tuple[RegisterDefinition, ...]:
        """Get every definition of an address space."""
        return tuple(self._spaces[space].values())

    def readable(self, space: AddressSpace) -> tuple[RegisterDefinition, ...]:
        """Get the definitions of an address space that take part in dumps."""
        return tuple(r for r in self._spaces[space].values() if r.readable)

    def names(self, space: AddressSpace) -> frozenset[str]:
        """Get the register names of an address space."""
        return frozenset(self._spaces[space])

    def resolve(self, name: str) -> tuple[AddressSpace, RegisterDefinition] | None:
        """Find a register by name across both address spaces.

        The input space is searched first. When a name is registered in both
        spaces the input definition is returned and a warning is logged.

        Returns:
            ``(space, definition)`` or None if neither space has the name
        """
        input_reg = self.lookup(AddressSpace.INPUT, name)
        holding_reg = self.lookup(AddressSpace.HOLDING, name)
        if input_reg is not None:
            if holding_reg is not None:
                _LOGGER.warning(
                    "Register %s exists in both input and holding spaces, using input",
                    name,
                )
            return AddressSpace.INPUT, input_reg
        if holding_reg is not None:
            return AddressSpace.HOLDING, holding_reg
        return None

    def __contains__(self, name: object) -> bool:
        return any(name in regs for regs in self._spaces.values())

    def __len__(self) -> int:
        return sum(len(regs) for regs in self._spaces.values())

    def __repr__(self) -> str:
        return (
            f"RegisterCatalog(input={len(self._spaces[AddressSpace.INPUT])}, "
            f"holding={len(self._spaces[AddressSpace.HOLDING])})"
        )


__all__ = ["RegisterCatalog"]
