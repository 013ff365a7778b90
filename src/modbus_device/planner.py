"""Group requested registers into contiguous read windows.

Each window becomes one raw read. A window is a run of registers sorted by
address where every register starts exactly where the previous one ends,
and whose total span stays within the per-request word limit. Gaps and
overlaps always start a new window, so words outside the requested
registers are never read.

Example:
    windows = plan_windows([a, b, c])  # a=[0,2) b=[2,4) c=[10,12)
    # -> [ReadWindow(start=0, (a, b)), ReadWindow(start=10, (c,))]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from modbus_device.registers.types import RegisterDefinition

_LOGGER = logging.getLogger(__name__)

# Maximum number of registers that can be read at once (Modbus FC 03/04 limit)
MAX_READ_WORDS = 125


@dataclass(frozen=True)
class ReadWindow:
    """Contiguous, gap-free run of registers served by a single read.

    Attributes:
        registers: Registers in ascending address order.
    """

    registers: tuple[RegisterDefinition, ...]

    @property
    def start(self) -> int:
        """First word address of the window."""
        return self.registers[0].address

    @property
    def end(self) -> int:
        """Exclusive end word address of the window."""
        return self.registers[-1].end

    @property
    def count(self) -> int:
        """Number of words the window reads."""
        return self.end - self.start

    def offset_of(self, register: RegisterDefinition) -> int:
        """Word offset of a register within the window's read buffer."""
        return register.address - self.start

    def slice_words(self, register: RegisterDefinition, words: list[int]) -> list[int]:
        """Cut one register's words out of the window's read buffer."""
        offset = self.offset_of(register)
        return words[offset : offset + register.length]


def plan_windows(
    registers: Iterable[RegisterDefinition],
    max_words: int = MAX_READ_WORDS,
) -> list[ReadWindow]:
    """Plan the reads needed to fetch a set of registers from one space.

    Args:
        registers: Registers of a single address space, in any order
        max_words: Maximum words per read request

    Returns:
        Windows in ascending address order. Every input register appears in
        exactly one window. No window spans more than ``max_words`` words
        unless a single register is itself longer than that.
    """
    ordered = sorted(registers, key=lambda r: r.address)

    if not ordered:
        return []
    if len(ordered) == 1:
        return [ReadWindow((ordered[0],))]

    windows: list[ReadWindow] = []
    run: list[RegisterDefinition] = [ordered[0]]

    for reg in ordered[1:]:
        contiguous = reg.address == run[-1].end
        fits = reg.end - run[0].address <= max_words
        if contiguous and fits:
            run.append(reg)
            continue
        windows.append(ReadWindow(tuple(run)))
        run = [reg]

    windows.append(ReadWindow(tuple(run)))

    for window in windows:
        if window.count > max_words:
            _LOGGER.warning(
                "Register %s spans %d words, more than the %d word request limit",
                window.registers[0].name,
                window.count,
                max_words,
            )

    _LOGGER.debug("Planned %d read windows for %d registers", len(windows), len(ordered))
    return windows


__all__ = ["MAX_READ_WORDS", "ReadWindow", "plan_windows"]
