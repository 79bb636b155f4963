"""
Register Pool
=============

A fixed set of interchangeable general-purpose registers used to hold
intermediate values while one expression is compiled.

Register Usage
--------------
| Register          | Usage                                        |
|-------------------|----------------------------------------------|
| r8, r9, r10, r11  | Allocatable pool, one value per register     |
| rax, rdx, rcx     | Division scratch, never handed out           |
| rdi               | First integer argument (print helper input)  |

The x86-64 `idiv` instruction takes its dividend in rdx:rax and leaves
the quotient in rax, so the division sequence needs registers of its own.
Those are kept out of the pool; the pool constructor refuses any name
list that includes them.

There is no spilling. Asking for a fifth live value raises
RegisterExhaustedError.
"""

from dataclasses import dataclass
from typing import Optional
import logging

from arithc.errors import SourceLocation
from arithc.cc.errors import CCodeGenError, RegisterExhaustedError

logger = logging.getLogger(__name__)


GENERAL_REGISTERS = ("r8", "r9", "r10", "r11")

# Fixed operands of the division sequence: dividend/quotient, remainder, divisor
DIVISION_SCRATCH = ("rax", "rdx", "rcx")


@dataclass(frozen=True)
class Register:
    """
    A register handed out by a RegisterPool.

    Attributes:
        index: Slot number in the pool
        name: Assembly name, e.g. 'r8'
    """
    index: int
    name: str

    def __str__(self) -> str:
        return self.name


class RegisterPool:
    """
    Tracks which registers of a fixed pool are free.

    Allocation and release are the only mutations. release_all() is
    called between statements, so no value lives across statements.

    Example:
        pool = RegisterPool()
        a = pool.allocate()     # r8
        b = pool.allocate()     # r9
        pool.release(b)
        pool.release_all()
    """

    def __init__(self, names: tuple[str, ...] = GENERAL_REGISTERS):
        reserved = set(names) & set(DIVISION_SCRATCH)
        if reserved:
            raise CCodeGenError(
                f"register pool overlaps division scratch registers: "
                f"{', '.join(sorted(reserved))}"
            )
        if len(set(names)) != len(names):
            raise CCodeGenError("register pool contains duplicate names")

        self._registers = tuple(Register(i, name) for i, name in enumerate(names))
        self._free = [True] * len(names)
        self._high_water = 0

    @property
    def size(self) -> int:
        return len(self._registers)

    @property
    def live_count(self) -> int:
        """Number of registers currently allocated."""
        return self._free.count(False)

    @property
    def all_free(self) -> bool:
        return all(self._free)

    @property
    def high_water(self) -> int:
        """Most registers live at once since the last release_all()."""
        return self._high_water

    def allocate(self, location: Optional[SourceLocation] = None) -> Register:
        """
        Take the lowest-numbered free register.

        Raises:
            RegisterExhaustedError: No register is free
        """
        for index, free in enumerate(self._free):
            if free:
                self._free[index] = False
                self._high_water = max(self._high_water, self.live_count)
                return self._registers[index]
        raise RegisterExhaustedError(self.size, location)

    def release(self, register: Register) -> None:
        """
        Return a register to the pool.

        Raises:
            CCodeGenError: The register is not allocated from this pool
        """
        if not 0 <= register.index < self.size or self._registers[register.index] != register:
            raise CCodeGenError(f"register {register} does not belong to this pool")
        if self._free[register.index]:
            raise CCodeGenError(f"register {register} released twice")
        self._free[register.index] = True

    def release_all(self) -> None:
        """Free every register."""
        if not self.all_free:
            logger.debug(f"Releasing {self.live_count} live register(s)")
        self._free = [True] * self.size
        self._high_water = 0
