from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List

import numpy as np

from .errors import BFVMConfigError

CELL_WIDTHS = (8, 16, 32)

_DTYPES = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
}


@dataclass(frozen=True)
class VMConfig:
    cell_bits: int = 8
    jit: bool = True
    initial_capacity: int = 1024

    def __post_init__(self) -> None:
        if self.cell_bits not in CELL_WIDTHS:
            raise BFVMConfigError(
                message=f"ConfigError: cell width must be one of {CELL_WIDTHS}, got {self.cell_bits!r}"
            )
        if self.initial_capacity < 1:
            raise BFVMConfigError(
                message=f"ConfigError: initial tape capacity must be positive, got {self.initial_capacity!r}"
            )

    @property
    def mask(self) -> int:
        return (1 << self.cell_bits) - 1

    @property
    def dtype(self):
        return _DTYPES[self.cell_bits]


class Tape:
    """
    Growable run of cells, starting as a single zero cell.

    The numpy buffer holds ``capacity`` zeroed cells; ``len(tape)`` is the
    logical length, i.e. one past the highest cell the head has reached.
    The dtype of the buffer is the cell width, so stored values are always
    masked.
    """

    def __init__(self, dtype=np.uint8, capacity: int = 1024):
        self.memory = np.zeros(max(1, capacity), dtype=dtype)
        self.length = 1

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, index: int) -> int:
        if not 0 <= index < self.length:
            raise IndexError(f"tape index {index} out of range (length {self.length})")
        return int(self.memory[index])

    @property
    def capacity(self) -> int:
        return len(self.memory)

    def ensure(self, index: int) -> None:
        """Grow the tape so that ``index`` is a valid cell."""
        if index >= self.capacity:
            size = self.capacity
            while size <= index:
                size *= 2
            grown = np.zeros(size, dtype=self.memory.dtype)
            grown[:self.length] = self.memory[:self.length]
            self.memory = grown
        if index >= self.length:
            self.length = index + 1

    def cells(self) -> List[int]:
        return [int(v) for v in self.memory[:self.length]]


class Status(enum.Enum):
    RUNNING = 'running'
    HALTED = 'halted'
    FAULTED = 'faulted'


@dataclass
class MachineState:
    tape: Tape
    pc: int = 0
    head: int = 0
    steps: int = 0
    status: Status = Status.RUNNING
    output_count: int = 0
    input_count: int = 0

    @property
    def cell(self) -> int:
        return int(self.tape.memory[self.head])
