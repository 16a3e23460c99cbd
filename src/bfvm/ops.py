from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Tuple, Union

import numpy as np

# Opcodes used by the encoded (numpy) form of a program.
OP_ADD = 0
OP_SUB = 1
OP_LEFT = 2
OP_RIGHT = 3
OP_INPUT = 4
OP_OUTPUT = 5
OP_JZ = 6
OP_JNZ = 7

BF_OPS = frozenset("+-<>,.[]")
FOLDABLE_OPS = frozenset("+-<>,.")


# ---------------- Instructions ----------------
@dataclass(frozen=True)
class Add:
    count: int
    symbol = '+'
    opcode = OP_ADD


@dataclass(frozen=True)
class Sub:
    count: int
    symbol = '-'
    opcode = OP_SUB


@dataclass(frozen=True)
class MoveLeft:
    count: int
    symbol = '<'
    opcode = OP_LEFT


@dataclass(frozen=True)
class MoveRight:
    count: int
    symbol = '>'
    opcode = OP_RIGHT


@dataclass(frozen=True)
class Input:
    count: int
    symbol = ','
    opcode = OP_INPUT


@dataclass(frozen=True)
class Output:
    count: int
    symbol = '.'
    opcode = OP_OUTPUT


@dataclass(frozen=True)
class JumpIfZero:
    target: int  # index just past the matching JumpIfNonZero
    symbol = '['
    opcode = OP_JZ


@dataclass(frozen=True)
class JumpIfNonZero:
    target: int  # index just past the matching JumpIfZero
    symbol = ']'
    opcode = OP_JNZ


Counted = Union[Add, Sub, MoveLeft, MoveRight, Input, Output]
Jump = Union[JumpIfZero, JumpIfNonZero]
Instruction = Union[Counted, Jump]

_COUNTED_BY_SYMBOL = {
    '+': Add,
    '-': Sub,
    '<': MoveLeft,
    '>': MoveRight,
    ',': Input,
    '.': Output,
}


def is_operator(ch: str) -> bool:
    return ch in BF_OPS


def instruction_for(symbol: str, count: int) -> Counted:
    """Build the counted instruction for one of ``+ - < > , .``."""
    try:
        kind = _COUNTED_BY_SYMBOL[symbol]
    except KeyError:
        raise ValueError(f"Not a foldable operator: {symbol!r}") from None
    if count < 1:
        raise ValueError(f"Instruction count must be >= 1, got {count}")
    return kind(count)


def payload(ins: Instruction) -> int:
    if isinstance(ins, (JumpIfZero, JumpIfNonZero)):
        return ins.target
    return ins.count


# ---------------- Program ----------------
class Program:
    """Immutable, resolved instruction sequence."""

    __slots__ = ('_ops',)

    def __init__(self, ops: Iterable[Instruction] = ()):
        self._ops: Tuple[Instruction, ...] = tuple(ops)

    def __len__(self) -> int:
        return len(self._ops)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self._ops)

    def __getitem__(self, index):
        return self._ops[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Program):
            return self._ops == other._ops
        if isinstance(other, (list, tuple)):
            return self._ops == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ops)

    def __repr__(self) -> str:
        return f"Program({list(self._ops)!r})"

    def encode(self) -> Tuple[np.ndarray, np.ndarray]:
        """Parallel (opcode, argument) int64 arrays for the JIT loop."""
        n = len(self._ops)
        codes = np.empty(n, dtype=np.int64)
        args = np.empty(n, dtype=np.int64)
        for i, ins in enumerate(self._ops):
            codes[i] = ins.opcode
            args[i] = payload(ins)
        return codes, args
