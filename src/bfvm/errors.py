from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


def _line_col(source: str, pos: int) -> Tuple[int, int]:
    pos = max(0, min(pos, len(source)))
    line = source.count('\n', 0, pos) + 1
    col = pos - (source.rfind('\n', 0, pos) + 1) + 1
    return line, col


def _build_context(lines: List[str], line_no_1: int, col_1: int, *, context: int = 2) -> str:
    idx = max(1, min(line_no_1, len(lines)))
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (col_1 - 1)}^")
    return "\n".join(out)


def _hint_for(message: str) -> Optional[str]:
    msg = message.lower()
    if "unmatched ']'" in msg:
        return "Every ']' needs an earlier '[' to close. Remove it or add the missing '['."
    if "unmatched '['" in msg:
        return "This '[' is never closed. Add a ']' after the loop body."
    return None


@dataclass
class BFVMError(Exception):
    message: str

    # Bytes written before a run-time fault; filled in by the run helpers.
    output = b""

    def __str__(self) -> str:
        return self.message


@dataclass
class UnbalancedLoop(BFVMError):
    pos: int
    line: int
    context: str


@dataclass
class MemoryUnderflow(BFVMError):
    pc: int
    head: int
    count: int


@dataclass
class InputExhausted(BFVMError):
    pc: int


@dataclass
class BFVMConfigError(BFVMError):
    pass


@dataclass
class SourceLoadError(BFVMError):
    path: str


def make_unbalanced_error(*, message: str, source: str, pos: int) -> UnbalancedLoop:
    line, col = _line_col(source, pos)
    lines = source.split('\n')
    ctx = _build_context(lines, line, col)
    hint = _hint_for(message)
    hint_block = f"\nHint: {hint}" if hint else ""
    return UnbalancedLoop(
        message=f"UnbalancedLoop: {message} at {pos} (line {line}, column {col})\n{ctx}{hint_block}",
        pos=pos,
        line=line,
        context=ctx,
    )


def make_underflow_error(*, pc: int, head: int, count: int) -> MemoryUnderflow:
    return MemoryUnderflow(
        message=f"MemoryUnderflow: cannot move left by {count} from cell {head} (instruction {pc})",
        pc=pc,
        head=head,
        count=count,
    )


def make_input_error(*, pc: int) -> InputExhausted:
    return InputExhausted(
        message=f"InputExhausted: no more input available (instruction {pc})",
        pc=pc,
    )
