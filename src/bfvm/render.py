from __future__ import annotations

from typing import List

from .ops import JumpIfNonZero, JumpIfZero, Program


def render_program(program: Program, *, indent: str = "  ") -> str:
    """
    Human readable listing, one instruction per line:

        0000  +  x8
        0001  [  -> 6
        0002    >  x1
    """
    width = max(4, len(str(max(len(program) - 1, 0))))
    out: List[str] = []
    depth = 0
    for i, ins in enumerate(program):
        if isinstance(ins, JumpIfNonZero):
            depth = max(0, depth - 1)
        if isinstance(ins, (JumpIfZero, JumpIfNonZero)):
            detail = f"-> {ins.target}"
        else:
            detail = f"x{ins.count}"
        out.append(f"{i:0{width}d}  {indent * depth}{ins.symbol}  {detail}")
        if isinstance(ins, JumpIfZero):
            depth += 1
    return "\n".join(out)


def to_source(program: Program) -> str:
    """Canonical operator text for ``program`` (comments are not preserved)."""
    parts: List[str] = []
    for ins in program:
        if isinstance(ins, (JumpIfZero, JumpIfNonZero)):
            parts.append(ins.symbol)
        else:
            parts.append(ins.symbol * ins.count)
    return "".join(parts)
