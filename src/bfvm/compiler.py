from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from .errors import make_unbalanced_error
from .lexer import Lexer
from .ops import Instruction, JumpIfNonZero, JumpIfZero, Program

log = logging.getLogger(__name__)


def compile_program(source: str) -> Program:
    """
    Compile Brainfuck source into a resolved Program.

    Single pass over the lexer stream. Each '[' records its own program
    index on an address stack; each ']' pops the innermost open '[' and
    back-patches it, so both ends of a loop point just past each other:

        JumpIfZero.target    == index(matching ']') + 1
        JumpIfNonZero.target == index(matching '[') + 1

    Raises UnbalancedLoop for a ']' with nothing open, or for any '[' still
    open at end of input.
    """
    lexer = Lexer(source)
    program: List[Instruction] = []
    stack: List[Tuple[int, int]] = []  # (program address, source offset)

    for op in lexer:
        if isinstance(op, JumpIfZero):
            stack.append((len(program), lexer.last_pos))
            program.append(op)
        elif isinstance(op, JumpIfNonZero):
            if not stack:
                raise make_unbalanced_error(
                    message="unmatched ']'", source=source, pos=lexer.last_pos
                )
            addr, _ = stack.pop()
            program.append(JumpIfNonZero(addr + 1))
            program[addr] = JumpIfZero(len(program))
        else:
            program.append(op)

    if stack:
        _, open_pos = stack[-1]
        raise make_unbalanced_error(
            message=f"unmatched '[' ({len(stack)} loop(s) left open)", source=source, pos=open_pos
        )

    log.debug("compiled %d source chars into %d instructions", len(source), len(program))
    return Program(program)


def matching_brackets(program: Program) -> Dict[int, int]:
    """Map each JumpIfZero index to the index of its JumpIfNonZero."""
    pairs: Dict[int, int] = {}
    for i, ins in enumerate(program):
        if isinstance(ins, JumpIfZero):
            pairs[i] = ins.target - 1
    return pairs
