from __future__ import annotations

from typing import Iterator, List, Optional

from .ops import FOLDABLE_OPS, Instruction, JumpIfNonZero, JumpIfZero, instruction_for, is_operator


class Lexer:
    """
    Scans Brainfuck source into unresolved instructions.

    Non-operator characters are comments and are skipped. Runs of the same
    ``+ - < > , .`` operator fold into a single counted instruction; brackets
    are emitted one per character with a placeholder target of 0.

    ``pos`` is the offset of the next unread character. After a bracket has
    been emitted, ``last_pos`` is the offset of that bracket.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.last_pos = 0

    def __iter__(self) -> Iterator[Instruction]:
        return self

    def __next__(self) -> Instruction:
        op = self.next_op()
        if op is None:
            raise StopIteration
        return op

    def _skip_comments(self) -> None:
        src = self.source
        while self.pos < len(src) and not is_operator(src[self.pos]):
            self.pos += 1

    def next_op(self) -> Optional[Instruction]:
        self._skip_comments()
        src = self.source
        if self.pos >= len(src):
            return None

        ch = src[self.pos]
        self.last_pos = self.pos
        if ch in FOLDABLE_OPS:
            j = self.pos
            while j < len(src) and src[j] == ch:
                j += 1
            count = j - self.pos
            self.pos = j
            return instruction_for(ch, count)

        self.pos += 1
        if ch == '[':
            return JumpIfZero(0)
        return JumpIfNonZero(0)


def tokenize(source: str) -> List[Instruction]:
    """Lex ``source`` from the start and return the unresolved instructions."""
    return list(Lexer(source))
