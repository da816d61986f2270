from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from .errors import line_col

TAPE_SIZE = 30_000
CELL_MAX = 255


class Op(Enum):
    INCREMENT = '+'
    DECREMENT = '-'
    MOVE_LEFT = '<'
    MOVE_RIGHT = '>'
    OUTPUT = '.'
    INPUT = ','
    LOOP_OPEN = '['
    LOOP_CLOSE = ']'


INSTRUCTION_CHARS = frozenset(op.value for op in Op)


@dataclass(frozen=True)
class Instruction:
    op: Op
    target: Optional[int] = None  # matching bracket index, loops only
    pos: int = 0  # offset of the character in the source text

    def __str__(self) -> str:
        if self.target is not None:
            return f"{self.op.value} (target: {self.target})"
        return self.op.value


@dataclass(frozen=True)
class Program:
    """
    A validated, jump-resolved instruction sequence.

    Built once by ``bfvm.parser.parse`` and never mutated afterwards. The
    original source text is kept so that runtime errors can point back at
    the line and column of the failing instruction.
    """

    instructions: Tuple[Instruction, ...]
    source: str = ""

    def __len__(self) -> int:
        return len(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def to_source(self) -> str:
        """Canonical program text: the instruction characters only."""
        return ''.join(ins.op.value for ins in self.instructions)

    def location(self, index: int) -> Tuple[int, int]:
        """1-based (line, column) of instruction ``index`` in the source."""
        return line_col(self.source, self.instructions[index].pos)
