from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .program import TAPE_SIZE


class Status(Enum):
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'


@dataclass
class ExecutionState:
    tape: bytearray = field(default_factory=lambda: bytearray(TAPE_SIZE))
    cursor: int = 0
    pc: int = 0
    steps: int = 0
    status: Status = Status.RUNNING

    @classmethod
    def fresh(cls, tape_size: int = TAPE_SIZE) -> "ExecutionState":
        if isinstance(tape_size, bool) or not isinstance(tape_size, int) or tape_size < 1:
            raise ValueError(f"tape size must be a positive integer, got {tape_size!r}")
        return cls(tape=bytearray(tape_size))

    @property
    def current(self) -> int:
        return self.tape[self.cursor]

    @property
    def finished(self) -> bool:
        return self.status is not Status.RUNNING

    def dump(self, start: int = 0, count: int = 100, width: int = 8) -> str:
        """Cell values from ``start`` as rows of ``width``, cursor cell in brackets."""
        end = min(len(self.tape), start + count)
        rows: List[str] = []
        for row in range(start, end, width):
            cells = []
            for addr in range(row, min(row + width, end)):
                v = self.tape[addr]
                cells.append(f"[{v:3d}]" if addr == self.cursor else f" {v:3d} ")
            rows.append(f"{row:5d}: " + "".join(cells))
        return "\n".join(rows)
