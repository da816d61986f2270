from __future__ import annotations

from typing import List

from .errors import UnmatchedCloseBracket, UnmatchedOpenBracket, make_parse_error
from .program import INSTRUCTION_CHARS, Instruction, Op, Program


def is_code_char(ch: str) -> bool:
    return ch in INSTRUCTION_CHARS


def filter_source(source: str) -> str:
    """Drop every character that is not one of the eight instructions."""
    return ''.join(c for c in source if is_code_char(c))


def parse(source: str) -> Program:
    """
    Parse and validate program text.

    Unknown characters are comments. Brackets are matched with a stack of
    open-bracket indices; each loop instruction stores the index of its
    partner so the engine never has to rescan.

    Raises:
        UnmatchedCloseBracket: a ']' with no open loop.
        UnmatchedOpenBracket: a '[' still open at end of input.
    """
    ops: List[Instruction] = []
    stack: List[int] = []

    for pos, ch in enumerate(source):
        if not is_code_char(ch):
            continue
        op = Op(ch)
        if op is Op.LOOP_OPEN:
            stack.append(len(ops))
            ops.append(Instruction(op, pos=pos))
        elif op is Op.LOOP_CLOSE:
            if not stack:
                raise make_parse_error(UnmatchedCloseBracket, source=source, position=pos)
            start = stack.pop()
            end = len(ops)
            ops[start] = Instruction(Op.LOOP_OPEN, target=end, pos=ops[start].pos)
            ops.append(Instruction(op, target=start, pos=pos))
        else:
            ops.append(Instruction(op, pos=pos))

    if stack:
        raise make_parse_error(UnmatchedOpenBracket, source=source, position=ops[stack[-1]].pos)

    return Program(instructions=tuple(ops), source=source)
