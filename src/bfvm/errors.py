from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

if TYPE_CHECKING:
    from .state import ExecutionState


def line_col(source: str, position: int) -> Tuple[int, int]:
    before = source[:position]
    line = before.count('\n') + 1
    column = position - (before.rfind('\n') + 1) + 1
    return line, column


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"  {'':4s} | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'open':
        return "Every '[' needs a matching ']' later in the program."
    if kind == 'close':
        return "This ']' closes a loop that was never opened. Check for a missing '[' or a stray ']'."
    return None


@dataclass(eq=False)
class BFVMError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ParseError(BFVMError):
    position: int
    line: int
    column: int
    context: str


class UnmatchedOpenBracket(ParseError):
    pass


class UnmatchedCloseBracket(ParseError):
    pass


@dataclass(eq=False)
class ExecutionError(BFVMError):
    pc: int
    cursor: int
    state: Optional["ExecutionState"] = field(default=None, repr=False)


class CellOverflow(ExecutionError):
    pass


class CellUnderflow(ExecutionError):
    pass


class CursorOverflow(ExecutionError):
    pass


class CursorUnderflow(ExecutionError):
    pass


class InputExhausted(ExecutionError):
    pass


@dataclass(eq=False)
class MalformedInput(BFVMError):
    value: Any
    reason: str


def make_parse_error(cls, *, source: str, position: int) -> ParseError:
    """Build an Unmatched*Bracket error pointing at ``source[position]``."""
    line, column = line_col(source, position)
    ctx = _build_context(source.split('\n'), line, column)
    if cls is UnmatchedOpenBracket:
        what, hint = "unmatched '['", _hint_for('open')
    else:
        what, hint = "unmatched ']'", _hint_for('close')
    hint_block = f"\nHint: {hint}" if hint else ""
    return cls(
        message=f"ParseError: {what} (line {line}, column {column})\n{ctx}{hint_block}",
        position=position,
        line=line,
        column=column,
        context=ctx,
    )


def make_execution_error(cls, *, what: str, pc: int, cursor: int, source: str = "",
                         position: Optional[int] = None,
                         state: Optional["ExecutionState"] = None) -> ExecutionError:
    where = f"instruction {pc}"
    if position is not None and source:
        line, column = line_col(source, position)
        where += f", line {line}, column {column}"
    return cls(
        message=f"{cls.__name__}: {what} (cursor {cursor}, {where})",
        pc=pc,
        cursor=cursor,
        state=state,
    )


def make_malformed_input(value: Any, reason: str) -> MalformedInput:
    return MalformedInput(
        message=f"MalformedInput: {reason}: {value!r}",
        value=value,
        reason=reason,
    )
